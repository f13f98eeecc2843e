"""Tests for the local event channel and subscription handles."""

import pytest

from conftest import PRESSURE, TEMPERATURE
from models.errors import BindingUnavailable
from services.can_service import CanEventChannel
from services.event_channel import Subscription


def test_publish_is_delivered_on_update_only(channel):
    received = []
    channel.subscribe([TEMPERATURE], False, received.append)
    channel.publish(TEMPERATURE, 5.0, timestamp=10.0)
    assert received == []
    assert channel.update() == 1
    assert received[0].value == 5.0 and received[0].timestamp == 10.0


def test_only_matching_refs_are_dispatched(channel):
    received = []
    channel.subscribe([TEMPERATURE], False, received.append)
    channel.publish(PRESSURE, 2.0)
    channel.update()
    assert received == []


def test_push_current_value_uses_last_published(channel):
    channel.publish(TEMPERATURE, 1.0)
    channel.publish(TEMPERATURE, 2.0)
    channel.update()
    received = []
    channel.subscribe([TEMPERATURE, PRESSURE], True, received.append)
    channel.update()
    assert [e.value for e in received] == [2.0]


def test_subscription_close_is_idempotent(channel):
    subscription_id = channel.subscribe([TEMPERATURE], True, lambda e: None)
    subscription = Subscription(channel, subscription_id, [TEMPERATURE])
    subscription.close()
    subscription.close()
    assert not subscription.active
    assert channel.subscriber_count() == 0


def test_unsubscribe_before_update_drops_initial_values(channel):
    channel.seed(TEMPERATURE, 3.0)
    received = []
    subscription_id = channel.subscribe([TEMPERATURE], True, received.append)
    channel.unsubscribe(subscription_id)
    channel.update()
    assert received == []


def test_disconnected_can_channel_refuses_subscriptions():
    with pytest.raises(BindingUnavailable):
        CanEventChannel({}).subscribe([TEMPERATURE], True, lambda e: None)
