# services/event_channel.py
import queue
from models.attribute import AttributeEvent
from models.errors import BindingUnavailable
from state import next_subscription_id


class Subscription:
    """Handle for one live subscription. `close()` is safe to call more than once."""

    def __init__(self, channel, subscription_id, refs):
        self._channel = channel
        self.id = subscription_id
        self.refs = tuple(refs)
        self._closed = False

    @property
    def active(self):
        return not self._closed

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._channel.unsubscribe(self.id)


class EventChannel:
    """
    Push channel for attribute value changes.

    Producers (a reader thread, a local publisher) only put raw items on the
    queue. Subscriber callbacks run inside `update()`, which the owner calls
    on its UI turn, so callbacks never race with rendering.
    """

    def __init__(self):
        self._queue = queue.Queue()
        self._subscribers = {}
        self._pending = {}
        self._current_values = {}

    @property
    def is_available(self):
        return True

    def subscribe(self, refs, push_current_value, on_event):
        if not self.is_available:
            raise BindingUnavailable(f"{type(self).__name__} is not connected")
        subscription_id = next_subscription_id()
        self._subscribers[subscription_id] = (frozenset(refs), on_event)
        if push_current_value:
            self._pending[subscription_id] = [
                self._current_values[ref] for ref in refs if ref in self._current_values
            ]
        return subscription_id

    def unsubscribe(self, subscription_id):
        self._subscribers.pop(subscription_id, None)
        self._pending.pop(subscription_id, None)

    def subscriber_count(self):
        return len(self._subscribers)

    def update(self):
        """Delivers initial values, then every queued event, to matching subscribers."""
        for subscription_id in list(self._pending):
            events = self._pending.pop(subscription_id)
            subscriber = self._subscribers.get(subscription_id)
            if subscriber is None:
                continue
            for event in events:
                subscriber[1](event)

        delivered = 0
        try:
            while not self._queue.empty():
                item = self._queue.get_nowait()
                event = self._decode(item)
                if event is None:
                    continue
                self._current_values[event.ref] = event
                self._dispatch(event)
                delivered += 1
        except queue.Empty:
            pass
        return delivered

    def _decode(self, item):
        return item

    def _dispatch(self, event):
        for subscription_id, (refs, on_event) in list(self._subscribers.items()):
            if event.ref in refs and subscription_id in self._subscribers:
                on_event(event)


class LocalEventChannel(EventChannel):
    """In-process channel. Anything that can call `publish` can drive widgets."""

    def publish(self, ref, value, timestamp=None):
        if timestamp is None:
            self._queue.put(AttributeEvent(ref=ref, value=value))
        else:
            self._queue.put(AttributeEvent(ref=ref, value=value, timestamp=timestamp))

    def seed(self, ref, value, timestamp=None):
        """Sets the current value without notifying anyone."""
        if timestamp is None:
            self._current_values[ref] = AttributeEvent(ref=ref, value=value)
        else:
            self._current_values[ref] = AttributeEvent(ref=ref, value=value, timestamp=timestamp)
