# services/binding_service.py
from models.attribute import ref_matches
from models.errors import BindingUnavailable
from services.event_channel import Subscription
from utils import log_message


class AttributeBindingManager:
    """
    Keeps one widget's cached assets in step with the event channel.

    There is at most one live subscription at a time: every `subscribe` closes
    the previous handle first. Cached assets are held in a tuple that is
    replaced, never modified, so a renderer can detect change by identity.
    """

    def __init__(self, channel, owner="widget", resource_resolver=None, on_change=None):
        self._channel = channel
        self._owner = owner
        self._resource_resolver = resource_resolver
        self._on_change = on_change
        self._subscription = None
        self._torn_down = False
        self.loaded_assets = ()
        self.resource_ref = None

    @property
    def subscription(self):
        return self._subscription

    def set_assets(self, assets):
        self.loaded_assets = tuple(assets or ())

    def find_asset(self, asset_id):
        return next((a for a in self.loaded_assets if a.id == asset_id), None)

    def is_attribute_ref_loaded(self, ref):
        asset = self.find_asset(ref.asset_id)
        return asset is not None and ref.attribute_name in asset.attributes

    def subscribe(self, refs, push_current_value=True, on_event=None):
        """
        Subscribes to `refs`, replacing any previous subscription. Returns the
        new Subscription, or None when there is nothing to bind or no channel.
        """
        self.unsubscribe()
        if self._torn_down:
            log_message(f"Warning: {self._owner} is disconnected; not subscribing.")
            return None
        refs = list(refs or [])
        if not refs:
            return None
        try:
            if self._channel is None:
                raise BindingUnavailable("no event channel available")
            # The callback is tied to this subscription id so a late delivery
            # for a replaced subscription is dropped.
            holder = {}
            subscription_id = self._channel.subscribe(
                refs, push_current_value, lambda event: self._handle_event(holder.get("id"), event, on_event))
        except BindingUnavailable as e:
            log_message(f"Warning: {self._owner} cannot subscribe to attribute events ({e}); using fetched data only.")
            return None
        except Exception as e:
            # Channel implementations may fail in transport-specific ways.
            log_message(f"ERROR: {self._owner} subscription failed: {e}")
            return None
        holder["id"] = subscription_id
        self._subscription = Subscription(self._channel, subscription_id, refs)
        return self._subscription

    def unsubscribe(self):
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def reopen(self):
        """Allows subscribing again after `teardown`."""
        self._torn_down = False

    def teardown(self):
        """Closes the subscription and drops the cache. Later callbacks are ignored."""
        self.unsubscribe()
        self._torn_down = True
        self.loaded_assets = ()

    def _handle_event(self, subscription_id, event, on_event):
        if self._torn_down or self._subscription is None or self._subscription.id != subscription_id:
            return
        self.apply_event(event)
        if on_event is not None:
            on_event(event)

    def apply_event(self, event):
        """Merges one pushed value into the cache and bumps the resource version if it applies."""
        index = next((i for i, a in enumerate(self.loaded_assets) if a.id == event.ref.asset_id), -1)
        if index >= 0:
            updated = self.loaded_assets[index].with_attribute_value(
                event.ref.attribute_name, event.value, event.timestamp)
            assets = list(self.loaded_assets)
            assets[index] = updated
            self.loaded_assets = tuple(assets)
        # Same-value republishes still count: upstream uses them to request a refresh.
        if self._resource_resolver is not None and ref_matches(self.resource_ref, event.ref):
            self._resource_resolver.bump()
        if self._on_change is not None:
            self._on_change()
