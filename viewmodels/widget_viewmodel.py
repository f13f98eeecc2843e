# viewmodels/widget_viewmodel.py
from services.binding_service import AttributeBindingManager
from services.formatter_service import AttributeFormatter
from services.history_service import HistoryService
from services.axis_service import AxisScaleController
from services.marker_service import MarkerSyncResolver
from services.resource_service import ResourceResolver
from utils import log_message


class WidgetViewModel:
    """
    Live side of one dashboard widget: loads assets for the configured refs,
    keeps them fresh through the event channel and exposes what the view draws.
    """

    def __init__(self, config, channel=None, provider=None, formatter=None):
        self.config = config
        self._provider = provider
        self._formatter = formatter or AttributeFormatter()
        self.asset_attributes = []
        self.render_count = 0
        self.needs_render = True
        self._connected = False
        self._binding = AttributeBindingManager(
            channel, owner=f"{type(self).__name__}({config.id})",
            resource_resolver=self._resource_resolver(), on_change=self.request_update)

    def _resource_resolver(self):
        return None

    @property
    def loaded_assets(self):
        return self._binding.loaded_assets

    @property
    def binding(self):
        return self._binding

    def request_update(self):
        self.needs_render = True

    # --- Lifecycle ---

    def connect(self):
        self._connected = True
        self._binding.reopen()
        self.load_assets()
        self.subscribe_attribute_events()

    def disconnect(self):
        self._connected = False
        self._binding.teardown()

    def set_config(self, config):
        """Takes a new configuration from the host and rebinds."""
        previous = self.config
        self.config = config
        self._on_config_changed(previous, config)
        refs = config.all_attribute_refs()
        if any(not self._binding.is_attribute_ref_loaded(ref) for ref in refs):
            self.load_assets()
        if self._connected:
            self.subscribe_attribute_events()
        self.request_update()

    def _on_config_changed(self, previous, current):
        pass

    # --- Data ---

    def load_assets(self):
        refs = self.config.all_attribute_refs()
        if self._provider is None or not refs:
            self._binding.set_assets([])
            self.asset_attributes = []
            return
        try:
            assets = self._provider.fetch(refs)
        except Exception as e:
            # Provider implementations may fail in transport-specific ways.
            log_message(f"ERROR: Could not load assets for widget {self.config.id}: {e}")
            assets = []
        self._binding.set_assets(assets)
        self.asset_attributes = self._collect_asset_attributes(assets)
        self.request_update()

    def _collect_asset_attributes(self, assets):
        pairs = []
        for ref in self.config.attribute_refs:
            index = next((i for i, a in enumerate(assets) if a.id == ref.asset_id), -1)
            if index < 0:
                continue
            attribute = assets[index].get_attribute(ref.attribute_name)
            if attribute is not None:
                pairs.append((index, attribute))
        return pairs

    def subscribe_attribute_events(self):
        self._binding.resource_ref = getattr(self.config, "resource_url_attribute_ref", None)
        return self._binding.subscribe(self.config.all_attribute_refs(), True, self._on_attribute_event)

    def _on_attribute_event(self, event):
        pass

    def render(self):
        """Returns a plain description of what to draw and clears the dirty flag."""
        self.needs_render = False
        self.render_count += 1
        return self._render_model()

    def _render_model(self):
        return {}


class ChartWidgetViewModel(WidgetViewModel):

    def __init__(self, config, channel=None, provider=None, formatter=None, history=None):
        self.history = history or HistoryService()
        self.axis = AxisScaleController()
        super().__init__(config, channel, provider, formatter)

    def _on_config_changed(self, previous, current):
        self.history.drop_streams(current.attribute_refs)

    def load_assets(self):
        super().load_assets()
        for asset in self.loaded_assets:
            for ref in self.config.attribute_refs:
                if ref.asset_id != asset.id:
                    continue
                attribute = asset.get_attribute(ref.attribute_name)
                if attribute is not None and attribute.timestamp is not None:
                    self.history.add_data_point(ref, attribute.timestamp, attribute.value)

    def _on_attribute_event(self, event):
        if event.ref in self.config.attribute_refs:
            self.history.add_event(event)

    def _render_model(self):
        left, right = self.axis.split_by_axis(self.config)
        series = []
        for axis_name, refs in (("left", left), ("right", right)):
            for ref in refs:
                timestamps, values = self.history.query(ref, self.config.datapoint_query)
                asset = self._binding.find_asset(ref.asset_id)
                series.append({
                    "ref": ref,
                    "label": f"{asset.name if asset else ref.asset_id}: {ref.attribute_name}",
                    "axis": axis_name,
                    "timestamps": timestamps,
                    "values": values,
                })
        bounds = {}
        for axis_name in self.axis.visible_axes(self.config):
            bounds[axis_name] = (self.axis.get_bound(self.config, axis_name, "min"),
                                 self.axis.get_bound(self.config, axis_name, "max"))
        return {
            "series": series,
            "multi_axis": self.axis.is_multi_axis(self.config),
            "bounds": bounds,
            "show_legend": self.config.show_legend,
        }


class ResourceWidgetViewModel(WidgetViewModel):
    """Image and web page widgets: a resource path plus attribute markers."""

    def __init__(self, config, channel=None, provider=None, formatter=None):
        self.resolver = ResourceResolver(formatter)
        self.markers = MarkerSyncResolver(formatter)
        super().__init__(config, channel, provider, formatter)

    def _resource_resolver(self):
        return self.resolver

    def _on_config_changed(self, previous, current):
        self.resolver.note_config_change(previous, current)

    @property
    def version(self):
        return self.resolver.version

    def resource_url(self):
        return self.resolver.resolve(self.config, self.loaded_assets)

    def placed_markers(self):
        if not self.asset_attributes or not self.config.attribute_refs:
            return []
        if not self.config.markers:
            log_message(f"ERROR: No markers found for widget {self.config.id}.")
            return []
        return self.markers.resolve(self.config, self.loaded_assets)

    def _render_model(self):
        url = self.resource_url()
        return {
            "url": url,
            "markers": self.placed_markers() if url else [],
        }
