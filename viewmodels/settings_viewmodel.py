# viewmodels/settings_viewmodel.py
from config import NUMERIC_VALUE_TYPES, SAMPLING_OPTIONS, INTERVAL_FORMULAS, QUERY_TYPE_INTERVAL, TIME_PRESET_OPTIONS
from services.axis_service import AxisScaleController
from services.configuration_mutator import ConfigurationMutator
from services.formatter_service import AttributeFormatter
from services.marker_service import MarkerSyncResolver
from utils import log_message


class WidgetSettings:
    """
    Settings panel state for one widget. Every edit goes through the
    ConfigurationMutator and ends with the host being told about the new config.
    """

    def __init__(self, config, host, provider=None, formatter=None):
        self.config = config
        self._host = host
        self._provider = provider
        self._formatter = formatter or AttributeFormatter()
        self.loaded_assets = []
        self.mutator = ConfigurationMutator(self.notify_config_update, AxisScaleController(),
                                            MarkerSyncResolver(self._formatter))

    def notify_config_update(self, config):
        self.config = config
        self._host.notify_config_changed(config.id, config)

    def set_config(self, config):
        """Called by the host when the config changed from any source."""
        self.config = config

    def attribute_filter(self, attribute):
        return True

    def load_assets(self):
        if self._provider is None:
            return
        missing = [r for r in self.config.all_attribute_refs() if not self.is_attribute_ref_loaded(r)]
        if not missing:
            return
        try:
            self.loaded_assets = list(self._provider.fetch(self.config.all_attribute_refs()))
        except Exception as e:
            log_message(f"ERROR: Settings could not load assets: {e}")
            self.loaded_assets = []

    def is_attribute_ref_loaded(self, ref):
        return any(a.id == ref.asset_id and ref.attribute_name in a.attributes for a in self.loaded_assets)

    def asset_name(self, ref):
        asset = next((a for a in self.loaded_assets if a.id == ref.asset_id), None)
        return asset.name if asset else ref.asset_id


class ChartSettings(WidgetSettings):

    def __init__(self, config, host, provider=None, formatter=None, sampling_options=None, time_preset_options=None):
        super().__init__(config, host, provider, formatter)
        self.sampling_options = dict(sampling_options or SAMPLING_OPTIONS)
        self.time_preset_options = list(time_preset_options or TIME_PRESET_OPTIONS)

    @property
    def axis(self):
        return self.mutator.axis

    def attribute_filter(self, attribute):
        return attribute.type in NUMERIC_VALUE_TYPES

    def is_multi_axis(self):
        return self.axis.is_multi_axis(self.config)

    def attribute_label(self, ref):
        """(asset name, attribute name, 'right' marker or None)."""
        on_right = self.is_multi_axis() and self.axis.is_on_right_axis(self.config, ref)
        return self.asset_name(ref), ref.attribute_name, "right" if on_right else None

    def bound_state(self, axis, bound):
        """(enabled, value) for one min/max input; disabled renders as 'auto'."""
        value = self.axis.get_bound(self.config, axis, bound)
        return value is not None, value

    def sampling_label(self):
        return next((label for label, query_type in self.sampling_options.items()
                     if query_type == self.config.datapoint_query.type), None)

    def formula_options(self):
        return list(INTERVAL_FORMULAS) if self.config.datapoint_query.type == QUERY_TYPE_INTERVAL else []

    # Edits
    def on_attributes_select(self, refs):
        self.mutator.chart_attributes(self.config, refs)

    def on_attribute_action(self, ref):
        self.mutator.toggle_right_axis(self.config, ref)

    def on_time_preset_select(self, key):
        self.mutator.default_time_preset(self.config, key)

    def on_timestamp_controls_toggle(self, allow_select):
        self.mutator.allow_timerange_select(self.config, allow_select)

    def on_show_legend_toggle(self, enabled):
        self.mutator.show_legend(self.config, enabled)

    def on_show_grid_toggle(self, enabled):
        self.mutator.show_grid(self.config, enabled)

    def on_grid_intensity_change(self, axis, value):
        self.mutator.grid_intensity(self.config, axis, value)

    def on_grid_density_change(self, axis, value):
        self.mutator.grid_density(self.config, axis, value)

    def on_x_axis_unit_change(self, unit):
        self.mutator.x_axis_time_unit(self.config, unit)

    def on_x_axis_step_size_change(self, value):
        self.mutator.x_axis_step_size(self.config, value)

    def on_min_max_value_change(self, axis, bound, value):
        self.mutator.axis_bound(self.config, axis, bound, value)

    def on_min_max_value_toggle(self, axis, bound, enabled):
        self.mutator.toggle_axis_bound(self.config, axis, bound, enabled)

    def on_sampling_query_change(self, label):
        self.mutator.sampling(self.config, label, self.sampling_options)

    def on_formula_change(self, formula):
        self.mutator.interval_formula(self.config, formula)


class ResourceSettings(WidgetSettings):
    """Shared by the image and web page settings panels."""

    def __init__(self, config, host, provider=None, formatter=None):
        super().__init__(config, host, provider, formatter)
        self._markers = MarkerSyncResolver(self._formatter)
        self.set_config(config)

    def set_config(self, config):
        synced = self._markers.sync(config)
        self.config = synced
        self.load_assets()
        if synced is not config:
            self.notify_config_update(synced)

    def coordinate_entries(self):
        """One row per reference: (marker index, asset name, label, coordinates)."""
        entries = []
        for ref in self.config.attribute_refs:
            marker = next((m for m in self.config.markers if m.attribute_ref == ref), None)
            if marker is None:
                log_message("ERROR: A marker could not be found while listing coordinates.")
                continue
            asset = next((a for a in self.loaded_assets if a.id == ref.asset_id), None)
            label = None
            if asset is not None:
                attribute = asset.get_attribute(ref.attribute_name)
                label = ref.attribute_name if attribute is not None else None
            entries.append((self.config.markers.index(marker), self.asset_name(ref), label, marker.coordinates))
        return entries

    # Edits
    def on_attributes_select(self, refs):
        self.mutator.resource_attributes(self.config, refs)

    def on_resource_path_update(self, path):
        self.mutator.resource_path(self.config, path)

    def on_resource_url_attribute_select(self, refs):
        self.mutator.resource_url_attribute(self.config, refs)

    def on_coordinate_update(self, index, axis, value):
        self.mutator.marker_coordinate(self.config, index, axis, value)


class ImageSettings(ResourceSettings):
    pass


class WebSettings(ResourceSettings):
    pass
