# services/configuration_mutator.py
"""
Edits coming from the settings panels. Every transform takes a widget config
and returns a new one; the input is never modified, so a config that is still
referenced elsewhere (the widget, the undo stack of the host) stays intact.
`ConfigurationMutator` applies a transform and tells the host about the result.
"""
import math
from dataclasses import replace
from config import (
    DEFAULT_GRID_INTENSITY, GRID_DENSITY_BASE, GRID_DENSITY_MIN_TICKS, GRID_DENSITY_MAX_TICKS,
    INVALID_DENSITY_FALLBACK, X_AXIS_TIME_UNITS, DEFAULT_X_AXIS_TIME_UNIT, DEFAULT_X_AXIS_STEP_SIZE,
    INTERVAL_FORMULAS, DEFAULT_INTERVAL_FORMULA, QUERY_TYPE_INTERVAL,
)
from models.chart_options import set_in, set_many
from models.errors import InvalidNumericInput, RedundantSelection
from models.attribute import ref_matches
from services.axis_service import AxisScaleController
from utils import clamp, log_message, to_number

GRID_AXES = ("x", "y")


def js_round(value):
    """Rounds half up, the way the chart renderer does."""
    return int(math.floor(value + 0.5))


def require_number(raw, fallback):
    number = to_number(raw)
    if number is None:
        raise InvalidNumericInput(raw, fallback)
    return number


def read_number(raw, fallback):
    try:
        return require_number(raw, fallback)
    except InvalidNumericInput as e:
        log_message(f"Warning: {e}")
        return e.fallback


def grid_color(alpha):
    return f"rgba(0,0,0,{alpha:g})"


def effective_grid_density(raw):
    """
    Maps the raw density from the input control to a tick limit in [2, 100].
    Values below 1 scale a baseline of 10 ticks; larger values are tick counts.
    """
    if raw <= 0:
        effective = GRID_DENSITY_MIN_TICKS
    elif raw < 1:
        effective = max(GRID_DENSITY_MIN_TICKS, js_round(GRID_DENSITY_BASE * raw))
    elif raw >= GRID_DENSITY_MAX_TICKS:
        effective = GRID_DENSITY_MAX_TICKS
    else:
        effective = max(GRID_DENSITY_MIN_TICKS, js_round(raw))
    return min(GRID_DENSITY_MAX_TICKS, effective)


def _check_axis(axis):
    if axis not in GRID_AXES:
        raise ValueError(f"Unknown grid axis '{axis}'")


# --- Chart transforms ---

def set_show_grid(config, enabled):
    enabled = bool(enabled)
    options = set_many(config.chart_options, [
        (("scales", "x", "grid", "display"), enabled),
        (("scales", "y", "grid", "display"), enabled),
        (("scales", "x", "grid", "color"), grid_color(config.grid_x_intensity)),
        (("scales", "y", "grid", "color"), grid_color(config.grid_y_intensity)),
    ])
    return replace(config, show_grid=enabled, chart_options=options)


def set_grid_intensity(config, axis, value):
    _check_axis(axis)
    intensity = clamp(read_number(value, DEFAULT_GRID_INTENSITY), 0.0, 1.0)
    writes = [(("scales", axis, "grid", "color"), grid_color(intensity))]
    if config.show_grid is not False:
        writes.append((("scales", axis, "grid", "display"), True))
    options = set_many(config.chart_options, writes)
    if axis == "x":
        return replace(config, grid_x_intensity=intensity, chart_options=options)
    return replace(config, grid_y_intensity=intensity, chart_options=options)


def set_grid_density(config, axis, value):
    """Stores the raw density and writes the derived tick limit into the chart options."""
    _check_axis(axis)
    raw = read_number(value, INVALID_DENSITY_FALLBACK)
    options = set_in(config.chart_options, ("scales", axis, "ticks", "maxTicksLimit"), effective_grid_density(raw))
    if axis == "x":
        return replace(config, grid_x_density=raw, chart_options=options)
    return replace(config, grid_y_density=raw, chart_options=options)


def set_x_axis_time_unit(config, unit):
    unit = str(unit or DEFAULT_X_AXIS_TIME_UNIT)
    if unit not in X_AXIS_TIME_UNITS:
        log_message(f"Warning: Unknown time unit '{unit}', using {DEFAULT_X_AXIS_TIME_UNIT}.")
        unit = DEFAULT_X_AXIS_TIME_UNIT
    return replace(config, chart_options=set_in(config.chart_options, ("scales", "x", "time", "unit"), unit))


def set_x_axis_step_size(config, value):
    try:
        step = require_number(value, DEFAULT_X_AXIS_STEP_SIZE)
        if step <= 0 or math.isinf(step):
            raise InvalidNumericInput(value, DEFAULT_X_AXIS_STEP_SIZE)
    except InvalidNumericInput as e:
        log_message(f"Warning: {e}")
        step = e.fallback
    options = set_in(config.chart_options, ("scales", "x", "time", "stepSize"), js_round(step))
    return replace(config, chart_options=options)


def set_show_legend(config, enabled):
    return replace(config, show_legend=bool(enabled))


def set_allow_timerange_select(config, allowed):
    # Timestamp controls are hidden when the user may select the range on the chart.
    return replace(config, show_timestamp_controls=not allowed)


def set_default_time_preset(config, key):
    return replace(config, default_time_preset_key=str(key))


def set_sampling(config, label, sampling_options):
    query_type = sampling_options.get(label)
    if query_type is None:
        log_message(f"Warning: Unknown sampling option '{label}'.")
        return config
    return replace(config, datapoint_query=replace(config.datapoint_query, type=query_type))


def set_interval_formula(config, formula):
    if config.datapoint_query.type != QUERY_TYPE_INTERVAL:
        return config
    if formula not in INTERVAL_FORMULAS:
        log_message(f"Warning: Unknown formula '{formula}', using {DEFAULT_INTERVAL_FORMULA}.")
        formula = DEFAULT_INTERVAL_FORMULA
    return replace(config, datapoint_query=replace(config.datapoint_query, formula=formula))


def select_chart_attributes(config, refs, axis_controller=None):
    """Replaces the chart's references; refs that were dropped also leave the right axis."""
    axis_controller = axis_controller or AxisScaleController()
    refs = list(refs)
    removed = [r for r in config.attribute_refs if r not in refs]
    config = axis_controller.remove_from_right_axis(config, removed)
    return replace(config, attribute_refs=refs)


# --- Image / web transforms ---

def select_resource_attributes(config, refs):
    """Replaces the marker references. Orphaned markers are left in place."""
    return replace(config, attribute_refs=list(refs))


def set_resource_path(config, path):
    return replace(config, resource_path=str(path or ""))


def select_resource_url_attribute(config, refs):
    """
    Binds (or clears) the attribute that overrides the static resource path.
    Raises RedundantSelection when nothing changes.
    """
    refs = list(refs or [])
    new_ref = refs[0] if refs else None
    old_ref = config.resource_url_attribute_ref
    if (old_ref is None and new_ref is None) or ref_matches(old_ref, new_ref):
        raise RedundantSelection("resource attribute selection unchanged")
    return replace(config, resource_url_attribute_ref=new_ref)


class ConfigurationMutator:
    """
    Applies transforms for one widget and reports each result through
    `on_changed(config)`. Writing the same value twice gives an equal config and
    a second notification.
    """

    def __init__(self, on_changed, axis_controller=None, marker_resolver=None):
        self._on_changed = on_changed
        self.axis = axis_controller or AxisScaleController()
        self._marker_resolver = marker_resolver

    def apply(self, config, transform, *args):
        updated = transform(config, *args)
        self._on_changed(updated)
        return updated

    # Chart
    def show_grid(self, config, enabled):
        return self.apply(config, set_show_grid, enabled)

    def grid_intensity(self, config, axis, value):
        return self.apply(config, set_grid_intensity, axis, value)

    def grid_density(self, config, axis, value):
        return self.apply(config, set_grid_density, axis, value)

    def x_axis_time_unit(self, config, unit):
        return self.apply(config, set_x_axis_time_unit, unit)

    def x_axis_step_size(self, config, value):
        return self.apply(config, set_x_axis_step_size, value)

    def show_legend(self, config, enabled):
        return self.apply(config, set_show_legend, enabled)

    def allow_timerange_select(self, config, allowed):
        return self.apply(config, set_allow_timerange_select, allowed)

    def default_time_preset(self, config, key):
        return self.apply(config, set_default_time_preset, key)

    def sampling(self, config, label, sampling_options):
        return self.apply(config, set_sampling, label, sampling_options)

    def interval_formula(self, config, formula):
        return self.apply(config, set_interval_formula, formula)

    def chart_attributes(self, config, refs):
        return self.apply(config, select_chart_attributes, refs, self.axis)

    def toggle_right_axis(self, config, ref):
        if ref not in config.attribute_refs:
            return config
        return self.apply(config, self.axis.toggle_right_axis, ref)

    def axis_bound(self, config, axis, bound, value):
        if value is not None:
            value = read_number(value, self.axis.get_bound(config, axis, bound))
        return self.apply(config, self.axis.set_bound, axis, bound, value)

    def toggle_axis_bound(self, config, axis, bound, enabled):
        return self.apply(config, self.axis.toggle_bound, axis, bound, enabled)

    # Image / web
    def resource_attributes(self, config, refs):
        return self.apply(config, select_resource_attributes, refs)

    def resource_path(self, config, path):
        return self.apply(config, set_resource_path, path)

    def resource_url_attribute(self, config, refs):
        try:
            updated = select_resource_url_attribute(config, refs)
        except RedundantSelection:
            return config
        self._on_changed(updated)
        return updated

    def marker_coordinate(self, config, index, axis, value):
        if self._marker_resolver is None:
            return config
        return self.apply(config, self._marker_resolver.set_coordinate, index, axis, value)
