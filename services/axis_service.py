# services/axis_service.py
from dataclasses import replace
from typing import Optional
from config import DEFAULT_AXIS_MIN, DEFAULT_AXIS_MAX
from models.chart_options import get_in, set_in

AXIS_SCALE_KEYS = {"left": "y", "right": "y1"}
BOUND_DEFAULTS = {"min": DEFAULT_AXIS_MIN, "max": DEFAULT_AXIS_MAX}


def _scale_path(axis, bound):
    if axis not in AXIS_SCALE_KEYS:
        raise ValueError(f"Unknown axis '{axis}'")
    if bound not in BOUND_DEFAULTS:
        raise ValueError(f"Unknown bound '{bound}'")
    return ("scales", AXIS_SCALE_KEYS[axis], bound)


class AxisScaleController:
    """Left/right axis assignment and min/max bounds for chart widgets."""

    def is_multi_axis(self, config) -> bool:
        return len(config.right_axis_attributes) > 0

    def is_on_right_axis(self, config, ref) -> bool:
        return ref in config.right_axis_attributes

    def toggle_right_axis(self, config, ref):
        """Moves `ref` to the other axis. Refs the chart doesn't show are ignored."""
        if ref not in config.attribute_refs:
            return config
        if ref in config.right_axis_attributes:
            right = [r for r in config.right_axis_attributes if r != ref]
        else:
            right = list(config.right_axis_attributes) + [ref]
        return replace(config, right_axis_attributes=right)

    def remove_from_right_axis(self, config, refs):
        dropped = set(refs)
        if not dropped.intersection(config.right_axis_attributes):
            return config
        right = [r for r in config.right_axis_attributes if r not in dropped]
        return replace(config, right_axis_attributes=right)

    def split_by_axis(self, config):
        """Returns (left refs, right refs) in attribute order."""
        left = [r for r in config.attribute_refs if r not in config.right_axis_attributes]
        right = [r for r in config.attribute_refs if r in config.right_axis_attributes]
        return left, right

    def get_bound(self, config, axis, bound) -> Optional[float]:
        """None means automatic scaling; 0 is a real bound."""
        return get_in(config.chart_options, _scale_path(axis, bound))

    def set_bound(self, config, axis, bound, value: Optional[float]):
        options = set_in(config.chart_options, _scale_path(axis, bound), value)
        return replace(config, chart_options=options)

    def toggle_bound(self, config, axis, bound, enabled):
        if not enabled:
            return self.set_bound(config, axis, bound, None)
        current = self.get_bound(config, axis, bound)
        return self.set_bound(config, axis, bound, BOUND_DEFAULTS[bound] if current is None else current)

    def visible_axes(self, config):
        return ["left", "right"] if self.is_multi_axis(config) else ["left"]
