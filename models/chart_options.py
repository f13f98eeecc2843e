# models/chart_options.py
"""
Helpers for the chart's rendering options tree:

    {"scales": {"x":  {"grid": {...}, "ticks": {...}, "time": {...}},
                "y":  {"min": .., "max": .., "grid": {...}, "ticks": {...}},
                "y1": {"min": .., "max": ..}}}

Stored trees may be partial (older documents, hand-written defaults). Writers go
through `set_in`, which creates intermediate nodes as needed; readers go through
`with_defaults`, which returns a fully populated copy.
"""
import copy
from config import DEFAULT_X_AXIS_TIME_UNIT, DEFAULT_X_AXIS_STEP_SIZE


def default_chart_options():
    return {
        "scales": {
            "x": {
                "grid": {"display": False, "color": None},
                "ticks": {"maxTicksLimit": None},
                "time": {"unit": DEFAULT_X_AXIS_TIME_UNIT, "stepSize": DEFAULT_X_AXIS_STEP_SIZE},
            },
            "y": {
                "min": None,
                "max": None,
                "grid": {"display": False, "color": None},
                "ticks": {"maxTicksLimit": None},
            },
            "y1": {"min": None, "max": None},
        }
    }


def _merge(defaults, stored):
    merged = {}
    for key, default in defaults.items():
        value = stored.get(key) if isinstance(stored, dict) else None
        if isinstance(default, dict):
            merged[key] = _merge(default, value if isinstance(value, dict) else {})
        else:
            merged[key] = copy.deepcopy(value) if value is not None else default
    if isinstance(stored, dict):
        # Keys the renderer understands but we don't manage are carried along.
        for key, value in stored.items():
            if key not in merged:
                merged[key] = copy.deepcopy(value)
    return merged


def with_defaults(options):
    """Returns a fully populated copy of `options`. The input is not modified."""
    return _merge(default_chart_options(), options or {})


def get_in(options, path, default=None):
    node = options
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def set_in(options, path, value):
    """
    Returns a new tree with `value` written at `path`. Missing or non-dict
    intermediate nodes are created as empty dicts; siblings along the path are
    preserved and the input tree is never modified.
    """
    if not path:
        raise ValueError("path must not be empty")
    root = dict(options) if isinstance(options, dict) else {}
    node = root
    for key in path[:-1]:
        child = node.get(key)
        child = dict(child) if isinstance(child, dict) else {}
        node[key] = child
        node = child
    node[path[-1]] = value
    return root


def set_many(options, writes):
    """Applies several (path, value) writes as one update."""
    for path, value in writes:
        options = set_in(options, path, value)
    return options
