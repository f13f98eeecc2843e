"""Tests for the chart options tree helpers."""

from models.chart_options import default_chart_options, get_in, set_in, set_many, with_defaults


def test_set_in_creates_missing_intermediate_nodes():
    options = set_in({}, ("scales", "x", "grid", "color"), "rgba(0,0,0,0.5)")
    assert options == {"scales": {"x": {"grid": {"color": "rgba(0,0,0,0.5)"}}}}


def test_set_in_preserves_siblings_and_does_not_modify_input():
    original = {"scales": {"x": {"grid": {"display": True}}, "y": {"min": 3}}, "plugins": {"a": 1}}
    updated = set_in(original, ("scales", "x", "grid", "color"), "red")
    assert updated["scales"]["x"]["grid"] == {"display": True, "color": "red"}
    assert updated["scales"]["y"] == {"min": 3}
    assert updated["plugins"] == {"a": 1}
    assert original["scales"]["x"]["grid"] == {"display": True}


def test_set_in_replaces_non_dict_intermediate():
    updated = set_in({"scales": None}, ("scales", "y", "max"), 10)
    assert updated == {"scales": {"y": {"max": 10}}}


def test_set_in_same_value_twice_gives_equal_tree():
    once = set_in({}, ("scales", "y", "min"), 0)
    twice = set_in(once, ("scales", "y", "min"), 0)
    assert once == twice


def test_set_many_applies_all_writes():
    updated = set_many(None, [(("a", "b"), 1), (("a", "c"), 2)])
    assert updated == {"a": {"b": 1, "c": 2}}


def test_with_defaults_fills_partial_tree():
    filled = with_defaults({"scales": {"y": {"min": 0}}})
    assert filled["scales"]["y"]["min"] == 0
    assert filled["scales"]["y"]["max"] is None
    assert filled["scales"]["x"]["time"]["unit"] == "second"
    assert filled["scales"]["y1"] == {"min": None, "max": None}


def test_with_defaults_keeps_unmanaged_keys():
    filled = with_defaults({"plugins": {"zoom": True}})
    assert filled["plugins"] == {"zoom": True}
    assert "scales" in filled


def test_with_defaults_of_none_is_default_tree():
    assert with_defaults(None) == default_chart_options()


def test_get_in_missing_path_returns_default():
    assert get_in({"scales": {}}, ("scales", "y", "min")) is None
    assert get_in({"scales": {}}, ("scales", "y", "min"), 5) == 5
