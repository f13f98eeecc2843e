"""Tests for widget content, settings panels and the dashboard host."""

import pytest

from conftest import COLOUR, PRESSURE, SNAPSHOT_URL, TEMPERATURE, log_lines
from models.widget_config import ChartWidgetConfig, DatapointQuery, ImageWidgetConfig, Marker
from viewmodels.main_viewmodel import MainViewModel
from viewmodels.settings_viewmodel import ChartSettings, ImageSettings
from viewmodels.widget_registry import WidgetManifest, WidgetRegistry, create_default_registry
from viewmodels.widget_viewmodel import ChartWidgetViewModel, ResourceWidgetViewModel


# --- Registry ---

def test_default_registry_kinds():
    registry = create_default_registry()
    assert registry.kinds() == ["chart", "image", "web"]
    chart = registry.get("chart")
    assert (chart.min_column_width, chart.min_column_height) == (2, 2)
    assert isinstance(chart.default_config(), ChartWidgetConfig)
    assert "datapoint_query" in chart.config_schema()


def test_registry_rejects_duplicates_and_unknown_kinds():
    registry = WidgetRegistry()
    manifest = create_default_registry().get("web")
    registry.register(manifest)
    with pytest.raises(ValueError):
        registry.register(manifest)
    with pytest.raises(KeyError):
        registry.get("gauge")
    assert "web" in registry and "gauge" not in registry


# --- Host ---

def test_host_routes_settings_edits_to_content(provider):
    dashboard = MainViewModel(provider=provider)
    widget_id = dashboard.add_widget("chart", ChartWidgetConfig(attribute_refs=[TEMPERATURE]))
    entry = dashboard.get_widget(widget_id)
    entry.settings.on_show_legend_toggle(False)
    assert dashboard.config_change_count == 1
    assert entry.config.show_legend is False
    assert entry.content.config is entry.config
    assert entry.settings.config is entry.config


def test_selecting_refs_on_image_adds_centred_markers(provider):
    dashboard = MainViewModel(provider=provider)
    widget_id = dashboard.add_widget("image", ImageWidgetConfig(resource_path="https://x/plan.png"))
    entry = dashboard.get_widget(widget_id)
    entry.settings.on_attributes_select([TEMPERATURE, COLOUR])
    assert [m.coordinates for m in entry.config.markers] == [(50, 50), (50, 50)]
    assert entry.content.config is entry.config
    markers = entry.content.placed_markers()
    assert [m.text for m in markers] == ["60.0 C", None]
    assert markers[1].swatch == "#00ff00"


def test_live_events_reach_widgets_through_update(provider):
    dashboard = MainViewModel(provider=provider)
    widget_id = dashboard.add_widget("chart", ChartWidgetConfig(attribute_refs=[TEMPERATURE], datapoint_query=DatapointQuery(type="lttb")))
    content = dashboard.get_widget(widget_id).content
    content.render()
    dashboard.channel.publish(TEMPERATURE, 65.0, timestamp=1001.0)
    assert dashboard.update() == 1
    assert content.needs_render
    series = content.render()["series"]
    assert list(series[0]["values"]) == [60.0, 65.0]


def test_remove_widget_tears_down_subscription(provider):
    dashboard = MainViewModel(provider=provider)
    widget_id = dashboard.add_widget("chart", ChartWidgetConfig(attribute_refs=[TEMPERATURE]))
    assert dashboard.channel.subscriber_count() == 1
    dashboard.select_widget(widget_id)
    dashboard.remove_widget(widget_id)
    assert dashboard.channel.subscriber_count() == 0
    assert dashboard.selected is None


# --- Chart ---

def test_chart_settings_label_and_right_axis(provider, host):
    config = ChartWidgetConfig(attribute_refs=[TEMPERATURE, PRESSURE])
    settings = ChartSettings(config, host, provider)
    settings.load_assets()
    settings.on_attribute_action(PRESSURE)
    assert settings.attribute_label(PRESSURE) == ("Boiler 1", "pressure", "right")
    assert settings.attribute_label(TEMPERATURE) == ("Boiler 1", "temperature", None)
    assert settings.is_multi_axis()


def test_chart_settings_sampling_and_formulas(host):
    settings = ChartSettings(ChartWidgetConfig(), host)
    assert settings.sampling_label() == "Interval"
    assert settings.formula_options() == ["AVG", "MIN", "MAX"]
    settings.on_sampling_query_change("Downsample (LTTB)")
    assert settings.config.datapoint_query.type == "lttb"
    assert settings.formula_options() == []


def test_chart_settings_bound_toggle(host):
    settings = ChartSettings(ChartWidgetConfig(), host)
    assert settings.bound_state("left", "max") == (False, None)
    settings.on_min_max_value_toggle("left", "max", True)
    assert settings.bound_state("left", "max") == (True, 100)
    settings.on_min_max_value_change("left", "max", "abc")
    assert settings.bound_state("left", "max") == (True, 100)


def test_chart_filter_accepts_numeric_only(provider, boiler, host):
    settings = ChartSettings(ChartWidgetConfig(), host, provider)
    assert settings.attribute_filter(boiler.get_attribute("temperature"))
    assert not settings.attribute_filter(boiler.get_attribute("statusColour"))


def test_chart_render_bounds_follow_visible_axes(provider):
    content = ChartWidgetViewModel(ChartWidgetConfig(attribute_refs=[TEMPERATURE]), provider=provider)
    content.connect()
    model = content.render()
    assert model["multi_axis"] is False
    assert set(model["bounds"]) == {"left"}
    assert model["series"][0]["label"] == "Boiler 1: temperature"


def test_load_failure_is_logged_and_not_fatal():
    class FailingProvider:
        def fetch(self, refs):
            raise ConnectionError("offline")

    content = ChartWidgetViewModel(ChartWidgetConfig(attribute_refs=[TEMPERATURE]), provider=FailingProvider())
    content.connect()
    assert content.loaded_assets == ()
    assert any("offline" in line for line in log_lines())


# --- Image / web ---

def test_two_refs_give_two_centred_markers(provider, host):
    config = ImageWidgetConfig(attribute_refs=[TEMPERATURE, PRESSURE])
    settings = ImageSettings(config, host, provider)
    assert [m.coordinates for m in settings.config.markers] == [(50, 50), (50, 50)]
    assert len(host.changes) == 1


def test_already_synced_config_does_not_notify(provider, host):
    config = ImageWidgetConfig(attribute_refs=[TEMPERATURE], markers=[Marker(TEMPERATURE, (10, 20))])
    ImageSettings(config, host, provider)
    assert host.changes == []


def test_redundant_resource_attribute_selection_is_silent(provider, host):
    config = ImageWidgetConfig(resource_url_attribute_ref=SNAPSHOT_URL)
    settings = ImageSettings(config, host, provider)
    settings.on_resource_url_attribute_select([SNAPSHOT_URL])
    settings.on_resource_url_attribute_select([])
    assert len(host.changes) == 1
    assert host.changes[0][1].resource_url_attribute_ref is None


def test_coordinate_entries(provider, host):
    config = ImageWidgetConfig(attribute_refs=[TEMPERATURE], markers=[Marker(TEMPERATURE, (10, 20))])
    settings = ImageSettings(config, host, provider)
    assert settings.coordinate_entries() == [(0, "Boiler 1", "temperature", (10, 20))]
    settings.on_coordinate_update(0, "y", "250")
    assert host.changes[-1][1].markers[0].coordinates == (10, 100)


def test_resource_url_uses_override_and_version(provider, channel):
    config = ImageWidgetConfig(resource_path="https://static/a.png", resource_url_attribute_ref=SNAPSHOT_URL)
    content = ResourceWidgetViewModel(config, channel, provider)
    content.connect()
    assert content.resource_url() == "https://cam/snap.png?v=0"
    channel.publish(SNAPSHOT_URL, "https://cam/snap.png")
    channel.update()
    assert content.resource_url() == "https://cam/snap.png?v=1"


def test_static_path_edit_reloads_resource():
    content = ResourceWidgetViewModel(ImageWidgetConfig(resource_path="https://x/a.png"))
    content.set_config(ImageWidgetConfig(id=content.config.id, resource_path="https://x/b.png"))
    assert content.render()["url"] == "https://x/b.png?v=1"


def test_no_markers_logs_error(provider):
    config = ImageWidgetConfig(resource_path="https://x/a.png", attribute_refs=[TEMPERATURE])
    content = ResourceWidgetViewModel(config, provider=provider)
    content.connect()
    assert content.placed_markers() == []
    assert any("No markers found" in line for line in log_lines())


def test_chart_history_stays_ordered_across_config_edits(provider):
    dashboard = MainViewModel(provider=provider)
    widget_id = dashboard.add_widget("chart", ChartWidgetConfig(
        attribute_refs=[TEMPERATURE], datapoint_query=DatapointQuery(type="lttb")))
    entry = dashboard.get_widget(widget_id)
    dashboard.channel.publish(TEMPERATURE, 61.0, timestamp=1001.0)
    dashboard.channel.publish(TEMPERATURE, 62.0, timestamp=1002.0)
    dashboard.update()

    entry.settings.on_attributes_select([TEMPERATURE, SNAPSHOT_URL])
    entry.settings.on_show_legend_toggle(False)
    dashboard.update()

    timestamps, _ = entry.content.history.get_stream_data(TEMPERATURE)
    assert list(timestamps) == [1000.0, 1001.0, 1002.0]


def test_default_chart_settings_offer_time_presets(host):
    settings = create_default_registry().get("chart").create_settings(ChartWidgetConfig(), host)
    assert "last24Hours" in settings.time_preset_options
    settings.on_time_preset_select("last7Days")
    assert host.changes[-1][1].default_time_preset_key == "last7Days"


def test_reconnect_after_disconnect_resubscribes(provider, channel):
    content = ChartWidgetViewModel(ChartWidgetConfig(attribute_refs=[TEMPERATURE]), channel, provider)
    content.connect()
    content.disconnect()
    assert channel.subscriber_count() == 0
    content.connect()
    assert channel.subscriber_count() == 1
    assert content.loaded_assets
