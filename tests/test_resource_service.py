"""Tests for resource path resolution and cache busting."""

import pytest

from conftest import SNAPSHOT_URL
from models.attribute import Asset, Attribute
from models.widget_config import ImageWidgetConfig, WebWidgetConfig
from services.resource_service import ResourceResolver, with_cache_bust


@pytest.mark.parametrize("url, version, expected", [
    ("https://x/img.png", 3, "https://x/img.png?v=3"),
    ("https://x/img.png?a=1", 4, "https://x/img.png?a=1&v=4"),
    ("", 2, ""),
    (None, 2, None),
])
def test_with_cache_bust(url, version, expected):
    assert with_cache_bust(url, version) == expected


def test_static_path_when_no_override():
    resolver = ResourceResolver()
    resolver.version = 3
    assert resolver.resolve(ImageWidgetConfig(resource_path="https://x/img.png"), ()) == "https://x/img.png?v=3"


def test_empty_path_resolves_to_none():
    assert ResourceResolver().resolve(WebWidgetConfig(), ()) is None


def test_attribute_override_wins(camera):
    config = ImageWidgetConfig(resource_path="https://static/a.png", resource_url_attribute_ref=SNAPSHOT_URL)
    assert ResourceResolver().resolve(config, (camera,)) == "https://cam/snap.png?v=0"


@pytest.mark.parametrize("value", [None, "", "-"])
def test_placeholder_override_falls_back_to_static(value):
    camera = Asset(id="camera1", attributes={"snapshotUrl": Attribute("snapshotUrl", "text", value)})
    config = ImageWidgetConfig(resource_path="https://static/a.png", resource_url_attribute_ref=SNAPSHOT_URL)
    assert ResourceResolver().resolve(config, (camera,)) == "https://static/a.png?v=0"


def test_override_asset_not_loaded_falls_back_to_static(boiler):
    config = WebWidgetConfig(resource_path="https://static/page", resource_url_attribute_ref=SNAPSHOT_URL)
    assert ResourceResolver().resolve(config, (boiler,)) == "https://static/page?v=0"


def test_static_path_edit_bumps_version_only_without_override():
    resolver = ResourceResolver()
    before = ImageWidgetConfig(resource_path="a.png")
    assert resolver.note_config_change(before, ImageWidgetConfig(resource_path="b.png")) is True
    assert resolver.version == 1
    assert resolver.note_config_change(before, ImageWidgetConfig(resource_path="a.png")) is False
    overridden = ImageWidgetConfig(resource_path="c.png", resource_url_attribute_ref=SNAPSHOT_URL)
    assert resolver.note_config_change(before, overridden) is False
    assert resolver.version == 1
