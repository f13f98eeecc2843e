"""pytest configuration and fixtures for the widget engine tests."""

import pytest

from models.attribute import Asset, Attribute, AttributeRef
from services.asset_service import InMemoryAssetDataProvider
from services.event_channel import LocalEventChannel
from state import app_state


TEMPERATURE = AttributeRef("boiler1", "temperature")
PRESSURE = AttributeRef("boiler1", "pressure")
COLOUR = AttributeRef("boiler1", "statusColour")
SNAPSHOT_URL = AttributeRef("camera1", "snapshotUrl")


@pytest.fixture(autouse=True)
def clear_log():
    app_state["log_messages"].clear()
    yield


@pytest.fixture
def boiler():
    return Asset(id="boiler1", name="Boiler 1", attributes={
        "temperature": Attribute("temperature", "number", 60.0, 1000.0, {"units": "C"}),
        "pressure": Attribute("pressure", "number", 1.2, 1000.0),
        "statusColour": Attribute("statusColour", "colourRGB", "#00ff00", 1000.0),
    })


@pytest.fixture
def camera():
    return Asset(id="camera1", name="Camera 1", attributes={
        "snapshotUrl": Attribute("snapshotUrl", "text", "https://cam/snap.png", 1000.0),
    })


@pytest.fixture
def provider(boiler, camera):
    return InMemoryAssetDataProvider([boiler, camera])


@pytest.fixture
def channel():
    return LocalEventChannel()


class RecordingHost:
    """Stands in for the dashboard: records every config it is told about."""

    def __init__(self):
        self.changes = []

    def notify_config_changed(self, widget_id, config):
        self.changes.append((widget_id, config))


@pytest.fixture
def host():
    return RecordingHost()


def log_lines():
    return list(app_state["log_messages"])
