# main.py
import math
import time
import dearpygui.dearpygui as dpg
from config import RENDER_INTERVAL, USE_CAN_CHANNEL
from models.attribute import Asset, Attribute, AttributeRef
from services.asset_service import InMemoryAssetDataProvider
from services.can_service import CanEventChannel
from services.event_channel import LocalEventChannel
from utils import log_message
from viewmodels.main_viewmodel import MainViewModel
from views.main_view import MainView

DEMO_TEMPERATURE = AttributeRef("boiler1", "temperature")
DEMO_PRESSURE = AttributeRef("boiler1", "pressure")
DEMO_STATUS_COLOUR = AttributeRef("boiler1", "statusColour")
DEMO_SNAPSHOT_URL = AttributeRef("camera1", "snapshotUrl")

# (node id, signal index) -> attribute, for boards publishing on the attribute frame ids
DEMO_SIGNAL_MAP = {(1, 0): DEMO_TEMPERATURE, (1, 1): DEMO_PRESSURE}


def create_demo_provider():
    now = time.time()
    return InMemoryAssetDataProvider([
        Asset(id="boiler1", name="Boiler 1", type="ThingAsset", attributes={
            "temperature": Attribute("temperature", "number", 60.0, now, {"units": "C", "decimals": 1}),
            "pressure": Attribute("pressure", "number", 1.2, now, {"units": "bar", "decimals": 2}),
            "statusColour": Attribute("statusColour", "colourRGB", "#00ff00", now),
        }),
        Asset(id="camera1", name="Camera 1", type="ThingAsset", attributes={
            "snapshotUrl": Attribute("snapshotUrl", "text", "https://example.com/snapshot.png", now),
        }),
    ])


def create_channel():
    if USE_CAN_CHANNEL:
        channel = CanEventChannel(DEMO_SIGNAL_MAP)
        if channel.connect():
            return channel
        log_message("Falling back to the local demo channel.")
    return LocalEventChannel()


def publish_demo_values(channel, t):
    channel.publish(DEMO_TEMPERATURE, 60.0 + 5.0 * math.sin(t / 5.0))
    channel.publish(DEMO_PRESSURE, 1.2 + 0.1 * math.cos(t / 3.0))
    if int(t) % 10 == 0:
        # Same URL on purpose: the camera republishes to request a reload.
        channel.publish(DEMO_SNAPSHOT_URL, "https://example.com/snapshot.png")
        channel.publish(DEMO_STATUS_COLOUR, "#00ff00" if int(t) % 20 == 0 else "#ff8800")


def main():
    dpg.create_context()
    dpg.create_viewport(title='Live Attribute Widgets', width=1500, height=950)

    channel = create_channel()
    main_viewmodel = MainViewModel(provider=create_demo_provider(), channel=channel)
    main_view = MainView(main_viewmodel)
    main_view.create_window()

    dpg.setup_dearpygui()
    dpg.show_viewport()
    dpg.set_primary_window("primary_window", True)

    start_time = time.time()
    last_publish_time = 0.0
    last_render_time = time.time()

    while dpg.is_dearpygui_running():
        now = time.time()
        if isinstance(channel, LocalEventChannel) and now - last_publish_time >= 1.0:
            publish_demo_values(channel, now - start_time)
            last_publish_time = now
        main_viewmodel.update()

        if now - last_render_time >= RENDER_INTERVAL:
            last_render_time = now
            main_view.update()
            dpg.render_dearpygui_frame()

        time.sleep(0.001)

    main_viewmodel.disconnect()
    dpg.destroy_context()

if __name__ == "__main__":
    main()
