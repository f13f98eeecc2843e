# services/can_service.py
import can
import struct
import threading
from config import CAN_INTERFACE, CAN_CHANNEL, CAN_BITRATE, CAN_ID_ATTRIBUTE_BASE, CAN_NODE_COUNT, CAN_READ_TIMEOUT
from models.attribute import AttributeEvent
from services.event_channel import EventChannel
from utils import log_message


class CanEventChannel(EventChannel):
    """
    Event channel fed by attribute frames on a CAN bus.

    Each node publishes on CAN_ID_ATTRIBUTE_BASE + node_id. Payload is one
    signal index byte followed by a little-endian float32. `signal_map` maps
    (node_id, signal_index) to the AttributeRef the value belongs to.
    """

    def __init__(self, signal_map, interface=CAN_INTERFACE, channel=CAN_CHANNEL, bitrate=CAN_BITRATE):
        super().__init__()
        self._signal_map = dict(signal_map)
        self._interface = interface
        self._channel = channel
        self._bitrate = bitrate
        self._bus = None
        self._is_running = False
        self._read_thread = None

    @property
    def is_available(self):
        return self._is_running

    def connect(self, bus=None):
        """Opens the bus (or adopts `bus`) and starts the reader thread."""
        try:
            if bus is None:
                can_filters = [{"can_id": CAN_ID_ATTRIBUTE_BASE, "can_mask": 0x780}]
                bus = can.interface.Bus(interface=self._interface, channel=self._channel,
                                        bitrate=self._bitrate, can_filters=can_filters)
            self._bus = bus
            self._is_running = True
            self._read_thread = threading.Thread(target=self._read_messages, daemon=True)
            self._read_thread.start()
            log_message(f"CAN event channel connected on {self._channel}.")
            return True
        except (can.CanError, OSError, ValueError) as e:
            log_message(f"ERROR: Could not connect CAN event channel: {e}")
            return False

    def disconnect(self):
        # The reader may already have stopped itself after a bus error.
        self._is_running = False
        if self._read_thread:
            self._read_thread.join(timeout=1)
            self._read_thread = None
        if self._bus:
            self._bus.shutdown()
            self._bus = None
            log_message("CAN event channel disconnected.")

    def _read_messages(self):
        while self._is_running:
            try:
                msg = self._bus.recv(timeout=CAN_READ_TIMEOUT)
                if msg: self._queue.put(msg)
            except can.CanError as e:
                log_message(f"ERROR: CAN read thread stopped: {e}")
                self._is_running = False
                break

    def _decode(self, msg):
        if not CAN_ID_ATTRIBUTE_BASE <= msg.arbitration_id < CAN_ID_ATTRIBUTE_BASE + CAN_NODE_COUNT:
            return None
        if len(msg.data) < 5:
            return None
        node_id = msg.arbitration_id - CAN_ID_ATTRIBUTE_BASE
        ref = self._signal_map.get((node_id, msg.data[0]))
        if ref is None:
            return None
        try:
            value = struct.unpack('<f', bytes(msg.data[1:5]))[0]
        except struct.error:
            return None
        if msg.timestamp:
            return AttributeEvent(ref=ref, value=value, timestamp=msg.timestamp)
        return AttributeEvent(ref=ref, value=value)

    @staticmethod
    def encode(node_id, signal_index, value):
        """Builds the frame a node would send for one attribute value."""
        data = [signal_index] + list(struct.pack('<f', value))
        return can.Message(arbitration_id=CAN_ID_ATTRIBUTE_BASE + node_id, data=data, is_extended_id=False)
