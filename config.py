# config.py
"""
Shared constants for the widget engine, the CAN event channel and the dashboard view.
"""

# --- Markers ---
DEFAULT_MARKER_COORDINATES = (50, 50)
MARKER_COORDINATE_MIN = 0
MARKER_COORDINATE_MAX = 100

# --- Attribute formatting ---
VALUE_PLACEHOLDER = "-"
VALUE_TYPE_COLOUR_RGB = "colourRGB"
VALUE_TYPE_TEXT = "text"
NUMERIC_VALUE_TYPES = [
    "boolean", "positiveInteger", "positiveNumber", "number", "long", "integer",
    "bigInteger", "negativeInteger", "negativeNumber", "bigNumber", "integerByte", "direction",
]

# --- Chart grid ---
DEFAULT_GRID_INTENSITY = 0.2
DEFAULT_GRID_DENSITY = 10
GRID_DENSITY_BASE = 10
GRID_DENSITY_MIN_TICKS = 2
GRID_DENSITY_MAX_TICKS = 100
INVALID_DENSITY_FALLBACK = 1

# --- Chart axes ---
DEFAULT_AXIS_MIN = 0
DEFAULT_AXIS_MAX = 100
X_AXIS_TIME_UNITS = ["millisecond", "second", "minute", "hour"]
DEFAULT_X_AXIS_TIME_UNIT = "second"
DEFAULT_X_AXIS_STEP_SIZE = 1

# --- Datapoint queries ---
QUERY_TYPE_INTERVAL = "interval"
QUERY_TYPE_LTTB = "lttb"
INTERVAL_FORMULAS = ["AVG", "MIN", "MAX"]
DEFAULT_INTERVAL_FORMULA = "AVG"
DEFAULT_INTERVAL_SECONDS = 60.0
SAMPLING_OPTIONS = {"Interval": QUERY_TYPE_INTERVAL, "Downsample (LTTB)": QUERY_TYPE_LTTB}
TIME_PRESET_OPTIONS = ["lastHour", "last24Hours", "last7Days", "last30Days", "last365Days"]
DEFAULT_TIME_PRESET_KEY = "last24Hours"

# --- Resources ---
CACHE_BUST_PARAM = "v"

# --- History / logging ---
HISTORY_LENGTH = 1000
LOG_HISTORY_LENGTH = 100

# --- CAN bus event channel ---
CAN_INTERFACE = "socketcan"
CAN_CHANNEL = "can0"
CAN_BITRATE = 1000000
CAN_ID_ATTRIBUTE_BASE = 0x500
CAN_NODE_COUNT = 128
CAN_READ_TIMEOUT = 0.1
USE_CAN_CHANNEL = False

# --- View ---
RENDER_INTERVAL = 1.0 / 30.0
