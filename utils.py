# utils.py
import time
from state import app_state


def log_message(message):
    """Appends a timestamped line to the shared log and echoes it to stdout."""
    log_time = time.strftime("%H:%M:%S", time.localtime())
    line = f"[{log_time}] {message}"
    app_state["log_messages"].appendleft(line)
    print(line)


def clamp(value, low, high):
    return max(low, min(high, value))


def to_number(value):
    """
    Converts raw UI input to a float. Returns None for anything non-numeric,
    including NaN and booleans.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number:
        return None
    return number
