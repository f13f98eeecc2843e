# state.py
"""
Defines and manages the shared application state.
"""
import collections
from config import LOG_HISTORY_LENGTH

# Process-wide state. Widget-owned data (cached assets, versions, subscriptions)
# never lives here.
app_state = {
    "is_running": False,
    "log_messages": collections.deque(maxlen=LOG_HISTORY_LENGTH),
    "subscription_counter": 0,
}


def next_subscription_id(prefix="sub"):
    """Returns a process-unique subscription id."""
    app_state["subscription_counter"] += 1
    return f"{prefix}_{app_state['subscription_counter']}"
