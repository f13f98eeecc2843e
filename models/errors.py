# models/errors.py
"""
Recoverable conditions raised by the widget engine. None of these are fatal:
each is caught where it is detected, logged, and the widget keeps rendering
its best-known state.
"""


class WidgetError(Exception):
    """Base class for all widget engine errors."""


class BindingUnavailable(WidgetError):
    """No event channel is present, or the channel refused the subscription."""


class ConsistencyError(WidgetError):
    """A marker and the attribute reference list disagree."""


class InvalidNumericInput(WidgetError):
    """User input was non-numeric or out of range."""

    def __init__(self, raw_value, fallback):
        super().__init__(f"Invalid numeric input {raw_value!r}, using {fallback}")
        self.raw_value = raw_value
        self.fallback = fallback


class RedundantSelection(WidgetError):
    """The selected override attribute is already the bound one."""
