"""
Error types raised by the business calendar.
"""


class CalendarError(Exception):
    """Base class for all business calendar errors."""


class ConfigError(CalendarError):
    """A calendar or settings source could not be read or is unusable."""


class ParseError(CalendarError, ValueError):
    """A holiday date string does not match the ordinal date layout."""

    def __init__(self, text: str, reason: str = ""):
        self.text = text
        message = f"Invalid holiday date: {text!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
