"""
Business Calendar - working days, holidays and business day arithmetic.
"""

from business_calendar.core import (
    Calendar,
    CalendarError,
    CalendarLoader,
    ConfigError,
    ParseError,
)

__version__ = "0.1.0"

__all__ = [
    "Calendar",
    "CalendarError",
    "CalendarLoader",
    "ConfigError",
    "ParseError",
]
