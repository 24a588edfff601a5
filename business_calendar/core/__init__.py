"""
Core business logic for the business calendar.
"""

from business_calendar.core.calendar import Calendar
from business_calendar.core.exceptions import CalendarError, ConfigError, ParseError
from business_calendar.core.loader import CalendarLoader
from business_calendar.core.service import CalendarService

__all__ = [
    "Calendar",
    "CalendarError",
    "CalendarLoader",
    "CalendarService",
    "ConfigError",
    "ParseError",
]
