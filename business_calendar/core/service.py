"""
Calendar service combining the loader with result building for the
CLI, REST API and MCP server.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from business_calendar.core.calendar import Calendar
from business_calendar.core.date_parser import weekday_name
from business_calendar.core.loader import CalendarLoader
from business_calendar.data.schemas import Config, DateQueryResult, RangeResult

logger = logging.getLogger(__name__)


class CalendarService:
    """Loads calendars on demand and answers queries against them."""

    def __init__(self, loader: CalendarLoader, default_calendar: str = "bacs"):
        """
        Initialize the calendar service.

        Args:
            loader: Loader used to read calendar files.
            default_calendar: Calendar used when no name is given.
        """
        self.loader = loader
        self.default_calendar = default_calendar
        self._cache: Dict[str, Calendar] = {}

    @classmethod
    def from_config(cls, config: Config) -> "CalendarService":
        """Create a service from tool settings."""
        loader = CalendarLoader(config.calendar_directory, max_roll_days=config.max_roll_days)
        return cls(loader, default_calendar=config.default_calendar)

    def get_calendar(self, name: Optional[str] = None) -> Calendar:
        """
        Return a loaded calendar, reading it on first use.

        Raises:
            ConfigError: If the calendar cannot be read.
            ParseError: If one of its holidays is malformed.
        """
        name = name or self.default_calendar
        if name not in self._cache:
            self._cache[name] = self.loader.load(name)
        return self._cache[name]

    def add_calendar(self, calendar: Calendar) -> None:
        """Register an already loaded calendar under its name."""
        self._cache[calendar.name] = calendar

    def list_calendars(self) -> List[str]:
        """Names of all calendars available to the service."""
        return sorted(set(self.loader.list_calendars()) | set(self._cache))

    def clear_cache(self) -> None:
        """Forget all loaded calendars."""
        self._cache.clear()

    def check(self, value: date, name: Optional[str] = None) -> DateQueryResult:
        """Describe the business day status of a date."""
        calendar = self.get_calendar(name)
        return DateQueryResult(
            calendar=calendar.name,
            query_date=value,
            weekday=weekday_name(value.weekday()),
            is_holiday=calendar.is_holiday(value),
            is_working_day=calendar.is_working_day(value),
            is_business_day=calendar.is_business_day(value),
            business_day_of_month=calendar.get_business_day(value),
            previous_business_day=calendar.previous_business_day(value),
            next_business_day=calendar.next_business_day(value),
        )

    def between(self, start: date, end: date, name: Optional[str] = None) -> RangeResult:
        """Count business days from start up to, but not including, end."""
        calendar = self.get_calendar(name)
        low, high = min(start, end), max(start, end)
        # The walk visits start but stops before end, in either direction
        holidays = [h for h in calendar.holidays_between(low, high) if h != end]
        return RangeResult(
            calendar=calendar.name,
            start_date=start,
            end_date=end,
            business_days=calendar.business_days_between(start, end),
            holidays=holidays,
        )
