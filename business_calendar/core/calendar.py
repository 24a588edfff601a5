"""
Business calendar: working weekdays, holidays and business day arithmetic.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from business_calendar.core.date_parser import (
    WEEKDAY_NAMES,
    Weekday,
    parse_ordinal_date,
    weekday_name,
)
from business_calendar.core.exceptions import ConfigError
from business_calendar.data.schemas import CalendarConf, CalendarInfo

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROLL_DAYS = 3660

ONE_DAY = timedelta(days=1)


def as_date(value: Union[date, datetime]) -> date:
    """Drop any time-of-day component, keeping the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


class Calendar:
    """
    A set of working weekdays plus a list of holiday dates.

    The calendar is populated once (via the constructor or load()) and is
    read-only afterwards, so a loaded instance can be shared freely.
    """

    def __init__(
        self,
        working_days: Optional[Iterable[int]] = None,
        holidays: Optional[Iterable[Union[date, datetime]]] = None,
        name: str = "custom",
        max_roll_days: int = DEFAULT_MAX_ROLL_DAYS,
    ):
        """
        Initialize the calendar.

        Args:
            working_days: Weekday numbers (Monday=0) that are open for business.
            holidays: Dates excluded from business day status.
            name: Calendar name, used in output only.
            max_roll_days: Step limit for roll operations.
        """
        self.name = name
        self.max_roll_days = max_roll_days
        self._working_days: FrozenSet[Weekday] = frozenset(
            Weekday(d) for d in (working_days or ())
        )
        self._holidays: Tuple[date, ...] = tuple(as_date(h) for h in (holidays or ()))
        self._holiday_set: FrozenSet[date] = frozenset(self._holidays)
        self._ignored_weekdays: Tuple[str, ...] = ()

    @classmethod
    def from_config(
        cls,
        conf: Union[CalendarConf, Mapping[str, Any]],
        name: str = "custom",
        max_roll_days: int = DEFAULT_MAX_ROLL_DAYS,
    ) -> "Calendar":
        """Create a calendar and load it from a calendar definition."""
        calendar = cls(name=name, max_roll_days=max_roll_days)
        calendar.load(conf)
        return calendar

    @property
    def working_days(self) -> FrozenSet[Weekday]:
        return self._working_days

    @property
    def holidays(self) -> Tuple[date, ...]:
        return self._holidays

    @property
    def ignored_weekdays(self) -> Tuple[str, ...]:
        """Weekday names from the last load that were not recognized."""
        return self._ignored_weekdays

    def load(self, conf: Union[CalendarConf, Mapping[str, Any]]) -> None:
        """
        Populate the calendar from a parsed calendar definition.

        Unrecognized weekday names are skipped with a warning. Nothing is
        changed unless every holiday parses.

        Args:
            conf: CalendarConf or a mapping with working_days and holidays.

        Raises:
            ConfigError: If the definition has the wrong shape.
            ParseError: If a holiday string is malformed.
        """
        if not isinstance(conf, CalendarConf):
            try:
                conf = CalendarConf.model_validate(conf)
            except ValidationError as e:
                raise ConfigError(f"Invalid calendar definition: {e}") from e

        working_days = set()
        ignored = []
        for day_name in conf.working_days:
            weekday = WEEKDAY_NAMES.get(day_name)
            if weekday is None:
                logger.warning(f"Ignoring unknown weekday {day_name!r} in calendar {self.name!r}")
                ignored.append(day_name)
                continue
            working_days.add(weekday)

        holidays = [parse_ordinal_date(text) for text in conf.holidays]

        self._working_days = self._working_days | frozenset(working_days)
        self._holidays = self._holidays + tuple(holidays)
        self._holiday_set = frozenset(self._holidays)
        self._ignored_weekdays = tuple(ignored)

        logger.debug(
            f"Loaded calendar {self.name!r}: {len(working_days)} working days, "
            f"{len(holidays)} holidays"
        )

    def is_holiday(self, value: Union[date, datetime]) -> bool:
        """Return True if the date is one of the listed holidays."""
        return as_date(value) in self._holiday_set

    def is_working_day(self, value: Union[date, datetime]) -> bool:
        """Return True if the date falls on a working weekday."""
        return value.weekday() in self._working_days

    def is_business_day(self, value: Union[date, datetime]) -> bool:
        """Return True if the date is a working day and not a holiday."""
        if self.is_holiday(value):
            return False
        return self.is_working_day(value)

    def _roll(self, value: date, step: timedelta) -> date:
        current = value
        for _ in range(self.max_roll_days):
            if self.is_business_day(current):
                return current
            current += step
        raise ConfigError(
            f"No business day within {self.max_roll_days} days of {value.isoformat()} "
            f"in calendar {self.name!r}; check its working days"
        )

    def roll_forward(self, value: Union[date, datetime]) -> date:
        """
        Roll forward to the next business day.

        If the date given is a business day, that day is returned.

        Raises:
            ConfigError: If no business day is found within max_roll_days.
        """
        return self._roll(as_date(value), ONE_DAY)

    def roll_backward(self, value: Union[date, datetime]) -> date:
        """
        Roll backward to the previous business day.

        If the date given is a business day, that day is returned.

        Raises:
            ConfigError: If no business day is found within max_roll_days.
        """
        return self._roll(as_date(value), -ONE_DAY)

    def next_business_day(self, value: Union[date, datetime]) -> date:
        """First business day strictly after the given date."""
        return self.roll_forward(as_date(value) + ONE_DAY)

    def previous_business_day(self, value: Union[date, datetime]) -> date:
        """Last business day strictly before the given date."""
        return self.roll_backward(as_date(value) - ONE_DAY)

    def business_days_between(
        self, start: Union[date, datetime], end: Union[date, datetime]
    ) -> int:
        """
        Count business days from start up to, but not including, end.

        Walks day by day from start toward end. The start date is counted
        if it is a business day, end never is. Walking backward negates
        the count:

            business_days_between(mon, wed) == 2   (no holidays)
            business_days_between(wed, mon) == -2
            business_days_between(mon, sat) == -1
        """
        start, end = as_date(start), as_date(end)
        if start == end:
            return 0
        if start < end:
            return len(self.business_days_in_range(start, end))

        count = 0
        current = start
        while current > end:
            if self.is_business_day(current):
                count += 1
            current -= ONE_DAY
        return -count

    def business_days_in_range(
        self, start: Union[date, datetime], end: Union[date, datetime]
    ) -> List[date]:
        """Business days in [start, end), ascending. Empty if end <= start."""
        start, end = as_date(start), as_date(end)
        days = []
        current = start
        while current < end:
            if self.is_business_day(current):
                days.append(current)
            current += ONE_DAY
        return days

    def add_business_days(self, value: Union[date, datetime], delta: int) -> date:
        """
        Add or subtract a number of business days.

        A non-business start date is first rolled in the direction of travel:

            monday + 1 = tuesday      friday - 1 = thursday
            friday + 1 = monday       monday - 1 = friday
            sunday + 1 = tuesday      sunday - 1 = thursday

        A delta of 0 returns the date unchanged.
        """
        current = as_date(value)
        if delta == 0:
            return current

        if delta > 0:
            current = self.roll_forward(current)
            for _ in range(delta):
                current = self.next_business_day(current)
        else:
            current = self.roll_backward(current)
            for _ in range(-delta):
                current = self.previous_business_day(current)
        return current

    def subtract_business_days(self, value: Union[date, datetime], delta: int) -> date:
        """Subtract a number of business days. Same as add_business_days(value, -delta)."""
        return self.add_business_days(value, -delta)

    def get_business_day(self, value: Union[date, datetime]) -> int:
        """Ordinal business day of the month, counting the given date."""
        value = as_date(value)
        first = value.replace(day=1)
        return self.business_days_between(first, value + ONE_DAY)

    def holidays_between(
        self, start: Union[date, datetime], end: Union[date, datetime]
    ) -> List[date]:
        """Holidays in [start, end], ascending."""
        start, end = as_date(start), as_date(end)
        return sorted(h for h in self._holiday_set if start <= h <= end)

    def info(self) -> CalendarInfo:
        """Describe the calendar as a CalendarInfo model."""
        return CalendarInfo(
            name=self.name,
            working_days=[weekday_name(d) for d in sorted(self._working_days)],
            holidays=list(self._holidays),
            ignored_weekdays=list(self._ignored_weekdays),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable representation of the calendar."""
        return self.info().model_dump(mode="json")

    def __repr__(self) -> str:
        days = ", ".join(weekday_name(d) for d in sorted(self._working_days))
        return (
            f"Calendar(name={self.name!r}, working_days=[{days}], "
            f"holidays={len(self._holidays)})"
        )
