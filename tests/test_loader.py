"""
Tests for the calendar loader and the calendar service.
"""

from datetime import date

import pytest

from business_calendar.core.calendar import Calendar
from business_calendar.core.exceptions import ConfigError, ParseError
from business_calendar.core.loader import BUNDLED_CALENDARS_DIR, CalendarLoader
from business_calendar.core.service import CalendarService


CUSTOM_CALENDAR = """\
working_days:
  - monday
  - tuesday
  - wednesday
  - thursday
  - friday
  - saturday
holidays:
  - January 1st, 2020
  - May 1st, 2020
"""


@pytest.fixture
def calendar_dir(tmp_path):
    """A directory with one valid and some broken calendar files."""
    (tmp_path / "custom.yml").write_text(CUSTOM_CALENDAR, encoding="utf-8")
    (tmp_path / "broken.yml").write_text("working_days: [monday\n", encoding="utf-8")
    (tmp_path / "listing.yml").write_text("- monday\n- tuesday\n", encoding="utf-8")
    (tmp_path / "badholiday.yml").write_text(
        "working_days: [monday]\nholidays:\n  - May 1, 2020\n", encoding="utf-8"
    )
    (tmp_path / "empty.yml").write_text("", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not a calendar", encoding="utf-8")
    return tmp_path


@pytest.fixture
def loader(calendar_dir):
    """Create a CalendarLoader for the temporary directory."""
    return CalendarLoader(calendar_dir)


class TestCalendarLoader:
    """Tests for CalendarLoader."""

    def test_bundled_calendars(self):
        loader = CalendarLoader()

        assert loader.directory == BUNDLED_CALENDARS_DIR
        assert "bacs" in loader.list_calendars()
        assert "target" in loader.list_calendars()

    def test_load_bundled_bacs(self):
        bacs = CalendarLoader().load("bacs")

        assert bacs.name == "bacs"
        assert bacs.is_holiday(date(2020, 12, 28))
        assert not bacs.is_working_day(date(2020, 12, 26))

    def test_load_custom(self, loader):
        calendar = loader.load("custom")

        assert calendar.name == "custom"
        assert calendar.is_business_day(date(2020, 6, 27))  # Saturday
        assert not calendar.is_business_day(date(2020, 5, 1))

    def test_list_calendars(self, loader):
        assert loader.list_calendars() == ["badholiday", "broken", "custom", "empty", "listing"]

    def test_list_calendars_missing_directory(self, tmp_path):
        assert CalendarLoader(tmp_path / "missing").list_calendars() == []

    def test_missing_calendar(self, loader):
        with pytest.raises(ConfigError, match="Calendar not found"):
            loader.load("missing")

    def test_invalid_yaml(self, loader):
        with pytest.raises(ConfigError, match="Error parsing calendar file"):
            loader.load("broken")

    def test_top_level_must_be_mapping(self, loader):
        with pytest.raises(ConfigError, match="must contain a mapping"):
            loader.load("listing")

    def test_malformed_holiday(self, loader):
        with pytest.raises(ParseError):
            loader.load("badholiday")

    def test_empty_file(self, loader):
        calendar = loader.load("empty")

        assert calendar.working_days == frozenset()
        assert calendar.holidays == ()

    @pytest.mark.parametrize("name", ["", "../custom", "sub/custom", ".hidden"])
    def test_invalid_name(self, loader, name):
        with pytest.raises(ConfigError, match="Invalid calendar name"):
            loader.load(name)

    def test_load_file_uses_stem_as_name(self, calendar_dir):
        calendar = CalendarLoader().load_file(calendar_dir / "custom.yml")
        assert calendar.name == "custom"

    def test_max_roll_days_is_passed_on(self, loader):
        calendar = CalendarLoader(loader.directory, max_roll_days=10).load("empty")

        assert calendar.max_roll_days == 10
        with pytest.raises(ConfigError):
            calendar.roll_forward(date(2020, 1, 1))


class TestCalendarService:
    """Tests for CalendarService."""

    @pytest.fixture
    def service(self):
        return CalendarService(CalendarLoader(), default_calendar="bacs")

    def test_default_calendar(self, service):
        assert service.get_calendar().name == "bacs"

    def test_calendars_are_cached(self, service):
        assert service.get_calendar("bacs") is service.get_calendar("bacs")
        service.clear_cache()
        assert service.get_calendar("bacs") is not None

    def test_add_calendar(self, service):
        service.add_calendar(Calendar(working_days=[0], name="mondays"))

        assert "mondays" in service.list_calendars()
        assert service.get_calendar("mondays").is_business_day(date(2020, 6, 22))

    def test_check(self, service):
        result = service.check(date(2020, 12, 25))

        assert result.calendar == "bacs"
        assert result.weekday == "friday"
        assert result.is_holiday is True
        assert result.is_working_day is True
        assert result.is_business_day is False
        assert result.business_day_of_month == 18
        assert result.previous_business_day == date(2020, 12, 24)
        assert result.next_business_day == date(2020, 12, 29)

    def test_between(self, service):
        result = service.between(date(2020, 12, 24), date(2021, 1, 5))

        assert result.business_days == 5
        assert result.holidays == [date(2020, 12, 25), date(2020, 12, 28), date(2021, 1, 1)]

    def test_between_backward(self, service):
        result = service.between(date(2014, 6, 5), date(2014, 6, 2))
        assert result.business_days == -3

    def test_between_backward_holidays_include_start(self, service):
        result = service.between(date(2020, 12, 28), date(2020, 12, 25))

        assert result.business_days == 0
        assert result.holidays == [date(2020, 12, 28)]

    def test_unknown_calendar(self, service):
        with pytest.raises(ConfigError):
            service.get_calendar("nope")
