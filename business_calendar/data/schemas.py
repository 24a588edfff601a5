"""
Data models for the business calendar using Pydantic.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CalendarConf(BaseModel):
    """Raw calendar definition as read from a calendar YAML file."""

    model_config = ConfigDict(extra="ignore")

    working_days: List[str] = Field(
        default_factory=list, description="Lowercase weekday names, e.g. 'monday'"
    )
    holidays: List[str] = Field(
        default_factory=list, description="Holiday dates, e.g. 'August 29th, 2011'"
    )

    @field_validator("working_days", "holidays", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        """Treat an empty YAML key (null) as an empty list."""
        return [] if v is None else v


class CalendarInfo(BaseModel):
    """Description of a loaded calendar."""

    name: str = Field(..., description="Calendar name")
    working_days: List[str] = Field(default_factory=list, description="Working weekday names")
    holidays: List[date] = Field(default_factory=list, description="Holiday dates in load order")
    ignored_weekdays: List[str] = Field(
        default_factory=list, description="Weekday names that were not recognized"
    )


class DateQueryResult(BaseModel):
    """Status of a single date within a calendar."""

    calendar: str = Field(..., description="Calendar name")
    query_date: date = Field(..., description="Date that was checked")
    weekday: str = Field(..., description="Lowercase weekday name")
    is_holiday: bool = Field(..., description="Date is a listed holiday")
    is_working_day: bool = Field(..., description="Weekday is a working weekday")
    is_business_day: bool = Field(..., description="Working weekday and not a holiday")
    business_day_of_month: int = Field(
        ..., ge=0, description="Ordinal business day within the month, inclusive"
    )
    previous_business_day: date = Field(..., description="Nearest business day before the date")
    next_business_day: date = Field(..., description="Nearest business day after the date")
    calculation_timestamp: datetime = Field(
        default_factory=datetime.now, description="When the query was performed"
    )


class RangeResult(BaseModel):
    """Business day count between two dates."""

    calendar: str = Field(..., description="Calendar name")
    start_date: date = Field(..., description="First date, counted if a business day")
    end_date: date = Field(..., description="Last date, never counted")
    business_days: int = Field(..., description="Signed business day count")
    holidays: List[date] = Field(default_factory=list, description="Holidays within the range")
    calculation_timestamp: datetime = Field(
        default_factory=datetime.now, description="When the calculation was performed"
    )


class Config(BaseModel):
    """Configuration for the business calendar tools."""

    calendar_directory: Optional[str] = Field(
        default=None, description="Directory with calendar YAML files (default: bundled calendars)"
    )
    default_calendar: str = Field(default="bacs", description="Calendar used when none is given")
    max_roll_days: int = Field(
        default=3660, ge=1, description="Maximum days a roll may step before failing"
    )
    output_format: str = Field(default="json", description="Default output format: json or csv")
    output_directory: str = Field(default="results", description="Directory for output files")
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API server port")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the log level is one the logging module knows."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level
