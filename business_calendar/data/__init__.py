"""
Data models and schemas for the business calendar.
"""

from business_calendar.data.schemas import (
    CalendarConf,
    CalendarInfo,
    Config,
    DateQueryResult,
    RangeResult,
)

__all__ = [
    "CalendarConf",
    "CalendarInfo",
    "Config",
    "DateQueryResult",
    "RangeResult",
]
