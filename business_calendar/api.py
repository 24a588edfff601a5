"""
FastAPI REST API for the business calendar.
"""

import logging
from datetime import date
from enum import Enum
from typing import List

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from business_calendar.config.manager import ConfigManager
from business_calendar.core.calendar import Calendar
from business_calendar.core.exceptions import ConfigError, ParseError
from business_calendar.core.service import CalendarService
from business_calendar.data.schemas import CalendarInfo, DateQueryResult, RangeResult

logger = logging.getLogger(__name__)

# Load configuration
config_manager = ConfigManager()
config = config_manager.load_config()

# Initialize components
service = CalendarService.from_config(config)


class Direction(str, Enum):
    """Roll direction."""

    forward = "forward"
    backward = "backward"


# API Models
class DateResponse(BaseModel):
    """Response model for operations returning a single date."""

    calendar: str
    input_date: date
    result_date: date
    weekday: str


# FastAPI app
app = FastAPI(
    title="Business Calendar API",
    description="Holiday lookups and business day arithmetic",
    version="0.1.0",
)


def get_calendar(name: str) -> Calendar:
    """Load a calendar, translating load errors into HTTP errors."""
    if name not in service.list_calendars():
        raise HTTPException(status_code=404, detail=f"Unknown calendar: {name}")
    try:
        return service.get_calendar(name)
    except (ConfigError, ParseError) as e:
        logger.error(f"Failed to load calendar {name!r}: {e}")
        raise HTTPException(status_code=400, detail=str(e))


def date_response(calendar: Calendar, input_date: date, compute) -> DateResponse:
    try:
        result = compute()
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return DateResponse(
        calendar=calendar.name,
        input_date=input_date,
        result_date=result,
        weekday=result.strftime("%A").lower(),
    )


@app.get("/")
async def root():
    """API root endpoint with basic info."""
    return {
        "name": "Business Calendar API",
        "version": "0.1.0",
        "endpoints": {
            "GET /calendars": "List calendars",
            "GET /calendars/{name}": "Describe a calendar",
            "GET /calendars/{name}/check": "Business day status of a date",
            "GET /calendars/{name}/roll": "Roll to the nearest business day",
            "GET /calendars/{name}/next": "Next business day",
            "GET /calendars/{name}/previous": "Previous business day",
            "GET /calendars/{name}/add": "Add business days",
            "GET /calendars/{name}/between": "Count business days between dates",
        },
    }


@app.get("/calendars", response_model=List[str])
async def list_calendars():
    """List the available calendars."""
    return service.list_calendars()


@app.get("/calendars/{name}", response_model=CalendarInfo)
async def describe_calendar(name: str):
    """Describe the working days and holidays of a calendar."""
    return get_calendar(name).info()


@app.get("/calendars/{name}/check", response_model=DateQueryResult)
async def check_date(name: str, day: date = Query(..., alias="date", description="Date to check")):
    """Holiday, working day and business day status of a date."""
    get_calendar(name)
    try:
        return service.check(day, name)
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/calendars/{name}/roll", response_model=DateResponse)
async def roll(
    name: str,
    day: date = Query(..., alias="date", description="Date to roll"),
    direction: Direction = Query(Direction.forward, description="forward or backward"),
):
    """Roll a date to the nearest business day, inclusive."""
    calendar = get_calendar(name)
    if direction == Direction.backward:
        return date_response(calendar, day, lambda: calendar.roll_backward(day))
    return date_response(calendar, day, lambda: calendar.roll_forward(day))


@app.get("/calendars/{name}/next", response_model=DateResponse)
async def next_business_day(name: str, day: date = Query(..., alias="date", description="Start date")):
    """First business day strictly after a date."""
    calendar = get_calendar(name)
    return date_response(calendar, day, lambda: calendar.next_business_day(day))


@app.get("/calendars/{name}/previous", response_model=DateResponse)
async def previous_business_day(name: str, day: date = Query(..., alias="date", description="Start date")):
    """Last business day strictly before a date."""
    calendar = get_calendar(name)
    return date_response(calendar, day, lambda: calendar.previous_business_day(day))


@app.get("/calendars/{name}/add", response_model=DateResponse)
async def add_business_days(
    name: str,
    day: date = Query(..., alias="date", description="Start date"),
    delta: int = Query(..., description="Business days to add, negative to subtract"),
):
    """Add or subtract business days."""
    calendar = get_calendar(name)
    return date_response(calendar, day, lambda: calendar.add_business_days(day, delta))


@app.get("/calendars/{name}/between", response_model=RangeResult)
async def business_days_between(
    name: str,
    start: date = Query(..., description="First date, counted if a business day"),
    end: date = Query(..., description="Last date, never counted"),
):
    """Count business days from start up to, but not including, end."""
    get_calendar(name)
    return service.between(start, end, name)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}
