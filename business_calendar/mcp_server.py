"""
MCP Server for the Business Calendar.

This module provides an MCP (Model Context Protocol) server that exposes
the business calendar operations to MCP clients.

Supports two transport modes:
- stdio: For local desktop client integration
- sse: For HTTP-based integration (Docker, remote servers)
"""

import argparse
import logging
import os
from datetime import MAXYEAR, MINYEAR, date
from typing import Optional

from mcp.server.fastmcp import FastMCP

from business_calendar.config.manager import ConfigManager
from business_calendar.core.exceptions import CalendarError
from business_calendar.core.service import CalendarService

logger = logging.getLogger(__name__)

# Load configuration
config_manager = ConfigManager()
config = config_manager.load_config()

# Initialize components
service = CalendarService.from_config(config)


def _parse_iso(value: str) -> date:
    return date.fromisoformat(value)


def holiday_listing(service: CalendarService, calendar: Optional[str], year: Optional[int]) -> dict:
    """Holidays of a calendar as a tool result, or an error dictionary."""
    if year is not None and not MINYEAR <= year <= MAXYEAR:
        return {"error": f"Year must be between {MINYEAR} and {MAXYEAR}"}

    try:
        cal = service.get_calendar(calendar)
    except CalendarError as e:
        return {"error": str(e)}

    if year is None:
        holidays = sorted(cal.holidays)
    else:
        holidays = cal.holidays_between(date(year, 1, 1), date(year, 12, 31))

    return {
        "calendar": cal.name,
        "year": year,
        "holiday_count": len(holidays),
        "holidays": [
            {"date": h.isoformat(), "weekday": h.strftime("%A").lower()}
            for h in holidays
        ],
    }


def create_mcp_server(host: str = "127.0.0.1", port: int = 8000) -> FastMCP:
    """Create and configure the MCP server with tools."""
    mcp = FastMCP("Business Calendar", host=host, port=port)

    @mcp.tool()
    def check_date(day: str, calendar: Optional[str] = None) -> dict:
        """
        Check whether a date is a holiday, a working day and a business day.

        Args:
            day: Date in format YYYY-MM-DD (e.g., "2020-12-25")
            calendar: Calendar name (e.g., "bacs"). Uses the default if omitted.

        Returns:
            Dictionary with is_holiday, is_working_day, is_business_day,
            business_day_of_month, previous_business_day and next_business_day.

        Example:
            >>> check_date("2020-12-25", calendar="bacs")
        """
        try:
            value = _parse_iso(day)
        except ValueError as e:
            return {"error": f"Invalid date format. Use YYYY-MM-DD. Details: {str(e)}"}

        try:
            result = service.check(value, calendar)
        except CalendarError as e:
            return {"error": str(e)}
        return result.model_dump(mode="json", exclude={"calculation_timestamp"})

    @mcp.tool()
    def add_business_days(day: str, delta: int, calendar: Optional[str] = None) -> dict:
        """
        Add (or, with a negative delta, subtract) business days to a date.

        A start date that is not a business day is first rolled to the
        nearest business day in the direction of travel.

        Args:
            day: Start date in format YYYY-MM-DD (e.g., "2020-12-26")
            delta: Number of business days; negative values subtract
            calendar: Calendar name (e.g., "bacs"). Uses the default if omitted.

        Returns:
            Dictionary with the start date, delta and resulting date.

        Example:
            >>> add_business_days("2020-12-26", 6)
            {"start_date": "2020-12-26", "delta": 6, "result_date": "2021-01-07", ...}
        """
        try:
            value = _parse_iso(day)
        except ValueError as e:
            return {"error": f"Invalid date format. Use YYYY-MM-DD. Details: {str(e)}"}

        try:
            cal = service.get_calendar(calendar)
            result = cal.add_business_days(value, delta)
        except CalendarError as e:
            return {"error": str(e)}

        return {
            "calendar": cal.name,
            "start_date": value.isoformat(),
            "delta": delta,
            "result_date": result.isoformat(),
            "weekday": result.strftime("%A").lower(),
        }

    @mcp.tool()
    def business_days_between(start_date: str, end_date: str, calendar: Optional[str] = None) -> dict:
        """
        Count business days from start_date up to, but not including, end_date.

        The count is negative when end_date is before start_date.

        Args:
            start_date: First date in format YYYY-MM-DD, counted if a business day
            end_date: Last date in format YYYY-MM-DD, never counted
            calendar: Calendar name (e.g., "bacs"). Uses the default if omitted.

        Returns:
            Dictionary with business_days and the holidays inside the range.

        Example:
            >>> business_days_between("2014-06-02", "2014-06-05")
            {"business_days": 3, ...}
        """
        try:
            start = _parse_iso(start_date)
            end = _parse_iso(end_date)
        except ValueError as e:
            return {"error": f"Invalid date format. Use YYYY-MM-DD. Details: {str(e)}"}

        try:
            result = service.between(start, end, calendar)
        except CalendarError as e:
            return {"error": str(e)}
        return result.model_dump(mode="json", exclude={"calculation_timestamp"})

    @mcp.tool()
    def list_holidays(calendar: Optional[str] = None, year: Optional[int] = None) -> dict:
        """
        List the holidays of a calendar, optionally for a single year.

        Args:
            calendar: Calendar name (e.g., "bacs"). Uses the default if omitted.
            year: Year to restrict the list to (e.g., 2020)

        Returns:
            Dictionary with the calendar name, holiday_count and holidays.
        """
        return holiday_listing(service, calendar, year)

    @mcp.tool()
    def list_calendars() -> dict:
        """
        List the available business calendars.

        Returns:
            Dictionary with the calendar names and the default calendar.
        """
        names = service.list_calendars()
        return {
            "count": len(names),
            "default": service.default_calendar,
            "calendars": names,
        }

    return mcp


def main():
    """Run the MCP server with configurable transport.

    Transport can be set via:
    - Command line: --transport sse --port 8080
    - Environment: MCP_TRANSPORT=sse MCP_PORT=8080 MCP_HOST=0.0.0.0
    """
    parser = argparse.ArgumentParser(description="Business Calendar MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=os.environ.get("MCP_TRANSPORT", "stdio"),
        help="Transport mode: stdio (default) or sse for HTTP",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("MCP_HOST", os.environ.get("FASTMCP_HOST", "0.0.0.0")),
        help="Host to bind to (SSE mode only, default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("MCP_PORT", os.environ.get("FASTMCP_PORT", "8080"))),
        help="Port to listen on (SSE mode only, default: 8080)",
    )

    args = parser.parse_args()

    # Create MCP server with configured host/port
    mcp = create_mcp_server(host=args.host, port=args.port)
    logger.info(f"Starting MCP server with {args.transport} transport")

    if args.transport == "sse":
        # Run with SSE transport for HTTP access
        mcp.run(transport="sse")
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
