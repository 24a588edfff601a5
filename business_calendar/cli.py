"""
CLI interface for the business calendar.
"""

import logging
import os
import sys
from datetime import date, datetime
from typing import Optional

import click

from business_calendar.config.manager import CONFIG_PATH_ENV, ConfigManager
from business_calendar.core.calendar import Calendar
from business_calendar.core.date_parser import parse_ordinal_date
from business_calendar.core.exceptions import CalendarError, ParseError
from business_calendar.core.service import CalendarService
from business_calendar.data.schemas import Config
from business_calendar.output.exporter import ResultExporter
from business_calendar.output.formatter import ConsoleFormatter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_date(date_str: str) -> date:
    """Parse date string in various formats, including 'August 29th, 2011'."""
    formats = ["%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y"]
    for fmt in formats:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    try:
        return parse_ordinal_date(date_str)
    except ParseError:
        raise click.BadParameter(
            f"Invalid date format: {date_str}. "
            "Use YYYY-MM-DD, DD.MM.YYYY, DD/MM/YYYY or 'August 29th, 2011'"
        )


class DateParam(click.ParamType):
    """Click parameter type for calendar dates."""

    name = "date"

    def convert(self, value, param, ctx):
        if isinstance(value, date):
            return value
        try:
            return parse_date(value)
        except click.BadParameter as e:
            self.fail(e.message, param, ctx)


DATE = DateParam()


class CliContext:
    """Objects shared between commands."""

    def __init__(
        self,
        service: CalendarService,
        calendar_name: Optional[str],
        config: Config,
        config_path: Optional[str] = None,
    ):
        self.service = service
        self.calendar_name = calendar_name
        self.config = config
        self.config_path = config_path
        self.output_directory = config.output_directory
        self.formatter = ConsoleFormatter()

    def calendar(self) -> Calendar:
        """Load the selected calendar, exiting with an error if that fails."""
        try:
            calendar = self.service.get_calendar(self.calendar_name)
        except CalendarError as e:
            self.formatter.print_error(str(e))
            sys.exit(1)
        self.formatter.print_warnings(calendar)
        return calendar


def run_query(ctx: CliContext, func):
    """Run a calendar operation, reporting calendar errors and exiting with 1."""
    try:
        return func()
    except CalendarError as e:
        ctx.formatter.print_error(str(e))
        sys.exit(1)


@click.group()
@click.version_option(version="0.1.0", prog_name="business-calendar")
@click.option(
    "--calendar", "-k",
    default=None,
    help="Calendar name (default: from config, e.g. bacs)",
)
@click.option(
    "--calendar-file",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a calendar YAML file (overrides --calendar)",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to config file (optional)",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging",
)
@click.pass_context
def main(ctx, calendar, calendar_file, config, verbose):
    """Business Calendar - working days, holidays and business day arithmetic."""
    formatter = ConsoleFormatter()

    try:
        cfg = ConfigManager(config).load_config()
    except CalendarError as e:
        formatter.print_error(str(e))
        sys.exit(1)

    logging.getLogger().setLevel(logging.DEBUG if verbose else cfg.log_level)

    service = CalendarService.from_config(cfg)
    if calendar_file:
        try:
            loaded = service.loader.load_file(calendar_file)
        except CalendarError as e:
            formatter.print_error(str(e))
            sys.exit(1)
        service.add_calendar(loaded)
        calendar = loaded.name

    ctx.obj = CliContext(service, calendar, cfg, config)


@main.command()
@click.argument("day", type=DATE)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Also write the result as JSON to this path",
)
@click.pass_obj
def check(obj: CliContext, day, output):
    """Show the holiday, working day and business day status of DAY."""
    obj.calendar()
    result = run_query(obj, lambda: obj.service.check(day, obj.calendar_name))
    obj.formatter.print_query(result)

    if output:
        path = ResultExporter(obj.output_directory).export_json(result, output)
        obj.formatter.print_success(f"Result saved to {path}")


@main.command()
@click.argument("day", type=DATE)
@click.option(
    "--backward", "-b",
    is_flag=True,
    default=False,
    help="Roll backward instead of forward",
)
@click.pass_obj
def roll(obj: CliContext, day, backward):
    """Roll DAY to the nearest business day (DAY itself if it is one)."""
    calendar = obj.calendar()
    if backward:
        result = run_query(obj, lambda: calendar.roll_backward(day))
        obj.formatter.print_date("Rolled backward", result)
    else:
        result = run_query(obj, lambda: calendar.roll_forward(day))
        obj.formatter.print_date("Rolled forward", result)


@main.command(name="next")
@click.argument("day", type=DATE)
@click.pass_obj
def next_day(obj: CliContext, day):
    """Show the first business day after DAY."""
    calendar = obj.calendar()
    result = run_query(obj, lambda: calendar.next_business_day(day))
    obj.formatter.print_date("Next business day", result)


@main.command()
@click.argument("day", type=DATE)
@click.pass_obj
def previous(obj: CliContext, day):
    """Show the last business day before DAY."""
    calendar = obj.calendar()
    result = run_query(obj, lambda: calendar.previous_business_day(day))
    obj.formatter.print_date("Previous business day", result)


@main.command()
@click.argument("day", type=DATE)
@click.argument("delta", type=int)
@click.pass_obj
def add(obj: CliContext, day, delta):
    """Add DELTA business days to DAY (negative DELTA subtracts).

    Use "--" before a negative DELTA, e.g. add 2020-06-23 -- -7
    """
    calendar = obj.calendar()
    result = run_query(obj, lambda: calendar.add_business_days(day, delta))
    obj.formatter.print_date(f"{day.isoformat()} {delta:+d} business days", result)


@main.command()
@click.argument("start", type=DATE)
@click.argument("end", type=DATE)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output file path (optional)",
)
@click.option(
    "--format", "-f",
    type=click.Choice(["json", "csv", "console"]),
    default="console",
    help="Output format (default: console)",
)
@click.pass_obj
def between(obj: CliContext, start, end, output, format):
    """Count business days from START up to, but not including, END."""
    obj.calendar()
    result = run_query(obj, lambda: obj.service.between(start, end, obj.calendar_name))
    obj.formatter.print_range(result)

    if format in ("json", "csv"):
        exporter = ResultExporter(output_directory=obj.output_directory)
        if format == "json":
            path = exporter.export_json(result, output)
        else:
            path = exporter.export_csv(result, output)
        obj.formatter.print_success(f"Result saved to {path}")


@main.command(name="business-day")
@click.argument("day", type=DATE)
@click.pass_obj
def business_day(obj: CliContext, day):
    """Show which business day of its month DAY is."""
    calendar = obj.calendar()
    ordinal = run_query(obj, lambda: calendar.get_business_day(day))
    obj.formatter.console.print(
        f"[cyan]Business day of month:[/cyan] [bold]{ordinal}[/bold] ({day.strftime('%B %Y')})"
    )


@main.command()
@click.option(
    "--year", "-y",
    type=click.IntRange(1, 9999),
    default=None,
    help="Year to show holidays for (default: all years)",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output CSV file path (optional)",
)
@click.pass_obj
def holidays(obj: CliContext, year, output):
    """List the holidays of the calendar."""
    calendar = obj.calendar()

    if year is None:
        holiday_list = sorted(calendar.holidays)
        title = "Holidays"
    else:
        holiday_list = calendar.holidays_between(date(year, 1, 1), date(year, 12, 31))
        title = f"Holidays {year}"

    obj.formatter.print_holidays(calendar, holiday_list, title=title)

    if output:
        exporter = ResultExporter(output_directory=obj.output_directory)
        path = exporter.export_holidays_csv(calendar, holiday_list, output)
        obj.formatter.print_success(f"Holidays saved to {path}")


@main.command()
@click.pass_obj
def calendars(obj: CliContext):
    """List the available calendars."""
    obj.formatter.print_calendars(obj.service.list_calendars(), default=obj.service.default_calendar)


@main.command()
@click.option(
    "--host", "-h",
    default=None,
    help="Host to bind to (default: from config or 0.0.0.0)",
)
@click.option(
    "--port", "-p",
    type=int,
    default=None,
    help="Port to bind to (default: from config or 8000)",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to config file (optional)",
)
@click.pass_obj
def serve(obj: CliContext, host, port, config):
    """Start the FastAPI server."""
    formatter = obj.formatter

    try:
        import uvicorn

        config_path = config or obj.config_path
        cfg = ConfigManager(config).load_config() if config else obj.config
        if config_path:
            # The app module reads its settings when uvicorn imports it
            os.environ[CONFIG_PATH_ENV] = os.path.abspath(config_path)

        # Use provided values or fall back to config
        api_host = host or cfg.api_host
        api_port = port or cfg.api_port

        formatter.console.print(f"Starting API server at http://{api_host}:{api_port}")
        formatter.console.print("Press Ctrl+C to stop")
        formatter.console.print()

        uvicorn.run(
            "business_calendar.api:app",
            host=api_host,
            port=api_port,
            reload=False,
        )

    except ImportError:
        formatter.print_error("uvicorn is required for the API server. Install it with: pip install uvicorn")
        sys.exit(1)
    except CalendarError as e:
        formatter.print_error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
