"""
Console output formatting using Rich.
"""

from datetime import date
from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from business_calendar.core.calendar import Calendar
from business_calendar.data.schemas import DateQueryResult, RangeResult


def _yes_no(value: bool) -> Text:
    return Text("yes", style="green") if value else Text("no", style="red")


class ConsoleFormatter:
    """Formats output for console display using Rich."""

    def __init__(self, console: Console = None):
        """Initialize the console formatter."""
        self.console = console or Console()

    def print_query(self, result: DateQueryResult) -> None:
        """
        Print the status of a single date.

        Args:
            result: DateQueryResult to display.
        """
        self.console.print()
        self.console.rule(f"[bold blue]{result.query_date.isoformat()} ({result.calendar})[/bold blue]")
        self.console.print()

        table = Table(show_header=False, box=None)
        table.add_column("Label", style="cyan", width=24)
        table.add_column("Value", style="white")

        table.add_row("Weekday:", result.weekday.capitalize())
        table.add_row("Holiday:", _yes_no(result.is_holiday))
        table.add_row("Working Day:", _yes_no(result.is_working_day))
        table.add_row("Business Day:", _yes_no(result.is_business_day))
        table.add_row("Business Day of Month:", str(result.business_day_of_month))
        table.add_row("Previous Business Day:", result.previous_business_day.isoformat())
        table.add_row("Next Business Day:", result.next_business_day.isoformat())

        self.console.print(Panel(table, title="[bold]Date Status[/bold]"))
        self.console.print()

    def print_date(self, label: str, value: date) -> None:
        """Print a single labelled date result."""
        self.console.print(
            f"[cyan]{label}:[/cyan] [bold]{value.isoformat()}[/bold] ({value.strftime('%A')})"
        )

    def print_range(self, result: RangeResult) -> None:
        """
        Print a business day count.

        Args:
            result: RangeResult to display.
        """
        table = Table(show_header=False, box=None)
        table.add_column("Label", style="cyan", width=20)
        table.add_column("Value", style="white")

        table.add_row("Calendar:", result.calendar)
        table.add_row(
            "Period:",
            f"{result.start_date.isoformat()} -> {result.end_date.isoformat()} (end excluded)",
        )
        table.add_row("Holidays in Period:", str(len(result.holidays)))
        table.add_row(
            Text("Business Days:", style="bold green"),
            Text(str(result.business_days), style="bold green"),
        )

        self.console.print(Panel(table, title="[bold]Business Days Between[/bold]"))

    def print_holidays(self, calendar: Calendar, holidays: List[date], title: str = None) -> None:
        """
        Print a table of holidays.

        Args:
            calendar: Calendar the holidays belong to.
            holidays: Holiday dates to display.
            title: Optional table title.
        """
        self.console.print()
        self.console.rule(f"[bold blue]{title or 'Holidays'} - {calendar.name}[/bold blue]")
        self.console.print()

        if not holidays:
            self.console.print("[dim]No holidays found for this period.[/dim]")
            self.console.print()
            return

        holiday_table = Table()
        holiday_table.add_column("Date", style="cyan", width=12)
        holiday_table.add_column("Day", style="dim", width=12)
        holiday_table.add_column("Working Weekday", width=16)

        for holiday in holidays:
            holiday_table.add_row(
                holiday.isoformat(),
                holiday.strftime("%A"),
                _yes_no(calendar.is_working_day(holiday)),
            )

        self.console.print(holiday_table)
        self.console.print()

    def print_calendars(self, names: List[str], default: str = None) -> None:
        """Print the available calendar names."""
        table = Table(title="[bold]Available Calendars[/bold]")
        table.add_column("Name", style="cyan")
        table.add_column("Default", style="dim")

        for name in names:
            table.add_row(name, "*" if name == default else "")

        self.console.print(table)

    def print_warnings(self, calendar: Calendar) -> None:
        """Print warnings collected while loading a calendar."""
        for name in calendar.ignored_weekdays:
            self.console.print(
                f"[yellow]Warning:[/yellow] unknown weekday {name!r} ignored in calendar {calendar.name}"
            )

    def print_error(self, message: str) -> None:
        """
        Print an error message.

        Args:
            message: Error message to display.
        """
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def print_success(self, message: str) -> None:
        """
        Print a success message.

        Args:
            message: Success message to display.
        """
        self.console.print(f"[bold green]Success:[/bold green] {message}")
