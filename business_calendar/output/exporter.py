"""
Export functionality for business calendar results.
"""

import csv
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Union

from business_calendar.core.calendar import Calendar
from business_calendar.data.schemas import DateQueryResult, RangeResult

logger = logging.getLogger(__name__)

Result = Union[DateQueryResult, RangeResult]


class ResultExporter:
    """Exports business calendar results to various formats."""

    def __init__(
        self,
        output_directory: str = "results",
        timestamp_format: str = "%Y%m%d_%H%M%S",
    ):
        """
        Initialize the result exporter.

        Args:
            output_directory: Directory for output files.
            timestamp_format: Format string for timestamps in filenames.
        """
        self.output_directory = output_directory
        self.timestamp_format = timestamp_format

    def _ensure_output_dir(self) -> Path:
        """Ensure output directory exists and return path."""
        output_path = Path(self.output_directory)
        output_path.mkdir(parents=True, exist_ok=True)
        return output_path

    def _generate_filename(self, prefix: str, extension: str) -> str:
        """Generate a filename with timestamp."""
        timestamp = datetime.now().strftime(self.timestamp_format)
        return f"{prefix}_{timestamp}.{extension}"

    def _resolve_path(self, output_path: Optional[str], prefix: str, extension: str) -> Path:
        if output_path:
            file_path = Path(output_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            return file_path
        return self._ensure_output_dir() / self._generate_filename(prefix, extension)

    def export_json(self, result: Result, output_path: Optional[str] = None) -> str:
        """
        Export a result to a JSON file.

        Args:
            result: DateQueryResult or RangeResult to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        prefix = "query" if isinstance(result, DateQueryResult) else "range"
        file_path = self._resolve_path(output_path, prefix, "json")

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(result.model_dump(mode="json"), f, indent=2, ensure_ascii=False)

        logger.info(f"Exported result to {file_path}")
        return str(file_path)

    def export_csv(self, result: Result, output_path: Optional[str] = None) -> str:
        """
        Export a result to a CSV file with a header row and one data row.

        Args:
            result: DateQueryResult or RangeResult to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        prefix = "query" if isinstance(result, DateQueryResult) else "range"
        file_path = self._resolve_path(output_path, prefix, "csv")

        row = result.model_dump(mode="json")
        if "holidays" in row:
            row["holidays"] = ";".join(row["holidays"])

        with open(file_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=list(row.keys()))
            writer.writeheader()
            writer.writerow(row)

        logger.info(f"Exported result to {file_path}")
        return str(file_path)

    def export_holidays_csv(
        self,
        calendar: Calendar,
        holidays: Optional[List[date]] = None,
        output_path: Optional[str] = None,
    ) -> str:
        """
        Export holidays to a CSV file.

        Args:
            calendar: Calendar the holidays belong to.
            holidays: Holidays to export. Defaults to all of the calendar's holidays.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        if holidays is None:
            holidays = sorted(calendar.holidays)
        file_path = self._resolve_path(output_path, f"holidays_{calendar.name}", "csv")

        with open(file_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)

            # Write header
            writer.writerow(["Date", "Weekday", "Working Weekday"])

            # Write data
            for holiday in holidays:
                writer.writerow([
                    holiday.isoformat(),
                    holiday.strftime("%A"),
                    calendar.is_working_day(holiday),
                ])

        logger.info(f"Exported {len(holidays)} holidays to {file_path}")
        return str(file_path)
