"""
Loader for calendar definitions stored as YAML files.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import yaml

from business_calendar.core.calendar import DEFAULT_MAX_ROLL_DAYS, Calendar
from business_calendar.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Calendars shipped with the package
BUNDLED_CALENDARS_DIR = Path(__file__).parent.parent / "data" / "calendars"

CALENDAR_SUFFIX = ".yml"


class CalendarLoader:
    """Reads calendar YAML files and builds Calendar instances."""

    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        max_roll_days: int = DEFAULT_MAX_ROLL_DAYS,
    ):
        """
        Initialize the calendar loader.

        Args:
            directory: Directory containing <name>.yml files. Uses the bundled
                calendars if not provided.
            max_roll_days: Step limit passed on to every loaded calendar.
        """
        self.directory = Path(directory) if directory else BUNDLED_CALENDARS_DIR
        self.max_roll_days = max_roll_days

    def path_for(self, name: str) -> Path:
        """Return the file path of a named calendar."""
        return self.directory / f"{name}{CALENDAR_SUFFIX}"

    def list_calendars(self) -> List[str]:
        """List the names of all calendars in the directory."""
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob(f"*{CALENDAR_SUFFIX}"))

    def load(self, name: str) -> Calendar:
        """
        Load a calendar by name.

        Args:
            name: Calendar name, e.g. 'bacs'.

        Returns:
            The populated Calendar.

        Raises:
            ConfigError: If the file is missing or not a valid definition.
            ParseError: If a holiday date is malformed.
        """
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise ConfigError(f"Invalid calendar name: {name!r}")
        return self.load_file(self.path_for(name), name=name)

    def load_file(self, path: Union[str, Path], name: Optional[str] = None) -> Calendar:
        """
        Load a calendar from an explicit file path.

        Args:
            path: Path to the calendar YAML file.
            name: Calendar name. Defaults to the file stem.

        Returns:
            The populated Calendar.

        Raises:
            ConfigError: If the file is missing or not a valid definition.
            ParseError: If a holiday date is malformed.
        """
        path = Path(path)
        name = name or path.stem

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Calendar not found: {name} ({path})") from e
        except OSError as e:
            raise ConfigError(f"Error reading calendar file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing calendar file {path}: {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Calendar file {path} must contain a mapping")

        calendar = Calendar.from_config(raw, name=name, max_roll_days=self.max_roll_days)
        logger.info(
            f"Loaded calendar {name!r} from {path} "
            f"({len(calendar.holidays)} holidays)"
        )
        return calendar
