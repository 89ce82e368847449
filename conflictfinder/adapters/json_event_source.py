"""
Event source backed by a JSON file of calendar events.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from ..domain.exceptions import EventFileError
from ..domain.models import BusyInterval, TimeRange, parse_instant

logger = logging.getLogger(__name__)


class JsonEventSource:
    """
    Loads existing events from a JSON file.

    The file holds a list of objects with ``id``, ``start`` and ``end`` keys
    (``title`` is optional). Times are ISO-8601; times without an offset are
    read in ``timezone``. Entries that cannot be parsed are skipped with a
    warning.
    """

    def __init__(self, path: Path, timezone: str = "UTC"):
        """
        Args:
            path: Location of the JSON event file
            timezone: IANA zone for times without an offset
        """
        self.path = path
        self.timezone = timezone

    def _load_raw_events(self) -> List[Dict[str, Any]]:
        """Read the file and check its root is a list."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise EventFileError(f"Event file not found: {self.path}") from exc
        except json.JSONDecodeError as exc:
            raise EventFileError(f"Invalid JSON in {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise EventFileError("Event file must contain a list of events at the root level.")

        return data

    def list_busy_intervals(self) -> List[BusyInterval]:
        """
        Parse every well-formed event in the file.

        Returns:
            Busy intervals in file order
        """
        busy: List[BusyInterval] = []

        for index, event in enumerate(self._load_raw_events()):
            try:
                event_start = parse_instant(event["start"], self.timezone)
                event_end = parse_instant(event["end"], self.timezone)
                time_range = TimeRange.checked(event_start, event_end)
                busy.append(BusyInterval(id=event["id"], range=time_range))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping event #%d in %s: %s", index, self.path, exc)

        logger.debug("Loaded %d event(s) from %s", len(busy), self.path)
        return busy
