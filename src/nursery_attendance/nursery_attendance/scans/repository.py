from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ScanEvent


class ScanRepository(Protocol):
    def get_latest_for_child(self, child_id: int) -> Optional[ScanEvent]:
        """Most recent scan by scan_time, or None if never scanned."""

        raise NotImplementedError

    def list_for_child_and_day(self, child_id: int, day: date) -> Sequence[ScanEvent]:
        """Scans of one calendar day, oldest first."""

        raise NotImplementedError
