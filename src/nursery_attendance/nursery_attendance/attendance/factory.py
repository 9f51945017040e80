from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ScanType
from ..scans.model import ScanEvent
from .strategies.arrival_strategy import ArrivalStrategy
from .strategies.base import ScanStrategy
from .strategies.departure_strategy import DepartureStrategy


@dataclass
class ScanStrategyFactory:
    """Factory Pattern: pick the transition for a scan and suggest the next one."""

    def for_scan(self, scan_type: ScanType) -> ScanStrategy:
        if scan_type == ScanType.ARRIVAL:
            return ArrivalStrategy()
        return DepartureStrategy()

    def suggest(self, *, last_scan: Optional[ScanEvent], today: date) -> ScanType:
        # every child starts the day OUT, whatever happened yesterday
        if not last_scan or last_scan.scan_time.date() != today:
            return ScanType.ARRIVAL
        if last_scan.scan_type == ScanType.ARRIVAL:
            return ScanType.DEPARTURE
        return ScanType.ARRIVAL
