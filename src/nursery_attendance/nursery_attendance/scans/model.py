from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ScanType


@dataclass(frozen=True)
class ScanEvent:
    """Immutable scan log entry. Append-only."""

    scan_id: Optional[int]
    child_id: int
    scan_type: ScanType
    scan_time: datetime
    scanned_by: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "scan_type": self.scan_type.value,
            "scan_time": self.scan_time.isoformat(),
            "scanned_by": self.scanned_by,
        }
