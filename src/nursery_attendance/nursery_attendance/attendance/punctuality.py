from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Mapping, Optional

from config.common import LATE_ARRIVAL_CUTOFFS


@dataclass(frozen=True)
class LateArrivalPolicy:
    """Arrival cutoffs keyed by section prefix (e.g. "creche" -> 09:00)."""

    cutoffs: Mapping[str, time] = field(default_factory=lambda: dict(LATE_ARRIVAL_CUTOFFS))

    def cutoff_for(self, section: Optional[str]) -> Optional[time]:
        if not section:
            return None
        matches = [p for p in self.cutoffs if section.startswith(p)]
        if not matches:
            return None
        return self.cutoffs[max(matches, key=len)]

    def is_late(self, section: Optional[str], arrival_time: Optional[datetime]) -> bool:
        cutoff = self.cutoff_for(section)
        if cutoff is None or arrival_time is None:
            return False
        return arrival_time.time() > cutoff
