from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Group:
    """Domain entity: a staffed sub-unit of a section."""

    group_id: int
    name: str
    section: str
    capacity: Optional[int] = None
    age_min_months: Optional[int] = None
    age_max_months: Optional[int] = None
    assigned_educator_id: Optional[int] = None

    @property
    def has_educator(self) -> bool:
        return self.assigned_educator_id is not None

    def effective_capacity(self, default: int) -> int:
        # 0 or missing means "not set"
        return int(self.capacity) if self.capacity else int(default)
