from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import age_in_months
from ..core.enums import ChildStatus


@dataclass(frozen=True)
class Child:
    """Domain entity: an enrolled child.

    Note: Pure data object, no DB access. `group_name` is filled by reads that
    join the group, for display only.
    """

    child_id: int
    first_name: str
    last_name: str
    code_qr_id: str
    birth_date: date
    status: ChildStatus = ChildStatus.ACTIVE
    section: Optional[str] = None
    group_id: Optional[int] = None
    assigned_educator_id: Optional[int] = None
    group_name: Optional[str] = None
    photo_url: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == ChildStatus.ACTIVE

    def age_months(self, today: date) -> int:
        return age_in_months(self.birth_date, today)
