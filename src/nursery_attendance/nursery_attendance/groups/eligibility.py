"""Group eligibility & capacity decisions.

Pure functions: no clock, no I/O. The caller supplies today's date and the
current occupant count and performs any write itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..children.model import Child
from ..common.datetime_utils import age_in_months
from ..core.constants import DEFAULT_GROUP_CAPACITY
from ..core.enums import AgeVerdict
from .model import Group


def age_verdict(age_months: int, age_min_months: Optional[int], age_max_months: Optional[int]) -> AgeVerdict:
    """Classify an age against an inclusive band; a missing bound is open."""
    if age_min_months is not None and age_months < age_min_months:
        return AgeVerdict.TOO_YOUNG
    if age_max_months is not None and age_months > age_max_months:
        return AgeVerdict.TOO_OLD
    return AgeVerdict.COMPATIBLE


@dataclass(frozen=True)
class EligibilityDecision:
    group_id: int
    group_name: str
    section: str
    age_months: int
    verdict: AgeVerdict
    occupants: int
    capacity: int

    @property
    def is_full(self) -> bool:
        return self.occupants >= self.capacity

    @property
    def free_places(self) -> int:
        return max(self.capacity - self.occupants, 0)

    @property
    def assignable(self) -> bool:
        return self.verdict == AgeVerdict.COMPATIBLE and not self.is_full

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "group_name": self.group_name,
            "section": self.section,
            "age_months": self.age_months,
            "verdict": self.verdict.value,
            "full": self.is_full,
            "occupants": self.occupants,
            "capacity": self.capacity,
            "assignable": self.assignable,
        }


@dataclass(frozen=True)
class EligibilityEngine:
    default_capacity: int = DEFAULT_GROUP_CAPACITY

    def decide(self, child: Child, group: Group, *, occupants: int, today: date) -> EligibilityDecision:
        months = age_in_months(child.birth_date, today)
        return EligibilityDecision(
            group_id=group.group_id,
            group_name=group.name,
            section=group.section,
            age_months=months,
            verdict=age_verdict(months, group.age_min_months, group.age_max_months),
            occupants=int(occupants),
            capacity=group.effective_capacity(self.default_capacity),
        )
