from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.enums import ComplianceStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class SectionPolicy:
    """Regulatory staffing policy of a section: children per educator."""

    section: str
    ratio: int
    label: Optional[str] = None
    age_range: Optional[str] = None

    def __post_init__(self):
        if int(self.ratio) <= 0:
            raise ValidationError(f"Ratio of section {self.section} must be positive")

    @classmethod
    def from_config(cls, section: str, value: Any) -> "SectionPolicy":
        """Accept an int ratio, a (label, age_range, ratio) tuple or a dict."""
        if isinstance(value, Mapping):
            return cls(
                section=section,
                ratio=int(value["ratio"]),
                label=value.get("label"),
                age_range=value.get("age_range"),
            )
        if isinstance(value, (tuple, list)):
            label, age_range, ratio = value
            return cls(section=section, ratio=int(ratio), label=label, age_range=age_range)
        return cls(section=section, ratio=int(value))


def build_policies(config: Mapping[str, Any]) -> dict[str, SectionPolicy]:
    return {section: SectionPolicy.from_config(section, value) for section, value in config.items()}


@dataclass(frozen=True)
class GroupLoad:
    """Snapshot of one group used by the ratio computation."""

    group_id: int
    name: str
    children_count: int
    capacity: int
    has_educator: bool

    @property
    def over_capacity(self) -> bool:
        return self.children_count > self.capacity

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "name": self.name,
            "children_count": self.children_count,
            "capacity": self.capacity,
            "has_educator": self.has_educator,
        }


@dataclass(frozen=True)
class SectionCompliance:
    section: str
    label: Optional[str]
    ratio: int
    status: ComplianceStatus
    required_educators: int
    present_educators: int
    total_children: int
    total_capacity: int
    groups: tuple[GroupLoad, ...] = ()

    @property
    def over_capacity_groups(self) -> tuple[GroupLoad, ...]:
        return tuple(g for g in self.groups if g.over_capacity)

    def to_dict(self) -> dict:
        return {
            "section": self.section,
            "label": self.label,
            "ratio": self.ratio,
            "status": self.status.value,
            "required_educators": self.required_educators,
            "present_educators": self.present_educators,
            "total_children": self.total_children,
            "total_capacity": self.total_capacity,
            "groups": [g.to_dict() for g in self.groups],
            "over_capacity_groups": [g.group_id for g in self.over_capacity_groups],
        }


@dataclass(frozen=True)
class ComplianceAlert:
    kind: str
    section: str
    severity: str
    message: str
    group_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "section": self.section,
            "severity": self.severity,
            "message": self.message,
            "group_id": self.group_id,
        }
