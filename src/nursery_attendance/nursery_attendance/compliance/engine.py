"""Educator:child ratio compliance.

Pure aggregation, recomputed from current data on every call and never stored.
"""

from __future__ import annotations

from typing import Iterable

from ..core.enums import ComplianceStatus
from .model import GroupLoad, SectionCompliance, SectionPolicy


def required_educators(total_children: int, ratio: int) -> int:
    """ceil(total_children / ratio) in integer arithmetic."""
    return -(-int(total_children) // int(ratio))


def classify(*, total_children: int, present_educators: int, required: int) -> ComplianceStatus:
    if present_educators >= required:
        return ComplianceStatus.COMPLIANT
    if present_educators == 0 and total_children > 0:
        return ComplianceStatus.CRITICAL
    return ComplianceStatus.WARNING


class RatioComplianceEngine:
    def evaluate(self, policy: SectionPolicy, groups: Iterable[GroupLoad]) -> SectionCompliance:
        loads = tuple(groups)
        total = sum(g.children_count for g in loads)
        present = sum(1 for g in loads if g.has_educator)
        required = required_educators(total, policy.ratio)

        return SectionCompliance(
            section=policy.section,
            label=policy.label,
            ratio=policy.ratio,
            status=classify(total_children=total, present_educators=present, required=required),
            required_educators=required,
            present_educators=present,
            total_children=total,
            total_capacity=sum(g.capacity for g in loads),
            groups=loads,
        )
