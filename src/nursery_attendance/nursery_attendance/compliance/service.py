from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..children.repository import ChildRepository
from ..core.constants import DEFAULT_GROUP_CAPACITY
from ..core.enums import ComplianceStatus
from ..core.exceptions import NotFoundError
from ..groups.repository import GroupRepository
from .engine import RatioComplianceEngine
from .model import ComplianceAlert, GroupLoad, SectionCompliance, SectionPolicy

logger = logging.getLogger(__name__)


class ComplianceService:
    """Use case: staffing-ratio report per section, built from current rows."""

    def __init__(
        self,
        children: ChildRepository,
        groups: GroupRepository,
        policies: Mapping[str, SectionPolicy],
        *,
        engine: Optional[RatioComplianceEngine] = None,
        default_capacity: int = DEFAULT_GROUP_CAPACITY,
    ):
        self._children = children
        self._groups = groups
        self._policies = dict(policies)
        self._engine = engine or RatioComplianceEngine()
        self._default_capacity = int(default_capacity)

    def _loads(self, section: Optional[str], counts: Mapping[int, int]) -> dict[str, list[GroupLoad]]:
        by_section: dict[str, list[GroupLoad]] = {}
        for g in self._groups.list_all(section=section):
            by_section.setdefault(g.section, []).append(
                GroupLoad(
                    group_id=g.group_id,
                    name=g.name,
                    children_count=int(counts.get(g.group_id, 0)),
                    capacity=g.effective_capacity(self._default_capacity),
                    has_educator=g.has_educator,
                )
            )
        return by_section

    def section_report(self, section: str) -> SectionCompliance:
        policy = self._policies.get(section)
        if not policy:
            raise NotFoundError(f"Unknown section: {section}")

        loads = self._loads(section, self._children.count_active_by_group())
        return self._engine.evaluate(policy, loads.get(section, []))

    def all_sections(self) -> list[SectionCompliance]:
        loads = self._loads(None, self._children.count_active_by_group())
        unknown = set(loads) - set(self._policies)
        if unknown:
            logger.warning("groups reference sections without a ratio policy: %s", sorted(unknown))
        return [self._engine.evaluate(p, loads.get(s, [])) for s, p in self._policies.items()]

    def alerts(self) -> list[ComplianceAlert]:
        out: list[ComplianceAlert] = []
        for report in self.all_sections():
            name = report.label or report.section
            if report.status != ComplianceStatus.COMPLIANT:
                out.append(
                    ComplianceAlert(
                        kind="ratio",
                        section=report.section,
                        severity="high" if report.status == ComplianceStatus.CRITICAL else "medium",
                        message=(
                            f"{name}: {report.present_educators} educator(s) for {report.total_children} "
                            f"children, {report.required_educators} required (1:{report.ratio})"
                        ),
                    )
                )
            for g in report.over_capacity_groups:
                out.append(
                    ComplianceAlert(
                        kind="capacity",
                        section=report.section,
                        severity="medium",
                        message=f"{name}: group {g.name} holds {g.children_count}/{g.capacity} children",
                        group_id=g.group_id,
                    )
                )

        if out:
            logger.warning("%d compliance alert(s)", len(out))
        return out
