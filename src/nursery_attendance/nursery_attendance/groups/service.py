from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional

from ..children.model import Child
from ..children.repository import ChildRepository
from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import require_non_empty
from ..core.enums import AgeVerdict
from ..core.exceptions import GroupFull, GroupIncompatible, NotFoundError, ValidationError
from .eligibility import EligibilityDecision, EligibilityEngine
from .model import Group
from .repository import GroupRepository

logger = logging.getLogger(__name__)


class GroupAssignmentService:
    """Use case: place children into groups.

    Occupant counts are read at decision time; two near-simultaneous assignments
    can both pass the capacity check. Over-capacity groups are surfaced by the
    compliance report instead of being corrected here.
    """

    def __init__(
        self,
        children: ChildRepository,
        groups: GroupRepository,
        *,
        engine: Optional[EligibilityEngine] = None,
        clock: Optional[Clock] = None,
        sections: Optional[Iterable[str]] = None,
    ):
        self._children = children
        self._groups = groups
        self._engine = engine or EligibilityEngine()
        self._clock = clock or SystemClock()
        self._sections = frozenset(sections) if sections is not None else None

    def _get_child(self, child_id: int) -> Child:
        child = self._children.get_by_id(int(child_id))
        if not child:
            raise NotFoundError("Child not found")
        if not child.is_active:
            raise ValidationError("Child is inactive")
        return child

    def _decide(self, child: Child, group: Group, counts) -> EligibilityDecision:
        occupants = int(counts.get(group.group_id, 0))
        if child.group_id == group.group_id:
            # the child already sits in this group, do not count it against itself
            occupants -= 1
        return self._engine.decide(child, group, occupants=occupants, today=self._clock.now().date())

    def group_options(self, child_id: int) -> list[EligibilityDecision]:
        child = self._get_child(child_id)
        counts = self._children.count_active_by_group()
        return [self._decide(child, g, counts) for g in self._groups.list_all()]

    def assign_child(self, child_id: int, group_id: int) -> EligibilityDecision:
        child = self._get_child(child_id)
        group = self._groups.get_by_id(int(group_id))
        if not group:
            raise NotFoundError("Group not found")

        decision = self._decide(child, group, self._children.count_active_by_group())
        if decision.verdict != AgeVerdict.COMPATIBLE:
            raise GroupIncompatible(decision.verdict, decision.age_months, group.name)
        if decision.is_full:
            raise GroupFull(decision.capacity, decision.occupants, group.name)

        self._children.update_group(child.child_id, group_id=group.group_id, section=group.section)
        logger.info("child %s assigned to group %s (%s)", child.child_id, group.group_id, group.section)
        return decision

    def auto_assign(self, child_id: int) -> Optional[EligibilityDecision]:
        """Pick the eligible group of the child's section with the most free places."""
        child = self._get_child(child_id)
        return self._auto_assign(child, child.section)

    def _auto_assign(self, child: Child, section: Optional[str]) -> Optional[EligibilityDecision]:
        if not section:
            return None

        counts = self._children.count_active_by_group()
        eligible = [
            d for d in (self._decide(child, g, counts) for g in self._groups.list_all(section=section))
            if d.assignable
        ]
        if not eligible:
            logger.warning("no eligible group with free places in section %s for child %s", section, child.child_id)
            return None

        # list_all is ordered by name; max() keeps the first of equal candidates
        best = max(eligible, key=lambda d: d.free_places)
        self._children.update_group(child.child_id, group_id=best.group_id, section=section)
        logger.info("child %s auto-assigned to group %s", child.child_id, best.group_id)
        return best

    def change_section(self, child_id: int, section: str) -> Optional[EligibilityDecision]:
        """Move a child to another section and re-evaluate its group."""
        section = require_non_empty(section, "Section")
        if self._sections is not None and section not in self._sections:
            raise ValidationError(f"Unknown section: {section}")

        child = self._get_child(child_id)
        self._children.update_group(child.child_id, group_id=None, section=section)
        detached = replace(child, group_id=None, group_name=None, section=section)
        return self._auto_assign(detached, section)
