from __future__ import annotations

from typing import Optional

from .enums import AgeVerdict


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced child or group does not exist."""


class InvalidCodeFormat(ValidationError):
    """Scanned payload does not follow the badge code convention."""


class ChildNotFoundOrInactive(ValidationError):
    """Scanned code does not map to an active child."""


class DuplicateScanTooSoon(ValidationError):
    """A second scan arrived inside the cooldown window."""

    def __init__(self, elapsed_minutes: float, cooldown_minutes: int):
        self.elapsed_minutes = elapsed_minutes
        self.cooldown_minutes = cooldown_minutes
        super().__init__(
            f"Last scan was {int(elapsed_minutes)} minute(s) ago. "
            f"Wait at least {cooldown_minutes} minutes between scans."
        )


class GroupIncompatible(ValidationError):
    """Child's age is outside the group's age band."""

    def __init__(self, verdict: AgeVerdict, age_months: int, group_name: Optional[str] = None):
        self.verdict = verdict
        self.age_months = age_months
        label = "too young" if verdict == AgeVerdict.TOO_YOUNG else "too old"
        target = f" for group {group_name}" if group_name else ""
        super().__init__(f"Child ({age_months} months) is {label}{target}")


class GroupFull(ValidationError):
    """Group has reached its capacity."""

    def __init__(self, capacity: int, occupants: int, group_name: Optional[str] = None):
        self.capacity = capacity
        self.occupants = occupants
        target = f"Group {group_name}" if group_name else "Group"
        super().__init__(f"{target} is full ({occupants}/{capacity})")


class PersistenceFailure(DomainError):
    """Data store I/O error, propagated to the caller without retry."""
