from __future__ import annotations

from enum import Enum


class ChildStatus(str, Enum):
    """Enrollment status; children are never hard-deleted."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class ScanType(str, Enum):
    """Kind of scan stored in the scan log."""

    ARRIVAL = "arrival"
    DEPARTURE = "departure"


class AgeVerdict(str, Enum):
    """Result of matching a child's age against a group age band."""

    COMPATIBLE = "compatible"
    TOO_YOUNG = "too_young"
    TOO_OLD = "too_old"


class ComplianceStatus(str, Enum):
    """Staffing adequacy of a section, ordered from best to worst."""

    COMPLIANT = "compliant"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    ComplianceStatus.COMPLIANT: 0,
    ComplianceStatus.WARNING: 1,
    ComplianceStatus.CRITICAL: 2,
}


class AttendanceStatus(str, Enum):
    """Daily status of a child as shown on the roll call."""

    PRESENT = "present"
    LATE = "late"
    DEPARTED = "departed"
    ABSENT = "absent"
    UNMARKED = "unmarked"
