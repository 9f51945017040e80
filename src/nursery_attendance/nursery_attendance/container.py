from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Any, Optional

from config import common as default_settings

from .attendance.factory import ScanStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.punctuality import LateArrivalPolicy
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .children.mysql_child_repository import MySQLChildRepository
from .children.repository import ChildRepository
from .common.datetime_utils import Clock, SystemClock
from .compliance.model import build_policies
from .compliance.service import ComplianceService
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .groups.eligibility import EligibilityEngine
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.repository import GroupRepository
from .groups.service import GroupAssignmentService
from .reports.service import AttendanceReportService
from .scans.codes import CodeResolver, ScanCodeParser
from .scans.mysql_scan_repository import MySQLScanRepository
from .scans.repository import ScanRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    clock: Clock

    children_repo: ChildRepository
    groups_repo: GroupRepository
    scans_repo: ScanRepository
    attendance_repo: AttendanceRepository

    code_resolver: CodeResolver
    attendance_service: AttendanceService
    assignment_service: GroupAssignmentService
    compliance_service: ComplianceService
    report_service: AttendanceReportService


def _setting(settings: ModuleType, name: str, default: Any) -> Any:
    return getattr(settings, name, default)


def wire_services(
    *,
    children_repo: ChildRepository,
    groups_repo: GroupRepository,
    scans_repo: ScanRepository,
    attendance_repo: AttendanceRepository,
    settings: Optional[ModuleType] = None,
    clock: Optional[Clock] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations.

    Without a settings module the shared defaults of config.common apply.
    """
    settings = settings or default_settings
    clock = clock or SystemClock()

    default_capacity = int(_setting(settings, "DEFAULT_GROUP_CAPACITY", constants.DEFAULT_GROUP_CAPACITY))
    policies = build_policies(_setting(settings, "SECTION_POLICIES", default_settings.SECTION_POLICIES))
    late_policy = LateArrivalPolicy(
        cutoffs=dict(_setting(settings, "LATE_ARRIVAL_CUTOFFS", default_settings.LATE_ARRIVAL_CUTOFFS))
    )

    code_resolver = CodeResolver(
        children_repo,
        ScanCodeParser(
            prefix=str(_setting(settings, "SCAN_CODE_PREFIX", constants.DEFAULT_SCAN_CODE_PREFIX)),
            secure_prefix=str(_setting(settings, "SCAN_SECURE_PREFIX", constants.DEFAULT_SECURE_CODE_PREFIX)),
            secure_key=str(_setting(settings, "SCAN_SECURE_KEY", constants.DEFAULT_SECURE_CODE_KEY)),
        ),
    )
    attendance_service = AttendanceService(
        attendance_repo,
        scans_repo,
        children_repo,
        code_resolver,
        clock=clock,
        strategy_factory=ScanStrategyFactory(),
        cooldown_minutes=int(_setting(settings, "SCAN_COOLDOWN_MINUTES", constants.DEFAULT_SCAN_COOLDOWN_MINUTES)),
    )
    assignment_service = GroupAssignmentService(
        children_repo,
        groups_repo,
        engine=EligibilityEngine(default_capacity=default_capacity),
        clock=clock,
        sections=policies.keys(),
    )
    compliance_service = ComplianceService(children_repo, groups_repo, policies, default_capacity=default_capacity)
    report_service = AttendanceReportService(children_repo, attendance_repo, late_policy=late_policy, clock=clock)

    return Container(
        conn=conn,
        clock=clock,
        children_repo=children_repo,
        groups_repo=groups_repo,
        scans_repo=scans_repo,
        attendance_repo=attendance_repo,
        code_resolver=code_resolver,
        attendance_service=attendance_service,
        assignment_service=assignment_service,
        compliance_service=compliance_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict, settings: Optional[ModuleType] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_services(
        children_repo=MySQLChildRepository(conn),
        groups_repo=MySQLGroupRepository(conn),
        scans_repo=MySQLScanRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings=settings,
        conn=conn,
    )
