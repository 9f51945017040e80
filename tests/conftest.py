from datetime import date, datetime

import pytest

from fakes import FakeAttendanceRepo, FakeChildRepo, FakeGroupRepo, FakeScanRepo, FixedClock, make_child
from src.nursery_attendance.nursery_attendance.container import wire_services
from src.nursery_attendance.nursery_attendance.core.enums import ChildStatus
from src.nursery_attendance.nursery_attendance.groups.model import Group


@pytest.fixture
def fixed_now():
    # Monday morning
    return datetime(2026, 3, 2, 7, 45)


@pytest.fixture
def clock(fixed_now):
    return FixedClock(fixed_now)


@pytest.fixture
def groups_repo():
    return FakeGroupRepo(
        [
            Group(1, "Etoiles", "creche_etoile", capacity=10, age_min_months=3, age_max_months=18, assigned_educator_id=11),
            Group(2, "Nuages A", "creche_nuage", capacity=12, age_min_months=18, age_max_months=24, assigned_educator_id=12),
            Group(3, "Nuages B", "creche_nuage", capacity=12, age_min_months=18, age_max_months=24),
            Group(4, "Petits 1", "maternelle_PS1", capacity=15, age_min_months=36, age_max_months=48, assigned_educator_id=14),
        ]
    )


@pytest.fixture
def children_repo(groups_repo):
    return FakeChildRepo(
        [
            # 18 months on 2026-03-02
            make_child(1, birth=date(2024, 9, 10), section="creche_nuage", group_id=2, first_name="Lina", last_name="Martin", group_name="Nuages A"),
            # 45 months
            make_child(2, birth=date(2022, 6, 1), section="maternelle_PS1", group_id=4, first_name="Noah", last_name="Petit", group_name="Petits 1"),
            make_child(6, birth=date(2023, 1, 5), section="garderie", status=ChildStatus.INACTIVE),
        ],
        groups=groups_repo,
    )


@pytest.fixture
def scans_repo():
    return FakeScanRepo()


@pytest.fixture
def attendance_repo(scans_repo, children_repo):
    return FakeAttendanceRepo(scans_repo, children_repo)


@pytest.fixture
def container(children_repo, groups_repo, scans_repo, attendance_repo, clock):
    return wire_services(
        children_repo=children_repo,
        groups_repo=groups_repo,
        scans_repo=scans_repo,
        attendance_repo=attendance_repo,
        clock=clock,
    )


@pytest.fixture
def app(container, monkeypatch):
    from src.nursery_attendance.nursery_attendance.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def staff_headers():
    return {"X-Staff-Id": "7"}
