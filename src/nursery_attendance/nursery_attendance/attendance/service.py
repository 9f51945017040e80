from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from ..children.model import Child
from ..children.repository import ChildRepository
from ..common.datetime_utils import Clock, SystemClock, minutes_between
from ..core.constants import DEFAULT_SCAN_COOLDOWN_MINUTES
from ..core.enums import ScanType
from ..core.exceptions import DuplicateScanTooSoon, NotFoundError, ValidationError
from ..scans.codes import CodeResolver
from ..scans.model import ScanEvent
from ..scans.repository import ScanRepository
from .factory import ScanStrategyFactory
from .model import DailyAttendance, ScanOutcome, ScanPreview, Visit
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in/check-out state engine.

    Per child and per day the state is OUT (no scan yet, or last scan was a
    departure) or IN (last scan was an arrival). Any scan within the cooldown
    window of the previous one is rejected whatever its type; outside the
    window both actions are allowed so staff can correct a wrong suggestion.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        scans: ScanRepository,
        children: ChildRepository,
        resolver: CodeResolver,
        *,
        clock: Optional[Clock] = None,
        strategy_factory: Optional[ScanStrategyFactory] = None,
        cooldown_minutes: int = DEFAULT_SCAN_COOLDOWN_MINUTES,
    ):
        self._attendance = attendance
        self._scans = scans
        self._children = children
        self._resolver = resolver
        self._clock = clock or SystemClock()
        self._factory = strategy_factory or ScanStrategyFactory()
        self._cooldown_minutes = int(cooldown_minutes)

    def _elapsed(self, last_scan: Optional[ScanEvent], now: datetime) -> Optional[float]:
        if not last_scan:
            return None
        return minutes_between(last_scan.scan_time, now)

    def check_cooldown(self, last_scan: Optional[ScanEvent], now: datetime) -> None:
        """Raise DuplicateScanTooSoon when now is less than cooldown after last_scan.

        Exactly `cooldown_minutes` is accepted.
        """
        elapsed = self._elapsed(last_scan, now)
        if elapsed is not None and elapsed < self._cooldown_minutes:
            raise DuplicateScanTooSoon(max(elapsed, 0.0), self._cooldown_minutes)

    def suggest_action(self, last_scan: Optional[ScanEvent], today: date) -> ScanType:
        return self._factory.suggest(last_scan=last_scan, today=today)

    def last_scan(self, child_id: int) -> Optional[ScanEvent]:
        return self._scans.get_latest_for_child(int(child_id))

    def preview_scan(self, raw_code: str) -> ScanPreview:
        child = self._resolver.resolve(raw_code)
        now = self._clock.now()
        last = self.last_scan(child.child_id)
        elapsed = self._elapsed(last, now)
        return ScanPreview(
            child=child,
            last_scan=last,
            suggested_action=self.suggest_action(last, now.date()),
            elapsed_minutes=round(elapsed, 1) if elapsed is not None else None,
            cooldown_ok=elapsed is None or elapsed >= self._cooldown_minutes,
        )

    def record_scan(self, child: Child, *, action: Optional[ScanType] = None, staff_id: Optional[int] = None) -> ScanOutcome:
        """Append the scan and upsert today's row in one child-scoped transaction."""
        if not child.is_active:
            raise ValidationError("Child is inactive")

        with self._attendance.child_transaction(child.child_id) as tx:
            # now is read under the lock so a waiting scan sees the one before it
            now = self._clock.now()
            today = now.date()

            last = tx.latest_scan()
            try:
                self.check_cooldown(last, now)
            except DuplicateScanTooSoon as e:
                logger.info("scan rejected for child %s: %.1f min since last scan", child.child_id, e.elapsed_minutes)
                raise

            suggested = self.suggest_action(last, today)
            scan_type = action or suggested

            strategy = self._factory.for_scan(scan_type)
            record = strategy.apply(
                child_id=child.child_id,
                day=today,
                current=tx.get_daily(today),
                now=now,
                staff_id=staff_id,
            )
            event = tx.append_scan(scan_type=scan_type, scan_time=now, scanned_by=staff_id)
            tx.save_daily(record)

        if scan_type != suggested:
            logger.info("child %s: %s recorded against suggested %s", child.child_id, scan_type.value, suggested.value)
        logger.info("child %s: %s accepted at %s by staff %s", child.child_id, scan_type.value, now.isoformat(), staff_id)
        return ScanOutcome(child=child, event=event, suggested_action=suggested, attendance=record)

    def scan(self, raw_code: str, *, action: Optional[ScanType] = None, staff_id: Optional[int] = None) -> ScanOutcome:
        child = self._resolver.resolve(raw_code)
        return self.record_scan(child, action=action, staff_id=staff_id)

    def _require_child(self, child_id: int) -> Child:
        child = self._children.get_by_id(int(child_id))
        if not child:
            raise NotFoundError("Child not found")
        return child

    def mark_present(self, child_id: int, *, day: Optional[date] = None, staff_id: Optional[int] = None) -> DailyAttendance:
        return self._mark(child_id, is_present=True, day=day, staff_id=staff_id)

    def mark_absent(self, child_id: int, *, day: Optional[date] = None, staff_id: Optional[int] = None) -> DailyAttendance:
        return self._mark(child_id, is_present=False, day=day, staff_id=staff_id)

    def _mark(self, child_id: int, *, is_present: bool, day: Optional[date], staff_id: Optional[int]) -> DailyAttendance:
        child = self._require_child(child_id)
        day = day or self._clock.now().date()
        self._attendance.upsert_presence(
            child_id=child.child_id,
            day=day,
            is_present=is_present,
            recorded_by=staff_id,
        )
        logger.info("child %s marked %s on %s by staff %s", child.child_id, "present" if is_present else "absent", day, staff_id)
        record = self._attendance.get_for_child_and_date(child.child_id, day)
        return record or DailyAttendance(child_id=child.child_id, attendance_date=day, is_present=is_present)

    def record_arrival(self, child_id: int, *, staff_id: Optional[int] = None) -> DailyAttendance:
        """Stamp today's arrival on a child already marked present."""
        child = self._require_child(child_id)
        with self._attendance.child_transaction(child.child_id) as tx:
            now = self._clock.now()
            current = tx.get_daily(now.date())
            if current is None or not current.is_present:
                raise ValidationError("Mark the child present first")
            if current.arrival_time is not None:
                raise ValidationError("Arrival already recorded")

            record = replace(current, arrival_time=now, arrival_scanned_by=staff_id)
            tx.save_daily(record)

        logger.info("child %s: arrival stamped at %s by staff %s", child.child_id, now.isoformat(), staff_id)
        return record

    def record_departure(self, child_id: int, *, staff_id: Optional[int] = None) -> DailyAttendance:
        """Stamp today's departure after a recorded arrival."""
        child = self._require_child(child_id)
        with self._attendance.child_transaction(child.child_id) as tx:
            now = self._clock.now()
            current = tx.get_daily(now.date())
            if current is None or not current.is_present:
                raise ValidationError("Mark the child present first")
            if current.arrival_time is None:
                raise ValidationError("No arrival recorded")
            if current.departure_time is not None:
                raise ValidationError("Departure already recorded")
            if now < current.arrival_time:
                raise ValidationError("Departure cannot precede arrival")

            record = replace(current, departure_time=now, departure_scanned_by=staff_id)
            tx.save_daily(record)

        logger.info("child %s: departure stamped at %s by staff %s", child.child_id, now.isoformat(), staff_id)
        return record

    def get_daily(self, child_id: int, day: Optional[date] = None) -> Optional[DailyAttendance]:
        return self._attendance.get_for_child_and_date(int(child_id), day or self._clock.now().date())

    def visits_for_day(self, child_id: int, day: Optional[date] = None) -> list[Visit]:
        """Rebuild every (arrival, departure) interval of a day from the scan log."""
        self._require_child(child_id)
        events = self._scans.list_for_child_and_day(int(child_id), day or self._clock.now().date())

        visits: list[Visit] = []
        open_arrival: Optional[datetime] = None
        for ev in events:
            if ev.scan_type == ScanType.ARRIVAL:
                if open_arrival is not None:
                    visits.append(Visit(arrival_time=open_arrival, departure_time=None))
                open_arrival = ev.scan_time
            else:
                visits.append(Visit(arrival_time=open_arrival, departure_time=ev.scan_time))
                open_arrival = None

        if open_arrival is not None:
            visits.append(Visit(arrival_time=open_arrival, departure_time=None))
        return visits
