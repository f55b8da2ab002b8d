from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import as_utc, format_clock, format_duration, minutes_between, now_utc
from ..core.constants import DEFAULT_DISPLAY_TIMEZONE, OFFLINE_DRIFT_MINUTES
from ..core.enums import SessionStatus
from ..core.exceptions import ConflictError
from ..employees.model import Employee
from ..geofence.validator import Coordinate, GeofenceVerdict
from .model import AttendanceSession
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInResult:
    session: AttendanceSession
    check_in_time: str

    @property
    def message(self) -> str:
        return f"Pointage enregistré à {self.check_in_time}."


@dataclass(frozen=True)
class CheckOutResult:
    session: AttendanceSession
    check_out_time: str
    duration_minutes: int

    @property
    def duration(self) -> str:
        return format_duration(self.duration_minutes)

    @property
    def message(self) -> str:
        return f"Départ enregistré à {self.check_out_time}. Durée de travail : {self.duration}."


class SessionTracker:
    """Attendance state machine per (employee, UTC day): NoSession -> Open -> Closed.

    Closed is terminal for the day. The one-session-per-day rule is enforced by
    the repository write itself, so two concurrent "Hi" messages cannot both
    open a session even when handled by different worker processes.
    """

    def __init__(self, attendance: AttendanceRepository, *, display_timezone: str = DEFAULT_DISPLAY_TIMEZONE):
        self._attendance = attendance
        self._tz = display_timezone

    def _log_drift(self, action: str, event_time: datetime, received_at: Optional[datetime]) -> None:
        received_at = received_at or now_utc()
        drift = abs(minutes_between(event_time, received_at))
        if drift > OFFLINE_DRIFT_MINUTES:
            logger.info(
                "[offline] %s with message timestamp %s (received at server %s)",
                action,
                format_clock(event_time, self._tz),
                format_clock(received_at, self._tz),
            )

    def today_session(self, employee: Employee, *, now: datetime | None = None) -> Optional[AttendanceSession]:
        now = as_utc(now or now_utc())
        return self._attendance.get_for_day(
            tenant_id=employee.tenant_id,
            employee_id=employee.employee_id,
            work_date=now.date(),
        )

    def _already_checked_in(self, existing: AttendanceSession) -> ConflictError:
        return ConflictError(f"Vous avez déjà pointé aujourd'hui à {format_clock(existing.check_in, self._tz)}.")

    def check_in(
        self,
        employee: Employee,
        *,
        now: datetime | None = None,
        received_at: datetime | None = None,
    ) -> CheckInResult:
        """Open today's session. ``now`` is the message timestamp when the channel provides one."""
        now = as_utc(now or now_utc())

        existing = self.today_session(employee, now=now)
        if existing:
            raise self._already_checked_in(existing)

        session = self._attendance.create_session(
            tenant_id=employee.tenant_id,
            employee_id=employee.employee_id,
            work_date=now.date(),
            check_in=now,
            status=SessionStatus.PRESENT,
        )
        if session is None:
            # Lost the race against a concurrent check-in for the same day.
            existing = self.today_session(employee, now=now)
            if existing:
                raise self._already_checked_in(existing)
            raise ConflictError("Vous avez déjà pointé aujourd'hui.")

        self._log_drift("check-in", now, received_at)
        logger.info("Check-in employee=%s tenant=%s at %s", employee.employee_id, employee.tenant_id, now.isoformat())
        return CheckInResult(session=session, check_in_time=format_clock(now, self._tz))

    def check_out(
        self,
        employee: Employee,
        *,
        now: datetime | None = None,
        received_at: datetime | None = None,
    ) -> CheckOutResult:
        """Close the most recently opened session that has no check-out."""
        now = as_utc(now or now_utc())

        session = self._attendance.close_latest_open(
            tenant_id=employee.tenant_id,
            employee_id=employee.employee_id,
            check_out=now,
        )
        if session is None:
            raise ConflictError("Vous n'avez pas pointé ce matin. Dites 'Hi' pour commencer votre journée.")

        self._log_drift("check-out", now, received_at)
        minutes = minutes_between(session.check_in, now)
        logger.info(
            "Check-out employee=%s tenant=%s after %s", employee.employee_id, employee.tenant_id, format_duration(minutes)
        )
        return CheckOutResult(session=session, check_out_time=format_clock(now, self._tz), duration_minutes=minutes)

    def record_location(
        self,
        employee: Employee,
        position: Coordinate,
        verdict: GeofenceVerdict,
        *,
        now: datetime | None = None,
    ) -> AttendanceSession:
        """Store a shared position on today's session."""
        session = self.today_session(employee, now=now)
        if session is None:
            raise ConflictError('Vous devez d\'abord pointer votre entrée avec "Hi" avant d\'envoyer votre position.')

        self._attendance.attach_location(
            tenant_id=employee.tenant_id,
            session_id=session.session_id,
            latitude=position.latitude,
            longitude=position.longitude,
            distance_from_site=verdict.distance,
        )
        return session
