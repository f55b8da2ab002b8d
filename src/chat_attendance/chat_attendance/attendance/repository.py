from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SessionStatus
from .model import AttendanceSession


class AttendanceRepository(Protocol):
    """Session storage. Implementations must make the two write paths atomic:

    - ``create_session`` inserts only if the employee has no session for that
      UTC day, in one statement/transaction, returning None otherwise;
    - ``close_latest_open`` finds the most recent open session and sets its
      check-out in one transaction, returning None when nothing was open.
    """

    def get_for_day(self, *, tenant_id: str, employee_id: str, work_date: date) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def create_session(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        work_date: date,
        check_in: datetime,
        status: SessionStatus = SessionStatus.PRESENT,
    ) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def close_latest_open(self, *, tenant_id: str, employee_id: str, check_out: datetime) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def attach_location(
        self,
        *,
        tenant_id: str,
        session_id: str,
        latitude: float,
        longitude: float,
        distance_from_site: Optional[int],
    ) -> None:
        raise NotImplementedError

    def list_between(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceSession]:
        """Sessions whose check-in falls in [start, end], oldest first."""
        raise NotImplementedError
