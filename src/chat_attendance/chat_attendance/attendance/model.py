from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SessionStatus


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one continuous work interval of one employee on one UTC day.

    ``check_out is None`` means the session is still open.
    """

    session_id: str
    tenant_id: str
    employee_id: str
    work_date: date
    check_in: datetime
    check_out: Optional[datetime]
    status: SessionStatus = SessionStatus.PRESENT
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_from_site: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.check_out is None
