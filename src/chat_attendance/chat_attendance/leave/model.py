from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import SHORT_ID_LENGTH
from ..core.enums import RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    """One employee's leave for one calendar day, [00:00:00, 23:59:59] inclusive."""

    request_id: str
    tenant_id: str
    employee_id: str
    start_at: datetime
    end_at: datetime
    status: RequestStatus
    created_at: Optional[datetime] = None
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None

    @property
    def short_id(self) -> str:
        return self.request_id[:SHORT_ID_LENGTH]

    @property
    def is_terminal(self) -> bool:
        return self.status != RequestStatus.PENDING
