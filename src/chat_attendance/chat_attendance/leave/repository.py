from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import RequestStatus
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    def create(self, *, tenant_id: str, employee_id: str, start_at: datetime, end_at: datetime) -> LeaveRequest:
        raise NotImplementedError

    def decide_pending_by_prefix(
        self,
        *,
        tenant_id: str,
        id_prefix: str,
        status: RequestStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> Optional[LeaveRequest]:
        """Atomically resolve the first PENDING request of ``tenant_id`` whose id starts with ``id_prefix``.

        Never looks outside the tenant. Returns the updated request, or None
        when no PENDING request matches.
        """
        raise NotImplementedError

    def latest_for_employee(self, *, tenant_id: str, employee_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError
