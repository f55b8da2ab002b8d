from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..leave.model import LeaveRequest


@dataclass(frozen=True)
class WeeklySummary:
    """Read-model for the "my space" chat reply. Never written back."""

    employee_name: str
    week_start: datetime
    total_minutes: int
    days_worked: int
    ongoing_session: bool
    leave_balance: Decimal
    last_leave: Optional[LeaveRequest] = None

    @property
    def hours(self) -> int:
        return self.total_minutes // 60

    @property
    def minutes(self) -> int:
        return self.total_minutes % 60


@dataclass(frozen=True)
class HistoryEntry:
    check_in: datetime
    check_out: Optional[datetime]
    duration_minutes: Optional[int]

    @property
    def in_progress(self) -> bool:
        return self.check_out is None
