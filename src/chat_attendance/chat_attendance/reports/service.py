from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import as_utc, minutes_between, now_utc, week_start
from ..core.constants import DEFAULT_HISTORY_DAYS, DEFAULT_LEAVE_BALANCE
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRequestRepository
from .model import HistoryEntry, WeeklySummary


class WeeklyAggregator:
    """Read-side projections over sessions and leave requests of one employee.

    Every query is scoped by (tenant_id, employee_id); nothing here mutates state.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        leave_requests: LeaveRequestRepository,
        employees: EmployeeRepository,
    ):
        self._attendance = attendance
        self._leave_requests = leave_requests
        self._employees = employees

    def summarize(self, employee_id: str, tenant_id: str, now: datetime | None = None) -> WeeklySummary:
        now = as_utc(now or now_utc())
        start = week_start(now)

        sessions = self._attendance.list_between(tenant_id=tenant_id, employee_id=employee_id, start=start, end=now)

        total = 0
        ongoing = False
        days = set()
        for s in sessions:
            days.add(as_utc(s.check_in).date())
            if s.check_out is not None:
                total += minutes_between(s.check_in, s.check_out)
            else:
                total += minutes_between(s.check_in, now)
                ongoing = True

        employee = self._employees.get_by_id(tenant_id=tenant_id, employee_id=employee_id)
        last_leave = self._leave_requests.latest_for_employee(tenant_id=tenant_id, employee_id=employee_id)

        return WeeklySummary(
            employee_name=employee.display_name if employee else "Employé",
            week_start=start,
            total_minutes=max(0, total),
            days_worked=len(days),
            ongoing_session=ongoing,
            leave_balance=employee.leave_balance if employee else Decimal(DEFAULT_LEAVE_BALANCE),
            last_leave=last_leave,
        )

    def history(
        self,
        employee_id: str,
        tenant_id: str,
        days: int = DEFAULT_HISTORY_DAYS,
        now: datetime | None = None,
    ) -> list[HistoryEntry]:
        """Sessions of the trailing ``days`` window, newest first."""
        now = as_utc(now or now_utc())
        sessions = self._attendance.list_between(
            tenant_id=tenant_id,
            employee_id=employee_id,
            start=now - timedelta(days=int(days)),
            end=now,
        )
        entries = [
            HistoryEntry(
                check_in=s.check_in,
                check_out=s.check_out,
                duration_minutes=minutes_between(s.check_in, s.check_out) if s.check_out else None,
            )
            for s in sessions
        ]
        entries.sort(key=lambda e: e.check_in, reverse=True)
        return entries
