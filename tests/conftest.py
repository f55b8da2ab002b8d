from __future__ import annotations

import itertools
import uuid
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

import pytest

from chat_attendance.attendance.model import AttendanceSession
from chat_attendance.core.enums import EmployeeStatus, RequestStatus, Role, SessionStatus, WorkProfile
from chat_attendance.employees.model import Employee
from chat_attendance.leave.model import LeaveRequest
from chat_attendance.sites.model import Site


class InMemoryEmployees:
    def __init__(self, employees=()):
        self.items: list[Employee] = list(employees)

    def add(self, employee: Employee) -> Employee:
        self.items.append(employee)
        return employee

    def find_active_by_phone(self, phone_number: str):
        found = [e for e in self.items if e.phone_number == phone_number and e.status == EmployeeStatus.ACTIVE]
        return sorted(found, key=lambda e: e.created_at or datetime.min.replace(tzinfo=timezone.utc))

    def get_by_id(self, *, tenant_id: str, employee_id: str) -> Optional[Employee]:
        for e in self.items:
            if e.employee_id == employee_id and e.tenant_id == tenant_id:
                return e
        return None

    def find_managers(self, tenant_id: str):
        found = [
            e
            for e in self.items
            if e.tenant_id == tenant_id and e.role == Role.MANAGER and e.status == EmployeeStatus.ACTIVE
        ]
        return sorted(found, key=lambda e: (e.created_at, e.employee_id))


class InMemorySites:
    def __init__(self, sites=()):
        self.items = {s.site_id: s for s in sites}

    def get_by_id(self, *, tenant_id: str, site_id: str) -> Optional[Site]:
        site = self.items.get(site_id)
        if site and site.tenant_id == tenant_id:
            return site
        return None


class InMemoryAttendance:
    """Mirrors the MySQL guarantees: one session per (tenant, employee, day)."""

    def __init__(self):
        self.sessions: dict[str, AttendanceSession] = {}
        self.lose_next_insert = False

    def add(self, session: AttendanceSession) -> AttendanceSession:
        self.sessions[session.session_id] = session
        return session

    def get_for_day(self, *, tenant_id, employee_id, work_date):
        found = [
            s
            for s in self.sessions.values()
            if s.tenant_id == tenant_id and s.employee_id == employee_id and s.work_date == work_date
        ]
        return max(found, key=lambda s: s.check_in) if found else None

    def create_session(self, *, tenant_id, employee_id, work_date, check_in, status=SessionStatus.PRESENT):
        if self.lose_next_insert:
            # Simulates a concurrent request committing first.
            self.lose_next_insert = False
            self.add(
                AttendanceSession(
                    session_id=str(uuid.uuid4()),
                    tenant_id=tenant_id,
                    employee_id=employee_id,
                    work_date=work_date,
                    check_in=check_in,
                    check_out=None,
                    status=status,
                )
            )
            return None
        if self.get_for_day(tenant_id=tenant_id, employee_id=employee_id, work_date=work_date):
            return None
        return self.add(
            AttendanceSession(
                session_id=str(uuid.uuid4()),
                tenant_id=tenant_id,
                employee_id=employee_id,
                work_date=work_date,
                check_in=check_in,
                check_out=None,
                status=status,
            )
        )

    def close_latest_open(self, *, tenant_id, employee_id, check_out):
        open_sessions = [
            s
            for s in self.sessions.values()
            if s.tenant_id == tenant_id and s.employee_id == employee_id and s.check_out is None
        ]
        if not open_sessions:
            return None
        latest = max(open_sessions, key=lambda s: s.check_in)
        closed = replace(latest, check_out=check_out)
        self.sessions[closed.session_id] = closed
        return closed

    def attach_location(self, *, tenant_id, session_id, latitude, longitude, distance_from_site):
        s = self.sessions[session_id]
        assert s.tenant_id == tenant_id
        self.sessions[session_id] = replace(s, latitude=latitude, longitude=longitude, distance_from_site=distance_from_site)

    def list_between(self, *, tenant_id, employee_id, start, end):
        found = [
            s
            for s in self.sessions.values()
            if s.tenant_id == tenant_id and s.employee_id == employee_id and start <= s.check_in <= end
        ]
        return sorted(found, key=lambda s: s.check_in)

    def open_count(self, employee_id: str, work_date: date) -> int:
        return sum(
            1 for s in self.sessions.values() if s.employee_id == employee_id and s.work_date == work_date and s.check_out is None
        )


class InMemoryLeaveRequests:
    def __init__(self, ids=None):
        self.items: dict[str, LeaveRequest] = {}
        self._ids = iter(ids) if ids is not None else None
        self._tick = itertools.count()
        self.decide_calls = 0

    def _next_id(self) -> str:
        if self._ids is not None:
            return next(self._ids)
        return str(uuid.uuid4())

    def create(self, *, tenant_id, employee_id, start_at, end_at):
        req = LeaveRequest(
            request_id=self._next_id(),
            tenant_id=tenant_id,
            employee_id=employee_id,
            start_at=start_at,
            end_at=end_at,
            status=RequestStatus.PENDING,
            created_at=datetime(2026, 10, 1, tzinfo=timezone.utc).replace(microsecond=next(self._tick)),
        )
        self.items[req.request_id] = req
        return req

    def decide_pending_by_prefix(self, *, tenant_id, id_prefix, status, decided_by, decided_at):
        self.decide_calls += 1
        candidates = sorted(
            (
                r
                for r in self.items.values()
                if r.tenant_id == tenant_id and r.status == RequestStatus.PENDING and r.request_id.startswith(id_prefix)
            ),
            key=lambda r: (r.created_at, r.request_id),
        )
        if not candidates:
            return None
        decided = replace(candidates[0], status=status, decided_by=decided_by, decided_at=decided_at)
        self.items[decided.request_id] = decided
        return decided

    def latest_for_employee(self, *, tenant_id, employee_id):
        found = [r for r in self.items.values() if r.tenant_id == tenant_id and r.employee_id == employee_id]
        return max(found, key=lambda r: (r.start_at, r.created_at)) if found else None


TENANT_A = "tenant-a"
TENANT_B = "tenant-b"


@pytest.fixture
def make_employee():
    counter = itertools.count(1)

    def _make(**overrides) -> Employee:
        n = next(counter)
        data = dict(
            employee_id=f"emp-{n}",
            tenant_id=TENANT_A,
            name=f"Employé {n}",
            phone_number=f"+3360000000{n}",
            role=Role.EMPLOYEE,
            status=EmployeeStatus.ACTIVE,
            work_profile=WorkProfile.MOBILE,
            site_id=None,
            leave_balance=Decimal("25"),
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc).replace(minute=n),
            tenant_name="Boulangerie Demo",
        )
        data.update(overrides)
        return Employee(**data)

    return _make


@pytest.fixture
def employees_repo():
    return InMemoryEmployees()


@pytest.fixture
def sites_repo():
    return InMemorySites()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def leave_repo():
    return InMemoryLeaveRequests()


@pytest.fixture
def make_leave_repo():
    return InMemoryLeaveRequests
