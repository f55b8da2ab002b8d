from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import from_db
from ..core.enums import EmployeeStatus, Role, WorkProfile
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    e.employee_id, e.tenant_id, e.name, e.phone_number, e.role, e.status,
    e.work_profile, e.site_id, e.leave_balance, e.created_at, t.name AS tenant_name
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=str(r["employee_id"]),
        tenant_id=str(r["tenant_id"]),
        name=r.get("name"),
        phone_number=str(r["phone_number"]),
        role=Role(r["role"]),
        status=EmployeeStatus(r["status"]),
        work_profile=WorkProfile(r["work_profile"]),
        site_id=r.get("site_id"),
        leave_balance=Decimal(str(r["leave_balance"])),
        created_at=from_db(r.get("created_at")),
        tenant_name=r.get("tenant_name"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_active_by_phone(self, phone_number: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees e
                JOIN tenants t ON t.tenant_id = e.tenant_id
                WHERE e.phone_number=%s AND e.status=%s
                ORDER BY e.created_at ASC
                """,
                (phone_number, EmployeeStatus.ACTIVE.value),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, *, tenant_id: str, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees e
                JOIN tenants t ON t.tenant_id = e.tenant_id
                WHERE e.employee_id=%s AND e.tenant_id=%s
                """,
                (employee_id, tenant_id),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def find_managers(self, tenant_id: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees e
                JOIN tenants t ON t.tenant_id = e.tenant_id
                WHERE e.tenant_id=%s AND e.role=%s AND e.status=%s
                ORDER BY e.created_at ASC, e.employee_id ASC
                """,
                (tenant_id, Role.MANAGER.value, EmployeeStatus.ACTIVE.value),
            )
            return [_to_employee(r) for r in fetchall(cur)]
