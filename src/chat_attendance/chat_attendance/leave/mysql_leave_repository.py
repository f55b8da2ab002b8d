from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import from_db, now_utc, to_db
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_COLUMNS = "request_id, tenant_id, employee_id, start_at, end_at, status, created_at, decided_by, decided_at"


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=str(r["request_id"]),
        tenant_id=str(r["tenant_id"]),
        employee_id=str(r["employee_id"]),
        start_at=r["start_at"],
        end_at=r["end_at"],
        status=RequestStatus(r["status"]),
        created_at=from_db(r.get("created_at")),
        decided_by=r.get("decided_by"),
        decided_at=from_db(r.get("decided_at")),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, tenant_id: str, employee_id: str, start_at: datetime, end_at: datetime) -> LeaveRequest:
        request_id = str(uuid.uuid4())
        created_at = now_utc()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(request_id, tenant_id, employee_id, start_at, end_at, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request_id,
                    tenant_id,
                    employee_id,
                    start_at,
                    end_at,
                    RequestStatus.PENDING.value,
                    to_db(created_at),
                ),
            )
        return LeaveRequest(
            request_id=request_id,
            tenant_id=tenant_id,
            employee_id=employee_id,
            start_at=start_at,
            end_at=end_at,
            status=RequestStatus.PENDING,
            created_at=created_at,
        )

    def decide_pending_by_prefix(
        self,
        *,
        tenant_id: str,
        id_prefix: str,
        status: RequestStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE tenant_id=%s AND status=%s AND request_id LIKE %s
                ORDER BY created_at ASC, request_id ASC
                LIMIT 1
                FOR UPDATE
                """,
                (tenant_id, RequestStatus.PENDING.value, f"{id_prefix}%"),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=%s
                WHERE request_id=%s AND tenant_id=%s AND status=%s
                """,
                (status.value, decided_by, to_db(decided_at), r["request_id"], tenant_id, RequestStatus.PENDING.value),
            )
            if cur.rowcount != 1:
                return None

        return replace(_to_request(r), status=status, decided_by=decided_by, decided_at=decided_at)

    def latest_for_employee(self, *, tenant_id: str, employee_id: str) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE tenant_id=%s AND employee_id=%s
                ORDER BY start_at DESC, created_at DESC
                LIMIT 1
                """,
                (tenant_id, employee_id),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None
