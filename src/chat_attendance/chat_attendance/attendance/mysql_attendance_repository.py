from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import from_db, to_db
from ..core.enums import SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceSession
from .repository import AttendanceRepository

_COLUMNS = """
    session_id, tenant_id, employee_id, work_date, check_in, check_out, status,
    latitude, longitude, distance_from_site
"""


def _to_session(r: dict) -> AttendanceSession:
    return AttendanceSession(
        session_id=str(r["session_id"]),
        tenant_id=str(r["tenant_id"]),
        employee_id=str(r["employee_id"]),
        work_date=r["work_date"],
        check_in=from_db(r["check_in"]),
        check_out=from_db(r.get("check_out")),
        status=SessionStatus(r["status"]),
        latitude=r.get("latitude"),
        longitude=r.get("longitude"),
        distance_from_site=r.get("distance_from_site"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_day(self, *, tenant_id: str, employee_id: str, work_date: date) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE tenant_id=%s AND employee_id=%s AND work_date=%s
                ORDER BY check_in DESC
                LIMIT 1
                """,
                (tenant_id, employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create_session(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        work_date: date,
        check_in: datetime,
        status: SessionStatus = SessionStatus.PRESENT,
    ) -> Optional[AttendanceSession]:
        session_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_sessions(session_id, tenant_id, employee_id, work_date, check_in, status)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (session_id, tenant_id, employee_id, work_date, to_db(check_in), status.value),
                )
            except mysql.connector.errors.IntegrityError as exc:
                if exc.errno != errorcode.ER_DUP_ENTRY:
                    raise
                # uq_sessions_employee_day: a concurrent check-in won the race.
                return None

        return AttendanceSession(
            session_id=session_id,
            tenant_id=tenant_id,
            employee_id=employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=None,
            status=status,
        )

    def close_latest_open(self, *, tenant_id: str, employee_id: str, check_out: datetime) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE tenant_id=%s AND employee_id=%s AND check_out IS NULL
                ORDER BY check_in DESC
                LIMIT 1
                FOR UPDATE
                """,
                (tenant_id, employee_id),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                """
                UPDATE attendance_sessions
                SET check_out=%s
                WHERE session_id=%s AND tenant_id=%s AND check_out IS NULL
                """,
                (to_db(check_out), r["session_id"], tenant_id),
            )
            if cur.rowcount != 1:
                return None

        return replace(_to_session(r), check_out=check_out)

    def attach_location(
        self,
        *,
        tenant_id: str,
        session_id: str,
        latitude: float,
        longitude: float,
        distance_from_site: Optional[int],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET latitude=%s, longitude=%s, distance_from_site=%s
                WHERE session_id=%s AND tenant_id=%s
                """,
                (float(latitude), float(longitude), distance_from_site, session_id, tenant_id),
            )

    def list_between(
        self,
        *,
        tenant_id: str,
        employee_id: str,
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE tenant_id=%s AND employee_id=%s AND check_in BETWEEN %s AND %s
                ORDER BY check_in ASC
                """,
                (tenant_id, employee_id, to_db(start), to_db(end)),
            )
            return [_to_session(r) for r in fetchall(cur)]
