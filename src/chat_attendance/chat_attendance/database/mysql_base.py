from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


def _release(step: str, action: Callable[[], Any]) -> None:
    # On a dead socket rollback/close raise too; the original error must win.
    try:
        action()
    except mysql.connector.Error as exc:
        logger.warning("Database %s failed: %s", step, exc)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction: commit on success, rollback on any error.

    Driver errors escaping the block are re-raised as StorageError so callers
    can tell the sender to retry. Repositories that expect a specific driver
    error (e.g. a duplicate key) catch it inside the block.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.exception("Cannot open database connection")
        raise StorageError("Base de données indisponible") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            _release("cursor close", cur.close)
    except mysql.connector.Error as exc:
        _release("rollback", conn.rollback)
        logger.exception("Database operation failed, rolled back")
        raise StorageError("Opération interrompue") from exc
    except Exception:
        _release("rollback", conn.rollback)
        raise
    finally:
        _release("close", conn.close)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
