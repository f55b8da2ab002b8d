from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Site
from .repository import SiteRepository


class MySQLSiteRepository(SiteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, *, tenant_id: str, site_id: str) -> Optional[Site]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT site_id, tenant_id, name, latitude, longitude, radius
                FROM sites
                WHERE site_id=%s AND tenant_id=%s
                """,
                (site_id, tenant_id),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Site(
                site_id=str(r["site_id"]),
                tenant_id=str(r["tenant_id"]),
                name=r["name"],
                latitude=float(r["latitude"]) if r.get("latitude") is not None else None,
                longitude=float(r["longitude"]) if r.get("longitude") is not None else None,
                radius=int(r["radius"]) if r.get("radius") is not None else None,
            )
