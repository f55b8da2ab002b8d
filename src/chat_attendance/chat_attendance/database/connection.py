from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connection_timeout: int = 10

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "DBConfig":
        """Build from a settings ``DB_CONFIG`` dict."""
        return cls(
            host=str(raw.get("host", "localhost")),
            port=int(raw.get("port", 3306)),
            user=str(raw.get("user", "root")),
            password=str(raw.get("password", "")),
            database=str(raw.get("database", "chat_attendance")),
            connection_timeout=int(raw.get("connection_timeout", 10)),
        )


class DatabaseConnection:
    """Process-wide connection factory.

    Every repository call opens its own short-lived connection, so each inbound
    chat event gets its own transactions whatever worker process handles it.
    Sessions are pinned to UTC; DATETIME columns hold naive UTC.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        params = dict(
            host=self.config.host,
            port=self.config.port,
            user=self.config.user,
            password=self.config.password,
            connection_timeout=self.config.connection_timeout,
            time_zone="+00:00",
        )
        if with_database:
            params["database"] = self.config.database
        return mysql.connector.connect(**params)
