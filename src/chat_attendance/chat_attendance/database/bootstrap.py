"""Schema and demo data loading for local setups and AUTO_INIT_DB."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Mapping

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

# A statement is a run of non-';' text where quoted strings may contain ';'.
_STATEMENT = re.compile(r"""(?:'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|[^;'"])+""")
_DB_SELECTION = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b[^;]*;")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")


def split_statements(script: str) -> Iterator[str]:
    """Yield the statements of a SQL script, comments and database selection removed.

    The target database comes from configuration, so ``CREATE DATABASE`` and
    ``USE`` lines in the file are ignored.
    """
    script = _LINE_COMMENT.sub("", _DB_SELECTION.sub("", script))
    for match in _STATEMENT.finditer(script):
        stmt = match.group(0).strip()
        if stmt:
            yield stmt


def _factory(db_config: Mapping) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_mapping(db_config))


def ensure_database_exists(db_config: Mapping) -> None:
    factory = _factory(db_config)
    conn = factory.connect(with_database=False)
    try:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def run_script(db_config: Mapping, path: str | Path) -> int:
    """Execute every statement of ``path`` in one transaction; returns the statement count."""
    statements = list(split_statements(Path(path).read_text(encoding="utf-8")))
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
    return len(statements)


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    """Tables use CREATE TABLE IF NOT EXISTS, so this can run at every start."""
    ensure_database_exists(db_config)
    count = run_script(db_config, schema_path)
    logger.info("Applied %d schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: Mapping, *, seed_path: str | Path) -> None:
    count = run_script(db_config, seed_path)
    logger.info("Applied %d seed statements from %s", count, seed_path)


def list_tables(db_config: Mapping) -> list[str]:
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()
