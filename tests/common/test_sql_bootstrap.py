from __future__ import annotations

from chat_attendance.database.bootstrap import split_statements
from chat_attendance.database.connection import DBConfig


def test_split_statements_ignores_semicolons_in_strings():
    script = """
    -- demo
    CREATE DATABASE IF NOT EXISTS demo;
    USE demo;
    INSERT INTO sites (name) VALUES ('Quai; entrée nord');
    INSERT INTO tenants (name) VALUES ("It's fine")
    """

    assert list(split_statements(script)) == [
        "INSERT INTO sites (name) VALUES ('Quai; entrée nord')",
        'INSERT INTO tenants (name) VALUES ("It\'s fine")',
    ]


def test_db_config_defaults():
    config = DBConfig.from_mapping({"host": "db", "user": "app", "password": "x", "database": "att"})

    assert config.port == 3306
    assert config.connection_timeout == 10
