from __future__ import annotations

import logging
import re
from pathlib import Path

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("users", "time_entries", "user_settings", "absence_requests")

# schema.sql names a database for manual use; the configured one wins here.
_DB_SELECTION_RE = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def schema_statements(sql: str) -> list[str]:
    """Split a schema file into statements.

    Full-line ``--`` comments and database selection statements are dropped.
    The schema holds no ';' inside literals, so splitting on it is enough.
    """
    body = "\n".join(ln for ln in sql.splitlines() if not ln.lstrip().startswith("--"))
    statements = (stmt.strip() for stmt in body.split(";"))
    return [stmt for stmt in statements if stmt and not _DB_SELECTION_RE.match(stmt)]


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4")
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create the database if needed and run every CREATE TABLE IF NOT EXISTS."""
    ensure_database_exists(db_config)
    schema_path = Path(schema_path)
    statements = schema_statements(schema_path.read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %d schema statements from %s", len(statements), schema_path.name)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def missing_tables(db_config: dict) -> list[str]:
    present = set(list_tables(db_config))
    return [name for name in REQUIRED_TABLES if name not in present]
