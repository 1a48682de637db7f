from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[4] / "database" / "schema.sql"


def _iter_statements(sql: str) -> Iterable[str]:
    # schema.sql keeps one statement per `;`-terminated block and no `;` inside literals.
    sql = re.sub(r"(?m)^\s*--.*$", "", sql)
    for stmt in sql.split(";"):
        stmt = stmt.strip()
        if stmt:
            yield stmt


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(conn_factory)
    sql = Path(schema_path).read_text(encoding="utf-8")

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %s to database %s", Path(schema_path).name, conn_factory.config.database)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [str(r[0]) for r in cur.fetchall()]
    finally:
        conn.close()


def ensure_demo_users(conn_factory: DatabaseConnection) -> None:
    """Upsert one admin, one principal and one plain staff account for local development."""
    demo = [
        ("admin-demo", "admin", "Admin Demo", "admin@smapna.sch.id", "admin123", ()),
        ("kepsek-demo", "guru", "Kepala Sekolah Demo", "kepsek@smapna.sch.id", "guru123", ("kepala_sekolah",)),
        ("guru-demo", "guru", "Guru Demo", "guru@smapna.sch.id", "guru123", ()),
    ]

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for uid, role, name, email, password, duties in demo:
            cur.execute(
                """
                INSERT INTO users (uid, role, display_name, email, password_hash, is_active)
                VALUES (%s, %s, %s, %s, %s, 1)
                ON DUPLICATE KEY UPDATE
                    role=VALUES(role), display_name=VALUES(display_name),
                    email=VALUES(email), password_hash=VALUES(password_hash), is_active=1
                """,
                (uid, role, name, email, generate_password_hash(password)),
            )
            cur.execute("DELETE FROM user_duties WHERE uid=%s", (uid,))
            for duty in duties:
                cur.execute("INSERT INTO user_duties (uid, duty) VALUES (%s, %s)", (uid, duty))
        conn.commit()
    finally:
        conn.close()
