from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

LOG = logging.getLogger(__name__)

DEMO_TENANT = "acme"


def _factory(db_config: Mapping) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_mapping(db_config))


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured database name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a SQL script on ';' outside of quotes; '--' line comments are dropped."""
    buf: list[str] = []
    quote: str | None = None
    escape = False

    for line in sql.splitlines(keepends=True):
        if quote is None and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if escape:
                buf.append(ch)
                escape = False
                continue
            if ch == "\\":
                buf.append(ch)
                escape = True
                continue
            if ch in ("'", '"'):
                if quote is None:
                    quote = ch
                elif quote == ch:
                    quote = None
                buf.append(ch)
                continue
            if ch == ";" and quote is None:
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue
            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: Mapping, sql: str) -> None:
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(_strip_create_db_and_use(sql)):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: Mapping) -> None:
    factory = _factory(db_config)
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, Path(schema_path).read_text(encoding="utf-8"))
    LOG.info("Applied schema %s", schema_path)


def apply_seed_sql(db_config: Mapping, *, seed_path: str | Path) -> None:
    _run_script(db_config, Path(seed_path).read_text(encoding="utf-8"))
    LOG.info("Applied seed %s", seed_path)


def ensure_demo_users(db_config: Mapping, *, subdomain: str = DEMO_TENANT) -> None:
    """Upsert one admin and one worker for the demo tenant (passwords re-hashed every run)."""
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute(
            "SELECT dept_id FROM departments WHERE subdomain=%s ORDER BY dept_id LIMIT 1",
            (subdomain,),
        )
        row = cur.fetchone()
        dept_id = int(row["dept_id"]) if row else None

        def upsert_user(full_name: str, username: str, password: str, role: str) -> None:
            password_hash = generate_password_hash(password)
            cur.execute(
                "SELECT user_id FROM users WHERE subdomain=%s AND username=%s",
                (subdomain, username),
            )
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users
                    SET full_name=%s, password_hash=%s, role=%s, dept_id=%s, is_active=1
                    WHERE subdomain=%s AND username=%s
                    """,
                    (full_name, password_hash, role, dept_id, subdomain, username),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (full_name, username, password_hash, role, subdomain, dept_id)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (full_name, username, password_hash, role, subdomain, dept_id),
                )

        upsert_user("Admin Demo", "admin", "admin123", "admin")
        upsert_user("Worker Demo", "worker", "worker123", "worker")
        conn.commit()
    finally:
        conn.close()
    LOG.info("Demo users ready for tenant %s", subdomain)


def list_tables(db_config: Mapping) -> list[str]:
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
