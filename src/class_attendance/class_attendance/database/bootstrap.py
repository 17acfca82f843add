from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


DEMO_TEACHERS = (("profesor.demo", "profesor123"),)
DEMO_STUDENTS = (("estudiante.demo", "estudiante123"), ("estudiante.dos", "estudiante123"))


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "class_attendance_db")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in _strip_comments(sql):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> int:
    count = 0
    for stmt in iter_sql_statements(sql):
        cur.execute(stmt)
        count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def _apply_sql_file(db_config: dict, path: str | Path) -> None:
    target = _as_target(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        count = _exec_sql(cur, sql)
        conn.commit()
        logger.info("Applied %s (%d statements)", Path(path).name, count)
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _apply_sql_file(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _apply_sql_file(db_config, seed_path)


def ensure_demo_accounts(db_config: dict) -> None:
    """Create the demo teacher/student accounts with hashed passwords.

    Existing usernames get their password reset so the demo credentials keep working.
    """
    target = _as_target(db_config)

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def upsert(table: str, id_col: str, user_col: str, pass_col: str, username: str, password: str) -> None:
            password_hash = generate_password_hash(password)
            cur.execute(f"SELECT {id_col} AS id FROM {table} WHERE {user_col}=%s", (username,))
            existing = cur.fetchone()
            if existing:
                cur.execute(f"UPDATE {table} SET {pass_col}=%s WHERE {id_col}=%s", (password_hash, existing["id"]))
            else:
                cur.execute(f"INSERT INTO {table} ({user_col}, {pass_col}) VALUES (%s, %s)", (username, password_hash))

        for username, password in DEMO_TEACHERS:
            upsert("profesores", "id_profesor", "usuario_profesor", "contrasena_profesor", username, password)
        for username, password in DEMO_STUDENTS:
            upsert("estudiantes", "id_estudiante", "usuario_estudiante", "contrasena_estudiante", username, password)

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
