from __future__ import annotations

from typing import Any, Dict, Generic, Optional, Sequence, TypeVar

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student, Teacher

T = TypeVar("T")


class _MySQLAccountRepository(Generic[T]):
    """Shared SQL for the two account tables (same shape, different column names)."""

    table: str
    id_col: str
    user_col: str
    pass_col: str

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _to_entity(self, row: Dict[str, Any]) -> T:
        raise NotImplementedError

    def _select(self) -> str:
        return f"SELECT {self.id_col}, {self.user_col}, {self.pass_col} FROM {self.table}"

    def list_all(self) -> Sequence[T]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{self._select()} ORDER BY {self.id_col}")
            return [self._to_entity(r) for r in fetchall(cur)]

    def get_by_username(self, username: str) -> Optional[T]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{self._select()} WHERE {self.user_col}=%s ORDER BY {self.id_col} LIMIT 1",
                (username,),
            )
            row = fetchone(cur)
            return self._to_entity(row) if row else None

    def create(self, *, username: str, password_hash: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO {self.table}({self.user_col}, {self.pass_col}) VALUES(%s,%s)",
                (username, password_hash),
            )
            return int(cur.lastrowid)


class MySQLStudentRepository(_MySQLAccountRepository[Student]):
    table = "estudiantes"
    id_col = "id_estudiante"
    user_col = "usuario_estudiante"
    pass_col = "contrasena_estudiante"

    def _to_entity(self, row: Dict[str, Any]) -> Student:
        return Student(
            student_id=int(row["id_estudiante"]),
            username=row["usuario_estudiante"],
            password_hash=row["contrasena_estudiante"],
        )


class MySQLTeacherRepository(_MySQLAccountRepository[Teacher]):
    table = "profesores"
    id_col = "id_profesor"
    user_col = "usuario_profesor"
    pass_col = "contrasena_profesor"

    def _to_entity(self, row: Dict[str, Any]) -> Teacher:
        return Teacher(
            teacher_id=int(row["id_profesor"]),
            username=row["usuario_profesor"],
            password_hash=row["contrasena_profesor"],
        )
