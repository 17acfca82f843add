from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ClassSession
from .repository import ClassSessionRepository

_SELECT = "SELECT id_clase, id_asignatura, fecha_clase, codigoqr_clase FROM clases"


def _to_session(r: Dict[str, Any]) -> ClassSession:
    return ClassSession(
        session_id=int(r["id_clase"]),
        subject_id=int(r["id_asignatura"]),
        session_date=r["fecha_clase"],
        qr_payload=r["codigoqr_clase"],
    )


class MySQLClassSessionRepository(ClassSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _query(self, where: str = "", params: tuple = ()) -> Sequence[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY fecha_clase ASC, id_clase ASC", params)
            return [_to_session(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[ClassSession]:
        return self._query()

    def get_by_id(self, session_id: int) -> Optional[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id_clase=%s", (int(session_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_by_subject(self, subject_id: int) -> Sequence[ClassSession]:
        return self._query("WHERE id_asignatura=%s", (int(subject_id),))

    def list_by_date(self, session_date: date) -> Sequence[ClassSession]:
        return self._query("WHERE fecha_clase=%s", (session_date,))

    def list_by_subject_and_date(self, subject_id: int, session_date: date) -> Sequence[ClassSession]:
        return self._query("WHERE id_asignatura=%s AND fecha_clase=%s", (int(subject_id), session_date))

    def list_by_subject_and_qr(self, subject_id: int, qr_payload: str) -> Sequence[ClassSession]:
        return self._query("WHERE id_asignatura=%s AND codigoqr_clase=%s", (int(subject_id), qr_payload))

    def create(self, *, subject_id: int, session_date: date, qr_payload: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO clases(id_asignatura, fecha_clase, codigoqr_clase) VALUES(%s,%s,%s)",
                (int(subject_id), session_date, qr_payload),
            )
            return int(cur.lastrowid)

    def delete_by_subject(self, subject_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE s FROM asistencia s
                JOIN clases c ON c.id_clase = s.id_clase
                WHERE c.id_asignatura=%s
                """,
                (int(subject_id),),
            )
            cur.execute("DELETE FROM clases WHERE id_asignatura=%s", (int(subject_id),))
            return int(cur.rowcount)
