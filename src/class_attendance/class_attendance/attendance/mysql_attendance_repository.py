from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, Sequence

from ..common.datetime_utils import to_iso
from ..core.enums import Presence
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, unique_violation
from .model import AttendanceRecord
from .repository import AttendanceRepository

_DUPLICATE_MESSAGE = "La asistencia ya está registrada para esta clase"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["id_asistencia"]),
        session_id=int(r["id_clase"]),
        student_id=int(r["id_estudiante"]),
        present=Presence(int(r["asistencia"])),
        record_date=r["fecha_asistencia"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, session_id: int, student_id: int, present: Presence, record_date: date) -> int:
        with unique_violation(_DUPLICATE_MESSAGE):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO asistencia(id_clase, id_estudiante, asistencia, fecha_asistencia)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(session_id), int(student_id), int(present), record_date),
                )
                return int(cur.lastrowid)

    def create_many(self, *, session_id: int, student_ids: Iterable[int], present: Presence, record_date: date) -> int:
        params = [(int(session_id), int(sid), int(present), record_date) for sid in student_ids]
        if not params:
            return 0

        with unique_violation(_DUPLICATE_MESSAGE):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.executemany(
                    """
                    INSERT INTO asistencia(id_clase, id_estudiante, asistencia, fecha_asistencia)
                    VALUES(%s,%s,%s,%s)
                    """,
                    params,
                )
                return len(params)

    def mark_present(self, *, session_id: int, record_date: date, student_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE asistencia
                SET asistencia=1
                WHERE id_clase=%s AND fecha_asistencia=%s AND id_estudiante=%s
                """,
                (int(session_id), record_date, int(student_id)),
            )
            return int(cur.rowcount)

    def list_by_student_and_session(self, student_id: int, session_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id_asistencia, id_clase, id_estudiante, asistencia, fecha_asistencia
                FROM asistencia
                WHERE id_estudiante=%s AND id_clase=%s
                ORDER BY id_asistencia
                """,
                (int(student_id), int(session_id)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_by_session(self, session_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id_asistencia, id_clase, id_estudiante, asistencia, fecha_asistencia
                FROM asistencia
                WHERE id_clase=%s
                ORDER BY id_asistencia
                """,
                (int(session_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_by_student_username(self, username: str) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id_asistencia, s.id_clase, s.id_estudiante, s.asistencia, s.fecha_asistencia,
                       e.usuario_estudiante
                FROM asistencia s
                JOIN estudiantes e ON e.id_estudiante = s.id_estudiante
                WHERE e.usuario_estudiante=%s
                ORDER BY s.fecha_asistencia DESC, s.id_asistencia DESC
                """,
                (username,),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                row = _to_record(r).to_json()
                row["usuario_estudiante"] = r["usuario_estudiante"]
                out.append(row)
            return out

    def list_student_ids_for_subject(self, subject_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT s.id_estudiante
                FROM asistencia s
                JOIN clases c ON c.id_clase = s.id_clase
                WHERE c.id_asignatura=%s
                ORDER BY s.id_estudiante
                """,
                (int(subject_id),),
            )
            return [int(r["id_estudiante"]) for r in fetchall(cur)]

    def list_students_for_subject(self, subject_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT e.id_estudiante, e.usuario_estudiante
                FROM asistencia s
                JOIN clases c ON c.id_clase = s.id_clase
                JOIN estudiantes e ON e.id_estudiante = s.id_estudiante
                WHERE c.id_asignatura=%s
                ORDER BY e.id_estudiante
                """,
                (int(subject_id),),
            )
            return [
                {"id_estudiante": int(r["id_estudiante"]), "usuario_estudiante": r["usuario_estudiante"]}
                for r in fetchall(cur)
            ]

    def subject_sessions_attendance(self, *, teacher_id: int, subject_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    a.id_asignatura, a.id_profesor, a.nombre_asignatura, a.siglas_asignatura,
                    a.color_asignatura, a.color_seccion_asignatura, a.seccion_asignatura, a.modalidad_asignatura,
                    c.id_clase, c.fecha_clase, c.codigoqr_clase,
                    s.id_asistencia, s.id_estudiante, s.asistencia, s.fecha_asistencia
                FROM asignatura a
                JOIN clases c ON c.id_asignatura = a.id_asignatura
                JOIN asistencia s ON s.id_clase = c.id_clase
                WHERE a.id_profesor=%s AND a.id_asignatura=%s
                ORDER BY c.fecha_clase ASC, s.id_estudiante ASC
                """,
                (int(teacher_id), int(subject_id)),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                row = dict(r)
                row["fecha_clase"] = to_iso(row.get("fecha_clase"))
                row["fecha_asistencia"] = to_iso(row.get("fecha_asistencia"))
                row["asistencia"] = int(row["asistencia"])
                out.append(row)
            return out
