from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.constants import ENROLLMENT_SESSION_QR
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CreatedSubject, NewSubject, Subject, SubjectAttendanceSummary
from .repository import SubjectRepository

_SUBJECT_COLUMNS = """
    a.id_asignatura, a.id_profesor, a.nombre_asignatura, a.siglas_asignatura,
    a.color_asignatura, a.color_seccion_asignatura, a.seccion_asignatura, a.modalidad_asignatura
"""


def _to_subject(r: Dict[str, Any]) -> Subject:
    return Subject(
        subject_id=int(r["id_asignatura"]),
        teacher_id=int(r["id_profesor"]),
        name=r["nombre_asignatura"],
        short_code=r["siglas_asignatura"],
        primary_color=r["color_asignatura"],
        section_color=r["color_seccion_asignatura"],
        section_label=str(r["seccion_asignatura"]),
        modality=r["modalidad_asignatura"],
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SUBJECT_COLUMNS} FROM asignatura a ORDER BY a.id_asignatura")
            return [_to_subject(r) for r in fetchall(cur)]

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SUBJECT_COLUMNS} FROM asignatura a WHERE a.id_asignatura=%s",
                (int(subject_id),),
            )
            r = fetchone(cur)
            return _to_subject(r) if r else None

    def list_by_teacher_id(self, teacher_id: int) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SUBJECT_COLUMNS} FROM asignatura a WHERE a.id_profesor=%s ORDER BY a.id_asignatura",
                (int(teacher_id),),
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def list_by_teacher_username(self, username: str) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SUBJECT_COLUMNS}
                FROM asignatura a
                JOIN profesores p ON p.id_profesor = a.id_profesor
                WHERE p.usuario_profesor=%s
                ORDER BY a.id_asignatura
                """,
                (username,),
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def attendance_summaries(
        self,
        *,
        student_username: str,
        subject_id: Optional[int] = None,
    ) -> Sequence[SubjectAttendanceSummary]:
        clauses = ["e.usuario_estudiante=%s"]
        params: list[object] = [student_username]
        if subject_id is not None:
            clauses.append("a.id_asignatura=%s")
            params.append(int(subject_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    {_SUBJECT_COLUMNS},
                    e.id_estudiante, e.usuario_estudiante,
                    SUM(CASE WHEN s.asistencia = 1 THEN 1 ELSE 0 END) AS count_asistencias,
                    COUNT(s.id_asistencia) AS count_total_asistencias
                FROM asignatura a
                JOIN clases c ON c.id_asignatura = a.id_asignatura
                JOIN asistencia s ON s.id_clase = c.id_clase
                JOIN estudiantes e ON e.id_estudiante = s.id_estudiante
                WHERE {where}
                GROUP BY a.id_asignatura, e.id_estudiante
                ORDER BY a.nombre_asignatura ASC
                """,
                tuple(params),
            )
            return [
                SubjectAttendanceSummary(
                    subject=_to_subject(r),
                    student_id=int(r["id_estudiante"]),
                    student_username=r["usuario_estudiante"],
                    present_count=int(r.get("count_asistencias") or 0),
                    total_count=int(r.get("count_total_asistencias") or 0),
                )
                for r in fetchall(cur)
            ]

    def create(self, subject: NewSubject, *, enrollment_date: Optional[date] = None) -> CreatedSubject:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO asignatura(id_profesor, nombre_asignatura, siglas_asignatura, color_asignatura,
                                       color_seccion_asignatura, seccion_asignatura, modalidad_asignatura)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(subject.teacher_id),
                    subject.name,
                    subject.short_code,
                    subject.primary_color,
                    subject.section_color,
                    subject.section_label,
                    subject.modality,
                ),
            )
            subject_id = int(cur.lastrowid)

            if enrollment_date is None:
                return CreatedSubject(subject_id=subject_id)

            cur.execute(
                "INSERT INTO clases(id_asignatura, fecha_clase, codigoqr_clase) VALUES(%s,%s,%s)",
                (subject_id, enrollment_date, ENROLLMENT_SESSION_QR),
            )
            return CreatedSubject(subject_id=subject_id, enrollment_session_id=int(cur.lastrowid))

    def delete_cascade(self, subject_id: int) -> bool:
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
            cur.execute("DELETE FROM asignatura WHERE id_asignatura=%s", (int(subject_id),))
            return cur.rowcount > 0
