from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..class_sessions.repository import ClassSessionRepository
from ..common.datetime_utils import require_iso_date, today_local
from ..common.stats import attendance_percentage
from ..common.validators import require_fields, require_int, require_non_empty, require_presence_flag
from ..core.enums import Presence
from ..core.exceptions import DuplicateRecordError, NotFoundError, ValidationError
from ..users.repository import StudentRepository
from .model import AttendanceRecord, ScanOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Attendance state transitions: pre-populate (0), scan/insert (1), mark present (0 -> 1)."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: ClassSessionRepository,
        students: StudentRepository,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._students = students

    def _insert(self, *, session_id: Any, student_id: Any, record_date: Any, present: Presence) -> int:
        require_fields(
            {"id_clase": session_id, "id_estudiante": student_id, "fecha_asistencia": record_date},
            "id_clase",
            "id_estudiante",
            "fecha_asistencia",
            message="Faltan parámetros requeridos",
        )
        session_id = require_int(session_id, "ID de clase")
        student_id = require_int(student_id, "ID de estudiante")
        day = require_iso_date(record_date)

        if self._attendance.list_by_student_and_session(student_id, session_id):
            raise DuplicateRecordError("La asistencia ya está registrada para esta clase")

        record_id = self._attendance.create(
            session_id=session_id,
            student_id=student_id,
            present=present,
            record_date=day,
        )
        logger.info(
            "Attendance %s: session=%s student=%s present=%s",
            record_id,
            session_id,
            student_id,
            int(present),
        )
        return record_id

    def record_attendance(self, *, session_id: Any, student_id: Any, record_date: Any) -> int:
        """Scan succeeded (or manual enrollment): present=1."""
        return self._insert(
            session_id=session_id, student_id=student_id, record_date=record_date, present=Presence.PRESENT
        )

    def record_attendance_automatic(self, *, session_id: Any, student_id: Any, record_date: Any) -> int:
        """Pre-populated row, not yet scanned: present=0."""
        return self._insert(
            session_id=session_id, student_id=student_id, record_date=record_date, present=Presence.ABSENT
        )

    def record_attendance_value(self, *, session_id: Any, student_id: Any, record_date: Any, present: Any) -> int:
        if present is None:
            raise ValidationError("Faltan parámetros requeridos")
        return self._insert(
            session_id=session_id,
            student_id=student_id,
            record_date=record_date,
            present=Presence(require_presence_flag(present)),
        )

    def mark_present(self, *, session_id: Any, record_date: Any, student_id: Any) -> None:
        require_fields(
            {"idClase": session_id, "fechaAsistencia": record_date, "idEstudiante": student_id},
            "idClase",
            "fechaAsistencia",
            "idEstudiante",
            message="Faltan parámetros requeridos",
        )
        matched = self._attendance.mark_present(
            session_id=require_int(session_id, "ID de clase"),
            record_date=require_iso_date(record_date),
            student_id=require_int(student_id, "ID de estudiante"),
        )
        if matched == 0:
            raise NotFoundError("No existe un registro de asistencia para actualizar")

    def by_student_and_session(self, student_id: Any, session_id: Any) -> Sequence[AttendanceRecord]:
        return self._attendance.list_by_student_and_session(
            require_int(student_id, "ID de estudiante"),
            require_int(session_id, "ID de clase"),
        )

    def by_student_username(self, username: str) -> Sequence[dict]:
        rows = self._attendance.list_by_student_username((username or "").strip())
        if not rows:
            raise NotFoundError("No se encontró asistencia para este estudiante")
        return rows

    def student_ids_for_subject(self, subject_id: Any) -> Sequence[int]:
        return self._attendance.list_student_ids_for_subject(require_int(subject_id, "ID de asignatura"))

    def students_for_subject(self, subject_id: Any) -> Sequence[dict]:
        return self._attendance.list_students_for_subject(require_int(subject_id, "ID de asignatura"))

    def subject_sessions_attendance(self, *, teacher_id: Any, subject_id: Any) -> Sequence[dict]:
        if not teacher_id or not subject_id:
            raise ValidationError("Los parámetros idProfesor e idAsignatura son requeridos")
        return self._attendance.subject_sessions_attendance(
            teacher_id=require_int(teacher_id, "ID de profesor"),
            subject_id=require_int(subject_id, "ID de asignatura"),
        )

    def subject_percentage(self, *, teacher_id: Any, subject_id: Any) -> float:
        """Live percentage over every record of the subject, as the teacher view shows it."""
        rows = self.subject_sessions_attendance(teacher_id=teacher_id, subject_id=subject_id)
        present = sum(1 for r in rows if int(r["asistencia"]) == Presence.PRESENT)
        return attendance_percentage(present, len(rows))

    def prepopulate_session(self, session_id: Any) -> int:
        """Create present=0 rows for every enrolled student lacking one for this session."""
        session = self._sessions.get_by_id(require_int(session_id, "ID de clase"))
        if not session:
            raise NotFoundError("No se encontró la clase")
        if session.is_enrollment:
            raise ValidationError("La clase de inscripción no admite asistencia automática")

        enrolled = self._attendance.list_student_ids_for_subject(session.subject_id)
        already = {r.student_id for r in self._attendance.list_by_session(session.session_id)}
        missing = [sid for sid in enrolled if sid not in already]

        created = self._attendance.create_many(
            session_id=session.session_id,
            student_ids=missing,
            present=Presence.ABSENT,
            record_date=session.session_date,
        )
        logger.info("Pre-populated %s attendance rows for session %s", created, session.session_id)
        return created

    def _resolve_student_id(self, student_id: Any, student_username: Optional[str]) -> int:
        if student_id:
            return require_int(student_id, "ID de estudiante")
        if student_username is not None and str(student_username).strip():
            student = self._students.get_by_username(require_non_empty(student_username, "Usuario"))
            if not student:
                raise NotFoundError("No se encontró el estudiante")
            return student.student_id
        raise ValidationError("Faltan parámetros requeridos")

    def verify_scan(
        self,
        *,
        subject_id: Any,
        scanned_payload: Optional[str],
        student_id: Any = None,
        student_username: Optional[str] = None,
        day: Optional[date] = None,
    ) -> ScanOutcome:
        """Record attendance iff ``scanned_payload`` equals the payload of the subject's session for ``day``.

        Equality is literal. A mismatch changes nothing and raises ValidationError.
        """
        subject_id = require_int(subject_id, "ID de asignatura")
        if not scanned_payload:
            raise ValidationError("Código QR vacío")
        student_id = self._resolve_student_id(student_id, student_username)
        day = day or today_local()

        candidates = [s for s in self._sessions.list_by_subject_and_date(subject_id, day) if not s.is_enrollment]
        if not candidates:
            raise NotFoundError("No hay clase registrada hoy para esta asignatura")

        session = next((s for s in candidates if s.qr_payload == scanned_payload), None)
        if session is None:
            logger.info("QR mismatch for subject %s student %s", subject_id, student_id)
            raise ValidationError("El código QR no coincide con la clase de hoy")

        existing = self._attendance.list_by_student_and_session(student_id, session.session_id)
        if any(r.present == Presence.PRESENT for r in existing):
            raise DuplicateRecordError("La asistencia ya fue registrada")

        if existing:
            record_date = existing[0].record_date
            self._attendance.mark_present(session_id=session.session_id, record_date=record_date, student_id=student_id)
        else:
            record_date = day
            self._attendance.create(
                session_id=session.session_id,
                student_id=student_id,
                present=Presence.PRESENT,
                record_date=day,
            )

        logger.info("QR attendance recorded: session=%s student=%s", session.session_id, student_id)
        return ScanOutcome(
            session_id=session.session_id,
            student_id=student_id,
            record_date=record_date,
            updated_existing=bool(existing),
        )
