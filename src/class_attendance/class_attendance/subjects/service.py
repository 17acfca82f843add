from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..common.datetime_utils import today_local
from ..common.validators import require_int, require_non_empty
from ..core.exceptions import NotFoundError
from .model import CreatedSubject, NewSubject, Subject, SubjectAttendanceSummary
from .repository import SubjectRepository

logger = logging.getLogger(__name__)

# wire field -> (NewSubject attribute, label for error messages)
SUBJECT_FIELDS = {
    "nombre_asignatura": ("name", "Nombre de la asignatura"),
    "siglas_asignatura": ("short_code", "Siglas"),
    "color_asignatura": ("primary_color", "Color"),
    "color_seccion_asignatura": ("section_color", "Color de sección"),
    "seccion_asignatura": ("section_label", "Sección"),
    "modalidad_asignatura": ("modality", "Modalidad"),
}


class SubjectService:
    def __init__(self, subjects: SubjectRepository):
        self._subjects = subjects

    def list_subjects(self) -> Sequence[Subject]:
        return self._subjects.list_all()

    def get_subject(self, subject_id: Any) -> Subject:
        subject = self._subjects.get_by_id(require_int(subject_id, "ID de asignatura"))
        if not subject:
            raise NotFoundError("No se encontró asignatura con el ID proporcionado")
        return subject

    def list_by_teacher_id(self, teacher_id: Any) -> Sequence[Subject]:
        return self._subjects.list_by_teacher_id(require_int(teacher_id, "ID de profesor"))

    def list_by_teacher_username(self, username: str) -> Sequence[Subject]:
        return self._subjects.list_by_teacher_username(require_non_empty(username, "Usuario"))

    def list_for_student(self, username: str) -> Sequence[SubjectAttendanceSummary]:
        rows = self._subjects.attendance_summaries(student_username=require_non_empty(username, "Usuario"))
        if not rows:
            raise NotFoundError("No se encontraron asignaturas para el estudiante proporcionado.")
        return rows

    def detail_for_student(self, subject_id: Any, username: str) -> Sequence[SubjectAttendanceSummary]:
        """Same aggregation as list_for_student scoped to one subject; may be empty."""
        return self._subjects.attendance_summaries(
            student_username=require_non_empty(username, "Usuario"),
            subject_id=require_int(subject_id, "ID de asignatura"),
        )

    def create_subject(self, data: Mapping[str, Any], *, with_enrollment_session: bool = True) -> CreatedSubject:
        fields = {"teacher_id": require_int(data.get("id_profesor"), "ID de profesor")}
        for wire_name, (attr, label) in SUBJECT_FIELDS.items():
            fields[attr] = require_non_empty(data.get(wire_name), label)

        created = self._subjects.create(
            NewSubject(**fields),
            enrollment_date=today_local() if with_enrollment_session else None,
        )
        logger.info(
            "Created subject %s (id=%s, enrollment session=%s)",
            fields["short_code"],
            created.subject_id,
            created.enrollment_session_id,
        )
        return created

    def delete_subject(self, subject_id: Any) -> None:
        subject_id = require_int(subject_id, "ID de asignatura")
        if not self._subjects.delete_cascade(subject_id):
            raise NotFoundError("Asignatura no encontrada")
        logger.info("Deleted subject %s with its sessions and attendance", subject_id)
