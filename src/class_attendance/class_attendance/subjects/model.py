from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.colors import text_color_for
from ..common.stats import attendance_percentage


@dataclass(frozen=True)
class NewSubject:
    teacher_id: int
    name: str
    short_code: str
    primary_color: str
    section_color: str
    section_label: str
    modality: str


@dataclass(frozen=True)
class Subject:
    """Domain entity: Subject ("asignatura"), owned by one teacher."""

    subject_id: int
    teacher_id: int
    name: str
    short_code: str
    primary_color: str
    section_color: str
    section_label: str
    modality: str

    def to_json(self) -> dict:
        return {
            "id_asignatura": self.subject_id,
            "id_profesor": self.teacher_id,
            "nombre_asignatura": self.name,
            "siglas_asignatura": self.short_code,
            "color_asignatura": self.primary_color,
            "color_seccion_asignatura": self.section_color,
            "seccion_asignatura": self.section_label,
            "modalidad_asignatura": self.modality,
            "color_texto_asignatura": text_color_for(self.primary_color),
            "color_texto_seccion": text_color_for(self.section_color),
        }


@dataclass(frozen=True)
class SubjectAttendanceSummary:
    """Read-model: one subject seen from one student's attendance records."""

    subject: Subject
    student_id: int
    student_username: str
    present_count: int
    total_count: int

    @property
    def percentage(self) -> float:
        return attendance_percentage(self.present_count, self.total_count)

    def to_json(self) -> dict:
        out = self.subject.to_json()
        out.update(
            {
                "usuario_estudiante": self.student_username,
                "id_estudiante": self.student_id,
                "count_asistencias": self.present_count,
                "count_total_asistencias": self.total_count,
                "porcentaje_asistencia": round(self.percentage, 2),
            }
        )
        return out


@dataclass(frozen=True)
class CreatedSubject:
    subject_id: int
    enrollment_session_id: Optional[int] = None
