from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..common.datetime_utils import to_iso
from ..core.enums import Presence


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's presence for one class session."""

    record_id: int
    session_id: int
    student_id: int
    present: Presence
    record_date: date

    def to_json(self) -> dict:
        return {
            "id_asistencia": self.record_id,
            "id_clase": self.session_id,
            "id_estudiante": self.student_id,
            "asistencia": int(self.present),
            "fecha_asistencia": to_iso(self.record_date),
        }


@dataclass(frozen=True)
class ScanOutcome:
    """Result of a successful QR verification."""

    session_id: int
    student_id: int
    record_date: date
    updated_existing: bool

    def to_json(self) -> dict:
        return {
            "id_clase": self.session_id,
            "id_estudiante": self.student_id,
            "fecha_asistencia": to_iso(self.record_date),
            "actualizada": self.updated_existing,
        }
