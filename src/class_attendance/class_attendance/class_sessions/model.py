from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..common.datetime_utils import to_iso
from ..core.constants import ENROLLMENT_SESSION_QR


@dataclass(frozen=True)
class ClassSession:
    """Domain entity: one dated meeting ("clase") of a subject."""

    session_id: int
    subject_id: int
    session_date: date
    qr_payload: str

    @property
    def is_enrollment(self) -> bool:
        return self.qr_payload == ENROLLMENT_SESSION_QR

    def to_json(self) -> dict:
        return {
            "id_clase": self.session_id,
            "id_asignatura": self.subject_id,
            "fecha_clase": to_iso(self.session_date),
            "codigoqr_clase": self.qr_payload,
        }
