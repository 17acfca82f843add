from __future__ import annotations

import logging
from typing import Any, Sequence

from ..common.datetime_utils import require_iso_date
from ..common.validators import require_fields, require_int
from ..core.constants import ENROLLMENT_SESSION_QR
from ..core.exceptions import NotFoundError, ValidationError
from ..subjects.repository import SubjectRepository
from . import qr
from .model import ClassSession
from .repository import ClassSessionRepository

logger = logging.getLogger(__name__)


class ClassSessionService:
    def __init__(self, sessions: ClassSessionRepository, subjects: SubjectRepository):
        self._sessions = sessions
        self._subjects = subjects

    def list_sessions(self) -> Sequence[ClassSession]:
        return self._sessions.list_all()

    def get_session(self, session_id: Any) -> ClassSession:
        session = self._sessions.get_by_id(require_int(session_id, "ID de clase"))
        if not session:
            raise NotFoundError("No se encontró la clase")
        return session

    def list_by_subject(self, subject_id: Any) -> Sequence[ClassSession]:
        rows = self._sessions.list_by_subject(require_int(subject_id, "ID de asignatura"))
        if not rows:
            raise NotFoundError("No se encontraron clases para la asignatura especificada")
        return rows

    def create_session(
        self,
        *,
        subject_id: Any,
        session_date: Any,
        qr_payload: Any,
        generate_payload: bool = False,
    ) -> ClassSession:
        """Insert a session; with ``generate_payload`` a missing payload is minted here."""
        if generate_payload and not qr_payload:
            qr_payload = qr.generate_payload()

        require_fields(
            {"id_asignatura": subject_id, "fecha_clase": session_date, "codigoqr_clase": qr_payload},
            "id_asignatura",
            "fecha_clase",
            "codigoqr_clase",
        )
        subject_id = require_int(subject_id, "ID de asignatura")
        day = require_iso_date(session_date)
        payload = str(qr_payload)

        if not self._subjects.get_by_id(subject_id):
            raise ValidationError("La asignatura no existe")

        if payload == ENROLLMENT_SESSION_QR and self._sessions.list_by_subject_and_qr(subject_id, payload):
            raise ValidationError("La asignatura ya tiene una clase de inscripción")

        session_id = self._sessions.create(subject_id=subject_id, session_date=day, qr_payload=payload)
        logger.info("Created session %s for subject %s on %s", session_id, subject_id, day)
        return ClassSession(session_id=session_id, subject_id=subject_id, session_date=day, qr_payload=payload)

    def delete_by_subject(self, subject_id: Any) -> int:
        """Zero matches is not an error."""
        subject_id = require_int(subject_id, "ID de asignatura")
        deleted = self._sessions.delete_by_subject(subject_id)
        logger.info("Deleted %s sessions of subject %s", deleted, subject_id)
        return deleted

    def get_enrollment_session(self, subject_id: Any) -> ClassSession:
        """The subject's enrollment session; the lowest id wins if several exist."""
        rows = self._sessions.list_by_subject_and_qr(require_int(subject_id, "ID de asignatura"), ENROLLMENT_SESSION_QR)
        if not rows:
            raise NotFoundError('No se encontró ninguna clase con el código QR "Clase de inscripción"')
        return min(rows, key=lambda s: s.session_id)

    def list_by_date(self, value: Any) -> Sequence[ClassSession]:
        # validate before touching the store
        return self._sessions.list_by_date(require_iso_date(value))

    def list_by_subject_and_date(self, subject_id: Any, value: Any) -> Sequence[ClassSession]:
        if not subject_id or not value:
            raise ValidationError("Faltan parámetros: id_asignatura o fecha_clase")
        subject_id = require_int(subject_id, "ID de asignatura")
        day = require_iso_date(value)

        rows = self._sessions.list_by_subject_and_date(subject_id, day)
        if not rows:
            raise NotFoundError("No se encontraron resultados para los parámetros proporcionados.")
        return rows

    def qr_payload_for(self, subject_id: Any, value: Any) -> str:
        return self.list_by_subject_and_date(subject_id, value)[0].qr_payload

    def qr_png(self, session_id: Any) -> bytes:
        return qr.render_png(self.get_session(session_id).qr_payload)
