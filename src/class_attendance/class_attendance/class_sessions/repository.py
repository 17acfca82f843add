from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ClassSession


class ClassSessionRepository(Protocol):
    def list_all(self) -> Sequence[ClassSession]:
        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[ClassSession]:
        raise NotImplementedError

    def list_by_subject(self, subject_id: int) -> Sequence[ClassSession]:
        raise NotImplementedError

    def list_by_date(self, session_date: date) -> Sequence[ClassSession]:
        raise NotImplementedError

    def list_by_subject_and_date(self, subject_id: int, session_date: date) -> Sequence[ClassSession]:
        raise NotImplementedError

    def list_by_subject_and_qr(self, subject_id: int, qr_payload: str) -> Sequence[ClassSession]:
        raise NotImplementedError

    def create(self, *, subject_id: int, session_date: date, qr_payload: str) -> int:
        raise NotImplementedError

    def delete_by_subject(self, subject_id: int) -> int:
        """Delete every session of the subject (and their attendance); returns sessions deleted."""

        raise NotImplementedError
