from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol, Sequence

from ..core.enums import Presence
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def create(self, *, session_id: int, student_id: int, present: Presence, record_date: date) -> int:
        """Insert one record; raises DuplicateRecordError if (session, student) exists."""

        raise NotImplementedError

    def create_many(self, *, session_id: int, student_ids: Iterable[int], present: Presence, record_date: date) -> int:
        """Insert one record per student in a single transaction; returns rows created."""

        raise NotImplementedError

    def mark_present(self, *, session_id: int, record_date: date, student_id: int) -> int:
        """Set present=1 on rows matching the triple; returns rows matched."""

        raise NotImplementedError

    def list_by_student_and_session(self, student_id: int, session_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_session(self, session_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_student_username(self, username: str) -> Sequence[dict]:
        """Records joined with the student's username."""

        raise NotImplementedError

    def list_student_ids_for_subject(self, subject_id: int) -> Sequence[int]:
        raise NotImplementedError

    def list_students_for_subject(self, subject_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def subject_sessions_attendance(self, *, teacher_id: int, subject_id: int) -> Sequence[dict]:
        """Subject x session x attendance rows for the teacher view."""

        raise NotImplementedError
