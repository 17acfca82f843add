from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import CreatedSubject, NewSubject, Subject, SubjectAttendanceSummary


class SubjectRepository(Protocol):
    def list_all(self) -> Sequence[Subject]:
        raise NotImplementedError

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def list_by_teacher_id(self, teacher_id: int) -> Sequence[Subject]:
        raise NotImplementedError

    def list_by_teacher_username(self, username: str) -> Sequence[Subject]:
        raise NotImplementedError

    def attendance_summaries(
        self,
        *,
        student_username: str,
        subject_id: Optional[int] = None,
    ) -> Sequence[SubjectAttendanceSummary]:
        """One row per subject the student has at least one attendance record under."""

        raise NotImplementedError

    def create(self, subject: NewSubject, *, enrollment_date: Optional[date] = None) -> CreatedSubject:
        """Insert a subject; with ``enrollment_date`` also its enrollment session, atomically."""

        raise NotImplementedError

    def delete_cascade(self, subject_id: int) -> bool:
        """Delete attendance records, sessions and the subject in one transaction.

        Returns False (and deletes nothing) when the subject does not exist.
        """

        raise NotImplementedError
