from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student, Teacher


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, *, username: str, password_hash: str) -> int:
        raise NotImplementedError


class TeacherRepository(Protocol):
    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Teacher]:
        raise NotImplementedError

    def create(self, *, username: str, password_hash: str) -> int:
        raise NotImplementedError
