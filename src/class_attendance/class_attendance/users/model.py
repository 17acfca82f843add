from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Student:
    """Domain entity: Student account (no DB access code here)."""

    student_id: int
    username: str
    password_hash: str

    def to_json(self) -> dict:
        return {"id_estudiante": self.student_id, "usuario_estudiante": self.username}


@dataclass(frozen=True)
class Teacher:
    """Domain entity: Teacher account."""

    teacher_id: int
    username: str
    password_hash: str

    def to_json(self) -> dict:
        return {"id_profesor": self.teacher_id, "usuario_profesor": self.username}


@dataclass(frozen=True)
class SessionContext:
    """Who is using the client, as resolved at login.

    Views receive this object explicitly; it lives until logout.
    """

    username: str
    role: Role
    account_id: Optional[int]

    def to_json(self) -> dict:
        return {"usuario": self.username, "rol": self.role.value, "id": self.account_id}
