from __future__ import annotations

from enum import Enum, IntEnum


class Role(str, Enum):
    """Roles understood by the client views."""

    ADMIN = "administrador"
    TEACHER = "profesor"
    STUDENT = "estudiante"


class Presence(IntEnum):
    """Value stored in asistencia.asistencia."""

    ABSENT = 0
    PRESENT = 1
