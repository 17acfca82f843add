from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import SessionContext, Student, Teacher
from .repository import StudentRepository, TeacherRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Use case: manage student and teacher accounts (admin screens)."""

    def __init__(self, students: StudentRepository, teachers: TeacherRepository):
        self._students = students
        self._teachers = teachers

    def list_students(self) -> Sequence[Student]:
        return self._students.list_all()

    def list_teachers(self) -> Sequence[Teacher]:
        return self._teachers.list_all()

    def get_student(self, username: str) -> Student:
        student = self._students.get_by_username(require_non_empty(username, "Usuario"))
        if not student:
            raise NotFoundError("No se encontró el estudiante")
        return student

    def get_teacher(self, username: str) -> Teacher:
        teacher = self._teachers.get_by_username(require_non_empty(username, "Usuario"))
        if not teacher:
            raise NotFoundError("No se encontró el profesor")
        return teacher

    def create_student(self, *, username: str, password: str) -> int:
        username = require_non_empty(username, "Usuario")
        password = require_non_empty(password, "Contraseña")
        if self._students.get_by_username(username):
            raise ValidationError("El nombre de usuario ya existe")

        student_id = self._students.create(username=username, password_hash=generate_password_hash(password))
        logger.info("Created student %s (id=%s)", username, student_id)
        return student_id

    def create_teacher(self, *, username: str, password: str) -> int:
        username = require_non_empty(username, "Usuario")
        password = require_non_empty(password, "Contraseña")
        if self._teachers.get_by_username(username):
            raise ValidationError("El nombre de usuario ya existe")

        teacher_id = self._teachers.create(username=username, password_hash=generate_password_hash(password))
        logger.info("Created teacher %s (id=%s)", username, teacher_id)
        return teacher_id


class AuthService:
    """Use case: resolve credentials into a SessionContext (login)."""

    def __init__(
        self,
        students: StudentRepository,
        teachers: TeacherRepository,
        *,
        admin_username: Optional[str] = None,
        admin_password_hash: Optional[str] = None,
    ):
        self._students = students
        self._teachers = teachers
        self._admin_username = admin_username
        self._admin_password_hash = admin_password_hash

    @staticmethod
    def _matches(password_hash: str, password: str) -> bool:
        try:
            return check_password_hash(password_hash, password)
        except ValueError:
            # e.g. a legacy plaintext value that is not a werkzeug hash
            return False

    def authenticate(self, username: str, password: str) -> SessionContext:
        username = (username or "").strip()
        if not username or not password:
            raise AuthenticationError("Usuario o contraseña incorrectos")

        if self._admin_username and self._admin_password_hash and username == self._admin_username:
            if self._matches(self._admin_password_hash, password):
                return SessionContext(username=username, role=Role.ADMIN, account_id=None)
            raise AuthenticationError("Usuario o contraseña incorrectos")

        teacher = self._teachers.get_by_username(username)
        if teacher and self._matches(teacher.password_hash, password):
            return SessionContext(username=username, role=Role.TEACHER, account_id=teacher.teacher_id)

        student = self._students.get_by_username(username)
        if student and self._matches(student.password_hash, password):
            return SessionContext(username=username, role=Role.STUDENT, account_id=student.student_id)

        logger.info("Rejected login for %s", username)
        raise AuthenticationError("Usuario o contraseña incorrectos")
