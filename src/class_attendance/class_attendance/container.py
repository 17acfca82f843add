from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from werkzeug.security import generate_password_hash

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .class_sessions.mysql_class_session_repository import MySQLClassSessionRepository
from .class_sessions.service import ClassSessionService
from .core.constants import DEFAULT_POOL_SIZE
from .database.connection import DBConfig, DatabaseConnection
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.service import SubjectService
from .users.mysql_account_repository import MySQLStudentRepository, MySQLTeacherRepository
from .users.service import AccountService, AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    students_repo: MySQLStudentRepository
    teachers_repo: MySQLTeacherRepository
    subjects_repo: MySQLSubjectRepository
    sessions_repo: MySQLClassSessionRepository
    attendance_repo: MySQLAttendanceRepository

    account_service: AccountService
    auth_service: AuthService
    subject_service: SubjectService
    class_session_service: ClassSessionService
    attendance_service: AttendanceService


def build_container(
    *,
    db_config: dict,
    admin_username: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        pool_size=int(db_config.get("pool_size", DEFAULT_POOL_SIZE)),
    )
    conn = DatabaseConnection.get_instance(config)

    students_repo = MySQLStudentRepository(conn)
    teachers_repo = MySQLTeacherRepository(conn)
    subjects_repo = MySQLSubjectRepository(conn)
    sessions_repo = MySQLClassSessionRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    account_service = AccountService(students_repo, teachers_repo)
    auth_service = AuthService(
        students_repo,
        teachers_repo,
        admin_username=admin_username,
        admin_password_hash=generate_password_hash(admin_password) if admin_username and admin_password else None,
    )
    subject_service = SubjectService(subjects_repo)
    class_session_service = ClassSessionService(sessions_repo, subjects_repo)
    attendance_service = AttendanceService(attendance_repo, sessions_repo, students_repo)

    return Container(
        conn=conn,
        students_repo=students_repo,
        teachers_repo=teachers_repo,
        subjects_repo=subjects_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        account_service=account_service,
        auth_service=auth_service,
        subject_service=subject_service,
        class_session_service=class_session_service,
        attendance_service=attendance_service,
    )
