from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Optional

import pytest
from werkzeug.security import generate_password_hash

from src.class_attendance.class_attendance.attendance.model import AttendanceRecord
from src.class_attendance.class_attendance.attendance.service import AttendanceService
from src.class_attendance.class_attendance.class_sessions.model import ClassSession
from src.class_attendance.class_attendance.class_sessions.service import ClassSessionService
from src.class_attendance.class_attendance.container import Container
from src.class_attendance.class_attendance.core.constants import ENROLLMENT_SESSION_QR
from src.class_attendance.class_attendance.core.enums import Presence
from src.class_attendance.class_attendance.core.exceptions import DuplicateRecordError
from src.class_attendance.class_attendance.subjects.model import (
    CreatedSubject,
    NewSubject,
    Subject,
    SubjectAttendanceSummary,
)
from src.class_attendance.class_attendance.subjects.service import SubjectService
from src.class_attendance.class_attendance.users.model import Student, Teacher
from src.class_attendance.class_attendance.users.service import AccountService, AuthService

FIXED_TODAY = date(2024, 3, 11)


@dataclass
class InMemoryStore:
    students: dict[int, Student] = field(default_factory=dict)
    teachers: dict[int, Teacher] = field(default_factory=dict)
    subjects: dict[int, Subject] = field(default_factory=dict)
    sessions: dict[int, ClassSession] = field(default_factory=dict)
    attendance: dict[int, AttendanceRecord] = field(default_factory=dict)
    writes: int = 0
    reads: int = 0
    _ids: dict[str, int] = field(default_factory=dict)

    def next_id(self, table: str) -> int:
        self._ids[table] = self._ids.get(table, 0) + 1
        return self._ids[table]


class InMemoryStudents:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def list_all(self):
        return sorted(self._s.students.values(), key=lambda s: s.student_id)

    def get_by_username(self, username: str) -> Optional[Student]:
        return next((s for s in self._s.students.values() if s.username == username), None)

    def create(self, *, username: str, password_hash: str) -> int:
        new_id = self._s.next_id("estudiantes")
        self._s.students[new_id] = Student(student_id=new_id, username=username, password_hash=password_hash)
        return new_id


class InMemoryTeachers:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def list_all(self):
        return sorted(self._s.teachers.values(), key=lambda t: t.teacher_id)

    def get_by_username(self, username: str) -> Optional[Teacher]:
        return next((t for t in self._s.teachers.values() if t.username == username), None)

    def create(self, *, username: str, password_hash: str) -> int:
        new_id = self._s.next_id("profesores")
        self._s.teachers[new_id] = Teacher(teacher_id=new_id, username=username, password_hash=password_hash)
        return new_id


class InMemorySubjects:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def list_all(self):
        return sorted(self._s.subjects.values(), key=lambda s: s.subject_id)

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        return self._s.subjects.get(subject_id)

    def list_by_teacher_id(self, teacher_id: int):
        return [s for s in self.list_all() if s.teacher_id == teacher_id]

    def list_by_teacher_username(self, username: str):
        ids = {t.teacher_id for t in self._s.teachers.values() if t.username == username}
        return [s for s in self.list_all() if s.teacher_id in ids]

    def attendance_summaries(self, *, student_username: str, subject_id: Optional[int] = None):
        student = next((s for s in self._s.students.values() if s.username == student_username), None)
        if not student:
            return []
        out = []
        for subject in self.list_all():
            if subject_id is not None and subject.subject_id != subject_id:
                continue
            session_ids = {c.session_id for c in self._s.sessions.values() if c.subject_id == subject.subject_id}
            records = [
                r
                for r in self._s.attendance.values()
                if r.student_id == student.student_id and r.session_id in session_ids
            ]
            if not records:
                continue
            out.append(
                SubjectAttendanceSummary(
                    subject=subject,
                    student_id=student.student_id,
                    student_username=student.username,
                    present_count=sum(1 for r in records if r.present == Presence.PRESENT),
                    total_count=len(records),
                )
            )
        return out

    def create(self, subject: NewSubject, *, enrollment_date: Optional[date] = None) -> CreatedSubject:
        self._s.writes += 1
        new_id = self._s.next_id("asignatura")
        self._s.subjects[new_id] = Subject(subject_id=new_id, **subject.__dict__)
        session_id = None
        if enrollment_date is not None:
            session_id = self._s.next_id("clases")
            self._s.sessions[session_id] = ClassSession(
                session_id=session_id,
                subject_id=new_id,
                session_date=enrollment_date,
                qr_payload=ENROLLMENT_SESSION_QR,
            )
        return CreatedSubject(subject_id=new_id, enrollment_session_id=session_id)

    def delete_cascade(self, subject_id: int) -> bool:
        if subject_id not in self._s.subjects:
            return False
        self._s.writes += 1
        session_ids = {c.session_id for c in self._s.sessions.values() if c.subject_id == subject_id}
        for rid in [r.record_id for r in self._s.attendance.values() if r.session_id in session_ids]:
            del self._s.attendance[rid]
        for sid in session_ids:
            del self._s.sessions[sid]
        del self._s.subjects[subject_id]
        return True


class InMemorySessions:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def list_all(self):
        self._s.reads += 1
        return sorted(self._s.sessions.values(), key=lambda c: c.session_id)

    def get_by_id(self, session_id: int) -> Optional[ClassSession]:
        return self._s.sessions.get(session_id)

    def list_by_subject(self, subject_id: int):
        return [c for c in self.list_all() if c.subject_id == subject_id]

    def list_by_date(self, session_date: date):
        return [c for c in self.list_all() if c.session_date == session_date]

    def list_by_subject_and_date(self, subject_id: int, session_date: date):
        return [c for c in self.list_by_subject(subject_id) if c.session_date == session_date]

    def list_by_subject_and_qr(self, subject_id: int, qr_payload: str):
        return [c for c in self.list_by_subject(subject_id) if c.qr_payload == qr_payload]

    def create(self, *, subject_id: int, session_date: date, qr_payload: str) -> int:
        self._s.writes += 1
        new_id = self._s.next_id("clases")
        self._s.sessions[new_id] = ClassSession(
            session_id=new_id, subject_id=subject_id, session_date=session_date, qr_payload=qr_payload
        )
        return new_id

    def delete_by_subject(self, subject_id: int) -> int:
        session_ids = [c.session_id for c in self._s.sessions.values() if c.subject_id == subject_id]
        for rid in [r.record_id for r in self._s.attendance.values() if r.session_id in session_ids]:
            del self._s.attendance[rid]
        for sid in session_ids:
            del self._s.sessions[sid]
        return len(session_ids)


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _exists(self, session_id: int, student_id: int) -> bool:
        return any(r.session_id == session_id and r.student_id == student_id for r in self._s.attendance.values())

    def create(self, *, session_id: int, student_id: int, present: Presence, record_date: date) -> int:
        if self._exists(session_id, student_id):
            raise DuplicateRecordError("La asistencia ya está registrada para esta clase")
        self._s.writes += 1
        new_id = self._s.next_id("asistencia")
        self._s.attendance[new_id] = AttendanceRecord(
            record_id=new_id,
            session_id=session_id,
            student_id=student_id,
            present=Presence(present),
            record_date=record_date,
        )
        return new_id

    def create_many(self, *, session_id: int, student_ids: Iterable[int], present: Presence, record_date: date) -> int:
        student_ids = list(student_ids)
        for sid in student_ids:
            self.create(session_id=session_id, student_id=sid, present=present, record_date=record_date)
        return len(student_ids)

    def mark_present(self, *, session_id: int, record_date: date, student_id: int) -> int:
        matched = 0
        for rid, r in list(self._s.attendance.items()):
            if r.session_id == session_id and r.record_date == record_date and r.student_id == student_id:
                self._s.attendance[rid] = replace(r, present=Presence.PRESENT)
                matched += 1
        return matched

    def list_by_student_and_session(self, student_id: int, session_id: int):
        return [
            r
            for r in sorted(self._s.attendance.values(), key=lambda r: r.record_id)
            if r.student_id == student_id and r.session_id == session_id
        ]

    def list_by_session(self, session_id: int):
        return [r for r in self._s.attendance.values() if r.session_id == session_id]

    def list_by_student_username(self, username: str):
        ids = {s.student_id for s in self._s.students.values() if s.username == username}
        out = []
        for r in self._s.attendance.values():
            if r.student_id in ids:
                row = r.to_json()
                row["usuario_estudiante"] = username
                out.append(row)
        return out

    def _subject_records(self, subject_id: int):
        session_ids = {c.session_id for c in self._s.sessions.values() if c.subject_id == subject_id}
        return [r for r in self._s.attendance.values() if r.session_id in session_ids]

    def list_student_ids_for_subject(self, subject_id: int):
        return sorted({r.student_id for r in self._subject_records(subject_id)})

    def list_students_for_subject(self, subject_id: int):
        return [
            {"id_estudiante": sid, "usuario_estudiante": self._s.students[sid].username}
            for sid in self.list_student_ids_for_subject(subject_id)
        ]

    def subject_sessions_attendance(self, *, teacher_id: int, subject_id: int):
        subject = self._s.subjects.get(subject_id)
        if not subject or subject.teacher_id != teacher_id:
            return []
        out = []
        for r in self._subject_records(subject_id):
            session = self._s.sessions[r.session_id]
            row = subject.to_json()
            row.update(session.to_json())
            row.update(r.to_json())
            out.append(row)
        return out


@dataclass
class World:
    """In-memory store plus services wired the way build_container wires them."""

    store: InMemoryStore
    students: InMemoryStudents
    teachers: InMemoryTeachers
    subjects_repo: InMemorySubjects
    sessions_repo: InMemorySessions
    attendance_repo: InMemoryAttendance
    accounts: AccountService
    auth: AuthService
    subjects: SubjectService
    sessions: ClassSessionService
    attendance: AttendanceService

    def container(self) -> Container:
        return Container(
            conn=None,
            students_repo=self.students,
            teachers_repo=self.teachers,
            subjects_repo=self.subjects_repo,
            sessions_repo=self.sessions_repo,
            attendance_repo=self.attendance_repo,
            account_service=self.accounts,
            auth_service=self.auth,
            subject_service=self.subjects,
            class_session_service=self.sessions,
            attendance_service=self.attendance,
        )


def _pin_today(monkeypatch) -> None:
    monkeypatch.setattr(
        "src.class_attendance.class_attendance.subjects.service.today_local", lambda: FIXED_TODAY
    )
    monkeypatch.setattr(
        "src.class_attendance.class_attendance.attendance.service.today_local", lambda: FIXED_TODAY
    )


@pytest.fixture
def fixed_today() -> date:
    return FIXED_TODAY


@pytest.fixture
def world(monkeypatch) -> World:
    _pin_today(monkeypatch)
    store = InMemoryStore()
    students = InMemoryStudents(store)
    teachers = InMemoryTeachers(store)
    subjects_repo = InMemorySubjects(store)
    sessions_repo = InMemorySessions(store)
    attendance_repo = InMemoryAttendance(store)

    teachers.create(username="profesor.demo", password_hash=generate_password_hash("profesor123"))
    students.create(username="estudiante.demo", password_hash=generate_password_hash("estudiante123"))
    students.create(username="estudiante.dos", password_hash=generate_password_hash("estudiante123"))

    return World(
        store=store,
        students=students,
        teachers=teachers,
        subjects_repo=subjects_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        accounts=AccountService(students, teachers),
        auth=AuthService(
            students,
            teachers,
            admin_username="admin",
            admin_password_hash=generate_password_hash("admin123"),
        ),
        subjects=SubjectService(subjects_repo),
        sessions=ClassSessionService(sessions_repo, subjects_repo),
        attendance=AttendanceService(attendance_repo, sessions_repo, students),
    )


@pytest.fixture
def subject_payload() -> dict:
    return {
        "id_profesor": 1,
        "nombre_asignatura": "Programación Móvil",
        "siglas_asignatura": "PGY4121",
        "color_asignatura": "1e90ff",
        "color_seccion_asignatura": "f5f5f5",
        "seccion_asignatura": "001D",
        "modalidad_asignatura": "Presencial",
    }


@pytest.fixture
def client(world, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.class_attendance.class_attendance.main import create_app

    app = create_app(container=world.container())
    return app.test_client()
