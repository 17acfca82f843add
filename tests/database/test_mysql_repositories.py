from __future__ import annotations

from datetime import date

import mysql.connector
import pytest

from src.class_attendance.class_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.class_attendance.class_attendance.core.enums import Presence
from src.class_attendance.class_attendance.core.exceptions import DuplicateRecordError
from src.class_attendance.class_attendance.subjects.model import NewSubject
from src.class_attendance.class_attendance.subjects.mysql_subject_repository import MySQLSubjectRepository


class RecordingCursor:
    def __init__(self, conn: "RecordingConnection"):
        self._conn = conn
        self.rowcount = 0
        self.lastrowid = None
        self._rows: list = []

    def execute(self, sql: str, params=()):
        self._conn.statements.append((" ".join(sql.split()), tuple(params)))
        if self._conn.fail_on and self._conn.fail_on in sql:
            raise self._conn.error
        self._conn.next_id += 1
        self.lastrowid = self._conn.next_id
        self.rowcount = self._conn.rowcounts.pop(0) if self._conn.rowcounts else 1
        self._rows = self._conn.results.pop(0) if self._conn.results else []

    def executemany(self, sql: str, seq_params):
        for params in seq_params:
            self.execute(sql, params)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class RecordingConnection:
    def __init__(self):
        self.statements: list = []
        self.results: list = []
        self.rowcounts: list = []
        self.next_id = 0
        self.fail_on = None
        self.error: Exception = RuntimeError("boom")
        self.commits = 0
        self.rollbacks = 0
        self.closed = 0

    def cursor(self, dictionary: bool = False):
        return RecordingCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed += 1


class RecordingFactory:
    def __init__(self):
        self.conn = RecordingConnection()

    def connect(self):
        return self.conn


@pytest.fixture
def factory() -> RecordingFactory:
    return RecordingFactory()


def _new_subject() -> NewSubject:
    return NewSubject(
        teacher_id=1,
        name="Programación Móvil",
        short_code="PGY4121",
        primary_color="1e90ff",
        section_color="f5f5f5",
        section_label="001D",
        modality="Presencial",
    )


def test_create_subject_inserts_enrollment_session_in_same_transaction(factory):
    created = MySQLSubjectRepository(factory).create(_new_subject(), enrollment_date=date(2024, 3, 11))

    sqls = [s for s, _ in factory.conn.statements]
    assert sqls[0].startswith("INSERT INTO asignatura")
    assert sqls[1].startswith("INSERT INTO clases")
    assert factory.conn.statements[1][1] == (created.subject_id, date(2024, 3, 11), "Clase de inscripción")
    assert factory.conn.commits == 1
    assert created.enrollment_session_id == 2


def test_failed_enrollment_insert_rolls_back_subject(factory):
    factory.conn.fail_on = "INSERT INTO clases"

    with pytest.raises(RuntimeError):
        MySQLSubjectRepository(factory).create(_new_subject(), enrollment_date=date(2024, 3, 11))

    assert factory.conn.commits == 0
    assert factory.conn.rollbacks == 1
    assert factory.conn.closed == 1


def test_delete_cascade_order_and_result(factory):
    factory.conn.rowcounts = [3, 2, 1]

    assert MySQLSubjectRepository(factory).delete_cascade(5) is True

    sqls = [s for s, _ in factory.conn.statements]
    assert "asistencia" in sqls[0]
    assert sqls[1].startswith("DELETE FROM clases")
    assert sqls[2].startswith("DELETE FROM asignatura")
    assert factory.conn.commits == 1


def test_delete_cascade_unknown_subject(factory):
    factory.conn.rowcounts = [0, 0, 0]

    assert MySQLSubjectRepository(factory).delete_cascade(5) is False


def test_delete_cascade_failure_keeps_everything(factory):
    factory.conn.fail_on = "DELETE FROM asignatura"

    with pytest.raises(RuntimeError):
        MySQLSubjectRepository(factory).delete_cascade(5)

    assert factory.conn.commits == 0
    assert factory.conn.rollbacks == 1


def test_duplicate_key_maps_to_domain_error(factory):
    factory.conn.fail_on = "INSERT INTO asistencia"
    factory.conn.error = mysql.connector.IntegrityError(msg="Duplicate entry", errno=1062)

    with pytest.raises(DuplicateRecordError):
        MySQLAttendanceRepository(factory).create(
            session_id=1, student_id=2, present=Presence.ABSENT, record_date=date(2024, 3, 11)
        )
    assert factory.conn.rollbacks == 1


def test_other_integrity_errors_propagate(factory):
    factory.conn.fail_on = "INSERT INTO asistencia"
    factory.conn.error = mysql.connector.IntegrityError(msg="FK", errno=1452)

    with pytest.raises(mysql.connector.IntegrityError):
        MySQLAttendanceRepository(factory).create(
            session_id=1, student_id=2, present=Presence.ABSENT, record_date=date(2024, 3, 11)
        )


def test_create_many_with_no_students_skips_the_database(factory):
    created = MySQLAttendanceRepository(factory).create_many(
        session_id=1, student_ids=[], present=Presence.ABSENT, record_date=date(2024, 3, 11)
    )

    assert created == 0
    assert factory.conn.statements == []


def test_mark_present_reports_matched_rows(factory):
    factory.conn.rowcounts = [0]

    matched = MySQLAttendanceRepository(factory).mark_present(
        session_id=1, record_date=date(2024, 3, 11), student_id=2
    )

    assert matched == 0
    sql, params = factory.conn.statements[0]
    assert sql.startswith("UPDATE asistencia SET asistencia=1")
    assert params == (1, date(2024, 3, 11), 2)


def test_joined_rows_are_serialized(factory):
    factory.conn.results = [
        [
            {
                "id_asignatura": 1,
                "id_profesor": 1,
                "id_clase": 4,
                "fecha_clase": date(2024, 3, 11),
                "fecha_asistencia": date(2024, 3, 11),
                "asistencia": 1,
                "id_asistencia": 9,
                "id_estudiante": 2,
            }
        ]
    ]

    (row,) = MySQLAttendanceRepository(factory).subject_sessions_attendance(teacher_id=1, subject_id=1)

    assert row["fecha_clase"] == "2024-03-11"
    assert row["fecha_asistencia"] == "2024-03-11"
    assert row["asistencia"] == 1
