# tests/conftest.py

import datetime

import pytest

from core.session import Role, Session
from models.ledger import Ledger
from models.marks_entry import MarksEntry
from models.subject import Subject


@pytest.fixture
def sample_ledger(tmp_path):
    ledger_response = Ledger.create("B.Tech Computer Science", str(tmp_path / "ledger"))
    return ledger_response.data["ledger"]


@pytest.fixture
def sample_subject():
    return Subject("sub001", "cs101", "Programming Fundamentals", 1, 4)


@pytest.fixture
def sample_lab_subject():
    return Subject("sub002", "CS102L", "Programming Lab", 1, 2, "Lab")


@pytest.fixture
def sample_marks_entry():
    return MarksEntry(
        id="m001",
        student_id="stu001",
        subject_id="sub001",
        semester=1,
        academic_year="2024-2025",
        internal_marks=25,
        external_marks=60,
    )


@pytest.fixture
def sample_failing_entry():
    return MarksEntry("m002", "stu001", "sub002", 1, "2024-2025", 10, 20)


@pytest.fixture
def populated_ledger(sample_ledger, sample_subject, sample_lab_subject):
    sample_ledger.add_subject(sample_subject)
    sample_ledger.add_subject(sample_lab_subject)
    return sample_ledger


@pytest.fixture
def admin_session():
    return Session("u-admin", Role.ADMIN)


@pytest.fixture
def faculty_session():
    return Session("u-fac", Role.FACULTY, faculty_id="fac001")


@pytest.fixture
def student_session():
    return Session("u-stu", Role.STUDENT, student_id="stu001")


@pytest.fixture
def class_day():
    return datetime.date(2025, 3, 10)
