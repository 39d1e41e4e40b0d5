# tests/test_student.py

import datetime

import pytest

from core.errors import ValidationError
from core.response import ErrorCode
from models.student import Student


def test_student_to_dict(sample_student):
    data = sample_student.to_dict()

    assert data["id"] == "s001"
    assert data["first_name"] == "Anna"
    assert data["last_name"] == "Adler"
    assert data["class_id"] == "c001"
    assert data["exit_date"] is None
    assert not data["is_archived"]


def test_student_from_dict():
    student = Student.from_dict(
        {
            "id": "s001",
            "first_name": "Anna",
            "last_name": "Adler",
            "class_id": "c001",
            "entry_date": "2025-09-01",
            "is_archived": True,
        }
    )

    assert student.full_name == "Anna Adler"
    assert student.sortable_name == "Adler, Anna"
    assert student.entry_date == datetime.date(2025, 9, 1)
    assert student.is_archived
    assert student.status == "'ARCHIVED'"


def test_student_to_str(sample_student):
    assert str(sample_student) == "STUDENT: Anna Adler - (ID: s001)"


def test_student_with_single_name():
    student = Student("s002", "", "Zimmer", "c001")

    assert student.full_name == "Zimmer"
    assert student.sortable_name == "Zimmer"
    student.validate()


def test_student_normalized_name_ignores_case_and_whitespace():
    student = Student("s003", "  Anna ", "ADLER", "c001")

    assert student.normalized_name == ("anna", "adler")


def test_student_requires_a_name():
    student = Student("s004", " ", "", "c001")

    with pytest.raises(ValidationError) as exc_info:
        student.validate()

    assert exc_info.value.code is ErrorCode.MISSING_REQUIRED_FIELD


def test_student_requires_a_class():
    with pytest.raises(ValidationError):
        Student("s005", "Anna", "Adler", "").validate()


def test_student_copy_is_independent(sample_student):
    copy = sample_student.copy()
    copy.first_name = "Berta"

    assert copy == Student.from_dict({**sample_student.to_dict(), "first_name": "Berta"})
    assert sample_student.first_name == "Anna"
