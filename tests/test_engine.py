# tests/test_engine.py

import pytest

from core.errors import PersistenceError
from models.classroom import Classroom
from models.rating import Rating
from models.seating_position import SeatingPosition
from models.student import Student
from storage.engine import SQLAlchemyEngine


def test_new_engine_is_empty(engine):
    assert engine.is_empty()
    assert engine.fetch_all(Student) == []


def test_save_and_fetch_round_trip(engine, sample_class, sample_student, sample_rating):
    engine.save(sample_class)
    engine.save(sample_student)
    engine.save(sample_rating)

    assert engine.fetch(Classroom, "c001") == sample_class
    assert engine.fetch(Student, "s001") == sample_student
    assert engine.fetch(Rating, "r001") == sample_rating
    assert engine.fetch(Student, "missing") is None


def test_save_overwrites_by_id(engine, sample_student):
    engine.save(sample_student)

    sample_student.last_name = "Bauer"
    engine.save(sample_student)

    students = engine.fetch_all(Student)
    assert len(students) == 1
    assert students[0].last_name == "Bauer"


def test_delete_removes_record(engine, sample_student):
    engine.save(sample_student)
    engine.delete(sample_student)

    assert engine.fetch(Student, "s001") is None


def test_apply_is_all_or_nothing(engine, sample_position):
    engine.save(sample_position)

    # same (student, class) pair under a new id violates the unique constraint
    clash = SeatingPosition("p002", "s001", "c001", 0, 0)
    other = SeatingPosition("p003", "s002", "c001", 1, 0)

    with pytest.raises(PersistenceError):
        engine.apply(saves=[other, clash])

    assert engine.fetch(SeatingPosition, "p003") is None
    assert [p.id for p in engine.fetch_all(SeatingPosition)] == ["p001"]


def test_apply_deletes_before_saves(engine, sample_position):
    engine.save(sample_position)

    replacement = SeatingPosition("p002", "s001", "c001", 0, 0)
    engine.apply(saves=[replacement], deletes=[sample_position])

    assert [p.id for p in engine.fetch_all(SeatingPosition)] == ["p002"]


def test_replace_all(engine, sample_class, other_class, sample_student):
    engine.save(sample_class)

    engine.replace_all({Classroom: [other_class], Student: [sample_student]})

    assert [c.id for c in engine.fetch_all(Classroom)] == ["c002"]
    assert engine.count(Student) == 1


def test_unknown_record_type_is_rejected(engine):
    with pytest.raises(TypeError):
        engine.fetch_all(dict)


def test_unopenable_database_raises_persistence_error(tmp_path):
    with pytest.raises(PersistenceError):
        SQLAlchemyEngine(f"sqlite:///{tmp_path}/missing/dir/roster.sqlite")
