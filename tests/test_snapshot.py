# tests/test_snapshot.py

import os

import pytest

from core.errors import PersistenceError
from models.classroom import Classroom
from models.rating import Rating
from models.student import Student
from storage.snapshot import SnapshotStore


def test_missing_collection_reads_empty(snapshot):
    assert snapshot.read_collection(Student) == []
    assert not snapshot.has_data()


def test_write_and_read_collection(snapshot, sample_student, sample_rating):
    snapshot.write_collection(Student, [sample_student])
    snapshot.write_collection(Rating, [sample_rating])

    assert snapshot.read_collection(Student) == [sample_student]
    assert snapshot.read_collection(Rating) == [sample_rating]
    assert snapshot.has_data()
    assert os.path.exists(os.path.join(snapshot.path, "students.json"))


def test_write_collection_overwrites(snapshot, sample_student):
    snapshot.write_collection(Student, [sample_student])
    snapshot.write_collection(Student, [])

    assert snapshot.read_collection(Student) == []


def test_read_all_returns_every_type(snapshot, sample_class):
    snapshot.write_all({Classroom: [sample_class]})

    records = snapshot.read_all()

    assert records[Classroom] == [sample_class]
    assert records[Student] == []


def test_corrupt_file_raises_persistence_error(snapshot):
    with open(os.path.join(snapshot.path, "classes.json"), "w") as f:
        f.write("{not json")

    with pytest.raises(PersistenceError):
        snapshot.read_collection(Classroom)


def test_unwritable_directory_raises_persistence_error(tmp_path, sample_student):
    store = SnapshotStore(str(tmp_path / "does-not-exist"))

    with pytest.raises(PersistenceError):
        store.write_collection(Student, [sample_student])


def test_migration_marker(snapshot):
    assert not snapshot.has_completed_migration()

    snapshot.mark_migration_complete()

    assert snapshot.has_completed_migration()


def test_pending_sync_marker_keeps_migration_marker(snapshot):
    snapshot.mark_migration_complete()
    snapshot.mark_pending_sync()

    assert snapshot.has_pending_sync()
    assert snapshot.has_completed_migration()

    snapshot.clear_pending_sync()

    assert not snapshot.has_pending_sync()


def test_pending_writes_journal(snapshot, sample_class, sample_student):
    assert snapshot.read_pending_writes() == []

    snapshot.write_pending_writes([(sample_class, False), (sample_student, True)])

    assert snapshot.read_pending_writes() == [(sample_class, False), (sample_student, True)]
    assert not snapshot.has_data()

    snapshot.clear_pending_writes()
    snapshot.clear_pending_writes()

    assert snapshot.read_pending_writes() == []


def test_corrupt_pending_writes_raise(snapshot):
    with open(os.path.join(snapshot.path, "pending_writes.json"), "w") as f:
        f.write('[{"record_type": "Unknown", "deleted": false, "record": {}}]')

    with pytest.raises(PersistenceError):
        snapshot.read_pending_writes()
