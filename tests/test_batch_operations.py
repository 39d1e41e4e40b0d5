# tests/test_batch_operations.py

import threading

import pytest

from core.batch_operations import BatchOperationRunner, BatchResult
from core.events import ChangeKind
from models.classroom import Classroom
from models.student import Student


@pytest.fixture
def runner(seeded_roster):
    runner = BatchOperationRunner(seeded_roster, max_workers=3)
    yield runner
    runner.close()


@pytest.fixture
def three_students(seeded_roster):
    seeded_roster.add_student(Student("x", "Xaver", "Xylo", "c001"))
    seeded_roster.add_student(Student("z", "Zoe", "Zimmer", "c001"))
    return ["x", "y", "z"]


def test_missing_item_counts_as_failure(runner, three_students):
    events = []
    completions = []
    calls = []
    runner.events.subscribe(events.append)

    def operation(record_id):
        calls.append(record_id)
        return True

    result = runner.run(
        three_students,
        operation,
        ChangeKind.ARCHIVED,
        on_complete=lambda ok, failed: completions.append((ok, failed)),
    )

    assert result == BatchResult(2, 1)
    assert completions == [(2, 1)]
    assert len(events) == 3
    assert sorted(calls) == ["x", "z"]

    missing = next(e for e in events if e.record_id == "y")
    assert not missing.success
    assert missing.display_name == "y"


def test_empty_batch_completes_immediately(runner):
    completions = []

    result = runner.run([], lambda _: True, ChangeKind.DELETED, on_complete=lambda *c: completions.append(c))

    assert result.total == 0
    assert completions == [(0, 0)]


def test_raising_operation_counts_as_failure(runner, three_students):
    def operation(record_id):
        if record_id == "x":
            raise RuntimeError("boom")
        return True

    result = runner.run(three_students, operation, ChangeKind.UPDATED)

    assert (result.success_count, result.failure_count) == (1, 2)


def test_events_carry_display_names(runner, three_students):
    events = []
    runner.events.subscribe(events.append)

    runner.run(["x"], lambda _: True, ChangeKind.UPDATED)

    assert events[0].display_name == "Xaver Xylo"
    assert events[0].kind is ChangeKind.UPDATED


def test_items_run_concurrently(runner, three_students):
    barrier = threading.Barrier(2, timeout=5)

    def operation(record_id):
        barrier.wait()
        return True

    result = runner.run(["x", "z"], operation, ChangeKind.UPDATED)

    assert result.success_count == 2


def test_start_returns_future(runner, three_students):
    future = runner.start(three_students, lambda _: True, ChangeKind.UPDATED)

    assert future.result(timeout=5) == BatchResult(2, 1)


def test_delete_students(runner, seeded_roster, three_students):
    result = runner.delete_students(three_students)

    assert result == BatchResult(2, 1)
    assert seeded_roster.get_student("x") is None
    assert seeded_roster.get_student("z") is None
    assert seeded_roster.get_student("s001") is not None


def test_archive_and_restore_students(runner, seeded_roster, three_students):
    runner.archive_students(["x", "z"])

    assert seeded_roster.get_student_count_for_class("c001") == 1

    runner.restore_students(["x", "z"])

    assert seeded_roster.get_student_count_for_class("c001") == 3


def test_move_students(runner, seeded_roster, three_students):
    result = runner.move_students(["x", "z"], "c002")

    assert result == BatchResult(2, 0)
    assert [s.id for s in seeded_roster.get_students_for_class("c002")] == ["x", "z"]
    assert seeded_roster.get_seating_position("x", "c002").coordinates == (0, 0)


def test_class_batches(runner, seeded_roster):
    seeded_roster.add_class(Classroom("c003", "7c", 4, 4))

    assert runner.archive_classes(["c003"]) == BatchResult(1, 0)
    assert seeded_roster.get_class("c003").is_archived

    assert runner.delete_classes(["c001", "nope"]) == BatchResult(1, 1)
    assert seeded_roster.get_class("c001") is None
    assert seeded_roster.get_student("s001") is None


def test_runner_requires_a_worker(seeded_roster):
    with pytest.raises(ValueError):
        BatchOperationRunner(seeded_roster, max_workers=0)
