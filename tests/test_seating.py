# tests/test_seating.py

import pytest

from core.seating import GridSlot, arrange_in_grid
from models.student import Student


def make_students(*names, archived=()):
    return [
        Student(f"s{i}", first, last, "c001", is_archived=(last in archived))
        for i, (first, last) in enumerate(names)
    ]


def test_arrange_sorts_by_last_then_first_name():
    students = make_students(("Zoe", "Zimmer"), ("Anna", "Adler"), ("Ben", "Bauer"))

    slots = arrange_in_grid(students, 3)

    assert slots == [
        GridSlot("s1", 0, 0),
        GridSlot("s2", 1, 0),
        GridSlot("s0", 2, 0),
    ]


def test_arrange_wraps_rows():
    students = make_students(("A", "Adler"), ("B", "Bauer"), ("C", "Clemens"))

    slots = arrange_in_grid(students, 2)

    assert [(s.x_pos, s.y_pos) for s in slots] == [(0, 0), (1, 0), (0, 1)]


def test_arrange_skips_archived_students():
    students = make_students(("A", "Adler"), ("B", "Bauer"), archived=("Adler",))

    assert [s.student_id for s in arrange_in_grid(students, 5)] == ["s1"]


def test_arrange_is_case_insensitive_and_stable():
    students = make_students(("anna", "adler"), ("Anna", "ADLER"), ("Zed", "able"))

    assert [s.student_id for s in arrange_in_grid(students, 5)] == ["s2", "s0", "s1"]


def test_arrange_is_deterministic():
    students = make_students(("Zoe", "Zimmer"), ("Anna", "Adler"))

    assert arrange_in_grid(students, 1) == arrange_in_grid(list(students), 1)


def test_arrange_rejects_zero_columns():
    with pytest.raises(ValueError):
        arrange_in_grid([], 0)
