# core/seating.py

"""
Automatic seating-chart layout.

`arrange_in_grid()` is a pure function: given the students of a class and a column count it
returns one grid slot per active student, filled row by row in alphabetical order. The same
student set and column count always yield the same layout.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from models.student import Student


class GridSlot(NamedTuple):
    student_id: str
    x_pos: int
    y_pos: int


def seating_sort_key(student: Student) -> tuple[str, str]:
    return (student.last_name.strip().casefold(), student.first_name.strip().casefold())


def arrange_in_grid(students: Iterable[Student], columns: int) -> list[GridSlot]:
    """
    Assigns each non-archived student a grid slot, sorted by last name then first name.

    Args:
        students (Iterable[Student]): The class's students, in stored insertion order.
        columns (int): The number of seats per row; must be at least 1.

    Returns:
        list[GridSlot]: One slot per active student, where slot `i` sits at
        `(i % columns, i // columns)`.

    Raises:
        ValueError: If `columns` is less than 1.

    Notes:
        - The sort is stable, so students with identical names keep their insertion order.
    """
    if columns < 1:
        raise ValueError("Invalid input. Grid arrangement needs at least one column.")

    ordered = sorted(
        (student for student in students if not student.is_archived),
        key=seating_sort_key,
    )

    return [
        GridSlot(student.id, index % columns, index // columns)
        for index, student in enumerate(ordered)
    ]
