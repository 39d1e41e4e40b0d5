# models/seating_position.py

"""
Represents where a student sits on a class's seating chart.

Coordinates are zero-based grid cells. `is_custom_position` distinguishes a seat the user
placed by hand from one produced by the automatic grid arrangement.

Notes:
- At most one position exists per (student_id, class_id) pair; the `Roster` replaces rather
  than duplicates when a second position is saved for the same pair.
"""

from __future__ import annotations

import datetime

from core.errors import ValidationError
from core.response import ErrorCode
from core.utils import generate_uuid, now, parse_datetime


class SeatingPosition:

    def __init__(
        self,
        id: str,
        student_id: str,
        class_id: str,
        x_pos: int,
        y_pos: int,
        is_custom_position: bool = False,
        last_updated: datetime.datetime | None = None,
    ):
        self.id = id
        self._student_id = student_id
        self._class_id = class_id
        self._x_pos = x_pos
        self._y_pos = y_pos
        self._is_custom_position = is_custom_position
        self._last_updated = last_updated or now()

    # === properties ===

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def class_id(self) -> str:
        return self._class_id

    @property
    def pair(self) -> tuple[str, str]:
        return (self._student_id, self._class_id)

    @property
    def x_pos(self) -> int:
        return self._x_pos

    @x_pos.setter
    def x_pos(self, x_pos: int) -> None:
        self._x_pos = x_pos

    @property
    def y_pos(self) -> int:
        return self._y_pos

    @y_pos.setter
    def y_pos(self, y_pos: int) -> None:
        self._y_pos = y_pos

    @property
    def coordinates(self) -> tuple[int, int]:
        return (self._x_pos, self._y_pos)

    @property
    def is_custom_position(self) -> bool:
        return self._is_custom_position

    @is_custom_position.setter
    def is_custom_position(self, is_custom_position: bool) -> None:
        self._is_custom_position = is_custom_position

    @property
    def last_updated(self) -> datetime.datetime:
        return self._last_updated

    def move_to(self, x_pos: int, y_pos: int, custom: bool = True) -> None:
        self._x_pos = x_pos
        self._y_pos = y_pos
        self._is_custom_position = custom
        self._last_updated = now()

    # === public classmethods ===

    @classmethod
    def create(
        cls,
        student_id: str,
        class_id: str,
        x_pos: int = 0,
        y_pos: int = 0,
        is_custom_position: bool = False,
    ) -> SeatingPosition:
        return cls(
            id=generate_uuid(),
            student_id=student_id,
            class_id=class_id,
            x_pos=x_pos,
            y_pos=y_pos,
            is_custom_position=is_custom_position,
        )

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "student_id": self._student_id,
            "class_id": self._class_id,
            "x_pos": self._x_pos,
            "y_pos": self._y_pos,
            "is_custom_position": self._is_custom_position,
            "last_updated": self._last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> SeatingPosition:
        return cls(
            id=data["id"],
            student_id=data["student_id"],
            class_id=data["class_id"],
            x_pos=data["x_pos"],
            y_pos=data["y_pos"],
            is_custom_position=data.get("is_custom_position", False),
            last_updated=parse_datetime(data.get("last_updated")),
        )

    def copy(self) -> SeatingPosition:
        return SeatingPosition.from_dict(self.to_dict())

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SeatingPosition):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self) -> str:
        return f"SeatingPosition({self.id}, {self._student_id}, {self._class_id}, {self._x_pos}, {self._y_pos}, {self._is_custom_position})"

    def __str__(self) -> str:
        return f"SEAT: ({self._x_pos}, {self._y_pos}), student id: {self._student_id}, class id: {self._class_id}"

    # === data validators ===

    def validate(self) -> None:
        for axis, value in (("x", self._x_pos), ("y", self._y_pos)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError(
                    f"Invalid input. Seat {axis} position must be a whole number of at least 0.",
                    ErrorCode.INVALID_FIELD_VALUE,
                )
