# models/classroom.py

"""
Represents a class (a teaching group) placed on the weekly timetable grid.

Each `Classroom` occupies one cell of a 12 x 5 grid (row = period, column = weekday) while it
is active. Archiving a class frees its cell and its name for reuse without deleting any data.

Includes functionality for:
- Field-level validation of name, note and grid coordinates
- Serializing to and from JSON-compatible dictionaries
- Creating fresh instances with a random id and default timestamps

Notes:
- Cross-record rules (unique active name, unique active cell) are enforced by the `Roster`.
- The model is named `Classroom` because `class` is a reserved word; records are still
  referred to as "classes" throughout the store.
"""

from __future__ import annotations

import datetime

from core.errors import ValidationError
from core.response import ErrorCode
from core.utils import generate_uuid, now, parse_datetime

MAX_NAME_LENGTH = 8
MAX_NOTE_LENGTH = 10
GRID_ROWS = 12
GRID_COLUMNS = 5
DEFAULT_MAX_RATING_VALUE = 4


class Classroom:

    def __init__(
        self,
        id: str,
        name: str,
        row: int,
        column: int,
        note: str | None = None,
        max_rating_value: int = DEFAULT_MAX_RATING_VALUE,
        is_archived: bool = False,
        created_at: datetime.datetime | None = None,
        modified_at: datetime.datetime | None = None,
    ):
        timestamp = now()
        self._id = id
        self._name = name
        self._row = row
        self._column = column
        self._note = note
        self._max_rating_value = max_rating_value
        self._is_archived = is_archived
        self._created_at = created_at or timestamp
        self._modified_at = modified_at or timestamp

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = name

    @property
    def display_name(self) -> str:
        return self._name

    @property
    def note(self) -> str | None:
        return self._note

    @note.setter
    def note(self, note: str | None) -> None:
        self._note = note

    @property
    def row(self) -> int:
        return self._row

    @row.setter
    def row(self, row: int) -> None:
        self._row = row

    @property
    def column(self) -> int:
        return self._column

    @column.setter
    def column(self, column: int) -> None:
        self._column = column

    @property
    def grid_cell(self) -> tuple[int, int]:
        return (self._row, self._column)

    # archived classes give their cell back to the timetable grid
    @property
    def occupies_grid(self) -> bool:
        return not self._is_archived

    @property
    def max_rating_value(self) -> int:
        return self._max_rating_value

    @max_rating_value.setter
    def max_rating_value(self, max_rating_value: int) -> None:
        self._max_rating_value = max_rating_value

    @property
    def is_archived(self) -> bool:
        return self._is_archived

    @is_archived.setter
    def is_archived(self, is_archived: bool) -> None:
        self._is_archived = is_archived

    @property
    def status(self) -> str:
        return "'ARCHIVED'" if self._is_archived else "'ACTIVE'"

    @property
    def created_at(self) -> datetime.datetime:
        return self._created_at

    @property
    def modified_at(self) -> datetime.datetime:
        return self._modified_at

    def touch(self) -> None:
        self._modified_at = now()

    # === public classmethods ===

    @classmethod
    def create(
        cls,
        name: str,
        row: int,
        column: int,
        note: str | None = None,
        max_rating_value: int = DEFAULT_MAX_RATING_VALUE,
    ) -> Classroom:
        return cls(
            id=generate_uuid(),
            name=name,
            row=row,
            column=column,
            note=note,
            max_rating_value=max_rating_value,
        )

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "name": self._name,
            "note": self._note,
            "row": self._row,
            "column": self._column,
            "max_rating_value": self._max_rating_value,
            "is_archived": self._is_archived,
            "created_at": self._created_at.isoformat(),
            "modified_at": self._modified_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Classroom:
        return cls(
            id=data["id"],
            name=data["name"],
            note=data.get("note"),
            row=data["row"],
            column=data["column"],
            max_rating_value=data.get("max_rating_value", DEFAULT_MAX_RATING_VALUE),
            is_archived=data.get("is_archived", False),
            created_at=parse_datetime(data.get("created_at")),
            modified_at=parse_datetime(data.get("modified_at")),
        )

    def copy(self) -> Classroom:
        return Classroom.from_dict(self.to_dict())

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Classroom):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self) -> str:
        return f"Classroom({self._id}, {self._name}, {self._row}, {self._column}, {self._is_archived})"

    def __str__(self) -> str:
        return f"CLASS: {self._name} at ({self._row}, {self._column}) - (ID: {self._id})"

    # === data validators ===

    def validate(self) -> None:
        """
        Validates the field-level rules of a `Classroom`.

        Ensures:
            - The name is non-empty after trimming and at most 8 characters.
            - The note, if present, is at most 10 characters.
            - The grid cell lies within rows 1-12 and columns 1-5.
            - The maximum rating value is a positive integer.

        Raises:
            ValidationError: With `ErrorCode.INVALID_FIELD_VALUE` or
                `ErrorCode.POSITION_UNAVAILABLE` describing the first rule violated.
        """
        Classroom.validate_name_input(self._name)

        if self._note is not None and len(self._note) > MAX_NOTE_LENGTH:
            raise ValidationError(
                f"Invalid input. Class note must be at most {MAX_NOTE_LENGTH} characters.",
                ErrorCode.INVALID_FIELD_VALUE,
            )

        Classroom.validate_grid_cell(self._row, self._column)

        if (
            isinstance(self._max_rating_value, bool)
            or not isinstance(self._max_rating_value, int)
            or self._max_rating_value < 1
        ):
            raise ValidationError(
                "Invalid input. Maximum rating value must be a positive whole number.",
                ErrorCode.INVALID_FIELD_VALUE,
            )

    @staticmethod
    def validate_name_input(name: str) -> str:
        if name is None or not name.strip():
            raise ValidationError(
                "Invalid input. Class name cannot be empty.",
                ErrorCode.INVALID_FIELD_VALUE,
            )

        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"Invalid input. Class name must be at most {MAX_NAME_LENGTH} characters.",
                ErrorCode.INVALID_FIELD_VALUE,
            )

        return name

    @staticmethod
    def is_valid_grid_cell(row: int, column: int) -> bool:
        for value in (row, column):
            if isinstance(value, bool) or not isinstance(value, int):
                return False

        return 1 <= row <= GRID_ROWS and 1 <= column <= GRID_COLUMNS

    @staticmethod
    def validate_grid_cell(row: int, column: int) -> None:
        if not Classroom.is_valid_grid_cell(row, column):
            raise ValidationError(
                f"Invalid grid cell ({row}, {column}). Rows run from 1 to {GRID_ROWS} and columns from 1 to {GRID_COLUMNS}.",
                ErrorCode.POSITION_UNAVAILABLE,
            )
