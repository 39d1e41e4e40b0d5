# models/student.py

"""
Represents a student enrolled in one class.

Stores identifying information (first and last name), the owning class id, optional notes,
and the entry/exit dates of the enrollment. Archiving a student hides them from active views
without deleting their seating positions or rating history.

Includes functionality for:
- Validating that at least one name part is present
- Deriving display and sort names
- Serializing to and from JSON-compatible dictionaries

Notes:
- Uniqueness of names within a class and the per-class capacity are enforced by the `Roster`.
"""

from __future__ import annotations

import datetime

from core.errors import ValidationError
from core.response import ErrorCode
from core.utils import generate_uuid, normalize, parse_date

MAX_STUDENTS_PER_CLASS = 40


class Student:

    def __init__(
        self,
        id: str,
        first_name: str,
        last_name: str,
        class_id: str,
        notes: str | None = None,
        entry_date: datetime.date | None = None,
        exit_date: datetime.date | None = None,
        is_archived: bool = False,
    ):
        self._id: str = id
        self._first_name: str = first_name or ""
        self._last_name: str = last_name or ""
        self._class_id: str = class_id
        self._notes: str | None = notes
        self._entry_date: datetime.date = entry_date or datetime.date.today()
        self._exit_date: datetime.date | None = exit_date
        self._is_archived: bool = is_archived

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def first_name(self) -> str:
        return self._first_name

    @first_name.setter
    def first_name(self, first_name: str) -> None:
        self._first_name = first_name or ""

    @property
    def last_name(self) -> str:
        return self._last_name

    @last_name.setter
    def last_name(self, last_name: str) -> None:
        self._last_name = last_name or ""

    @property
    def full_name(self) -> str:
        if not self._first_name:
            return self._last_name
        if not self._last_name:
            return self._first_name
        return f"{self._first_name} {self._last_name}"

    @property
    def display_name(self) -> str:
        return self.full_name

    @property
    def sortable_name(self) -> str:
        if not self._last_name:
            return self._first_name
        return f"{self._last_name}, {self._first_name}"

    @property
    def normalized_name(self) -> tuple[str, str]:
        return (normalize(self._first_name), normalize(self._last_name))

    @property
    def class_id(self) -> str:
        return self._class_id

    @class_id.setter
    def class_id(self, class_id: str) -> None:
        self._class_id = class_id

    @property
    def notes(self) -> str | None:
        return self._notes

    @notes.setter
    def notes(self, notes: str | None) -> None:
        self._notes = notes

    @property
    def entry_date(self) -> datetime.date:
        return self._entry_date

    @property
    def exit_date(self) -> datetime.date | None:
        return self._exit_date

    @exit_date.setter
    def exit_date(self, exit_date: datetime.date | None) -> None:
        self._exit_date = exit_date

    @property
    def is_archived(self) -> bool:
        return self._is_archived

    @is_archived.setter
    def is_archived(self, is_archived: bool) -> None:
        self._is_archived = is_archived

    @property
    def status(self) -> str:
        return "'ARCHIVED'" if self._is_archived else "'ACTIVE'"

    # === public classmethods ===

    @classmethod
    def create(
        cls,
        first_name: str,
        last_name: str,
        class_id: str,
        notes: str | None = None,
    ) -> Student:
        return cls(
            id=generate_uuid(),
            first_name=first_name,
            last_name=last_name,
            class_id=class_id,
            notes=notes,
        )

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "first_name": self._first_name,
            "last_name": self._last_name,
            "class_id": self._class_id,
            "notes": self._notes,
            "entry_date": self._entry_date.isoformat(),
            "exit_date": self._exit_date.isoformat() if self._exit_date else None,
            "is_archived": self._is_archived,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Student:
        return cls(
            id=data["id"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            class_id=data["class_id"],
            notes=data.get("notes"),
            entry_date=parse_date(data.get("entry_date")),
            exit_date=parse_date(data.get("exit_date")),
            is_archived=data.get("is_archived", False),
        )

    def copy(self) -> Student:
        return Student.from_dict(self.to_dict())

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Student):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self) -> str:
        return f"Student({self._id}, {self._first_name}, {self._last_name}, {self._class_id}, {self._is_archived})"

    def __str__(self) -> str:
        return f"STUDENT: {self.full_name} - (ID: {self._id})"

    # === data validators ===

    def validate(self) -> None:
        """
        Validates the field-level rules of a `Student`.

        Raises:
            ValidationError: If both the first and last name are blank, or the class id is missing.
        """
        if not self._first_name.strip() and not self._last_name.strip():
            raise ValidationError(
                "Invalid input. A student needs a first name or a last name.",
                ErrorCode.MISSING_REQUIRED_FIELD,
            )

        if not self._class_id:
            raise ValidationError(
                "Invalid input. A student must belong to a class.",
                ErrorCode.MISSING_REQUIRED_FIELD,
            )
