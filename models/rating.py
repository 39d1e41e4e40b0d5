# models/rating.py

"""
Represents one participation rating given to a student during a class session.

Each `Rating` records the student and class ids, the session date, an optional ordinal value,
and flags for absence and archiving. Ratings form an append-only history: moving a student to
another class archives the ratings from the old class instead of deleting them.

Includes functionality for:
- Decoding rating values from their symbol ("++", "+", "-", "--") or a legacy integer
- Defaulting the school year from the current date
- Serializing to and from JSON-compatible dictionaries

Notes:
- A rating may be both absent and valued; averaging and reporting are handled by collaborators.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Any

from core.errors import ValidationError
from core.response import ErrorCode
from core.utils import current_school_year, generate_uuid, now, parse_date, parse_datetime


class RatingValue(str, Enum):
    # best to worst
    EXCELLENT = "++"
    GOOD = "+"
    FAIR = "-"
    POOR = "--"

    @property
    def numeric_value(self) -> int:
        return _NUMERIC_VALUES[self]

    @classmethod
    def from_legacy(cls, value: int) -> RatingValue | None:
        return _LEGACY_VALUES.get(value)


_NUMERIC_VALUES = {
    RatingValue.EXCELLENT: 4,
    RatingValue.GOOD: 3,
    RatingValue.FAIR: 2,
    RatingValue.POOR: 1,
}

_LEGACY_VALUES = {
    1: RatingValue.EXCELLENT,
    2: RatingValue.GOOD,
    3: RatingValue.FAIR,
    4: RatingValue.POOR,
}


class Rating:

    def __init__(
        self,
        id: str,
        student_id: str,
        class_id: str,
        date: datetime.date | None = None,
        value: RatingValue | None = None,
        is_absent: bool = False,
        is_archived: bool = False,
        created_at: datetime.datetime | None = None,
        school_year: str | None = None,
    ):
        self.id = id
        self._student_id = student_id
        self._class_id = class_id
        self._date = date or datetime.date.today()
        # value uses setter method for input normalization
        self.value = value
        self._is_absent = is_absent
        self._is_archived = is_archived
        self._created_at = created_at or now()
        self._school_year = school_year or ""

    # === properties ===

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def class_id(self) -> str:
        return self._class_id

    @property
    def date(self) -> datetime.date:
        return self._date

    @property
    def value(self) -> RatingValue | None:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self._value = Rating.validate_value_input(value)

    @property
    def is_absent(self) -> bool:
        return self._is_absent

    @is_absent.setter
    def is_absent(self, is_absent: bool) -> None:
        self._is_absent = is_absent

    @property
    def is_archived(self) -> bool:
        return self._is_archived

    @is_archived.setter
    def is_archived(self, is_archived: bool) -> None:
        self._is_archived = is_archived

    @property
    def created_at(self) -> datetime.datetime:
        return self._created_at

    @property
    def school_year(self) -> str:
        return self._school_year

    @school_year.setter
    def school_year(self, school_year: str) -> None:
        self._school_year = school_year or ""

    def ensure_school_year(self) -> None:
        if not self._school_year:
            self._school_year = current_school_year(self._date)

    # === public classmethods ===

    @classmethod
    def create(
        cls,
        student_id: str,
        class_id: str,
        value: RatingValue | None = None,
        date: datetime.date | None = None,
        is_absent: bool = False,
    ) -> Rating:
        return cls(
            id=generate_uuid(),
            student_id=student_id,
            class_id=class_id,
            date=date,
            value=value,
            is_absent=is_absent,
        )

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "student_id": self._student_id,
            "class_id": self._class_id,
            "date": self._date.isoformat(),
            "value": self._value.value if self._value else None,
            "is_absent": self._is_absent,
            "is_archived": self._is_archived,
            "created_at": self._created_at.isoformat(),
            "school_year": self._school_year,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Rating:
        return cls(
            id=data["id"],
            student_id=data["student_id"],
            class_id=data["class_id"],
            date=parse_date(data.get("date")),
            value=data.get("value"),
            is_absent=data.get("is_absent", False),
            is_archived=data.get("is_archived", False),
            created_at=parse_datetime(data.get("created_at")),
            school_year=data.get("school_year"),
        )

    def copy(self) -> Rating:
        return Rating.from_dict(self.to_dict())

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rating):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self) -> str:
        return f"Rating({self.id}, {self._student_id}, {self._class_id}, {self._date}, {self._value}, {self._is_absent}, {self._is_archived})"

    def __str__(self) -> str:
        value = self._value.value if self._value else "none"
        return f"RATING: {value} on {self._date.isoformat()}, student id: {self._student_id}, class id: {self._class_id}"

    # === data validators ===

    def validate(self) -> None:
        if not self._student_id or not self._class_id:
            raise ValidationError(
                "Invalid input. A rating must reference a student and a class.",
                ErrorCode.MISSING_REQUIRED_FIELD,
            )

    @staticmethod
    def validate_value_input(value: Any) -> RatingValue | None:
        """
        Validates and normalizes input for a `Rating` value.

        Accepts:
            - None, meaning "no value".
            - A `RatingValue` member or its symbol string ("++", "+", "-", "--").
            - A legacy integer from 1 (best) to 4 (worst).

        Args:
            value (Any): The input value to validate.

        Returns:
            The matching `RatingValue`, or None.

        Raises:
            ValidationError: If the input matches none of the accepted forms.
        """
        if value is None or isinstance(value, RatingValue):
            return value

        if isinstance(value, int) and not isinstance(value, bool):
            legacy = RatingValue.from_legacy(value)
            if legacy is not None:
                return legacy

        elif isinstance(value, str):
            try:
                return RatingValue(value.strip())
            except ValueError:
                pass

        raise ValidationError(
            f"Invalid input. Rating value must be one of ++, +, -, -- (got {value!r}).",
            ErrorCode.INVALID_FIELD_VALUE,
        )
