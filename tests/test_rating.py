# tests/test_rating.py

import datetime

import pytest

from core.errors import ValidationError
from core.utils import current_school_year
from models.rating import Rating, RatingValue


def test_rating_to_dict(sample_rating):
    data = sample_rating.to_dict()

    assert data["student_id"] == "s001"
    assert data["class_id"] == "c001"
    assert data["value"] == "+"
    assert not data["is_absent"]
    assert not data["is_archived"]


def test_rating_values_order_best_to_worst():
    assert [v.numeric_value for v in RatingValue] == [4, 3, 2, 1]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("++", RatingValue.EXCELLENT),
        (" - ", RatingValue.FAIR),
        (1, RatingValue.EXCELLENT),
        (4, RatingValue.POOR),
        (None, None),
    ],
)
def test_rating_value_input(raw, expected):
    assert Rating.validate_value_input(raw) == expected


@pytest.mark.parametrize("raw", ["+++", 0, 5, True, 2.5])
def test_rating_value_input_rejects_unknown(raw):
    with pytest.raises(ValidationError):
        Rating.validate_value_input(raw)


def test_rating_from_dict_accepts_legacy_integer():
    rating = Rating.from_dict(
        {"id": "r9", "student_id": "s1", "class_id": "c1", "date": "2025-10-01", "value": 2}
    )

    assert rating.value is RatingValue.GOOD


def test_ensure_school_year_uses_rating_date():
    rating = Rating("r9", "s1", "c1", date=datetime.date(2026, 2, 3))
    rating.ensure_school_year()

    assert rating.school_year == "2025/2026"


def test_ensure_school_year_keeps_existing_value():
    rating = Rating("r9", "s1", "c1", school_year="2020/2021")
    rating.ensure_school_year()

    assert rating.school_year == "2020/2021"


@pytest.mark.parametrize(
    "day, expected",
    [
        (datetime.date(2025, 8, 31), "2024/2025"),
        (datetime.date(2025, 9, 1), "2025/2026"),
        (datetime.date(2026, 1, 15), "2025/2026"),
    ],
)
def test_current_school_year_starts_in_september(day, expected):
    assert current_school_year(day) == expected


def test_absent_rating_without_value_is_valid():
    rating = Rating.create("s1", "c1", is_absent=True)
    rating.validate()

    assert rating.value is None
    assert rating.is_absent
