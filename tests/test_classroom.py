# tests/test_classroom.py

import pytest

from core.errors import ValidationError
from core.response import ErrorCode
from models.classroom import DEFAULT_MAX_RATING_VALUE, Classroom


def test_classroom_to_dict(sample_class):
    data = sample_class.to_dict()

    assert data["id"] == "c001"
    assert data["name"] == "5a"
    assert data["note"] == "Bio"
    assert (data["row"], data["column"]) == (1, 1)
    assert data["max_rating_value"] == DEFAULT_MAX_RATING_VALUE
    assert not data["is_archived"]


def test_classroom_from_dict_round_trips_timestamps(sample_class):
    restored = Classroom.from_dict(sample_class.to_dict())

    assert restored == sample_class
    assert restored.created_at == sample_class.created_at


def test_classroom_create_defaults():
    classroom = Classroom.create("7c", 3, 4)

    assert classroom.id
    assert classroom.max_rating_value == 4
    assert classroom.grid_cell == (3, 4)
    assert not classroom.is_archived


def test_classroom_touch_updates_modified_at(sample_class):
    before = sample_class.modified_at
    sample_class.touch()

    assert sample_class.modified_at >= before
    assert sample_class.created_at <= sample_class.modified_at


@pytest.mark.parametrize("name", ["", "   ", "123456789"])
def test_classroom_rejects_bad_names(name):
    with pytest.raises(ValidationError) as exc_info:
        Classroom("c009", name, 1, 1).validate()

    assert exc_info.value.code is ErrorCode.INVALID_FIELD_VALUE


def test_classroom_rejects_long_note():
    with pytest.raises(ValidationError):
        Classroom("c009", "5a", 1, 1, note="far too long").validate()


@pytest.mark.parametrize("row, column", [(0, 1), (13, 1), (1, 0), (1, 6), ("3", 1), (1, 2.0), (True, 1)])
def test_classroom_rejects_cells_outside_grid(row, column):
    with pytest.raises(ValidationError) as exc_info:
        Classroom("c009", "5a", row, column).validate()

    assert exc_info.value.code is ErrorCode.POSITION_UNAVAILABLE


def test_classroom_accepts_grid_corners():
    Classroom("c009", "5a", 1, 1).validate()
    Classroom("c010", "5b", 12, 5).validate()


def test_is_valid_grid_cell_rejects_non_integers():
    assert not Classroom.is_valid_grid_cell("3", 1)
    assert not Classroom.is_valid_grid_cell(1, None)
    assert Classroom.is_valid_grid_cell(3, 1)


def test_archived_classroom_leaves_the_grid(sample_class):
    assert sample_class.occupies_grid

    sample_class.is_archived = True

    assert not sample_class.occupies_grid
