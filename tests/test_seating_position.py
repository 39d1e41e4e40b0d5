# tests/test_seating_position.py

import pytest

from core.errors import ValidationError
from models.seating_position import SeatingPosition


def test_seating_position_to_dict(sample_position):
    data = sample_position.to_dict()

    assert data["id"] == "p001"
    assert (data["x_pos"], data["y_pos"]) == (2, 1)
    assert not data["is_custom_position"]


def test_move_to_marks_custom_by_default(sample_position):
    sample_position.move_to(4, 0)

    assert sample_position.coordinates == (4, 0)
    assert sample_position.is_custom_position


def test_move_to_can_clear_custom_flag(sample_position):
    sample_position.move_to(4, 0)
    sample_position.move_to(0, 0, custom=False)

    assert not sample_position.is_custom_position


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (1.5, 0)])
def test_seating_position_rejects_bad_coordinates(x, y):
    with pytest.raises(ValidationError):
        SeatingPosition("p9", "s1", "c1", x, y).validate()


def test_seating_position_pair(sample_position):
    assert sample_position.pair == ("s001", "c001")
