# models/types.py

"""
Holds TypeVar definition for simplifying type checks, plus the ordered tuple of record types.
"""

from typing import TypeVar

from .classroom import Classroom
from .rating import Rating
from .seating_position import SeatingPosition
from .student import Student

RecordType = TypeVar("RecordType", Classroom, Student, SeatingPosition, Rating)

# parents before children, the order collections load and persist in
RECORD_TYPES: tuple[type, ...] = (Classroom, Student, SeatingPosition, Rating)
