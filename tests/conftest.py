# tests/conftest.py

import pytest

from core.errors import PersistenceError
from models.classroom import Classroom
from models.rating import Rating, RatingValue
from models.roster import Roster
from models.seating_position import SeatingPosition
from models.student import Student
from storage.engine import PersistentEngine, SQLAlchemyEngine
from storage.snapshot import SnapshotStore


class FlakyEngine(PersistentEngine):
    """
    Wraps a real engine; every call raises `PersistenceError` while `fail` is set.

    Setting `fail_deletes_of` to a record type makes only units of work that delete a record of that
    type fail.
    """

    def __init__(self, inner: PersistentEngine):
        self.inner = inner
        self.fail = False
        self.fail_deletes_of = None

    def _check(self) -> None:
        if self.fail:
            raise PersistenceError("simulated disk failure")

    def fetch_all(self, record_type):
        self._check()
        return self.inner.fetch_all(record_type)

    def fetch(self, record_type, record_id):
        self._check()
        return self.inner.fetch(record_type, record_id)

    def apply(self, saves=(), deletes=()):
        self._check()
        deletes = list(deletes)
        if any(type(record) is self.fail_deletes_of for record in deletes):
            raise PersistenceError("simulated constraint failure")
        self.inner.apply(saves=saves, deletes=deletes)

    def replace_all(self, records):
        self._check()
        self.inner.replace_all(records)

    def is_empty(self):
        self._check()
        return self.inner.is_empty()


@pytest.fixture
def engine():
    engine = SQLAlchemyEngine("sqlite://")
    yield engine
    engine.close()


@pytest.fixture
def flaky_engine(engine):
    return FlakyEngine(engine)


@pytest.fixture
def snapshot(tmp_path):
    return SnapshotStore(str(tmp_path))


@pytest.fixture
def roster(engine, snapshot):
    return Roster(engine=engine, snapshot=snapshot)


@pytest.fixture
def flaky_roster(flaky_engine, snapshot):
    return Roster(engine=flaky_engine, snapshot=snapshot)


@pytest.fixture
def sample_class():
    return Classroom("c001", "5a", 1, 1, note="Bio")


@pytest.fixture
def other_class():
    return Classroom("c002", "6b", 2, 3)


@pytest.fixture
def sample_student():
    return Student("s001", "Anna", "Adler", "c001")


@pytest.fixture
def sample_rating():
    return Rating("r001", "s001", "c001", value=RatingValue.GOOD)


@pytest.fixture
def sample_position():
    return SeatingPosition("p001", "s001", "c001", 2, 1)


@pytest.fixture
def seeded_roster(roster, sample_class, other_class, sample_student):
    roster.add_class(sample_class)
    roster.add_class(other_class)
    roster.add_student(sample_student)
    return roster
