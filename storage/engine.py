# storage/engine.py

"""
Persistent engine adapters for the roster store.

`PersistentEngine` is the contract the `Roster` writes through: typed fetch/save/delete keyed by
record id, plus `apply()` for a multi-record unit of work that either commits entirely or not
at all. Every backend failure surfaces as `PersistenceError`, so the store can fall back to its
snapshot without knowing which library raised.

`SQLAlchemyEngine` implements the contract with SQLAlchemy Core tables whose columns mirror the
entity fields one to one. SQLite is the default target; any SQLAlchemy URL works.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    create_engine,
    delete,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.errors import PersistenceError
from core.utils import parse_date, parse_datetime
from models.classroom import MAX_NAME_LENGTH, MAX_NOTE_LENGTH, Classroom
from models.rating import Rating
from models.seating_position import SeatingPosition
from models.student import Student
from models.types import RECORD_TYPES, RecordType

logger = logging.getLogger(__name__)

metadata = MetaData()

classes_table = Table(
    "classes",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(MAX_NAME_LENGTH), nullable=False),
    Column("note", String(MAX_NOTE_LENGTH)),
    Column("row", Integer, nullable=False),
    Column("column", Integer, nullable=False),
    Column("max_rating_value", Integer, nullable=False, default=4),
    Column("is_archived", Boolean, nullable=False, default=False),
    Column("created_at", DateTime, nullable=False),
    Column("modified_at", DateTime, nullable=False),
    Index("ix_classes_row_column", "row", "column"),
)

students_table = Table(
    "students",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("first_name", String(255), nullable=False),
    Column("last_name", String(255), nullable=False),
    Column("class_id", String(36), nullable=False, index=True),
    Column("notes", Text),
    Column("entry_date", Date, nullable=False),
    Column("exit_date", Date),
    Column("is_archived", Boolean, nullable=False, default=False, index=True),
)

seating_positions_table = Table(
    "seating_positions",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("student_id", String(36), nullable=False, index=True),
    Column("class_id", String(36), nullable=False, index=True),
    Column("x_pos", Integer, nullable=False),
    Column("y_pos", Integer, nullable=False),
    Column("is_custom_position", Boolean, nullable=False, default=False),
    Column("last_updated", DateTime, nullable=False),
    UniqueConstraint("student_id", "class_id", name="uq_seating_student_class"),
)

ratings_table = Table(
    "ratings",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("student_id", String(36), nullable=False, index=True),
    Column("class_id", String(36), nullable=False, index=True),
    Column("date", Date, nullable=False, index=True),
    Column("value", String(2)),
    Column("is_absent", Boolean, nullable=False, default=False),
    Column("is_archived", Boolean, nullable=False, default=False),
    Column("created_at", DateTime, nullable=False),
    Column("school_year", String(9), nullable=False),
    Index("ix_ratings_student_class_date", "student_id", "class_id", "date"),
)

TABLES: dict[type, Table] = {
    Classroom: classes_table,
    Student: students_table,
    SeatingPosition: seating_positions_table,
    Rating: ratings_table,
}


class PersistentEngine(ABC):
    """
    Durable storage keyed by record id, one collection per record type.

    Notes:
        - Implementations must raise `PersistenceError` (and only that) on backend failure.
        - `apply()` is the unit of work: all listed deletes and saves commit together or not at all.
    """

    @abstractmethod
    def fetch_all(self, record_type: type) -> list[RecordType]: ...

    @abstractmethod
    def fetch(self, record_type: type, record_id: str) -> RecordType | None: ...

    @abstractmethod
    def apply(
        self,
        saves: Iterable[RecordType] = (),
        deletes: Iterable[RecordType] = (),
    ) -> None: ...

    @abstractmethod
    def replace_all(self, records: dict[type, list[RecordType]]) -> None: ...

    def save(self, record: RecordType) -> RecordType:
        self.apply(saves=[record])
        return record

    def delete(self, record: RecordType) -> None:
        self.apply(deletes=[record])

    def is_empty(self) -> bool:
        return all(not self.fetch_all(record_type) for record_type in RECORD_TYPES)

    def close(self) -> None:
        pass


class SQLAlchemyEngine(PersistentEngine):

    def __init__(self, database_url: str, echo: bool = False):
        engine_kwargs: dict = {"echo": echo, "future": True}

        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}

            # one shared connection keeps a single in-memory database visible to every thread
            if database_url.rstrip("/").endswith(":memory:") or database_url in (
                "sqlite://",
                "sqlite+pysqlite://",
            ):
                engine_kwargs["poolclass"] = StaticPool

        try:
            self._engine = create_engine(database_url, **engine_kwargs)
            metadata.create_all(self._engine)

        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"Could not open database {database_url}: {e}") from e

        self._session_factory = sessionmaker(
            bind=self._engine, autoflush=False, autocommit=False, future=True
        )

        logger.info(f"Persistent engine ready at {self._engine.url!r}")

    # === sessions ===

    @contextmanager
    def db_session(self) -> Iterator[Session]:
        """
        Yields a session whose transaction commits on exit and rolls back on error.

        Raises:
            PersistenceError: If the session, the statements, or the commit fail.
        """
        session = self._session_factory()

        try:
            yield session
            session.commit()

        except (SQLAlchemyError, OSError) as e:
            session.rollback()
            raise PersistenceError(f"Database operation failed: {e}") from e

        except Exception:
            session.rollback()
            raise

        finally:
            session.close()

    # === reads ===

    def fetch_all(self, record_type: type) -> list[RecordType]:
        table = self._table_for(record_type)

        with self.db_session() as session:
            rows = session.execute(select(table)).mappings().all()

        return [record_type.from_dict(dict(row)) for row in rows]

    def fetch(self, record_type: type, record_id: str) -> RecordType | None:
        table = self._table_for(record_type)

        with self.db_session() as session:
            row = (
                session.execute(select(table).where(table.c.id == record_id))
                .mappings()
                .first()
            )

        return record_type.from_dict(dict(row)) if row else None

    def count(self, record_type: type) -> int:
        table = self._table_for(record_type)

        with self.db_session() as session:
            return session.execute(select(func.count()).select_from(table)).scalar_one()

    def is_empty(self) -> bool:
        return all(self.count(record_type) == 0 for record_type in RECORD_TYPES)

    # === writes ===

    def apply(
        self,
        saves: Iterable[RecordType] = (),
        deletes: Iterable[RecordType] = (),
    ) -> None:
        saves = list(saves)
        deletes = list(deletes)

        with self.db_session() as session:
            for record in deletes:
                table = self._table_for(type(record))
                session.execute(delete(table).where(table.c.id == record.id))

            for record in saves:
                self._upsert(session, record)

        logger.debug(f"Committed {len(saves)} save(s) and {len(deletes)} delete(s)")

    def replace_all(self, records: dict[type, list[RecordType]]) -> None:
        with self.db_session() as session:
            for record_type in reversed(RECORD_TYPES):
                session.execute(delete(self._table_for(record_type)))

            for record_type in RECORD_TYPES:
                for record in records.get(record_type, []):
                    session.execute(
                        insert(self._table_for(record_type)).values(
                            **self._to_row(record)
                        )
                    )

        logger.info("Replaced every collection in the persistent engine")

    def close(self) -> None:
        self._engine.dispose()

    # === helper methods ===

    def _upsert(self, session: Session, record: RecordType) -> None:
        table = self._table_for(type(record))
        row = self._to_row(record)

        result = session.execute(
            update(table).where(table.c.id == row["id"]).values(**row)
        )

        if result.rowcount == 0:
            session.execute(insert(table).values(**row))

    def _to_row(self, record: RecordType) -> dict:
        table = self._table_for(type(record))
        row = record.to_dict()

        for column in table.columns:
            if isinstance(column.type, DateTime):
                row[column.name] = parse_datetime(row[column.name])
            elif isinstance(column.type, Date):
                row[column.name] = parse_date(row[column.name])

        return row

    @staticmethod
    def _table_for(record_type: type) -> Table:
        try:
            return TABLES[record_type]

        except KeyError:
            raise TypeError(f"Unrecognized record type: {record_type}")
