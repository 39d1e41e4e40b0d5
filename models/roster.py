# models/roster.py

"""
The Roster is the central data object of the store and the "source of truth" for every record.

Classes, Students, SeatingPositions, and Ratings are held in one dictionary per record type, keyed by
id and kept in insertion order. Every mutation is validated against the cache, written through to the
persistent engine as one unit of work, and only then applied to the cache and announced on `changes`.

When the persistent engine fails, the Roster switches to a degraded backend status: the change is
applied to the cache and the affected collections are written to the snapshot store instead. If the
engine failed on a write, the cache still holds the whole roster, so each further write first tries to
resynchronize all of it into the engine. If the engine failed on a read, the cache came from a snapshot
that may be stale, so only a journal of the writes made since is replayed into the engine and the
caches are reloaded from it. `recover_primary()` runs the same recovery on demand.

Provides functions for loading the caches, migrating an old snapshot-only install, adding, updating,
archiving, and deleting every record type, cascading deletes, moving a student between classes,
arranging a seating chart, and the uniqueness, position, and capacity checks behind all of them.

Notes:
- Getters return copies; mutating a returned record never changes the cache.
- One reentrant lock serializes every read-modify-write, so concurrent updates to the same id
  are last-writer-wins and never produce a mixed record.
"""

from __future__ import annotations

import logging
import threading
import traceback
from collections.abc import Iterable

from core.errors import NotFoundError, PersistenceError, ValidationError
from core.events import BackendStatus, ChangeKind, ChangeNotifier, EventStream, RecordChange
from core.response import ErrorCode, Response
from core.seating import arrange_in_grid, seating_sort_key
from core.utils import normalize
from models.classroom import Classroom
from models.rating import Rating
from models.seating_position import SeatingPosition
from models.student import MAX_STUDENTS_PER_CLASS, Student
from models.types import RECORD_TYPES, RecordType
from storage.engine import PersistentEngine
from storage.snapshot import SnapshotStore

logger = logging.getLogger(__name__)


class Roster:
    _tracking_maps: dict[type, str] = {
        Classroom: "_classes",
        Student: "_students",
        SeatingPosition: "_seating_positions",
        Rating: "_ratings",
    }

    def __init__(self, engine: PersistentEngine, snapshot: SnapshotStore):
        self._engine = engine
        self._snapshot = snapshot
        self._classes: dict[str, Classroom] = {}
        self._students: dict[str, Student] = {}
        self._seating_positions: dict[str, SeatingPosition] = {}
        self._ratings: dict[str, Rating] = {}
        self._lock = threading.RLock()
        self._backend_status = BackendStatus.PRIMARY
        # true while degraded if the cache held the whole roster when the engine failed
        self._snapshot_complete = False
        self._pending_writes: dict[tuple[type, str], tuple[RecordType, bool]] = {}
        self.changes = ChangeNotifier()
        self.status_changes: EventStream[BackendStatus] = EventStream()

    # === properties ===

    # --- core data structures ---

    @property
    def classes(self) -> dict[str, Classroom]:
        return self._copy_collection(Classroom)

    @property
    def students(self) -> dict[str, Student]:
        return self._copy_collection(Student)

    @property
    def seating_positions(self) -> dict[str, SeatingPosition]:
        return self._copy_collection(SeatingPosition)

    @property
    def ratings(self) -> dict[str, Rating]:
        return self._copy_collection(Rating)

    # --- status markers ---

    @property
    def backend_status(self) -> BackendStatus:
        return self._backend_status

    @property
    def is_degraded(self) -> bool:
        return self._backend_status is BackendStatus.DEGRADED

    # === loading and migration ===

    def load_all(self) -> Response:
        """
        Replaces every cache with the records held by the backends.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if every collection was loaded from the engine or the snapshot.
                    - False if both backends failed to read.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, the source the records were loaded from.
                - error (ErrorCode | str | None):
                    - `ErrorCode.PERSISTENCE_ERROR` if neither backend could be read.
                - status_code (int | None):
                    - 200 on success
                    - 500 on failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "source" (str): Either "engine" or "snapshot".
                        - "counts" (dict[str, int]): Number of records loaded per collection.
                    - On failure:
                        - None

        Notes:
            - If the snapshot holds writes the engine never received, the snapshot wins and is pushed
              back into the engine. If that push fails, the Roster starts out degraded.
            - If the engine cannot be read, the snapshot is loaded and the Roster is marked degraded.
              Writes made from then on are journaled and replayed into the engine once it is readable
              again, since the snapshot may be older than the engine.
            - The caches are left untouched on failure.
        """
        with self._lock:
            try:
                if self._snapshot_has_pending_sync():
                    loaded = self._snapshot.read_all()
                    source = "snapshot"

                    try:
                        self._resync_engine(loaded)

                    except PersistenceError as e:
                        logger.warning(f"Snapshot holds unsynced writes and the engine rejected them: {e}")
                        self._snapshot_complete = True
                        self._set_backend_status(BackendStatus.DEGRADED)

                else:
                    loaded, source = self._read_engine_or_snapshot()

            except PersistenceError as e:
                logger.error(f"Failed to load the roster from either backend: {e}")

                return Response.fail(
                    detail=f"Failed to load the roster: {e}",
                    error=ErrorCode.PERSISTENCE_ERROR,
                    status_code=500,
                )

            self._load_caches(loaded)

            counts = {
                attr_name.lstrip("_"): len(getattr(self, attr_name))
                for attr_name in self._tracking_maps.values()
            }

        logger.debug(f"Roster loaded from {source}: {counts}")

        return Response.succeed(
            detail=f"Roster successfully loaded from the {source}.",
            data={
                "source": source,
                "counts": counts,
            },
        )

    def migrate_from_snapshot(self) -> Response:
        """
        Imports an older snapshot-only install into the persistent engine, once.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the migration ran, was already complete, or had nothing to do.
                    - False if either backend failed.
                - detail (str | None):
                    - A human-readable description of what happened.
                - error (ErrorCode | str | None):
                    - `ErrorCode.PERSISTENCE_ERROR` if a backend read or write failed.
                - status_code (int | None):
                    - 200 on success
                    - 500 on failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "migrated" (bool): True only if records were copied into the engine.
                    - On failure:
                        - None

        Notes:
            - The migration marker is set whenever the check completes, so the import runs at most once.
            - An engine that already holds records is never overwritten.
        """
        with self._lock:
            try:
                if self._snapshot.has_completed_migration():
                    return Response.succeed(
                        detail="Snapshot migration already completed.",
                        data={"migrated": False},
                    )

                if not self._snapshot.has_data():
                    self._snapshot.mark_migration_complete()

                    return Response.succeed(
                        detail="No snapshot data to migrate.",
                        data={"migrated": False},
                    )

                if not self._engine.is_empty():
                    self._snapshot.mark_migration_complete()

                    logger.info("Persistent engine already holds records; snapshot migration skipped")

                    return Response.succeed(
                        detail="Persistent engine already holds records; nothing migrated.",
                        data={"migrated": False},
                    )

                records = self._snapshot.read_all()
                self._engine.replace_all(records)
                self._snapshot.mark_migration_complete()

            except PersistenceError as e:
                logger.error(f"Snapshot migration failed: {e}")

                return Response.fail(
                    detail=f"Snapshot migration failed: {e}",
                    error=ErrorCode.PERSISTENCE_ERROR,
                    status_code=500,
                )

        logger.info(
            "Migrated snapshot into the persistent engine: "
            + ", ".join(f"{len(v)} {t.__name__}" for t, v in records.items())
        )

        return Response.succeed(
            detail="Snapshot successfully migrated into the persistent engine.",
            data={"migrated": True},
        )

    def recover_primary(self) -> Response:
        """
        Hands the writes made while degraded back to the persistent engine and leaves degraded mode.

        Returns:
            Response: Succeeds immediately when the backend is already primary. Fails with
            `ErrorCode.PERSISTENCE_ERROR` (status 500) if the engine still rejects the write, in which
            case the Roster stays degraded.

        Notes:
            - If the engine failed on a write, the cache held the whole roster at that point and is
              pushed into the engine in full.
            - If the engine failed on a read, the cache came from a possibly stale snapshot. Only the
              journaled writes are replayed, and the caches are then reloaded from the engine.
        """
        with self._lock:
            if not self.is_degraded:
                return Response.succeed(detail="Persistent engine is already the primary backend.")

            try:
                if self._snapshot_complete:
                    self._resync_engine(self._cache_state())
                else:
                    self._replay_and_reload(self._pending_writes)

            except PersistenceError as e:
                logger.warning(f"Persistent engine is still unavailable: {e}")

                return Response.fail(
                    detail=f"Persistent engine is still unavailable: {e}",
                    error=ErrorCode.PERSISTENCE_ERROR,
                    status_code=500,
                )

        return Response.succeed(detail="Persistent engine restored as the primary backend.")

    # === write path ===

    def _commit(
        self,
        saves: Iterable[RecordType] = (),
        deletes: Iterable[RecordType] = (),
    ) -> None:
        """
        Persists one unit of work and applies it to the cache.

        Args:
            saves (Iterable[RecordType]): Records to insert or overwrite by id.
            deletes (Iterable[RecordType]): Records to remove by id.

        Raises:
            PersistenceError: If the engine and the snapshot fallback both reject the write. The cache
                is unchanged in that case.

        Notes:
            - The caller must hold `self._lock`.
            - Nothing is published here; callers announce their own changes once this returns.
            - While degraded, the engine only ever receives the whole cache if the cache is known to
              hold the whole roster. Otherwise the journaled writes are replayed on top of whatever
              the engine holds.
        """
        saves = [record.copy() for record in saves]
        deletes = list(deletes)

        if not self.is_degraded:
            try:
                self._engine.apply(saves=saves, deletes=deletes)

            except PersistenceError as e:
                logger.warning(f"Persistent engine write failed, falling back to snapshot: {e}")

                self._commit_to_snapshot(saves, deletes, write_everything=True)
                self._snapshot_complete = True
                self._set_backend_status(BackendStatus.DEGRADED)

            else:
                self._apply_to_cache(saves, deletes)

            return

        if self._snapshot_complete:
            try:
                self._resync_engine(self._cache_state(saves, deletes))

            except PersistenceError as e:
                logger.debug(f"Persistent engine still unavailable, writing to snapshot: {e}")

                self._commit_to_snapshot(saves, deletes)

            else:
                self._apply_to_cache(saves, deletes)

            return

        pending = self._pending_with(saves, deletes)

        try:
            self._replay_and_reload(pending)

        except PersistenceError as e:
            logger.debug(f"Persistent engine still unavailable, journaling write to snapshot: {e}")

            self._commit_to_snapshot(saves, deletes, pending=pending)

    def _commit_to_snapshot(
        self,
        saves: list[RecordType],
        deletes: list[RecordType],
        write_everything: bool = False,
        pending: dict[tuple[type, str], tuple[RecordType, bool]] | None = None,
    ) -> None:
        if write_everything:
            touched = list(RECORD_TYPES)
        else:
            touched = [
                record_type
                for record_type in RECORD_TYPES
                if any(type(record) is record_type for record in saves + deletes)
            ]

        backup = {
            record_type: dict(self._get_tracking_dict(record_type))
            for record_type in touched
        }

        self._apply_to_cache(saves, deletes)

        try:
            for record_type in touched:
                self._snapshot.write_collection(
                    record_type, list(self._get_tracking_dict(record_type).values())
                )

            if write_everything:
                self._snapshot.mark_pending_sync()

            if pending is not None:
                self._snapshot.write_pending_writes(list(pending.values()))

        except PersistenceError as e:
            for record_type, previous in backup.items():
                dictionary = self._get_tracking_dict(record_type)
                dictionary.clear()
                dictionary.update(previous)

            logger.error(f"Snapshot fallback write failed; change discarded: {e}")

            raise

        if pending is not None:
            self._pending_writes = pending

    def _apply_to_cache(
        self, saves: list[RecordType], deletes: list[RecordType]
    ) -> None:
        for record in deletes:
            self._get_tracking_dict(type(record)).pop(record.id, None)

        for record in saves:
            self._get_tracking_dict(type(record))[record.id] = record

    def _resync_engine(self, state: dict[type, list[RecordType]]) -> None:
        self._engine.replace_all(state)

        try:
            self._snapshot.clear_pending_sync()

        except PersistenceError as e:
            logger.warning(f"Could not clear the snapshot sync marker: {e}")

        self._snapshot_complete = False
        self._drop_pending_writes()
        self._set_backend_status(BackendStatus.PRIMARY)

    # --- degraded writes journal ---

    def _pending_with(
        self, saves: list[RecordType], deletes: list[RecordType]
    ) -> dict[tuple[type, str], tuple[RecordType, bool]]:
        # net effect per id, applied in the same order as the cache
        pending = dict(self._pending_writes)

        for record in deletes:
            pending[(type(record), record.id)] = (record.copy(), True)

        for record in saves:
            pending[(type(record), record.id)] = (record, False)

        return pending

    def _replay_and_reload(
        self, pending: dict[tuple[type, str], tuple[RecordType, bool]]
    ) -> None:
        """
        Replays journaled writes through the engine and reloads every cache from it.

        Raises:
            PersistenceError: If the engine rejects the replay or cannot be read back. Nothing in the
                Roster changes in that case, and the replay is safe to repeat.
        """
        self._replay_pending(pending)
        loaded = self._fetch_engine()

        self._load_caches(loaded)
        self._drop_pending_writes()
        self._set_backend_status(BackendStatus.PRIMARY)

        logger.info(f"Replayed {len(pending)} journaled write(s) into the persistent engine")

    def _replay_pending(
        self, pending: dict[tuple[type, str], tuple[RecordType, bool]]
    ) -> None:
        self._engine.apply(
            saves=[record for record, deleted in pending.values() if not deleted],
            deletes=[record for record, deleted in pending.values() if deleted],
        )

    def _drop_pending_writes(self) -> None:
        self._pending_writes = {}

        try:
            self._snapshot.clear_pending_writes()

        except PersistenceError as e:
            logger.warning(f"Could not clear the pending writes journal: {e}")

    # --- loading helpers ---

    def _fetch_engine(self) -> dict[type, list[RecordType]]:
        return {
            record_type: self._engine.fetch_all(record_type)
            for record_type in RECORD_TYPES
        }

    def _load_caches(self, loaded: dict[type, list[RecordType]]) -> None:
        for record_type in RECORD_TYPES:
            dictionary = self._get_tracking_dict(record_type)
            dictionary.clear()
            dictionary.update(
                {record.id: record for record in loaded.get(record_type, [])}
            )

    def _read_engine_or_snapshot(self) -> tuple[dict[type, list[RecordType]], str]:
        try:
            journal = self._snapshot.read_pending_writes()

        except PersistenceError as e:
            logger.warning(f"Could not read the pending writes journal: {e}")
            journal = []

        pending = {(type(record), record.id): (record, deleted) for record, deleted in journal}

        try:
            if pending:
                self._replay_pending(pending)

            loaded = self._fetch_engine()

        except PersistenceError as e:
            logger.warning(f"Persistent engine read failed, loading snapshot instead: {e}")

            loaded = self._snapshot.read_all()

            # the snapshot may be older than the engine, so it must never overwrite it
            self._snapshot_complete = False
            self._pending_writes = pending
            self._set_backend_status(BackendStatus.DEGRADED)

            return loaded, "snapshot"

        if pending:
            logger.info(f"Replayed {len(pending)} journaled write(s) into the persistent engine")

        self._drop_pending_writes()
        self._set_backend_status(BackendStatus.PRIMARY)

        return loaded, "engine"

    def _snapshot_has_pending_sync(self) -> bool:
        try:
            return self._snapshot.has_pending_sync()

        except PersistenceError as e:
            logger.warning(f"Could not read the snapshot sync marker: {e}")
            return False

    def _set_backend_status(self, status: BackendStatus) -> None:
        if status is self._backend_status:
            return

        self._backend_status = status

        if status is BackendStatus.DEGRADED:
            logger.warning("Roster is running degraded: writes go to the snapshot store only")
        else:
            logger.info("Persistent engine is the primary backend again")

        self.status_changes.publish(status)

    def _publish(self, record_type: type, kind: ChangeKind, record_id: str) -> None:
        self.changes.publish(RecordChange(record_type, kind, record_id))

    # === lookup helpers ===

    def _get_tracking_dict(self, record_type: type) -> dict[str, RecordType]:
        """
        Return the internal tracking dictionary corresponding to the given record type.

        Raises:
            TypeError: If the record type is not recognized.
        """
        try:
            return getattr(self, self._tracking_maps[record_type])

        except KeyError:
            raise TypeError(f"Unrecognized record type: {record_type}")

    def _copy_collection(self, record_type: type) -> dict[str, RecordType]:
        with self._lock:
            return {
                record_id: record.copy()
                for record_id, record in self._get_tracking_dict(record_type).items()
            }

    def _cache_state(
        self,
        saves: list[RecordType] | None = None,
        deletes: list[RecordType] | None = None,
    ) -> dict[type, list[RecordType]]:
        # the whole cache as it would look after the pending change
        state = {}

        for record_type in RECORD_TYPES:
            dictionary = dict(self._get_tracking_dict(record_type))

            for record in deletes or []:
                if type(record) is record_type:
                    dictionary.pop(record.id, None)

            for record in saves or []:
                if type(record) is record_type:
                    dictionary[record.id] = record

            state[record_type] = list(dictionary.values())

        return state

    def _require(self, record_type: type, record_id: str) -> RecordType:
        record = self._get_tracking_dict(record_type).get(record_id)

        if record is None:
            raise NotFoundError(f"No {record_type.__name__} with id {record_id} exists.")

        return record

    def _find_position(self, student_id: str, class_id: str) -> SeatingPosition | None:
        return next(
            (
                position
                for position in self._seating_positions.values()
                if position.student_id == student_id and position.class_id == class_id
            ),
            None,
        )

    def _failure(self, prefix: str, error: Exception) -> Response:
        if isinstance(error, ValidationError):
            logger.warning(f"{prefix}: {error}")

            return Response.fail(detail=f"{prefix}: {error}", error=error.code)

        if isinstance(error, NotFoundError):
            logger.warning(f"{prefix}: {error}")

            return Response.fail(
                detail=f"{prefix}: {error}",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        if isinstance(error, PersistenceError):
            return Response.fail(
                detail=f"{prefix}: {error}",
                error=ErrorCode.PERSISTENCE_ERROR,
                status_code=500,
            )

        logger.exception(f"{prefix}: unexpected error")

        return Response.fail(
            detail=f"Unexpected error: {error}",
            error=ErrorCode.INTERNAL_ERROR,
            trace=traceback.format_exc(),
        )

    # === generic lookup ===

    def find(self, record_type: type, record_id: str) -> RecordType | None:
        """Returns a copy of the record of the given type and id, or None."""
        with self._lock:
            record = self._get_tracking_dict(record_type).get(record_id)
            return record.copy() if record else None

    def clear_all(self) -> Response:
        """
        Deletes every record of every type in one unit of work.

        Returns:
            Response: Succeeds with "counts" (dict[str, int]) of the records removed, or fails with
            `ErrorCode.PERSISTENCE_ERROR` if neither backend accepted the write.
        """
        try:
            with self._lock:
                # children first, mirroring the cascade order
                doomed = [
                    record
                    for record_type in reversed(RECORD_TYPES)
                    for record in self._get_tracking_dict(record_type).values()
                ]
                counts = {
                    attr_name.lstrip("_"): len(getattr(self, attr_name))
                    for attr_name in self._tracking_maps.values()
                }

                self._commit(deletes=doomed)

        except Exception as e:
            return self._failure("Failed to clear the roster", e)

        else:
            for record in doomed:
                self._publish(type(record), ChangeKind.DELETED, record.id)

            logger.info(f"Roster cleared: {counts}")

            return Response.succeed(
                detail="Every record was removed from the roster.",
                data={"counts": counts},
            )

    # === class manipulation ===

    def add_class(self, classroom: Classroom) -> Response:
        """
        Adds a `Classroom` to the roster.

        Args:
            classroom (Classroom): The class to add.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the class was persisted and cached.
                    - False if a field rule fails, the name or grid cell is taken, or both backends fail.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a simple confirmation message.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_FIELD_VALUE` if a field rule fails.
                    - `ErrorCode.DUPLICATE_NAME` if another active class uses the name.
                    - `ErrorCode.POSITION_UNAVAILABLE` if the grid cell is invalid or occupied.
                    - `ErrorCode.VALIDATION_FAILED` if the id is already in use.
                    - `ErrorCode.PERSISTENCE_ERROR` if both backends fail.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 400 on validation failure
                    - 500 on persistence failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "record" (Classroom): A copy of the stored class.
                    - On failure:
                        - None

        Notes:
            - Name and cell checks are repeated here even when the caller already ran
              `is_class_name_unique()` and `is_position_available()`.
            - Archived classes do not occupy a name or a grid cell.
        """
        try:
            with self._lock:
                classroom.validate()

                if classroom.id in self._classes:
                    raise ValidationError(f"A class with id {classroom.id} already exists.")

                if not classroom.is_archived:
                    self.require_unique_class_name(classroom.name)
                    self.require_available_position(classroom.row, classroom.column)

                record = classroom.copy()
                self._commit(saves=[record])

        except Exception as e:
            return self._failure("Failed to add class", e)

        else:
            self._publish(Classroom, ChangeKind.CREATED, record.id)

            logger.info(f"Class added: {record.name} at {record.grid_cell}")

            return Response.succeed(
                detail="Class successfully added to the roster.",
                data={"record": record.copy()},
            )

    def update_class(self, classroom: Classroom) -> Response:
        """
        Replaces the stored class with the given one, matched by id.

        Returns:
            Response: On success "record" holds the stored copy with a fresh `modified_at`. Fails with
            `ErrorCode.NOT_FOUND` (404) for an unknown id, and with the same codes as `add_class()` when
            the name, cell, or fields are invalid. Names and cells are checked against every other
            active class.
        """
        try:
            with self._lock:
                existing = self._require(Classroom, classroom.id)
                classroom.validate()

                if not classroom.is_archived:
                    self.require_unique_class_name(classroom.name, except_class_id=classroom.id)
                    self.require_available_position(
                        classroom.row, classroom.column, except_class_id=classroom.id
                    )

                record = classroom.copy()
                record.touch()
                self._commit(saves=[record])

        except Exception as e:
            return self._failure("Failed to update class", e)

        else:
            kind = self._lifecycle_kind(existing.is_archived, record.is_archived)
            self._publish(Classroom, kind, record.id)

            logger.info(f"Class {kind.value}: {record.name}")

            return Response.succeed(
                detail=f"Class successfully {kind.value}.",
                data={"record": record.copy()},
            )

    def archive_class(self, class_id: str) -> Response:
        return self._set_class_archived(class_id, True)

    def restore_class(self, class_id: str) -> Response:
        return self._set_class_archived(class_id, False)

    def _set_class_archived(self, class_id: str, is_archived: bool) -> Response:
        with self._lock:
            existing = self._classes.get(class_id)

            if existing is None:
                return self._failure(
                    "Failed to change class status",
                    NotFoundError(f"No Classroom with id {class_id} exists."),
                )

            classroom = existing.copy()
            classroom.is_archived = is_archived

            return self.update_class(classroom)

    def delete_class(self, class_id: str) -> Response:
        """
        Deletes a class and, best effort, everything that references it.

        Args:
            class_id (str): The id of the class to delete.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the class itself was deleted.
                    - False if the class does not exist or its own delete fails on both backends.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a confirmation naming how many dependents could not be removed.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if no class has the given id.
                    - `ErrorCode.PERSISTENCE_ERROR` if the class delete fails on both backends.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 404 if the class cannot be found
                    - 500 on persistence failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "record" (Classroom): The deleted class.
                        - "skipped" (int): Dependents whose delete failed and were left in place.
                    - On failure:
                        - None

        Notes:
            - Order: every student of the class (archived included, each with its own cascade), then
              any seating positions and ratings still pointing at the class, then the class.
            - Each dependent is its own commit; a failure is logged and skipped.
        """
        try:
            with self._lock:
                classroom = self._require(Classroom, class_id)
                skipped = 0

                for student_id in [
                    s.id for s in self._students.values() if s.class_id == class_id
                ]:
                    student_response = self.delete_student(student_id)

                    if not student_response.success:
                        logger.warning(
                            f"Cascade delete of student {student_id} failed: {student_response.detail}"
                        )
                        skipped += 1

                leftovers = [
                    record
                    for dictionary in (self._seating_positions, self._ratings)
                    for record in dictionary.values()
                    if record.class_id == class_id
                ]

                for record in leftovers:
                    if not self._delete_best_effort(record):
                        skipped += 1

                self._commit(deletes=[classroom])

        except Exception as e:
            return self._failure("Failed to delete class", e)

        else:
            self._publish(Classroom, ChangeKind.DELETED, class_id)

            logger.info(f"Class deleted: {classroom.name} ({skipped} dependent(s) skipped)")

            return Response.succeed(
                detail=f"Class successfully deleted; {skipped} dependent record(s) could not be removed.",
                data={
                    "record": classroom.copy(),
                    "skipped": skipped,
                },
            )

    # --- class lookups ---

    def get_class(self, class_id: str) -> Classroom | None:
        return self.find(Classroom, class_id)

    def get_classes(self, include_archived: bool = False) -> list[Classroom]:
        """Returns copies of the classes ordered by grid row, then column, then name."""
        with self._lock:
            classes = [
                c.copy()
                for c in self._classes.values()
                if include_archived or not c.is_archived
            ]

        return sorted(classes, key=lambda c: (c.row, c.column, c.name.casefold()))

    def get_class_at(self, row: int, column: int) -> Classroom | None:
        with self._lock:
            for classroom in self._classes.values():
                if classroom.occupies_grid and classroom.grid_cell == (row, column):
                    return classroom.copy()

        return None

    def is_class_name_unique(self, name: str, except_class_id: str | None = None) -> bool:
        try:
            self.require_unique_class_name(name, except_class_id)

        except ValidationError:
            return False

        return True

    def is_position_available(
        self, row: int, column: int, except_class_id: str | None = None
    ) -> bool:
        try:
            self.require_available_position(row, column, except_class_id)

        except ValidationError:
            return False

        return True

    def find_similar_class_names(
        self, name: str, except_class_id: str | None = None
    ) -> list[str]:
        """
        Lists the names of active classes whose name contains `name`, case-insensitively.

        Used to warn about near-duplicates such as "5a" next to "5a Bio" before a save.
        """
        needle = normalize(name)

        with self._lock:
            return [
                c.name
                for c in self._classes.values()
                if not c.is_archived
                and c.id != except_class_id
                and needle in normalize(c.name)
            ]

    # === student manipulation ===

    def add_student(self, student: Student) -> Response:
        """
        Adds a `Student` to the roster.

        Args:
            student (Student): The student to add. Its `class_id` must name an existing class.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the student was persisted and cached.
                    - False if validation fails, the class is missing or full, the name is taken, or
                      both backends fail.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a simple confirmation message.
                - error (ErrorCode | str | None):
                    - `ErrorCode.MISSING_REQUIRED_FIELD` if both names or the class id are missing.
                    - `ErrorCode.NOT_FOUND` if the class does not exist.
                    - `ErrorCode.DUPLICATE_NAME` if an active student in the class has the same name.
                    - `ErrorCode.CAPACITY_EXCEEDED` if the class already has 40 active students.
                    - `ErrorCode.VALIDATION_FAILED` if the id is already in use.
                    - `ErrorCode.PERSISTENCE_ERROR` if both backends fail.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 400 on validation failure
                    - 404 if the class cannot be found
                    - 500 on persistence failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "record" (Student): A copy of the stored student.
                    - On failure:
                        - None

        Notes:
            - Every rejection happens before any write; the student collection is left unchanged.
            - Names compare trimmed and case-insensitively. Archived students are ignored for both the
              name and the capacity check, and an archived student is added without either check.
        """
        try:
            with self._lock:
                student.validate()
                self._require(Classroom, student.class_id)

                if student.id in self._students:
                    raise ValidationError(f"A student with id {student.id} already exists.")

                if not student.is_archived:
                    self.require_unique_student_name(
                        student.first_name, student.last_name, student.class_id
                    )
                    self.require_class_capacity(student.class_id)

                record = student.copy()
                self._commit(saves=[record])

        except Exception as e:
            return self._failure("Failed to add student", e)

        else:
            self._publish(Student, ChangeKind.CREATED, record.id)

            logger.info(f"Student added: {record.full_name}")

            return Response.succeed(
                detail="Student successfully added to the roster.",
                data={"record": record.copy()},
            )

    def update_student(self, student: Student) -> Response:
        """
        Replaces the stored student with the given one, matched by id.

        Returns:
            Response: On success "record" holds the stored copy. Fails with `ErrorCode.NOT_FOUND` for an
            unknown student or class, `ErrorCode.DUPLICATE_NAME` if another active student of the target
            class has the name, and `ErrorCode.CAPACITY_EXCEEDED` if the student joins a full class by
            changing `class_id` or by being restored.
        """
        try:
            with self._lock:
                existing = self._require(Student, student.id)
                student.validate()
                self._require(Classroom, student.class_id)

                if not student.is_archived:
                    self.require_unique_student_name(
                        student.first_name,
                        student.last_name,
                        student.class_id,
                        except_student_id=student.id,
                    )

                    joins_class = (
                        existing.is_archived or existing.class_id != student.class_id
                    )
                    if joins_class:
                        self.require_class_capacity(student.class_id)

                record = student.copy()
                self._commit(saves=[record])

        except Exception as e:
            return self._failure("Failed to update student", e)

        else:
            kind = self._lifecycle_kind(existing.is_archived, record.is_archived)
            self._publish(Student, kind, record.id)

            logger.info(f"Student {kind.value}: {record.full_name}")

            return Response.succeed(
                detail=f"Student successfully {kind.value}.",
                data={"record": record.copy()},
            )

    def archive_student(self, student_id: str) -> Response:
        return self._set_student_archived(student_id, True)

    def restore_student(self, student_id: str) -> Response:
        return self._set_student_archived(student_id, False)

    def _set_student_archived(self, student_id: str, is_archived: bool) -> Response:
        with self._lock:
            existing = self._students.get(student_id)

            if existing is None:
                return self._failure(
                    "Failed to change student status",
                    NotFoundError(f"No Student with id {student_id} exists."),
                )

            student = existing.copy()
            student.is_archived = is_archived

            return self.update_student(student)

    def delete_student(self, student_id: str) -> Response:
        """
        Deletes a student after deleting, best effort, its seating positions and ratings.

        Returns:
            Response: On success "record" holds the deleted student and "skipped" counts the dependents
            whose delete failed. Fails with `ErrorCode.NOT_FOUND` (404) for an unknown id and
            `ErrorCode.PERSISTENCE_ERROR` (500) if the student's own delete fails on both backends.
        """
        try:
            with self._lock:
                student = self._require(Student, student_id)

                dependents = [
                    record
                    for dictionary in (self._seating_positions, self._ratings)
                    for record in dictionary.values()
                    if record.student_id == student_id
                ]

                skipped = sum(
                    1 for record in dependents if not self._delete_best_effort(record)
                )

                self._commit(deletes=[student])

        except Exception as e:
            return self._failure("Failed to delete student", e)

        else:
            self._publish(Student, ChangeKind.DELETED, student_id)

            logger.info(f"Student deleted: {student.full_name}")

            return Response.succeed(
                detail="Student successfully deleted.",
                data={
                    "record": student.copy(),
                    "skipped": skipped,
                },
            )

    def _delete_best_effort(self, record: RecordType) -> bool:
        try:
            self._commit(deletes=[record])

        except PersistenceError as e:
            logger.warning(f"Cascade delete of {record!r} failed and was skipped: {e}")
            return False

        self._publish(type(record), ChangeKind.DELETED, record.id)

        return True

    def move_student_to_class(self, student_id: str, new_class_id: str) -> Response:
        """
        Moves a student into another class as one atomic change.

        Args:
            student_id (str): The student to move.
            new_class_id (str): The target class.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the whole move was persisted.
                    - False if a pre-check fails or both backends reject the write.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a confirmation naming the student and the target class.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the student or the target class does not exist.
                    - `ErrorCode.VALIDATION_FAILED` if the target is archived or is the current class.
                    - `ErrorCode.DUPLICATE_NAME` if the target already has an active student of that name.
                    - `ErrorCode.CAPACITY_EXCEEDED` if the target class is full.
                    - `ErrorCode.PERSISTENCE_ERROR` if both backends fail.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 400 on validation failure
                    - 404 if the student or class cannot be found
                    - 500 on persistence failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "record" (Student): The moved student.
                        - "position" (SeatingPosition): The new seat at (0, 0) in the target class.
                        - "archived_ratings" (int): How many old-class ratings were archived.
                    - On failure:
                        - None

        Notes:
            - The old-class ratings are archived, never deleted.
            - Archiving the ratings, reassigning the class, dropping the old seat and creating the new one
              commit together. Either all of it is visible afterwards or none of it is.
        """
        try:
            with self._lock:
                student = self._require(Student, student_id)
                target = self._require(Classroom, new_class_id)
                old_class_id = student.class_id

                if old_class_id == new_class_id:
                    raise ValidationError(f"{student.full_name} is already in class {target.name}.")

                if target.is_archived:
                    raise ValidationError(f"Cannot move a student into archived class {target.name}.")

                if not student.is_archived:
                    self.require_unique_student_name(
                        student.first_name,
                        student.last_name,
                        new_class_id,
                        except_student_id=student_id,
                    )
                    self.require_class_capacity(new_class_id)

                archived_ratings = []
                for rating in self._ratings.values():
                    if (
                        rating.student_id == student_id
                        and rating.class_id == old_class_id
                        and not rating.is_archived
                    ):
                        archived = rating.copy()
                        archived.is_archived = True
                        archived_ratings.append(archived)

                moved = student.copy()
                moved.class_id = new_class_id

                deletes = []
                old_position = self._find_position(student_id, old_class_id)
                if old_position:
                    deletes.append(old_position)

                new_position = SeatingPosition.create(student_id, new_class_id, 0, 0)

                # keeps the (student, class) pair unique if a stale seat survived an earlier move
                stale_position = self._find_position(student_id, new_class_id)
                if stale_position:
                    new_position.id = stale_position.id

                self._commit(saves=[*archived_ratings, moved, new_position], deletes=deletes)

        except Exception as e:
            return self._failure("Failed to move student", e)

        else:
            for rating in archived_ratings:
                self._publish(Rating, ChangeKind.ARCHIVED, rating.id)
            if old_position:
                self._publish(SeatingPosition, ChangeKind.DELETED, old_position.id)
            self._publish(SeatingPosition, ChangeKind.CREATED, new_position.id)
            self._publish(Student, ChangeKind.MOVED, student_id)

            logger.info(
                f"Student moved: {moved.full_name} to {target.name} "
                f"({len(archived_ratings)} rating(s) archived)"
            )

            return Response.succeed(
                detail=f"{moved.full_name} successfully moved to {target.name}.",
                data={
                    "record": moved.copy(),
                    "position": new_position.copy(),
                    "archived_ratings": len(archived_ratings),
                },
            )

    # --- student lookups ---

    def get_student(self, student_id: str) -> Student | None:
        return self.find(Student, student_id)

    def get_students_for_class(
        self, class_id: str, include_archived: bool = False
    ) -> list[Student]:
        """Returns copies of the class's students ordered by "last, first" name."""
        with self._lock:
            students = [
                s.copy()
                for s in self._students.values()
                if s.class_id == class_id and (include_archived or not s.is_archived)
            ]

        return sorted(students, key=seating_sort_key)

    def get_student_count_for_class(self, class_id: str) -> int:
        with self._lock:
            return sum(
                1
                for s in self._students.values()
                if s.class_id == class_id and not s.is_archived
            )

    def is_student_name_unique(
        self,
        first_name: str,
        last_name: str,
        class_id: str,
        except_student_id: str | None = None,
    ) -> bool:
        try:
            self.require_unique_student_name(first_name, last_name, class_id, except_student_id)

        except ValidationError:
            return False

        return True

    # === seating manipulation ===

    def add_seating_position(self, position: SeatingPosition) -> Response:
        """
        Stores a seat for a (student, class) pair, replacing the pair's existing seat if there is one.

        Returns:
            Response: On success "record" holds the stored seat. A replacement keeps the existing seat's
            id. Fails with `ErrorCode.NOT_FOUND` if the student or class does not exist, and with
            `ErrorCode.INVALID_FIELD_VALUE` for negative or non-integer coordinates.
        """
        try:
            with self._lock:
                position.validate()
                self._require(Student, position.student_id)
                self._require(Classroom, position.class_id)

                record = position.copy()
                existing = self._find_position(position.student_id, position.class_id)
                if existing:
                    record.id = existing.id

                self._commit(saves=[record])

        except Exception as e:
            return self._failure("Failed to add seating position", e)

        else:
            kind = ChangeKind.UPDATED if existing else ChangeKind.CREATED
            self._publish(SeatingPosition, kind, record.id)

            logger.debug(f"Seating position {kind.value}: {record.pair} at {record.coordinates}")

            return Response.succeed(
                detail="Seating position successfully saved.",
                data={"record": record.copy()},
            )

    def update_seating_position(self, position: SeatingPosition) -> Response:
        try:
            with self._lock:
                self._require(SeatingPosition, position.id)
                position.validate()
                self._require(Student, position.student_id)
                self._require(Classroom, position.class_id)

                other = self._find_position(position.student_id, position.class_id)
                if other and other.id != position.id:
                    raise ValidationError(
                        "Another seating position already exists for this student and class."
                    )

                record = position.copy()
                self._commit(saves=[record])

        except Exception as e:
            return self._failure("Failed to update seating position", e)

        else:
            self._publish(SeatingPosition, ChangeKind.UPDATED, record.id)

            return Response.succeed(
                detail="Seating position successfully updated.",
                data={"record": record.copy()},
            )

    def delete_seating_position(self, position_id: str) -> Response:
        try:
            with self._lock:
                position = self._require(SeatingPosition, position_id)
                self._commit(deletes=[position])

        except Exception as e:
            return self._failure("Failed to delete seating position", e)

        else:
            self._publish(SeatingPosition, ChangeKind.DELETED, position_id)

            return Response.succeed(
                detail="Seating position successfully deleted.",
                data={"record": position.copy()},
            )

    def arrange_seating_in_grid(self, class_id: str, columns: int) -> Response:
        """
        Lays out the class's active students alphabetically on a grid `columns` seats wide.

        Args:
            class_id (str): The class to arrange.
            columns (int): Seats per row; must be at least 1.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if every seat now matches the layout.
                    - False if the class is missing, `columns` is invalid, or both backends fail.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, how many seats changed.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the class does not exist.
                    - `ErrorCode.INVALID_FIELD_VALUE` if `columns` is less than 1.
                    - `ErrorCode.PERSISTENCE_ERROR` if both backends fail.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 400 on validation failure
                    - 404 if the class cannot be found
                    - 500 on persistence failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "positions" (list[SeatingPosition]): The class's seats in layout order.
                        - "updated" (int): How many seats were created or moved.
                    - On failure:
                        - None

        Notes:
            - Existing seats are moved in place and keep their ids. Arranged seats are not custom.
            - Seats that already sit in their slot and are not custom are left alone, so arranging twice
              writes nothing the second time.
            - All seat changes commit as one unit of work.
        """
        try:
            with self._lock:
                self._require(Classroom, class_id)

                if isinstance(columns, bool) or not isinstance(columns, int) or columns < 1:
                    raise ValidationError(
                        "Invalid input. Grid arrangement needs at least one column.",
                        ErrorCode.INVALID_FIELD_VALUE,
                    )

                students = [s for s in self._students.values() if s.class_id == class_id]
                slots = arrange_in_grid(students, columns)

                arranged: list[SeatingPosition] = []
                saves: list[SeatingPosition] = []

                for slot in slots:
                    existing = self._find_position(slot.student_id, class_id)

                    if (
                        existing
                        and existing.coordinates == (slot.x_pos, slot.y_pos)
                        and not existing.is_custom_position
                    ):
                        arranged.append(existing)
                        continue

                    if existing:
                        record = existing.copy()
                        record.move_to(slot.x_pos, slot.y_pos, custom=False)
                    else:
                        record = SeatingPosition.create(
                            slot.student_id, class_id, slot.x_pos, slot.y_pos
                        )

                    arranged.append(record)
                    saves.append(record)

                if saves:
                    self._commit(saves=saves)

        except Exception as e:
            return self._failure("Failed to arrange seating", e)

        else:
            for record in saves:
                self._publish(SeatingPosition, ChangeKind.UPDATED, record.id)

            logger.info(f"Seating arranged for class {class_id}: {len(saves)} seat(s) changed")

            return Response.succeed(
                detail=f"Seating arranged; {len(saves)} seat(s) changed.",
                data={
                    "positions": [record.copy() for record in arranged],
                    "updated": len(saves),
                },
            )

    # --- seating lookups ---

    def get_seating_position(self, student_id: str, class_id: str) -> SeatingPosition | None:
        with self._lock:
            position = self._find_position(student_id, class_id)
            return position.copy() if position else None

    def get_seating_positions_for_class(self, class_id: str) -> list[SeatingPosition]:
        with self._lock:
            return [
                p.copy() for p in self._seating_positions.values() if p.class_id == class_id
            ]

    # === rating manipulation ===

    def add_rating(self, rating: Rating) -> Response:
        """
        Adds a `Rating` to the roster.

        Returns:
            Response: On success "record" holds the stored rating, with `school_year` filled in from its
            date when it was left empty. Fails with `ErrorCode.NOT_FOUND` if the student or class does
            not exist, and `ErrorCode.VALIDATION_FAILED` if the id is already in use.
        """
        try:
            with self._lock:
                rating.validate()
                self._require(Student, rating.student_id)
                self._require(Classroom, rating.class_id)

                if rating.id in self._ratings:
                    raise ValidationError(f"A rating with id {rating.id} already exists.")

                record = rating.copy()
                record.ensure_school_year()
                self._commit(saves=[record])

        except Exception as e:
            return self._failure("Failed to add rating", e)

        else:
            self._publish(Rating, ChangeKind.CREATED, record.id)

            logger.debug(f"Rating added: {record}")

            return Response.succeed(
                detail="Rating successfully added to the roster.",
                data={"record": record.copy()},
            )

    def update_rating(self, rating: Rating) -> Response:
        try:
            with self._lock:
                existing = self._require(Rating, rating.id)
                rating.validate()
                self._require(Student, rating.student_id)
                self._require(Classroom, rating.class_id)

                record = rating.copy()
                record.ensure_school_year()
                self._commit(saves=[record])

        except Exception as e:
            return self._failure("Failed to update rating", e)

        else:
            kind = self._lifecycle_kind(existing.is_archived, record.is_archived)
            self._publish(Rating, kind, record.id)

            return Response.succeed(
                detail=f"Rating successfully {kind.value}.",
                data={"record": record.copy()},
            )

    def archive_rating(self, rating_id: str) -> Response:
        with self._lock:
            existing = self._ratings.get(rating_id)

            if existing is None:
                return self._failure(
                    "Failed to archive rating",
                    NotFoundError(f"No Rating with id {rating_id} exists."),
                )

            rating = existing.copy()
            rating.is_archived = True

            return self.update_rating(rating)

    def delete_rating(self, rating_id: str) -> Response:
        try:
            with self._lock:
                rating = self._require(Rating, rating_id)
                self._commit(deletes=[rating])

        except Exception as e:
            return self._failure("Failed to delete rating", e)

        else:
            self._publish(Rating, ChangeKind.DELETED, rating_id)

            return Response.succeed(
                detail="Rating successfully deleted.",
                data={"record": rating.copy()},
            )

    # --- rating lookups ---

    def get_rating(self, rating_id: str) -> Rating | None:
        return self.find(Rating, rating_id)

    def get_ratings_for_student(
        self,
        student_id: str,
        include_archived: bool = False,
        class_id: str | None = None,
    ) -> list[Rating]:
        """Returns copies of the student's ratings, oldest first, optionally limited to one class."""
        with self._lock:
            ratings = [
                r.copy()
                for r in self._ratings.values()
                if r.student_id == student_id
                and (class_id is None or r.class_id == class_id)
                and (include_archived or not r.is_archived)
            ]

        return sorted(ratings, key=lambda r: (r.date, r.created_at))

    def get_ratings_for_class(
        self, class_id: str, include_archived: bool = False
    ) -> list[Rating]:
        with self._lock:
            ratings = [
                r.copy()
                for r in self._ratings.values()
                if r.class_id == class_id and (include_archived or not r.is_archived)
            ]

        return sorted(ratings, key=lambda r: (r.date, r.created_at))

    # === data validators ===

    def require_unique_class_name(self, name: str, except_class_id: str | None = None) -> None:
        """
        Validates that no other active class shares the given name.

        Raises:
            ValidationError: With `ErrorCode.DUPLICATE_NAME` if the trimmed, lowercased name is taken.
        """
        normalized = normalize(name)

        with self._lock:
            if any(
                normalize(c.name) == normalized
                for c in self._classes.values()
                if not c.is_archived and c.id != except_class_id
            ):
                raise ValidationError(
                    f"A class with the name '{name}' already exists.",
                    ErrorCode.DUPLICATE_NAME,
                )

    def require_available_position(
        self, row: int, column: int, except_class_id: str | None = None
    ) -> None:
        """
        Validates that the grid cell is within bounds and not held by another active class.

        Raises:
            ValidationError: With `ErrorCode.POSITION_UNAVAILABLE` if the cell is invalid or occupied.
        """
        Classroom.validate_grid_cell(row, column)

        with self._lock:
            occupant = next(
                (
                    c
                    for c in self._classes.values()
                    if c.occupies_grid
                    and c.id != except_class_id
                    and c.grid_cell == (row, column)
                ),
                None,
            )

        if occupant:
            raise ValidationError(
                f"Grid cell ({row}, {column}) is already taken by class {occupant.name}.",
                ErrorCode.POSITION_UNAVAILABLE,
            )

    def require_unique_student_name(
        self,
        first_name: str,
        last_name: str,
        class_id: str,
        except_student_id: str | None = None,
    ) -> None:
        """
        Validates that no other active student of the class has the same first and last name.

        Raises:
            ValidationError: With `ErrorCode.DUPLICATE_NAME` if the trimmed, lowercased pair is taken.
        """
        normalized = (normalize(first_name), normalize(last_name))

        with self._lock:
            if any(
                s.normalized_name == normalized
                for s in self._students.values()
                if s.class_id == class_id
                and not s.is_archived
                and s.id != except_student_id
            ):
                full_name = f"{first_name or ''} {last_name or ''}".strip()

                raise ValidationError(
                    f"A student named '{full_name}' already exists in this class.",
                    ErrorCode.DUPLICATE_NAME,
                )

    def require_class_capacity(self, class_id: str) -> None:
        """
        Raises:
            ValidationError: With `ErrorCode.CAPACITY_EXCEEDED` if the class already holds the maximum
                number of active students.
        """
        if self.get_student_count_for_class(class_id) >= MAX_STUDENTS_PER_CLASS:
            raise ValidationError(
                f"The class already has the maximum of {MAX_STUDENTS_PER_CLASS} active students.",
                ErrorCode.CAPACITY_EXCEEDED,
            )

    @staticmethod
    def _lifecycle_kind(was_archived: bool, is_archived: bool) -> ChangeKind:
        if is_archived and not was_archived:
            return ChangeKind.ARCHIVED
        if was_archived and not is_archived:
            return ChangeKind.RESTORED
        return ChangeKind.UPDATED
