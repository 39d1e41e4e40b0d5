# storage/snapshot.py

"""
The fallback snapshot store: whole-collection JSON files in one directory.

Each record type is serialized as a single list (`classes.json`, `students.json`,
`seating_positions.json`, `ratings.json`) and overwritten in full on every write, alongside a
`metadata.json` that tracks the one-time migration into the persistent engine and a
`pending_writes.json` journal of writes made while the engine could not be read.

The store is not transactional. It exists so the `Roster` has somewhere durable to put writes
while the persistent engine is failing, and so older installs that only ever wrote snapshots
can be migrated.
"""

from __future__ import annotations

import datetime
import json
import logging
import os
from typing import Any

from core.errors import PersistenceError
from models.classroom import Classroom
from models.rating import Rating
from models.seating_position import SeatingPosition
from models.student import Student
from models.types import RECORD_TYPES, RecordType

logger = logging.getLogger(__name__)

COLLECTION_FILES: dict[type, str] = {
    Classroom: "classes.json",
    Student: "students.json",
    SeatingPosition: "seating_positions.json",
    Rating: "ratings.json",
}

METADATA_FILE = "metadata.json"
PENDING_WRITES_FILE = "pending_writes.json"


class SnapshotStore:

    def __init__(self, dir_path: str):
        self._dir_path = dir_path

    @property
    def path(self) -> str:
        return self._dir_path

    # === collections ===

    def write_collection(self, record_type: type, records: list[RecordType]) -> None:
        """
        Serializes one whole collection to disk, replacing the previous snapshot.

        Args:
            record_type (type): The record class the collection holds.
            records (list[RecordType]): Every record of that type, in cache order.

        Raises:
            PersistenceError: If the directory is missing or unwritable, or a record is not JSON serializable.
        """
        filename = self._filename_for(record_type)

        try:
            self._write_json(filename, [record.to_dict() for record in records])

        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to write snapshot {filename}: {e}") from e

        logger.debug(f"Snapshot {filename} written with {len(records)} record(s)")

    def read_collection(self, record_type: type) -> list[RecordType]:
        """
        Deserializes one whole collection from disk.

        Args:
            record_type (type): The record class to read.

        Returns:
            The records in file order, or an empty list if no snapshot exists yet.

        Raises:
            PersistenceError: If the file cannot be read or does not contain a list of valid records.
        """
        filename = self._filename_for(record_type)

        try:
            data = self._read_json(filename)

        except FileNotFoundError:
            return []

        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read snapshot {filename}: {e}") from e

        if not isinstance(data, list):
            raise PersistenceError(f"Expected {filename} to contain a list.")

        try:
            return [record_type.from_dict(item) for item in data]

        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Invalid record in snapshot {filename}: {e}") from e

    def write_all(self, records: dict[type, list[RecordType]]) -> None:
        for record_type in RECORD_TYPES:
            self.write_collection(record_type, records.get(record_type, []))

    def read_all(self) -> dict[type, list[RecordType]]:
        return {
            record_type: self.read_collection(record_type)
            for record_type in RECORD_TYPES
        }

    def has_data(self) -> bool:
        return any(
            os.path.exists(os.path.join(self._dir_path, filename))
            for filename in COLLECTION_FILES.values()
        )

    # === migration marker ===

    def has_completed_migration(self) -> bool:
        return bool(self._read_metadata().get("migrated_at"))

    def mark_migration_complete(self) -> None:
        self._update_metadata(migrated_at=datetime.datetime.now().isoformat())

    # --- pending sync marker ---

    # set while the snapshot holds writes the persistent engine has not seen

    def has_pending_sync(self) -> bool:
        return bool(self._read_metadata().get("pending_sync"))

    def mark_pending_sync(self) -> None:
        self._update_metadata(pending_sync=True)

    def clear_pending_sync(self) -> None:
        self._update_metadata(pending_sync=False)

    # === pending writes journal ===

    def write_pending_writes(self, entries: list[tuple[RecordType, bool]]) -> None:
        """
        Records the net writes made while the persistent engine was unreachable.

        Args:
            entries (list[tuple[RecordType, bool]]): One `(record, deleted)` pair per touched id, where
                `deleted` is True if the record was removed rather than saved.

        Raises:
            PersistenceError: If the journal cannot be written.

        Notes:
            - Unlike the collections, the journal never claims to hold the whole roster. It is replayed
              through the engine's unit of work, so records the engine holds but the cache never saw
              are left alone.
        """
        data = [
            {
                "record_type": type(record).__name__,
                "deleted": deleted,
                "record": record.to_dict(),
            }
            for record, deleted in entries
        ]

        try:
            self._write_json(PENDING_WRITES_FILE, data)

        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to write {PENDING_WRITES_FILE}: {e}") from e

    def read_pending_writes(self) -> list[tuple[RecordType, bool]]:
        try:
            data = self._read_json(PENDING_WRITES_FILE)

        except FileNotFoundError:
            return []

        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read {PENDING_WRITES_FILE}: {e}") from e

        if not isinstance(data, list):
            raise PersistenceError(f"Expected {PENDING_WRITES_FILE} to contain a list.")

        types_by_name = {record_type.__name__: record_type for record_type in RECORD_TYPES}

        try:
            return [
                (types_by_name[item["record_type"]].from_dict(item["record"]), bool(item["deleted"]))
                for item in data
            ]

        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Invalid entry in {PENDING_WRITES_FILE}: {e}") from e

    def clear_pending_writes(self) -> None:
        try:
            os.remove(os.path.join(self._dir_path, PENDING_WRITES_FILE))

        except FileNotFoundError:
            pass

        except OSError as e:
            raise PersistenceError(f"Failed to remove {PENDING_WRITES_FILE}: {e}") from e

    # === helper methods ===

    def _read_metadata(self) -> dict[str, Any]:
        try:
            metadata = self._read_json(METADATA_FILE)

        except FileNotFoundError:
            return {}

        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read {METADATA_FILE}: {e}") from e

        if not isinstance(metadata, dict):
            raise PersistenceError(f"{METADATA_FILE} must contain a dictionary.")

        return metadata

    def _update_metadata(self, **fields: Any) -> None:
        metadata = self._read_metadata()
        metadata.update(fields)

        try:
            self._write_json(METADATA_FILE, metadata)

        except OSError as e:
            raise PersistenceError(f"Failed to write {METADATA_FILE}: {e}") from e

    def _write_json(self, filename: str, data: list | dict) -> None:
        # this intentionally overwrites existing data
        with open(os.path.join(self._dir_path, filename), "w") as f:
            json.dump(data, f, indent=2, sort_keys=True)

    def _read_json(self, filename: str) -> list[Any] | dict[str, Any]:
        with open(os.path.join(self._dir_path, filename), "r") as f:
            return json.load(f)

    @staticmethod
    def _filename_for(record_type: type) -> str:
        try:
            return COLLECTION_FILES[record_type]

        except KeyError:
            raise TypeError(f"Unrecognized record type: {record_type}")
