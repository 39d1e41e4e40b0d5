# core/batch_operations.py

"""
Runs one roster operation over many records concurrently and reports on each of them.

`BatchOperationRunner` is used for the bulk actions of the roster screens, such as deleting,
archiving, or moving a selection of students. It provides:
    - One worker task per id on a `ThreadPoolExecutor`
    - One `StatusChange` event per processed item, success or failure
    - A single completion callback with the success and failure counts, fired once every item is done
    - A non-blocking `start()` variant that returns a `Future[BatchResult]`

Each item is independent: a failed or missing item never stops the rest of the batch, and
the Roster's own lock keeps concurrent items from interleaving inside one record.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable

from core.events import ChangeKind, EventStream, StatusChange
from models.classroom import Classroom
from models.roster import Roster
from models.student import Student

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    success_count: int
    failure_count: int

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count


class BatchOperationRunner:
    """
    Dispatches per-item roster operations to a thread pool.

    Attributes:
        events (EventStream[StatusChange]): Receives one event per processed item, from worker threads.

    Notes:
        - There is no timeout and no cancellation; a batch always runs to completion.
        - The runner owns a single coordinator thread for `start()`; call `close()` when done with it.
    """

    def __init__(self, roster: Roster, max_workers: int = 4):
        if max_workers < 1:
            raise ValueError("Invalid input. A batch needs at least one worker.")

        self._roster = roster
        self._max_workers = max_workers
        self._coordinator = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="batch-coordinator"
        )
        self.events: EventStream[StatusChange] = EventStream()

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def run(
        self,
        ids: list[str],
        operation: Callable[[str], bool],
        kind: ChangeKind,
        record_type: type = Student,
        on_complete: Callable[[int, int], None] | None = None,
    ) -> BatchResult:
        """
        Applies `operation` to every id and blocks until all of them are processed.

        Args:
            ids (list[str]): The records to process. Duplicates are processed once each time they appear.
            operation (Callable[[str], bool]): Performs the change for one id and reports success.
            kind (ChangeKind): The change reported in each `StatusChange` event.
            record_type (type): The record type the ids belong to, used for the existence check and
                the display name.
            on_complete (Callable[[int, int], None] | None): Called once with
                `(success_count, failure_count)` after every item has finished.

        Returns:
            BatchResult: The final counts.

        Notes:
            - An id that does not resolve to a record counts as a failure and the operation is not called.
            - An operation that raises counts as a failure; the exception is logged.
            - An empty batch completes immediately with (0, 0).
        """
        counts = {"success": 0, "failure": 0}
        counts_lock = threading.Lock()

        def process(record_id: str) -> None:
            record = self._roster.find(record_type, record_id)

            if record is None:
                succeeded = False
                display_name = record_id
                logger.warning(f"Batch {kind.value}: {record_type.__name__} {record_id} not found")

            else:
                display_name = record.display_name

                try:
                    succeeded = bool(operation(record_id))

                except Exception as e:
                    logger.error(f"Batch {kind.value} of {display_name} raised: {e}")
                    succeeded = False

            with counts_lock:
                counts["success" if succeeded else "failure"] += 1

            logger.debug(f"Batch {kind.value}: {display_name} -> {'ok' if succeeded else 'failed'}")

            self.events.publish(StatusChange(record_id, display_name, kind, succeeded))

        if ids:
            with ThreadPoolExecutor(
                max_workers=min(self._max_workers, len(ids)),
                thread_name_prefix="batch-worker",
            ) as executor:
                futures = [executor.submit(process, record_id) for record_id in ids]
                wait(futures)

        result = BatchResult(counts["success"], counts["failure"])

        logger.info(
            f"Batch {kind.value} finished: {result.success_count} succeeded, {result.failure_count} failed"
        )

        if on_complete is not None:
            on_complete(result.success_count, result.failure_count)

        return result

    def start(
        self,
        ids: list[str],
        operation: Callable[[str], bool],
        kind: ChangeKind,
        record_type: type = Student,
        on_complete: Callable[[int, int], None] | None = None,
    ) -> Future[BatchResult]:
        """Same as `run()`, but returns immediately with a future for the result."""
        return self._coordinator.submit(
            self.run, list(ids), operation, kind, record_type, on_complete
        )

    def close(self) -> None:
        self._coordinator.shutdown(wait=True)

    # === bulk actions ===

    def delete_students(
        self, ids: list[str], on_complete: Callable[[int, int], None] | None = None
    ) -> BatchResult:
        return self.run(
            ids,
            lambda record_id: self._roster.delete_student(record_id).success,
            ChangeKind.DELETED,
            on_complete=on_complete,
        )

    def archive_students(
        self, ids: list[str], on_complete: Callable[[int, int], None] | None = None
    ) -> BatchResult:
        return self.run(
            ids,
            lambda record_id: self._roster.archive_student(record_id).success,
            ChangeKind.ARCHIVED,
            on_complete=on_complete,
        )

    def restore_students(
        self, ids: list[str], on_complete: Callable[[int, int], None] | None = None
    ) -> BatchResult:
        return self.run(
            ids,
            lambda record_id: self._roster.restore_student(record_id).success,
            ChangeKind.RESTORED,
            on_complete=on_complete,
        )

    def move_students(
        self,
        ids: list[str],
        new_class_id: str,
        on_complete: Callable[[int, int], None] | None = None,
    ) -> BatchResult:
        return self.run(
            ids,
            lambda record_id: self._roster.move_student_to_class(
                record_id, new_class_id
            ).success,
            ChangeKind.MOVED,
            on_complete=on_complete,
        )

    def delete_classes(
        self, ids: list[str], on_complete: Callable[[int, int], None] | None = None
    ) -> BatchResult:
        return self.run(
            ids,
            lambda record_id: self._roster.delete_class(record_id).success,
            ChangeKind.DELETED,
            record_type=Classroom,
            on_complete=on_complete,
        )

    def archive_classes(
        self, ids: list[str], on_complete: Callable[[int, int], None] | None = None
    ) -> BatchResult:
        return self.run(
            ids,
            lambda record_id: self._roster.archive_class(record_id).success,
            ChangeKind.ARCHIVED,
            record_type=Classroom,
            on_complete=on_complete,
        )
