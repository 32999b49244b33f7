"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/deleter.py
Deletes reports in fixed-size batches with bounded concurrency.

Every delete in a batch is submitted to a thread pool and the batch is joined
before its results are counted, so counters are only touched by the calling
thread. A failed delete never stops the rest of the batch or later batches,
and nothing is retried.
"""

import concurrent.futures
import logging
import time
from typing import Callable, List, Optional, Sequence

from reportsweep.core.models import (
    DEFAULT_BATCH_PAUSE, DEFAULT_BATCH_SIZE, CleanupResult, DeleteOutcome,
    ProgressCallback, StoppedFlag)

logger = logging.getLogger(__name__)

DeleteFunc = Callable[[str], DeleteOutcome]


class BatchDeleter:
    """
    Drives delete calls against a report store.

    Attributes:
        delete_func: delete(report_id) -> DeleteOutcome, must be idempotent
        batch_size: Deletes in flight at once (one batch)
        batch_pause: Seconds to wait between batches
    """

    STAGE = "Deleting"

    def __init__(
            self,
            delete_func: DeleteFunc,
            batch_size: int = DEFAULT_BATCH_SIZE,
            batch_pause: float = DEFAULT_BATCH_PAUSE,
            sleep: Callable[[float], None] = time.sleep
    ):
        if batch_size < 1:
            raise ValueError("Batch size must be at least 1")
        if batch_pause < 0:
            raise ValueError("Batch pause cannot be negative")
        self.delete_func = delete_func
        self.batch_size = batch_size
        self.batch_pause = batch_pause
        self._sleep = sleep

    @staticmethod
    def make_batches(report_ids: Sequence[str], batch_size: int) -> List[List[str]]:
        """Splits ids into ordered batches; the last one may be shorter."""
        return [list(report_ids[i:i + batch_size]) for i in range(0, len(report_ids), batch_size)]

    def delete_all(
            self,
            report_ids: Sequence[str],
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> CleanupResult:
        """
        Deletes every id, batch by batch.

        Args:
            report_ids: Ids to delete, in order
            stopped_flag: Returns True to stop; checked only between batches
            progress_callback: (stage, processed, total) -> None, once per finished batch

        Returns:
            CleanupResult with deleted/failed counts, failed ids in input order
            and, if cancelled, the ids that were never attempted
        """
        total = len(report_ids)
        result = CleanupResult(requested_count=total)
        if total == 0:
            return result

        batches = self.make_batches(report_ids, self.batch_size)
        logger.info(f"Starting batch deletion of {total} reports in {len(batches)} batches")

        with concurrent.futures.ThreadPoolExecutor(
                max_workers=self.batch_size, thread_name_prefix="reportsweep-delete") as executor:
            for index, batch in enumerate(batches):
                if stopped_flag and stopped_flag():
                    result.cancelled = True
                    result.skipped_ids = [rid for pending in batches[index:] for rid in pending]
                    logger.info(f"Cleanup cancelled before batch {index + 1}/{len(batches)}")
                    break

                outcomes = self._run_batch(executor, batch)

                for outcome in outcomes:
                    if outcome.success:
                        result.deleted_count += 1
                    else:
                        result.failed_count += 1
                        result.failed_ids.append(outcome.report_id)
                        result.errors[outcome.report_id] = outcome.error or "unknown error"
                        logger.warning(f"Failed to delete {outcome.report_id}: {outcome.error}")

                processed = min(index * self.batch_size + len(batch), total)
                if progress_callback:
                    progress_callback(self.STAGE, processed, total)

                if index < len(batches) - 1 and self.batch_pause > 0:
                    self._sleep(self.batch_pause)

        logger.info(
            f"Batch deletion complete: {result.deleted_count} deleted, {result.failed_count} failed"
        )
        return result

    def _run_batch(self, executor: concurrent.futures.Executor, batch: List[str]) -> List[DeleteOutcome]:
        """Submits one batch and waits for every delete to settle."""
        futures = [executor.submit(self._delete_one, report_id) for report_id in batch]
        concurrent.futures.wait(futures)
        # Results in submission order, not completion order
        return [future.result() for future in futures]

    def _delete_one(self, report_id: str) -> DeleteOutcome:
        """Runs one delete; an exception becomes a failed outcome for this id only."""
        try:
            outcome = self.delete_func(report_id)
        except Exception as e:
            return DeleteOutcome.failed(report_id, f"{type(e).__name__}: {e}")

        if not isinstance(outcome, DeleteOutcome):
            return DeleteOutcome.failed(report_id, f"Unexpected delete result: {outcome!r}")
        if outcome.report_id != report_id:
            # Attribute the outcome to the id that was actually requested
            return DeleteOutcome(report_id=report_id, success=outcome.success, error=outcome.error)
        return outcome
