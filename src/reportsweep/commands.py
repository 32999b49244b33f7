"""
Unified command orchestrator for duplicate report cleanup.
This is the SINGLE source of truth for business logic, used by the CLI and by embedding services.
No state is kept between scan() and cleanup(): groups flow through the caller.
"""
import logging
import time
from typing import List, Optional, Tuple

from reportsweep.core.deleter import BatchDeleter
from reportsweep.core.errors import ScanError
from reportsweep.core.fingerprint import ContentFingerprinter
from reportsweep.core.interfaces import ReportStore
from reportsweep.core.models import (
    CleanupParams, CleanupResult, DuplicateGroup, ProgressCallback,
    RetentionDecision, ScanParams, ScanStats, StoppedFlag)
from reportsweep.core.retention import RetentionSelector
from reportsweep.core.scanner import DuplicateScanner

logger = logging.getLogger(__name__)


class CleanupCommand:
    """
    Orchestrates the cleanup workflow:
    1. scan(): list the owner's reports and find duplicate groups (read-only)
    2. cleanup(groups): delete every report except the newest of each group

    Usage:
        command = CleanupCommand(store, ScanParams(owner_scope="user-1"))
        groups, stats = command.scan()
        result = command.cleanup(
            groups,
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )

    cleanup() trusts the groups it is given. Call scan() right before it so that
    changes made by other sessions are picked up.
    """

    def __init__(
            self,
            store: ReportStore,
            scan_params: Optional[ScanParams] = None,
            cleanup_params: Optional[CleanupParams] = None,
            deleter: Optional[BatchDeleter] = None
    ):
        self.store = store
        self.scan_params = scan_params or ScanParams()
        self.cleanup_params = cleanup_params or CleanupParams()
        self._scanner = DuplicateScanner(
            fingerprinter=ContentFingerprinter(canonical_answers=self.scan_params.canonical_answers),
            tolerance=self.scan_params.tolerance,
        )
        self._deleter = deleter or BatchDeleter(
            self.store.delete_report,
            batch_size=self.cleanup_params.batch_size,
            batch_pause=self.cleanup_params.batch_pause,
        )

    def scan(
            self,
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> Tuple[List[DuplicateGroup], ScanStats]:
        """
        Re-lists reports from the store and groups duplicates.

        Returns:
            Tuple of (duplicate_groups, statistics)

        Raises:
            ScanError: If the store could not list reports
            ScanCancelled: If stopped_flag stopped the scan
        """
        start_time = time.time()
        owner_scope = self.scan_params.owner_scope

        try:
            reports = list(self.store.list_reports(owner_scope))
        except Exception as e:
            logger.error(f"Listing reports failed for owner {owner_scope!r}: {e}")
            raise ScanError(f"Failed to list reports: {e}") from e

        logger.info(f"Scanning {len(reports)} reports for duplicates")
        groups = self._scanner.find_duplicates(
            reports,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )

        stats = ScanStats(
            reports_listed=len(reports),
            groups_found=len(groups),
            duplicates_found=sum(group.size - 1 for group in groups),
            total_time=time.time() - start_time,
        )
        logger.info(f"Found {stats.groups_found} duplicate groups, {stats.duplicates_found} reports to delete")
        return groups, stats

    @staticmethod
    def plan(groups: List[DuplicateGroup]) -> List[RetentionDecision]:
        """Keep/remove decision per group, for previews and dry runs."""
        return RetentionSelector.plan(groups)

    def cleanup(
            self,
            groups: List[DuplicateGroup],
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> CleanupResult:
        """
        Deletes every report except the first of each group.

        Args:
            groups: Groups from a recent scan()
            stopped_flag: () -> bool, honored between batches only
            progress_callback: (stage, processed, total) -> None

        Returns:
            CleanupResult; individual delete failures are recorded, not raised
        """
        duplicate_groups = [group for group in groups if group.is_duplicate()]
        report_ids = RetentionSelector.ids_to_delete(duplicate_groups)

        result = self._deleter.delete_all(
            report_ids,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )
        result.kept_count = len(duplicate_groups)
        return result
