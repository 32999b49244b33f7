"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Partitions a report collection into duplicate groups.

Grouping is anchor-relative: each unvisited report becomes an anchor and collects
every later unvisited report of the same owner with the same fingerprint created
within the tolerance window of the anchor itself. Matches are not chained, so two reports
further apart than the tolerance only meet in a group through a shared anchor.
"""

import logging
from datetime import timedelta
from typing import List, Optional, Sequence

from reportsweep.core.errors import ScanCancelled
from reportsweep.core.fingerprint import ContentFingerprinter
from reportsweep.core.interfaces import Fingerprinter
from reportsweep.core.models import (
    DEFAULT_TOLERANCE, DuplicateGroup, ProgressCallback, Report, StoppedFlag)

logger = logging.getLogger(__name__)


class DuplicateScanner:
    """
    Finds groups of exact-content duplicates created close together in time.

    Attributes:
        fingerprinter: Derives the content key compared between reports
        tolerance: Maximum distance between an anchor and a match
    """

    STAGE = "Scanning"

    def __init__(self, fingerprinter: Fingerprinter = None, tolerance: timedelta = DEFAULT_TOLERANCE):
        if tolerance < timedelta(0):
            raise ValueError("Tolerance cannot be negative")
        self.fingerprinter = fingerprinter or ContentFingerprinter()
        self.tolerance = tolerance

    def find_duplicates(
            self,
            reports: Sequence[Report],
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> List[DuplicateGroup]:
        """
        Groups reports in input order. Output depends only on the input order,
        the fingerprints and the tolerance.

        Args:
            reports: Reports in the order the store returned them (not assumed sorted)
            stopped_flag: Returns True if the scan should stop; checked once per anchor
            progress_callback: (stage, current, total) -> None

        Returns:
            Groups of 2+ reports, each ordered by created_at descending

        Raises:
            ScanCancelled: If stopped_flag returned True before the pass completed
        """
        total = len(reports)
        # One fingerprint per report; the pairwise pass only compares strings
        fingerprints = [self.fingerprinter.fingerprint(report) for report in reports]
        visited = [False] * total
        groups: List[DuplicateGroup] = []

        logger.debug(f"Scanning {total} reports (tolerance={self.tolerance})")

        for i, anchor in enumerate(reports):
            if stopped_flag and stopped_flag():
                logger.debug(f"Scan cancelled at report {i}/{total}")
                raise ScanCancelled(f"Scan cancelled after {i} of {total} reports")

            if progress_callback:
                progress_callback(self.STAGE, i + 1, total)

            if visited[i]:
                continue

            candidates = [anchor]
            for j in range(i + 1, total):
                if visited[j] or fingerprints[j] != fingerprints[i]:
                    continue
                # Unscoped scans list every owner; copies never match across owners
                if reports[j].owner_id != anchor.owner_id:
                    continue
                if abs(reports[j].created_at - anchor.created_at) <= self.tolerance:
                    candidates.append(reports[j])
                    visited[j] = True

            visited[i] = True

            if len(candidates) >= 2:
                # sorted() is stable with reverse=True: ties keep input order
                ordered = sorted(candidates, key=lambda r: r.created_at, reverse=True)
                groups.append(DuplicateGroup(fingerprint=fingerprints[i], reports=ordered))
                logger.debug(
                    f"Group anchored at {anchor.id}: keep {ordered[0].id}, "
                    f"remove {[r.id for r in ordered[1:]]}"
                )

        logger.debug(f"Found {len(groups)} duplicate groups")
        return groups
