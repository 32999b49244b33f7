"""
In-memory report store.
Useful for embedding, previews and tests; supports injected delete failures.
"""
import threading
from typing import Dict, Iterable, List, Optional, Set

from reportsweep.core.errors import StoreError
from reportsweep.core.models import DeleteOutcome, Report


class InMemoryReportStore:
    """
    Dict-backed ReportStore. Thread-safe: deletes may arrive from a thread pool.

    list_reports() returns reports in insertion order.
    """

    def __init__(self, reports: Optional[Iterable[Report]] = None):
        self._lock = threading.Lock()
        self._reports: Dict[str, Report] = {}
        self._failing_ids: Dict[str, str] = {}
        self._list_error: Optional[str] = None
        self.delete_calls: List[str] = []
        for report in reports or []:
            self.add(report)

    def add(self, report: Report) -> None:
        with self._lock:
            self._reports[report.id] = report

    def fail_deletes_for(self, report_ids: Iterable[str], error: str = "simulated delete failure") -> None:
        """Makes future deletes of these ids fail without removing anything."""
        with self._lock:
            for report_id in report_ids:
                self._failing_ids[report_id] = error

    def fail_listing(self, error: str = "simulated listing failure") -> None:
        self._list_error = error

    def list_reports(self, owner_scope: Optional[str] = None) -> List[Report]:
        if self._list_error:
            raise StoreError(self._list_error)
        with self._lock:
            reports = list(self._reports.values())
        if owner_scope is None:
            return reports
        return [r for r in reports if r.owner_id == owner_scope]

    def delete_report(self, report_id: str) -> DeleteOutcome:
        with self._lock:
            self.delete_calls.append(report_id)
            if report_id in self._failing_ids:
                return DeleteOutcome.failed(report_id, self._failing_ids[report_id])
            # Absent ids are already deleted: success
            self._reports.pop(report_id, None)
            return DeleteOutcome.ok(report_id)

    @property
    def report_ids(self) -> Set[str]:
        with self._lock:
            return set(self._reports)

    def __len__(self) -> int:
        with self._lock:
            return len(self._reports)
