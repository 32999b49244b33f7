"""
reportsweep: duplicate report detection and batch cleanup.

Core features:
- Exact-content fingerprints (xxHash3) over description, file content and answers
- Anchor-relative grouping of duplicates created within a tolerance window (default 15 minutes)
- Keeps the newest report of each group, deletes the rest in concurrent batches
- Stores: JSON directory (deletes to system trash via send2trash), PostgREST/Supabase over HTTP
- CLI interface with dry run by default
"""

from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version("reportsweep")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from reportsweep.commands import CleanupCommand
from reportsweep.core import (
    Report, DuplicateGroup, RetentionDecision, DeleteOutcome, CleanupResult,
    ScanParams, ScanStats, CleanupParams, ReportSweepError, ScanError, StoreError)
from reportsweep.utils.convert_utils import ConvertUtils
from reportsweep.services import InMemoryReportStore, JsonDirectoryReportStore, RestReportStore

__all__ = [
    "CleanupCommand",
    "Report",
    "DuplicateGroup",
    "RetentionDecision",
    "DeleteOutcome",
    "CleanupResult",
    "ScanParams",
    "ScanStats",
    "CleanupParams",
    "ReportSweepError",
    "ScanError",
    "StoreError",
    "ConvertUtils",
    "InMemoryReportStore",
    "JsonDirectoryReportStore",
    "RestReportStore",
    "__version__",
]
