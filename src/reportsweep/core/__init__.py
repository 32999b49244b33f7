"""
Core cleanup engine: fingerprinting, duplicate scanning, retention and batch deletion.

This package contains the store-independent foundation of reportsweep:
- ContentFingerprinter: xxHash3-based content key over the equivalence fields
- DuplicateScanner: anchor-relative grouping within a tolerance window
- RetentionSelector: keeps the newest report of each group
- BatchDeleter: bounded-concurrency deletion with progress and failure accounting
- Models: Report, DuplicateGroup, CleanupResult and parameter objects

No store or CLI dependencies, suitable for embedding in other services.
"""

from .errors import ReportSweepError, StoreError, ScanError, ScanCancelled
from .fingerprint import ContentFingerprinter, XXHashAlgorithmImpl, canonical_content
from .scanner import DuplicateScanner
from .retention import RetentionSelector
from .deleter import BatchDeleter
from .models import (
    Report, DuplicateGroup, RetentionDecision, DeleteOutcome, CleanupResult,
    ScanStats, ScanParams, CleanupParams)

__all__ = [
    "ReportSweepError",
    "StoreError",
    "ScanError",
    "ScanCancelled",
    "ContentFingerprinter",
    "XXHashAlgorithmImpl",
    "canonical_content",
    "DuplicateScanner",
    "RetentionSelector",
    "BatchDeleter",
    "Report",
    "DuplicateGroup",
    "RetentionDecision",
    "DeleteOutcome",
    "CleanupResult",
    "ScanStats",
    "ScanParams",
    "CleanupParams",
]
