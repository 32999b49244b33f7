"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception taxonomy for scanning and cleanup.
Individual delete failures are never raised: they are recorded in CleanupResult.
"""


class ReportSweepError(RuntimeError):
    """Base class for all errors raised by reportsweep."""


class StoreError(ReportSweepError):
    """A report store operation failed (transport, permissions, bad payload)."""


class ScanError(ReportSweepError):
    """Listing reports failed, so the scan produced no result."""


class ScanCancelled(ReportSweepError):
    """The scan was stopped through its stopped_flag before it finished."""
