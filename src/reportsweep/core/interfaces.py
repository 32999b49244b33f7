"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the cleanup engine.
These protocols enforce structural typing using Python's `typing.Protocol` so that
stores and hashing strategies can be swapped without touching the engine.

Key Components:
---------------
- ReportStore: the only external collaborator (list + idempotent delete).
- HashAlgorithm: standardized interface for the digest behind a fingerprint.
- Fingerprinter: derives a content key from a report.
"""

from typing import List, Optional, Protocol

from reportsweep.core.models import DeleteOutcome, Report


class ReportStore(Protocol):
    """
    Interface for the store that owns the reports.

    delete_report must be idempotent: deleting an id that no longer exists
    returns a successful outcome, never a failure.
    """

    def list_reports(self, owner_scope: Optional[str] = None) -> List[Report]:
        """Returns every report visible in owner_scope, in unspecified order."""
        ...

    def delete_report(self, report_id: str) -> DeleteOutcome:
        ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions without affecting
    the rest of the fingerprinting logic.
    """

    @staticmethod
    def hexdigest(data: bytes) -> str:
        """Computes the hex digest of the provided byte data."""
        ...


class Fingerprinter(Protocol):
    def fingerprint(self, report: Report) -> str: ...
