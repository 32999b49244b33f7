"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for duplicate report detection and cleanup.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Union

from reportsweep.utils.convert_utils import ConvertUtils


AnswerValue = Union[str, List[str]]

DEFAULT_TOLERANCE = timedelta(minutes=15)
DEFAULT_BATCH_SIZE = 10
DEFAULT_BATCH_PAUSE = 0.05  # seconds


# ======================
#  Core Data Models
# ======================

@dataclass
class Report:
    """
    A single stored report as returned by a report store.
    Read-only to the engine: only its id is ever sent back (for deletion).
    """
    id: str
    created_at: datetime
    title: str = ""
    process_description: str = ""
    file_content: str = ""
    answers: Dict[str, AnswerValue] = field(default_factory=dict)
    report_data: Any = None
    owner_id: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Report id cannot be empty")
        self.id = str(self.id)
        # Optional text fields default to empty so None and "" compare equal
        if self.process_description is None:
            self.process_description = ""
        if self.file_content is None:
            self.file_content = ""
        if self.answers is None:
            self.answers = {}
        if self.title is None:
            self.title = ""
        self.created_at = ConvertUtils.ensure_aware(self.created_at)

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "Report":
        """
        Build a Report from a store row.
        Accepts snake_case (database) and camelCase (API) keys.
        """
        def pick(*keys, default=None):
            for key in keys:
                if key in row and row[key] is not None:
                    return row[key]
            return default

        report_id = pick("id")
        created_raw = pick("created_at", "createdAt")
        if report_id is None:
            raise ValueError("Report row has no 'id'")
        if created_raw is None:
            raise ValueError(f"Report {report_id} has no creation timestamp")

        return cls(
            id=str(report_id),
            created_at=ConvertUtils.parse_timestamp(created_raw),
            title=pick("title", default=""),
            process_description=pick("process_description", "processDescription", default=""),
            file_content=pick("file_content", "fileContent", default=""),
            answers=pick("answers", default={}),
            report_data=pick("report_data", "reportData"),
            owner_id=pick("user_id", "owner_id", "ownerId"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the report to the snake_case row layout used by stores."""
        return {
            "id": self.id,
            "user_id": self.owner_id,
            "title": self.title,
            "process_description": self.process_description,
            "file_content": self.file_content,
            "answers": self.answers,
            "report_data": self.report_data,
            "created_at": self.created_at.isoformat(),
        }

    def __repr__(self):
        return f"<Report id={self.id}, created_at={self.created_at.isoformat()}>"


@dataclass
class DuplicateGroup:
    """
    Reports with the same content fingerprint created within the tolerance
    window of a common anchor. Ordered newest first: the first report is kept.
    """
    fingerprint: str
    reports: List[Report]

    @property
    def size(self) -> int:
        return len(self.reports)

    @property
    def keep(self) -> Report:
        if not self.reports:
            raise ValueError("Empty duplicate group has nothing to keep")
        return self.reports[0]

    @property
    def remove(self) -> List[Report]:
        return self.reports[1:]

    def is_duplicate(self) -> bool:
        """True if this group contains at least two reports."""
        return self.size >= 2

    def __repr__(self):
        return f"<DuplicateGroup fingerprint={self.fingerprint[:12]}, count={self.size}>"


@dataclass(frozen=True)
class RetentionDecision:
    """Which report of a group survives and which ones are deleted."""
    keep: Report
    remove: List[Report]

    @property
    def remove_ids(self) -> List[str]:
        return [report.id for report in self.remove]


@dataclass(frozen=True)
class DeleteOutcome:
    """Result of a single delete call against a report store."""
    report_id: str
    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls, report_id: str) -> "DeleteOutcome":
        return cls(report_id=report_id, success=True)

    @classmethod
    def failed(cls, report_id: str, error: str) -> "DeleteOutcome":
        return cls(report_id=report_id, success=False, error=error)


@dataclass
class CleanupResult:
    """
    Aggregated outcome of one cleanup run.
    For a run that was not cancelled: deleted_count + failed_count == requested_count.
    """
    kept_count: int = 0
    deleted_count: int = 0
    failed_count: int = 0
    failed_ids: List[str] = field(default_factory=list)
    requested_count: int = 0
    skipped_ids: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
    cancelled: bool = False

    @property
    def processed_count(self) -> int:
        return self.deleted_count + self.failed_count

    @property
    def is_complete_success(self) -> bool:
        return not self.cancelled and self.failed_count == 0

    def print_summary(self) -> str:
        lines = [
            f"Reports kept: {self.kept_count}",
            f"Reports deleted: {self.deleted_count}",
        ]
        if self.failed_count:
            lines.append(f"Failed deletions: {self.failed_count}")
        if self.cancelled:
            lines.append(f"Skipped (cancelled): {len(self.skipped_ids)}")
        return "\n".join(lines)


@dataclass
class ScanStats:
    """
    Statistics collected during one scan.
    """
    reports_listed: int = 0
    groups_found: int = 0
    duplicates_found: int = 0
    total_time: float = 0.0

    def print_summary(self) -> str:
        return "\n".join([
            "📊 Scan Statistics:",
            f"Reports listed: {self.reports_listed}",
            f"Duplicate groups: {self.groups_found}",
            f"Reports to delete: {self.duplicates_found}",
            f"Total Execution Time: {self.total_time:.3f}s",
        ])


# ======================
#  Parameter DTOs
# ======================

ProgressCallback = Callable[[str, int, Optional[int]], None]
StoppedFlag = Callable[[], bool]


@dataclass
class ScanParams:
    """Parameters for a duplicate scan with validation."""
    owner_scope: Optional[str] = None
    tolerance: timedelta = DEFAULT_TOLERANCE
    canonical_answers: bool = True

    def __post_init__(self):
        if not isinstance(self.tolerance, timedelta):
            raise ValueError("Tolerance must be a timedelta")
        if self.tolerance < timedelta(0):
            raise ValueError("Tolerance cannot be negative")

    @staticmethod
    def from_human_readable(
            tolerance_str: str = "15m",
            owner_scope: Optional[str] = None,
            canonical_answers: bool = True,
    ) -> "ScanParams":
        return ScanParams(
            owner_scope=owner_scope,
            tolerance=ConvertUtils.human_to_timedelta(tolerance_str),
            canonical_answers=canonical_answers,
        )


@dataclass
class CleanupParams:
    """Parameters for batch deletion with validation."""
    batch_size: int = DEFAULT_BATCH_SIZE
    batch_pause: float = DEFAULT_BATCH_PAUSE

    def __post_init__(self):
        if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int):
            raise ValueError("Batch size must be an integer")
        if self.batch_size < 1:
            raise ValueError("Batch size must be at least 1")
        if self.batch_pause < 0:
            raise ValueError("Batch pause cannot be negative")

    @staticmethod
    def from_human_readable(batch_size: int = DEFAULT_BATCH_SIZE, pause_str: str = "50ms") -> "CleanupParams":
        pause = ConvertUtils.human_to_timedelta(pause_str).total_seconds()
        return CleanupParams(batch_size=batch_size, batch_pause=pause)
