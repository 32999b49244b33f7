"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_store.py
Report store backed by a directory of JSON files.
Layout: <root>/<owner>/<report id>.json. Deletion moves files to the system trash
(via send2trash), never a permanent erase.
"""
import json
import logging
import re
from pathlib import Path
from typing import List, Optional

from send2trash import send2trash

from reportsweep.core.errors import StoreError
from reportsweep.core.models import DeleteOutcome, Report

logger = logging.getLogger(__name__)

_SAFE_NAME = re.compile(r"^[A-Za-z0-9._@-]+$")


class JsonDirectoryReportStore:
    """
    Reads reports from JSON files and trashes them on delete.

    Attributes:
        root_dir: Directory holding one sub-directory per owner
        owner_scope: Owner whose reports are deleted; set by list_reports()
    """

    def __init__(self, root_dir: str, owner_scope: Optional[str] = None):
        self.root_dir = Path(root_dir)
        self.owner_scope = owner_scope

    def _owner_dir(self, owner_scope: Optional[str]) -> Path:
        if owner_scope is None:
            return self.root_dir
        if not _SAFE_NAME.match(owner_scope) or owner_scope in (".", ".."):
            raise StoreError(f"Invalid owner scope: {owner_scope!r}")
        return self.root_dir / owner_scope

    def _report_path(self, report_id: str) -> Path:
        if not _SAFE_NAME.match(report_id) or report_id in (".", ".."):
            raise StoreError(f"Invalid report id: {report_id!r}")
        return self._owner_dir(self.owner_scope) / f"{report_id}.json"

    def list_reports(self, owner_scope: Optional[str] = None) -> List[Report]:
        """
        Loads every *.json report of the owner, sorted by file name.

        Raises:
            StoreError: If the directory is missing or a file is unreadable or malformed
        """
        if owner_scope is not None:
            self.owner_scope = owner_scope
        owner_dir = self._owner_dir(self.owner_scope)

        if not owner_dir.is_dir():
            raise StoreError(f"Report directory does not exist: {owner_dir}")

        reports = []
        for path in sorted(owner_dir.glob("*.json")):
            try:
                row = json.loads(path.read_text(encoding="utf-8"))
                report = Report.from_dict(row)
            except (OSError, ValueError) as e:
                logger.error(f"Cannot load report file {path}: {e}")
                raise StoreError(f"Cannot load report file {path.name}: {e}") from e

            if report.id != path.stem:
                raise StoreError(f"Report file {path.name} contains id {report.id!r}")
            if report.owner_id is None:
                report.owner_id = self.owner_scope
            reports.append(report)

        logger.debug(f"Loaded {len(reports)} reports from {owner_dir}")
        return reports

    def delete_report(self, report_id: str) -> DeleteOutcome:
        """Moves the report file to the trash. A missing file counts as deleted."""
        try:
            path = self._report_path(report_id)
        except StoreError as e:
            return DeleteOutcome.failed(report_id, str(e))

        if not path.exists():
            logger.debug(f"Report {report_id} already gone")
            return DeleteOutcome.ok(report_id)

        try:
            send2trash(str(path))
        except Exception as e:
            # A concurrent session may have trashed it first
            if not path.exists():
                return DeleteOutcome.ok(report_id)
            return DeleteOutcome.failed(report_id, f"Failed to move to trash: {e}")
        return DeleteOutcome.ok(report_id)

    def save(self, report: Report) -> Path:
        """Writes a report file (used to seed a store)."""
        owner = report.owner_id if report.owner_id is not None else self.owner_scope
        owner_dir = self._owner_dir(owner)
        owner_dir.mkdir(parents=True, exist_ok=True)
        if not _SAFE_NAME.match(report.id):
            raise StoreError(f"Invalid report id: {report.id!r}")
        path = owner_dir / f"{report.id}.json"
        path.write_text(json.dumps(report.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        return path
