"""
Report store backed by a PostgREST-style HTTP table (e.g. a Supabase project).

Reports are rows of one table scoped by a `user_id` column:
    GET    {base_url}/rest/v1/{table}?select=*&user_id=eq.{owner}&order=created_at.desc
    DELETE {base_url}/rest/v1/{table}?id=eq.{id}&user_id=eq.{owner}
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from reportsweep.core.errors import StoreError
from reportsweep.core.models import DeleteOutcome, Report

logger = logging.getLogger(__name__)


class RestReportStore:
    """
    ReportStore over HTTP using one shared requests.Session.

    Timeouts are owned here (the cleanup engine imposes none).
    """

    def __init__(
            self,
            base_url: str,
            api_key: str,
            table: str = "audit_reports",
            owner_scope: Optional[str] = None,
            timeout: int = 30,
            session: Optional[requests.Session] = None
    ):
        if not base_url:
            raise ValueError("Store URL is required")
        if not api_key:
            raise ValueError("Store API key is required")
        self.base_url = base_url.rstrip('/')
        self.table = table
        self.owner_scope = owner_scope
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'apikey': api_key,
            'Authorization': f'Bearer {api_key}',
            'Accept': 'application/json',
        })

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    def _scope_params(self, owner_scope: Optional[str]) -> Dict[str, str]:
        return {'user_id': f'eq.{owner_scope}'} if owner_scope is not None else {}

    def list_reports(self, owner_scope: Optional[str] = None) -> List[Report]:
        """
        Fetches every report row of the owner.

        Raises:
            StoreError: On transport errors, non-2xx responses or malformed rows
        """
        if owner_scope is not None:
            self.owner_scope = owner_scope
        params = {'select': '*', 'order': 'created_at.desc'}
        params.update(self._scope_params(self.owner_scope))

        logger.debug(f"Listing reports from {self.table_url}")
        try:
            response = self.session.get(self.table_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            rows: Any = response.json()
        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP Error: {e.response.status_code} - {e.response.text}")
            raise StoreError(f"Listing reports failed: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {e}")
            raise StoreError(f"Listing reports failed: {e}") from e
        except ValueError as e:
            raise StoreError(f"Listing reports returned invalid JSON: {e}") from e

        if not isinstance(rows, list):
            raise StoreError(f"Expected a list of reports, got {type(rows).__name__}")

        try:
            return [Report.from_dict(row) for row in rows]
        except (TypeError, ValueError) as e:
            raise StoreError(f"Malformed report row: {e}") from e

    def delete_report(self, report_id: str) -> DeleteOutcome:
        """
        Deletes one row. 2xx and 404 are both success: the row is gone either way.
        """
        params = {'id': f'eq.{report_id}'}
        params.update(self._scope_params(self.owner_scope))

        try:
            response = self.session.delete(self.table_url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            return DeleteOutcome.failed(report_id, f"Request error: {e}")

        if response.status_code == 404 or 200 <= response.status_code < 300:
            return DeleteOutcome.ok(report_id)
        return DeleteOutcome.failed(report_id, f"HTTP {response.status_code}: {response.text[:200]}")
