"""
Shared fixtures for cleanup engine tests.
Builds reports with controlled content and timestamps.
"""
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from reportsweep.core.models import Report
from reportsweep.services.memory_store import InMemoryReportStore


BASE_TIME = datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_time() -> datetime:
    """10:00 UTC on a fixed day, the reference point for 'minutes after' offsets."""
    return BASE_TIME


@pytest.fixture
def make_report() -> Callable[..., Report]:
    """
    Factory for reports created N minutes after BASE_TIME.
    Content defaults to a shared description, so equal kwargs mean duplicates.
    """
    def _make(report_id: str, minutes: float = 0, description: str = "Onboarding process",
              file_content: str = "", answers=None, owner: str = "alice", title: str = None) -> Report:
        return Report(
            id=report_id,
            created_at=BASE_TIME + timedelta(minutes=minutes),
            title=title if title is not None else f"Report {report_id}",
            process_description=description,
            file_content=file_content,
            answers=answers if answers is not None else {"q1": "yes", "q2": ["a", "b"]},
            owner_id=owner,
        )
    return _make


@pytest.fixture
def scenario_reports(make_report):
    """
    The anchor-relative scenario, in store order:
    A 10:00 (H1), B 10:05 (H1), C 11:00 (H1), D 10:02 (H2).
    """
    return [
        make_report("A", minutes=0),
        make_report("B", minutes=5),
        make_report("C", minutes=60),
        make_report("D", minutes=2, description="Invoice approval"),
    ]


@pytest.fixture
def scenario_store(scenario_reports) -> InMemoryReportStore:
    return InMemoryReportStore(scenario_reports)
