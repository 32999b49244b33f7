"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/retention.py
Decides which report of each duplicate group survives cleanup.
Groups arrive already sorted newest first, so the first report is kept.
"""

from typing import List

from reportsweep.core.models import DuplicateGroup, RetentionDecision


class RetentionSelector:

    @staticmethod
    def select(group: DuplicateGroup) -> RetentionDecision:
        """
        Keeps the first (newest) report and marks the rest for deletion.

        Raises:
            ValueError: If the group is empty
        """
        if not group.reports:
            raise ValueError("Cannot select a report to keep from an empty group")
        return RetentionDecision(keep=group.reports[0], remove=list(group.reports[1:]))

    @classmethod
    def plan(cls, groups: List[DuplicateGroup]) -> List[RetentionDecision]:
        """One decision per group, in group order."""
        return [cls.select(group) for group in groups]

    @classmethod
    def ids_to_delete(cls, groups: List[DuplicateGroup]) -> List[str]:
        """
        Flattens every group's remove list, preserving group order.
        Groups with a single report contribute nothing.
        """
        report_ids = []
        for group in groups:
            if len(group.reports) > 1:
                report_ids.extend(cls.select(group).remove_ids)
        return report_ids
