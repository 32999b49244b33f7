"""
Tests for retention logic: validates correct report preservation behavior.
RetentionSelector preserves ONLY the first report of a pre-sorted group
(sorting newest-first is handled upstream by the scanner).
"""
import pytest

from reportsweep.core.models import DuplicateGroup
from reportsweep.core.retention import RetentionSelector


class TestSelect:

    def test_keeps_first_removes_rest(self, make_report):
        group = DuplicateGroup(fingerprint="h", reports=[
            make_report("newest", 10),  # ← Preserved (first)
            make_report("middle", 5),   # ← Deleted
            make_report("oldest", 0),   # ← Deleted
        ])

        decision = RetentionSelector.select(group)

        assert decision.keep.id == "newest"
        assert decision.remove_ids == ["middle", "oldest"]

    def test_does_not_reorder(self, make_report):
        """Selector trusts upstream order, even when it is not time-sorted."""
        group = DuplicateGroup(fingerprint="h", reports=[make_report("old", 0), make_report("new", 10)])

        assert RetentionSelector.select(group).keep.id == "old"

    def test_group_is_not_mutated(self, make_report):
        reports = [make_report("a", 1), make_report("b", 0)]
        group = DuplicateGroup(fingerprint="h", reports=list(reports))

        RetentionSelector.select(group).remove.clear()

        assert [r.id for r in group.reports] == ["a", "b"]

    def test_single_report_group_removes_nothing(self, make_report):
        decision = RetentionSelector.select(DuplicateGroup(fingerprint="h", reports=[make_report("only")]))
        assert decision.keep.id == "only"
        assert decision.remove == []

    def test_empty_group_rejected(self):
        with pytest.raises(ValueError):
            RetentionSelector.select(DuplicateGroup(fingerprint="h", reports=[]))


class TestIdsToDelete:

    def test_flattens_groups_in_order(self, make_report):
        groups = [
            DuplicateGroup(fingerprint="g1", reports=[make_report("g1-keep"), make_report("g1-del")]),
            DuplicateGroup(fingerprint="g2", reports=[
                make_report("g2-keep"), make_report("g2-del1"), make_report("g2-del2")]),
        ]

        assert RetentionSelector.ids_to_delete(groups) == ["g1-del", "g2-del1", "g2-del2"]

    def test_conservation_one_survivor_per_group(self, make_report):
        """Exactly sum(size - 1) ids are scheduled for deletion."""
        groups = [
            DuplicateGroup(fingerprint=str(n), reports=[make_report(f"{n}-{i}") for i in range(n)])
            for n in (2, 3, 5)
        ]

        assert len(RetentionSelector.ids_to_delete(groups)) == sum(g.size - 1 for g in groups)

    def test_skips_empty_and_single_groups(self, make_report):
        groups = [
            DuplicateGroup(fingerprint="e", reports=[]),
            DuplicateGroup(fingerprint="s", reports=[make_report("single")]),
        ]
        assert RetentionSelector.ids_to_delete(groups) == []

    def test_plan_one_decision_per_group(self, make_report):
        groups = [
            DuplicateGroup(fingerprint="g1", reports=[make_report("a"), make_report("b")]),
            DuplicateGroup(fingerprint="g2", reports=[make_report("c"), make_report("d")]),
        ]

        plan = RetentionSelector.plan(groups)

        assert [d.keep.id for d in plan] == ["a", "c"]
