"""
Tests for diskagent.core.reconcile module.
"""

import pytest

from diskagent.core.errors import MissingAnchorPartition
from diskagent.core.models import DesiredPartition, ExistingPartition, PartitionSpan
from diskagent.core.reconcile import (
    compare_layout,
    plan_reconciliation,
    reconcile_layout,
    require_anchor,
)


def existing(*specs: tuple[int, int, int]) -> list[ExistingPartition]:
    """Build partitions from (number, start, end) triples."""
    return [
        ExistingPartition(number=n, start_byte=s, end_byte=e, size_bytes=e - s, filesystem="ext4")
        for n, s, e in specs
    ]


def desired(*sizes: int) -> list[DesiredPartition]:
    return [DesiredPartition(size_bytes=size) for size in sizes]


ANCHOR = (1, 1, 33)


class TestRequireAnchor:
    """Tests for require_anchor."""

    def test_returns_first_partition(self) -> None:
        parts = existing(ANCHOR, (2, 33, 65))
        assert require_anchor(parts) is parts[0]

    def test_empty_layout(self) -> None:
        with pytest.raises(MissingAnchorPartition, match="Missing first partition on `/dev/sda'"):
            require_anchor([], "/dev/sda")

    def test_first_partition_not_number_one(self) -> None:
        with pytest.raises(MissingAnchorPartition):
            require_anchor(existing((2, 33, 65)))


class TestCompareLayout:
    """Tests for compare_layout."""

    def test_converged(self) -> None:
        assert compare_layout(existing(ANCHOR, (2, 33, 65)), desired(32), 0) is None

    def test_only_anchor_and_nothing_desired(self) -> None:
        assert compare_layout(existing(ANCHOR), [], 0) is None

    def test_difference_equal_to_delta_is_satisfied(self) -> None:
        assert compare_layout(existing(ANCHOR, (2, 33, 65)), desired(37), 5) is None
        assert compare_layout(existing(ANCHOR, (2, 33, 65)), desired(27), 5) is None

    def test_difference_above_delta_is_mismatch(self) -> None:
        assert compare_layout(existing(ANCHOR, (2, 33, 65)), desired(38), 5) == 0
        assert compare_layout(existing(ANCHOR, (2, 33, 65)), desired(26), 5) == 0

    def test_missing_partitions_on_disk(self) -> None:
        assert compare_layout(existing(ANCHOR), desired(32, 64), 1) == 0
        assert compare_layout(existing(ANCHOR, (2, 33, 65)), desired(32, 64), 1) == 1

    def test_surplus_partitions_on_disk(self) -> None:
        parts = existing(ANCHOR, (2, 33, 65), (3, 65, 97))
        assert compare_layout(parts, desired(32), 1) == 1

    def test_mismatch_in_middle(self) -> None:
        parts = existing(ANCHOR, (2, 33, 48), (3, 48, 80), (4, 80, 112), (5, 112, 120))
        assert compare_layout(parts, desired(16, 16, 32), 1) == 1

    def test_positional_not_multiset(self) -> None:
        parts = existing(ANCHOR, (2, 33, 49), (3, 49, 81))
        assert compare_layout(parts, desired(32, 16), 0) == 0

    def test_requires_anchor(self) -> None:
        with pytest.raises(MissingAnchorPartition):
            compare_layout([], desired(32), 1)


class TestPlanReconciliation:
    """Tests for plan_reconciliation."""

    def test_converged_plan_is_empty(self) -> None:
        plan = plan_reconciliation(existing(ANCHOR), desired(), None, 33)
        assert plan.is_converged
        assert plan.removals == []
        assert plan.creations == []

    def test_creates_after_anchor(self) -> None:
        plan = plan_reconciliation(existing(ANCHOR), desired(32, 64), 0, 33)
        assert plan.removals == []
        assert plan.creations == [PartitionSpan(33, 65), PartitionSpan(65, 129)]

    def test_offset_uses_desired_sizes_not_live_end(self) -> None:
        # Partition 2 is 15 bytes on disk but kept as a 16 byte match.
        parts = existing(ANCHOR, (2, 33, 48), (3, 48, 80), (4, 80, 112), (5, 112, 120))
        plan = plan_reconciliation(parts, desired(16, 16, 32), 1, 33)
        assert plan.removals == [3, 4, 5]
        assert plan.creations == [PartitionSpan(49, 65), PartitionSpan(65, 97)]
        assert plan.mismatch_index == 1

    def test_surplus_partitions_removed_without_creations(self) -> None:
        parts = existing(ANCHOR, (2, 33, 65), (3, 65, 97), (4, 97, 120))
        plan = plan_reconciliation(parts, desired(32), 1, 33)
        assert plan.removals == [3, 4]
        assert plan.creations == []
        assert not plan.is_converged

    def test_boundaries_are_contiguous(self) -> None:
        plan = plan_reconciliation(existing(ANCHOR), desired(10, 20, 30, 40), 0, 33)
        for current, following in zip(plan.creations, plan.creations[1:]):
            assert following.start_byte == current.end_byte
        assert [s.size_bytes for s in plan.creations] == [10, 20, 30, 40]

    def test_anchor_never_touched(self) -> None:
        parts = existing(ANCHOR, (2, 33, 40))
        plan = plan_reconciliation(parts, desired(8), 0, 33)
        assert 1 not in plan.removals
        assert all(span.start_byte >= 33 for span in plan.creations)


class TestReconcileLayout:
    """Tests for reconcile_layout."""

    def test_full_pipeline(self) -> None:
        parts = existing(ANCHOR, (2, 33, 48), (3, 48, 80), (4, 80, 112), (5, 112, 120))
        plan = reconcile_layout(parts, desired(16, 16, 32), 1)
        assert plan.removals == [3, 4, 5]
        assert plan.creations[0].start_byte == 49

    def test_missing_anchor_names_device(self) -> None:
        with pytest.raises(MissingAnchorPartition, match="/dev/vdb"):
            reconcile_layout([], desired(32), 1, "/dev/vdb")
