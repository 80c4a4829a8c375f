"""
Partition layout reconciliation.

Compares the partitions found on disk with the desired sizes and computes
the removals and creations that bring the disk in line. Partition 1 is the
anchor: it is never touched and all offsets are measured from its end.
"""

from __future__ import annotations

from collections.abc import Sequence

from diskagent.core.errors import MissingAnchorPartition
from diskagent.core.models import (
    DesiredPartition,
    ExistingPartition,
    PartitionSpan,
    ReconciliationPlan,
)


def require_anchor(
    existing: Sequence[ExistingPartition], device: str | None = None
) -> ExistingPartition:
    """Return partition 1, raising MissingAnchorPartition if it is absent."""
    if not existing or not existing[0].is_anchor:
        if device:
            raise MissingAnchorPartition(f"Missing first partition on `{device}'")
        raise MissingAnchorPartition("Missing first partition")
    return existing[0]


def compare_layout(
    existing: Sequence[ExistingPartition],
    desired: Sequence[DesiredPartition],
    delta: int,
) -> int | None:
    """
    Positionally compare partitions after the anchor with the desired sizes.

    Returns the first index where the sizes differ by more than ``delta`` or
    where only one side has an entry, or None when every position matches.
    """
    require_anchor(existing)

    candidates = existing[1:]
    for index in range(max(len(candidates), len(desired))):
        if index >= len(candidates) or index >= len(desired):
            return index
        if abs(candidates[index].size_bytes - desired[index].size_bytes) > delta:
            return index
    return None


def plan_reconciliation(
    existing: Sequence[ExistingPartition],
    desired: Sequence[DesiredPartition],
    mismatch_index: int | None,
    anchor_end: int,
) -> ReconciliationPlan:
    """
    Compute removals and creations starting at ``mismatch_index``.

    New boundaries are derived from the desired sizes of the kept partitions,
    not from their live end offsets, so tolerated drift never accumulates.
    """
    if mismatch_index is None:
        return ReconciliationPlan()

    removals = sorted(p.number for p in existing[1:][mismatch_index:])

    offset = anchor_end + sum(p.size_bytes for p in desired[:mismatch_index])
    creations: list[PartitionSpan] = []
    for partition in desired[mismatch_index:]:
        span = PartitionSpan(start_byte=offset, end_byte=offset + partition.size_bytes)
        creations.append(span)
        offset = span.end_byte

    return ReconciliationPlan(
        removals=removals,
        creations=creations,
        mismatch_index=mismatch_index,
    )


def reconcile_layout(
    existing: Sequence[ExistingPartition],
    desired: Sequence[DesiredPartition],
    delta: int,
    device: str | None = None,
) -> ReconciliationPlan:
    """Check the anchor, compare, and plan in one step."""
    anchor = require_anchor(existing, device)
    mismatch_index = compare_layout(existing, desired, delta)
    return plan_reconciliation(existing, desired, mismatch_index, anchor.end_byte)
