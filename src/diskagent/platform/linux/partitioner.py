"""
parted-based partitioner.

Converges a device onto a list of desired partition sizes placed after
partition 1. The table is re-read on every call; nothing is cached, so
re-running ``partition`` after an interruption completes the remaining work.
Callers must serialize calls against the same device.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from diskagent.core.errors import (
    CommandFailed,
    DiskQueryFailed,
    LayoutParseError,
    LayoutParseFailed,
    PartitionCreationFailed,
    PartitionerError,
    PartitionRemovalFailed,
)
from diskagent.core.logging import get_logger
from diskagent.core.models import (
    DesiredPartition,
    DiskLayout,
    PartitionSpan,
    ReconciliationPlan,
)
from diskagent.core.reconcile import reconcile_layout, require_anchor
from diskagent.platform.base import CommandRunner, Partitioner
from diskagent.platform.linux.parsers import parse_parted_output

logger = get_logger(__name__)


class PartedPartitioner(Partitioner):
    """Partitioner that drives ``parted`` in byte units."""

    def __init__(
        self,
        runner: CommandRunner,
        delta_bytes: int,
        parted: str = "parted",
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        if delta_bytes < 0:
            raise ValueError(f"delta_bytes must not be negative: {delta_bytes}")
        self.runner = runner
        self.delta_bytes = delta_bytes
        self.parted = parted
        self.logger = log or logger

    # ==================== Commands ====================

    def _print_command(self, device: str) -> list[str]:
        return [self.parted, "-m", device, "unit", "B", "print"]

    def _rm_command(self, device: str, number: int) -> list[str]:
        return [self.parted, "-s", device, "rm", str(number)]

    def _mkpart_command(self, device: str, span: PartitionSpan) -> list[str]:
        return [
            self.parted,
            "-s",
            device,
            "unit",
            "B",
            "mkpart",
            "primary",
            str(span.start_byte),
            str(span.end_byte),
        ]

    # ==================== Queries ====================

    def get_layout(self, device: str) -> DiskLayout:
        """Read and parse the current partition table of ``device``."""
        try:
            result = self.runner.run_command(self._print_command(device)).raise_for_status()
        except CommandFailed as e:
            raise DiskQueryFailed(
                f"Getting existing partitions of `{device}'", cause=e
            ) from e

        try:
            return parse_parted_output(result.stdout)
        except LayoutParseError as e:
            raise LayoutParseFailed(
                f"Parsing existing partitions of `{device}'", cause=e
            ) from e

    def _plan(self, device: str, desired: Sequence[DesiredPartition]) -> ReconciliationPlan:
        layout = self.get_layout(device)
        plan = reconcile_layout(layout.partitions, desired, self.delta_bytes, device)
        self.logger.debug(
            "Compared partition layout",
            device=device,
            existing=len(layout.partitions),
            desired=len(desired),
            mismatch_index=plan.mismatch_index,
            delta_bytes=self.delta_bytes,
        )
        return plan

    def plan(self, device: str, desired: Sequence[DesiredPartition]) -> ReconciliationPlan:
        """Compute the edits ``partition`` would apply; only the query is run."""
        try:
            return self._plan(device, desired)
        except PartitionerError as e:
            raise e.with_context(f"Partitioning disk `{device}'")

    def get_device_size_in_bytes(self, device: str) -> int:
        """Device size minus the end offset of partition 1."""
        try:
            layout = self.get_layout(device)
            anchor = require_anchor(layout.partitions, device)
            if anchor.end_byte > layout.device.size_bytes:
                raise LayoutParseFailed(
                    f"Partition 1 of `{device}' ends at {anchor.end_byte}B, "
                    f"past the device size of {layout.device.size_bytes}B"
                )
        except PartitionerError as e:
            raise e.with_context(f"Getting remaining size of `{device}'")

        return layout.device.size_bytes - anchor.end_byte

    # ==================== Mutations ====================

    def partition(self, device: str, desired: Sequence[DesiredPartition]) -> None:
        """Remove and recreate partitions so ``device`` matches ``desired``."""
        try:
            plan = self._plan(device, desired)
            if plan.is_converged:
                self.logger.info("Partitions already match", device=device)
                return
            self._apply(device, plan)
        except PartitionerError as e:
            raise e.with_context(f"Partitioning disk `{device}'")

    def _apply(self, device: str, plan: ReconciliationPlan) -> None:
        for number in plan.removals:
            self.logger.info("Removing partition", device=device, number=number)
            try:
                self.runner.run_command(self._rm_command(device, number)).raise_for_status()
            except CommandFailed as e:
                raise PartitionRemovalFailed(
                    f"Removing partition from `{device}'", cause=e
                ) from e

        for span in plan.creations:
            self.logger.info(
                "Creating partition",
                device=device,
                start_byte=span.start_byte,
                end_byte=span.end_byte,
            )
            try:
                self.runner.run_command(self._mkpart_command(device, span)).raise_for_status()
            except CommandFailed as e:
                raise PartitionCreationFailed(
                    f"Creating partition on `{device}'", cause=e
                ) from e
