"""
diskagent data models.

Defines the partition table snapshot read from disk and the desired layout
supplied by callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DeviceDescriptor:
    """Device summary line of a partition table listing."""

    path: str
    size_bytes: int
    transport: str = ""
    logical_sector_size: int = 512
    physical_sector_size: int = 512
    table_type: str = ""
    model: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "size_bytes": self.size_bytes,
            "transport": self.transport,
            "logical_sector_size": self.logical_sector_size,
            "physical_sector_size": self.physical_sector_size,
            "table_type": self.table_type,
            "model": self.model,
        }


@dataclass(frozen=True)
class ExistingPartition:
    """A partition currently present on disk."""

    number: int  # 1-based, as numbered on disk
    start_byte: int
    end_byte: int
    size_bytes: int
    filesystem: str = ""

    @property
    def is_anchor(self) -> bool:
        return self.number == 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "start_byte": self.start_byte,
            "end_byte": self.end_byte,
            "size_bytes": self.size_bytes,
            "filesystem": self.filesystem,
        }


@dataclass(frozen=True)
class DesiredPartition:
    """A partition the caller wants after the anchor partition."""

    size_bytes: int

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError(f"Partition size must not be negative: {self.size_bytes}")


@dataclass
class DiskLayout:
    """Parsed partition table of a single device."""

    device: DeviceDescriptor
    partitions: list[ExistingPartition] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "device": self.device.to_dict(),
            "partitions": [p.to_dict() for p in self.partitions],
        }


@dataclass(frozen=True)
class PartitionSpan:
    """Byte range of a partition to be created."""

    start_byte: int
    end_byte: int

    @property
    def size_bytes(self) -> int:
        return self.end_byte - self.start_byte


@dataclass
class ReconciliationPlan:
    """Edits needed to converge a device onto a desired layout."""

    removals: list[int] = field(default_factory=list)
    creations: list[PartitionSpan] = field(default_factory=list)
    mismatch_index: int | None = None

    @property
    def is_converged(self) -> bool:
        return not self.removals and not self.creations

    def get_plan_text(self, device: str) -> str:
        """Get human-readable plan text."""
        lines = [f"TARGET: {device}"]
        if self.is_converged:
            lines.append("Layout already matches, nothing to do.")
            return "\n".join(lines)

        lines.append("EXECUTION STEPS:")
        step = 1
        for number in self.removals:
            lines.append(f"   {step}. Remove partition {number}")
            step += 1
        for span in self.creations:
            lines.append(
                f"   {step}. Create partition {span.start_byte}B-{span.end_byte}B "
                f"({span.size_bytes} bytes)"
            )
            step += 1
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "converged": self.is_converged,
            "mismatch_index": self.mismatch_index,
            "removals": list(self.removals),
            "creations": [
                {"start_byte": s.start_byte, "end_byte": s.end_byte} for s in self.creations
            ],
        }
