"""
diskagent Platform Abstraction Layer.

Provides the platform-specific partitioner implementation.
"""

from __future__ import annotations

import platform
from typing import TYPE_CHECKING

from diskagent.platform.base import CommandResult, CommandRunner, Partitioner

if TYPE_CHECKING:
    from diskagent.core.config import PartitionerConfig


def get_partitioner(config: PartitionerConfig) -> Partitioner:
    """Get the partitioner for the current OS."""
    system = platform.system().lower()

    if system == "linux":
        from diskagent.platform.linux import PartedPartitioner, SubprocessCommandRunner

        return PartedPartitioner(
            runner=SubprocessCommandRunner(timeout=config.command_timeout_seconds),
            delta_bytes=config.delta_bytes,
            parted=config.parted_path,
        )
    raise RuntimeError(f"Unsupported platform: {system}")


__all__ = [
    "CommandResult",
    "CommandRunner",
    "Partitioner",
    "get_partitioner",
]
