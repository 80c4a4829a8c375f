"""
diskagent Platform Backend Base.

Defines the narrow interfaces the reconciliation engine depends on: running
external commands and managing partitions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

from diskagent.core.errors import CommandFailed

if TYPE_CHECKING:
    from diskagent.core.models import DesiredPartition, DiskLayout, ReconciliationPlan


class CommandResult:
    """Result of a command execution."""

    def __init__(
        self,
        returncode: int,
        stdout: str,
        stderr: str,
        command: str | list[str],
        duration_seconds: float = 0.0,
    ) -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.command = command
        self.duration_seconds = duration_seconds

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return self.command if isinstance(self.command, str) else " ".join(self.command)

    def raise_for_status(self) -> CommandResult:
        """Raise CommandFailed unless the command succeeded."""
        if not self.success:
            raise CommandFailed(self)
        return self

    def __repr__(self) -> str:
        return f"CommandResult(rc={self.returncode}, cmd='{self.command_line[:50]}...')"


class CommandRunner(ABC):
    """Runs external commands synchronously and captures their output."""

    @abstractmethod
    def run_command(self, command: list[str]) -> CommandResult:
        """Run ``command`` and return its result; never raises on failure."""


class Partitioner(ABC):
    """Converges a device's partition table onto a desired layout."""

    @abstractmethod
    def get_layout(self, device: str) -> DiskLayout:
        """Read and parse the current partition table of ``device``."""

    @abstractmethod
    def plan(self, device: str, desired: Sequence[DesiredPartition]) -> ReconciliationPlan:
        """Compute the edits ``partition`` would apply, without applying them."""

    @abstractmethod
    def partition(self, device: str, desired: Sequence[DesiredPartition]) -> None:
        """Apply the edits needed for ``device`` to match ``desired``."""

    @abstractmethod
    def get_device_size_in_bytes(self, device: str) -> int:
        """Bytes available for reconciled partitions after the anchor partition."""
