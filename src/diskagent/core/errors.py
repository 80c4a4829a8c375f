"""
diskagent error taxonomy.

Every error keeps its specific class as it travels outward, while callers
prepend context so the rendered message reads from the outermost operation
down to the innermost cause.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from diskagent.platform.base import CommandResult


class DiskAgentError(Exception):
    """Base class for all diskagent errors."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.contexts: list[str] = []

    def with_context(self, context: str) -> DiskAgentError:
        """Prepend an outer context message and return the same error."""
        self.contexts.insert(0, context)
        return self

    def __str__(self) -> str:
        parts = [*self.contexts, self.message]
        if self.cause is not None:
            parts.append(str(self.cause))
        return ": ".join(parts)


class CommandFailed(DiskAgentError):
    """An external command exited non-zero or could not be run."""

    def __init__(self, result: CommandResult) -> None:
        self.result = result
        detail = (result.stderr or "").strip() or f"exit status {result.returncode}"
        super().__init__(f"Running command '{result.command_line}': {detail}")


class PartitionerError(DiskAgentError):
    """Base class for partition reconciliation failures."""


class DiskQueryFailed(PartitionerError):
    """Reading the current partition table failed."""


class LayoutParseFailed(PartitionerError):
    """The partition table listing could not be parsed."""


class MissingAnchorPartition(PartitionerError):
    """Partition 1 is absent, so there is nothing to anchor the layout on."""


class PartitionRemovalFailed(PartitionerError):
    """Removing an existing partition failed."""


class PartitionCreationFailed(PartitionerError):
    """Creating a new partition failed."""


class RetriesExhausted(DiskAgentError):
    """A retried operation failed on every attempt."""


class LayoutParseError(ValueError):
    """Raised by the parted output parser on malformed input."""
