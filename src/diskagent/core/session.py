"""
diskagent Session Management.

Ties configuration, logging and the partitioner together and records every
operation in a session report.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from diskagent.core.config import DiskAgentConfig, load_config
from diskagent.core.errors import DiskAgentError, DiskQueryFailed
from diskagent.core.logging import get_logger, log_operation, setup_logging
from diskagent.core.models import DesiredPartition, DiskLayout, ReconciliationPlan
from diskagent.core.retry import retryable

if TYPE_CHECKING:
    from diskagent.platform.base import Partitioner

T = TypeVar("T")

logger = get_logger(__name__)


@dataclass
class SessionReport:
    """Session report for audit and review."""

    session_id: str
    started_at: datetime
    ended_at: datetime | None = None
    operations: list[dict[str, Any]] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)
    config_snapshot: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "operations": self.operations,
            "errors": self.errors,
            "config_snapshot": self.config_snapshot,
            "summary": {
                "total_operations": len(self.operations),
                "failed_operations": sum(
                    1 for op in self.operations if not op.get("success", True)
                ),
                "total_errors": len(self.errors),
            },
        }

    def save(self, path: Path) -> None:
        """Save report to file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)


def _desired_partitions(sizes: Sequence[int]) -> list[DesiredPartition]:
    return [DesiredPartition(size_bytes=size) for size in sizes]


class Session:
    """
    Manages a diskagent session.

    This is the main entry point for partitioning operations.
    """

    def __init__(
        self,
        config: DiskAgentConfig | None = None,
        partitioner: Partitioner | None = None,
        session_id: str | None = None,
    ) -> None:
        self.id = session_id or str(uuid.uuid4())
        self.config = config or load_config()
        self.started_at = datetime.now()

        setup_logging(self.config.logging)

        self._partitioner = partitioner
        self._report = SessionReport(
            session_id=self.id,
            started_at=self.started_at,
            config_snapshot=self.config.model_dump(mode="json"),
        )

        logger.info("Session started", session_id=self.id)

    @property
    def partitioner(self) -> Partitioner:
        """Get the platform-specific partitioner."""
        if self._partitioner is None:
            from diskagent.platform import get_partitioner

            self._partitioner = get_partitioner(self.config.partitioner)
        return self._partitioner

    def _run(self, operation: str, device: str, func: Callable[[], T]) -> T:
        """Run an operation, logging it and recording it in the report."""
        record: dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "operation": operation,
            "device": device,
            "success": False,
        }
        with log_operation(operation, logger, device=device, session_id=self.id) as trace:
            try:
                result = func()
            except (DiskAgentError, ValueError) as e:
                record.update(error=str(e), error_type=type(e).__name__)
                self._report.errors.append(
                    {"timestamp": datetime.now().isoformat(), "device": device, "error": str(e)}
                )
                raise
            finally:
                record["duration_seconds"] = trace.duration_seconds
                self._report.operations.append(record)

        record["success"] = True
        return result

    def layout(self, device: str) -> DiskLayout:
        """Read the current partition table of ``device``."""
        return self._run("read layout", device, lambda: self.partitioner.get_layout(device))

    def plan(self, device: str, sizes: Sequence[int]) -> ReconciliationPlan:
        """Compute the edits needed for ``device`` to match ``sizes``."""
        return self._run(
            "plan partitions",
            device,
            lambda: self.partitioner.plan(device, _desired_partitions(sizes)),
        )

    def partition(self, device: str, sizes: Sequence[int]) -> None:
        """Converge ``device`` onto ``sizes``. Never retried."""
        self._run(
            "partition disk",
            device,
            lambda: self.partitioner.partition(device, _desired_partitions(sizes)),
        )

    def device_size(self, device: str) -> int:
        """Capacity after the anchor partition, retrying the read-only query."""
        query = retryable(
            self.config.retry.max_tries,
            f"Getting device size of `{device}'",
            exceptions=(DiskQueryFailed,),
            log=logger,
        )(self.partitioner.get_device_size_in_bytes)
        return self._run("get device size", device, lambda: query(device))

    def close(self) -> Path:
        """Close the session and save the report."""
        self._report.ended_at = datetime.now()

        report_path = self.config.get_session_file(self.id)
        self._report.save(report_path)

        logger.info(
            "Session closed",
            session_id=self.id,
            duration_seconds=(self._report.ended_at - self.started_at).total_seconds(),
            report_path=str(report_path),
        )

        return report_path

    def get_report(self) -> SessionReport:
        """Get the current session report."""
        return self._report

    def __enter__(self) -> Session:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
