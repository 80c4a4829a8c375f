"""
diskagent structured logging.

Every command sent to a disk is logged with its exit status so that a
partially applied reconciliation can be reconstructed from the log
afterwards. Session operations are traced with their duration.
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from diskagent.core.config import LoggingConfig
    from diskagent.platform.base import CommandResult

ROOT_LOGGER = "diskagent"
MAX_LOGGED_OUTPUT = 500

_configured = False


def _handlers(config: LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if config.console_enabled:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(config.level)
        handlers.append(console)
    if config.file_enabled:
        config.log_directory.mkdir(parents=True, exist_ok=True)
        path = config.log_directory / f"{ROOT_LOGGER}_{date.today():%Y%m%d}.log"
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def setup_logging(config: LoggingConfig) -> None:
    """Route structlog events through stdlib handlers. Configures once per process."""
    global _configured

    if _configured:
        return

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(logging.DEBUG)
    for handler in _handlers(config):
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    renderer: structlog.types.Processor
    if config.json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger below the ``diskagent`` logger."""
    return structlog.get_logger(name or ROOT_LOGGER)


def log_command(result: CommandResult, log: Any = None) -> None:
    """Log a finished disk command; failures at warning level with their stderr."""
    log = log or get_logger()
    fields = {
        "command": result.command_line,
        "returncode": result.returncode,
        "duration_seconds": round(result.duration_seconds, 3),
    }
    if result.success:
        log.debug("Command finished", **fields)
    else:
        log.warning("Command failed", stderr=result.stderr[:MAX_LOGGED_OUTPUT], **fields)


@dataclass
class OperationTrace:
    """Timing of one session operation."""

    operation: str
    started: float = field(default_factory=time.monotonic)
    finished: float | None = None

    @property
    def duration_seconds(self) -> float:
        end = self.finished if self.finished is not None else time.monotonic()
        return end - self.started


@contextmanager
def log_operation(operation: str, log: Any = None, **context: Any) -> Iterator[OperationTrace]:
    """Log the start and outcome of ``operation``, yielding its trace."""
    log = (log or get_logger()).bind(operation=operation, **context)
    trace = OperationTrace(operation)
    log.info("Operation started")
    try:
        yield trace
    except Exception as e:
        trace.finished = time.monotonic()
        log.error(
            "Operation failed",
            duration_seconds=trace.duration_seconds,
            error_type=type(e).__name__,
            error=str(e),
        )
        raise
    trace.finished = time.monotonic()
    log.info("Operation completed", duration_seconds=trace.duration_seconds)
