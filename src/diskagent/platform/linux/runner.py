"""
Subprocess-backed command runner.
"""

from __future__ import annotations

import subprocess
import time

from diskagent.core.logging import get_logger, log_command
from diskagent.platform.base import CommandResult, CommandRunner

logger = get_logger(__name__)


class SubprocessCommandRunner(CommandRunner):
    """Run commands with subprocess, capturing text output."""

    def __init__(self, timeout: int = 300) -> None:
        self.timeout = timeout

    def run_command(self, command: list[str]) -> CommandResult:
        """Run a system command."""
        logger.debug("Running command", command=command)
        start_time = time.time()

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            cmd_result = CommandResult(
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {self.timeout}s",
                command=command,
                duration_seconds=self.timeout,
            )
        except OSError as e:
            cmd_result = CommandResult(
                returncode=-1,
                stdout="",
                stderr=str(e),
                command=command,
                duration_seconds=time.time() - start_time,
            )
        else:
            cmd_result = CommandResult(
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
                command=command,
                duration_seconds=time.time() - start_time,
            )

        log_command(cmd_result, logger)
        return cmd_result
