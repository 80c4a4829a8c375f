"""
Pytest configuration and fixtures for diskagent tests.
"""

import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from diskagent.platform.base import CommandResult, CommandRunner  # noqa: E402


class FakeCommandRunner(CommandRunner):
    """Command runner that records commands and replays canned results.

    Commands without a registered result succeed with empty output. When
    several results are registered for one command they are returned in
    order, and the last one keeps being returned.
    """

    def __init__(self) -> None:
        self.results: dict[str, list[CommandResult]] = {}
        self.run_commands: list[list[str]] = []

    def add_result(
        self,
        command_line: str,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> None:
        self.results.setdefault(command_line, []).append(
            CommandResult(
                returncode=returncode,
                stdout=stdout,
                stderr=stderr,
                command=command_line.split(),
            )
        )

    def run_command(self, command: list[str]) -> CommandResult:
        self.run_commands.append(list(command))
        queued = self.results.get(" ".join(command))
        if not queued:
            return CommandResult(returncode=0, stdout="", stderr="", command=command)
        if len(queued) > 1:
            return queued.pop(0)
        return queued[0]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_runner() -> FakeCommandRunner:
    """Create a recording command runner."""
    return FakeCommandRunner()


@pytest.fixture
def partitioner(fake_runner: FakeCommandRunner) -> "PartedPartitioner":
    """Create a parted partitioner with a 1 byte tolerance."""
    from diskagent.platform.linux.partitioner import PartedPartitioner

    return PartedPartitioner(runner=fake_runner, delta_bytes=1)


@pytest.fixture
def sample_config(temp_dir: Path) -> "DiskAgentConfig":
    """Create a sample configuration for testing."""
    from diskagent.core.config import DiskAgentConfig

    config = DiskAgentConfig(session_directory=temp_dir / "sessions")
    config.logging.log_directory = temp_dir / "logs"
    config.logging.file_enabled = False
    config.ensure_directories()
    return config


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
