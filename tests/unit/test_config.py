"""
Tests for diskagent.core.config module.
"""

import json
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from diskagent.core.config import (
    DiskAgentConfig,
    LoggingConfig,
    PartitionerConfig,
    RetryConfig,
    SafetyConfig,
    load_config,
)


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_default_values(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.file_enabled is True
        assert config.console_enabled is True
        assert config.json_format is False

    def test_custom_values(self) -> None:
        config = LoggingConfig(level="DEBUG", json_format=True)
        assert config.level == "DEBUG"
        assert config.json_format is True

    def test_path_expansion(self) -> None:
        config = LoggingConfig(log_directory="~/logs")
        assert "~" not in str(config.log_directory)


class TestPartitionerConfig:
    """Tests for PartitionerConfig."""

    def test_default_values(self) -> None:
        config = PartitionerConfig()
        assert config.parted_path == "parted"
        assert config.delta_bytes == 1024 * 1024
        assert config.command_timeout_seconds == 300

    def test_zero_delta_allowed(self) -> None:
        assert PartitionerConfig(delta_bytes=0).delta_bytes == 0

    def test_negative_delta_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PartitionerConfig(delta_bytes=-1)

    def test_timeout_bounds(self) -> None:
        with pytest.raises(ValidationError):
            PartitionerConfig(command_timeout_seconds=0)


class TestRetryConfig:
    """Tests for RetryConfig."""

    def test_default_values(self) -> None:
        assert RetryConfig().max_tries == 3

    def test_max_tries_bounds(self) -> None:
        with pytest.raises(ValidationError):
            RetryConfig(max_tries=0)


class TestDiskAgentConfig:
    """Tests for DiskAgentConfig."""

    def test_default_config(self) -> None:
        config = DiskAgentConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.partitioner, PartitionerConfig)
        assert isinstance(config.retry, RetryConfig)
        assert isinstance(config.safety, SafetyConfig)
        assert config.safety.require_confirmation is True

    def test_save_and_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"

            original = DiskAgentConfig(
                partitioner=PartitionerConfig(delta_bytes=4096, parted_path="/sbin/parted"),
                retry=RetryConfig(max_tries=5),
            )
            original.save(config_path)

            loaded = DiskAgentConfig.load(config_path)

            assert loaded.partitioner.delta_bytes == 4096
            assert loaded.partitioner.parted_path == "/sbin/parted"
            assert loaded.retry.max_tries == 5

    def test_load_partial_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            config_path.write_text(json.dumps({"partitioner": {"delta_bytes": 0}}))

            config = DiskAgentConfig.load(config_path)

            assert config.partitioner.delta_bytes == 0
            assert config.partitioner.parted_path == "parted"

    def test_load_nonexistent(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = DiskAgentConfig.load(Path(tmpdir) / "nonexistent.json")
            assert config.partitioner.delta_bytes == 1024 * 1024

    def test_ensure_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = DiskAgentConfig(
                logging=LoggingConfig(log_directory=Path(tmpdir) / "logs"),
                session_directory=Path(tmpdir) / "sessions",
            )
            config.ensure_directories()

            assert config.logging.log_directory.exists()
            assert config.session_directory.exists()

    def test_load_config_creates_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            DiskAgentConfig(
                logging=LoggingConfig(log_directory=Path(tmpdir) / "logs"),
                session_directory=Path(tmpdir) / "sessions",
            ).save(config_path)

            config = load_config(config_path)

            assert config.session_directory.exists()

    def test_get_session_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = DiskAgentConfig(session_directory=Path(tmpdir))
            session_file = config.get_session_file("0123456789abcdef")
            assert session_file == Path(tmpdir) / "report_01234567.json"
