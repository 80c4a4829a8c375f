"""
diskagent Core - Backend service layer.

Contains the data model, reconciliation logic, configuration,
logging and session management.
"""

from diskagent.core.config import DiskAgentConfig
from diskagent.core.errors import (
    DiskAgentError,
    DiskQueryFailed,
    LayoutParseFailed,
    MissingAnchorPartition,
    PartitionCreationFailed,
    PartitionerError,
    PartitionRemovalFailed,
)
from diskagent.core.logging import get_logger, setup_logging
from diskagent.core.reconcile import compare_layout, plan_reconciliation, reconcile_layout
from diskagent.core.session import Session

__all__ = [
    "DiskAgentConfig",
    "DiskAgentError",
    "DiskQueryFailed",
    "LayoutParseFailed",
    "MissingAnchorPartition",
    "PartitionCreationFailed",
    "PartitionerError",
    "PartitionRemovalFailed",
    "Session",
    "compare_layout",
    "get_logger",
    "plan_reconciliation",
    "reconcile_layout",
    "setup_logging",
]
