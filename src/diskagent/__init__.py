"""
diskagent - Partition reconciliation for node lifecycle agents.

Converges a block device's partition table onto a desired list of
partition sizes and reports the capacity available for them.
"""

__version__ = "1.0.0"
__author__ = "diskagent Team"

from diskagent.core.config import DiskAgentConfig
from diskagent.core.session import Session

__all__ = ["DiskAgentConfig", "Session", "__version__"]
