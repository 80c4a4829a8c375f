"""
diskagent Linux Platform Backend.

Implements partition reconciliation using parted in byte units.
"""

from diskagent.platform.linux.parsers import parse_parted_output
from diskagent.platform.linux.partitioner import PartedPartitioner
from diskagent.platform.linux.runner import SubprocessCommandRunner

__all__ = [
    "PartedPartitioner",
    "SubprocessCommandRunner",
    "parse_parted_output",
]
