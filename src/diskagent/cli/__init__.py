"""
diskagent CLI Module.

Provides command-line interface for diskagent operations.
"""

from diskagent.cli.main import main, cli

__all__ = ["main", "cli"]
