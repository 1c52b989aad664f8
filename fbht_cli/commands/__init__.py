"""
CLI command modules.
"""

from fbht_cli.commands import commit, evaluate, verify

__all__ = ["commit", "evaluate", "verify"]
