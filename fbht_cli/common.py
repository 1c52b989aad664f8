"""
Shared CLI helpers.
"""

from __future__ import annotations

from pathlib import Path


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def read_text_arg(value: str) -> str:
    """
    Resolve a CLI text argument.

    ``@path`` reads the file at ``path`` (surrounding whitespace stripped);
    anything else is returned as given.
    """
    if value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8").strip()
    return value
