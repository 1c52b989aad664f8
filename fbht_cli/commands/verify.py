"""
CLI Verify Command

Verify a slice offline against a trusted root:
- Parse the slice under the slice grammar
- Compare the recomputed root with the trusted root
- Optionally check the value is listed and the key routes to the proven leaf

Usage:
    fbht verify SLICE|@FILE --root HEX [--key KEY --height H] [--value HEX] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from core.crypto.hashing import from_hex
from core.merkle.verifier import check_slice
from core.schemas.verification import VerificationResult
from fbht_cli.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    read_text_arg,
)


logger = logging.getLogger(__name__)


def print_result_human(result: VerificationResult) -> None:
    """Print a verification result in human-readable format."""
    print(f"ok: {str(result.ok).lower()}")
    if result.computed_root:
        print(f"computed_root: {result.computed_root}")
    for check in result.checks:
        status = "✓" if check.ok else "✗"
        if check.severity == "warn":
            status = "-"
        print(f"  {status} {check.check_id}: {check.message}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    proof = read_text_arg(args.slice)

    value = None
    if args.value:
        try:
            value = from_hex(args.value)
        except ValueError as e:
            print(f"Error: --value is not valid hex: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

    height = args.height
    if args.key is not None and height is None:
        height = args.runtime_config.tree.height

    result = check_slice(
        proof,
        read_text_arg(args.root),
        key=args.key,
        value=value,
        height=height,
    )

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        print_result_human(result)

    if result.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
