"""
CLI Eval Command

Recompute the root digest implied by a slice. No trusted root is involved;
use ``verify`` to compare against one.

Usage:
    fbht eval SLICE|@FILE [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.crypto.hashing import to_hex
from core.merkle.slice_codec import parse_slice
from core.schemas.errors import MalformedProofException
from fbht_cli.common import EXIT_SUCCESS, EXIT_VERIFICATION_FAILED, read_text_arg


def eval_cmd(args: Namespace) -> int:
    """Execute the eval command."""
    proof = read_text_arg(args.slice)

    try:
        parsed = parse_slice(proof)
    except MalformedProofException as e:
        print(f"Malformed slice: {e.message}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    root_hex = to_hex(parsed.root_digest())

    if args.json:
        print(json.dumps({
            "root_hash": root_hex,
            "depth": parsed.depth,
            "leaf_index": parsed.leaf_index(),
            "values": [to_hex(v) for v in parsed.values],
        }, indent=2))
    else:
        print(root_hex)

    return EXIT_SUCCESS
