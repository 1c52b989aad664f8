"""
CLI Commit Command

Commit every file under a directory into a fresh tree:
- key: the file's path relative to the directory (POSIX separators)
- value: SHA-256 of the file contents

Prints the root announcement and, for each requested key, its slice.

Usage:
    fbht commit DIR [--key KEY ...] [--height H] [--eager] [--out FILE] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

from core.config.runtime import RuntimeConfig, TreeConfig
from core.crypto.hashing import hash_file
from core.merkle.fbh_tree import FBHTree
from core.schemas.commitment import CommitmentDocument, RootAnnouncement, SliceEnvelope
from core.schemas.errors import HashTreeException, NotFoundException
from fbht_cli.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS


logger = logging.getLogger(__name__)


@dataclass
class CommitSummary:
    """Summary of a commit for CLI output."""
    source_dir: str = ""
    height: int = 0
    key_count: int = 0
    root_hash: str = ""
    output_path: str | None = None
    slices: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["output_path"] is None:
            del d["output_path"]
        if not d["errors"]:
            del d["errors"]
        return d


def collect_files(source_dir: Path) -> list[tuple[str, Path]]:
    """Return ``(key, path)`` for every regular file under ``source_dir``, sorted by key."""
    entries = [
        (path.relative_to(source_dir).as_posix(), path)
        for path in source_dir.rglob("*")
        if path.is_file()
    ]
    return sorted(entries)


def build_tree(source_dir: Path, tree_config: TreeConfig) -> FBHTree:
    """Commit the files under ``source_dir`` into a new tree."""
    tree = FBHTree.from_config(tree_config)
    for key, path in collect_files(source_dir):
        tree.put(key, hash_file(path))
    logger.info(f"Committed {len(tree)} files from {source_dir}")
    return tree


def build_document(tree: FBHTree, keys: list[str]) -> CommitmentDocument:
    """
    Build the commitment document for ``tree``.

    Raises:
        NotFoundException: If a requested key was not committed
    """
    return CommitmentDocument(
        announcement=RootAnnouncement.from_tree(tree),
        slices=[SliceEnvelope.from_tree(tree, key) for key in keys],
    )


def _resolve_tree_config(args: Namespace, config: RuntimeConfig) -> TreeConfig:
    height = args.height if args.height is not None else config.tree.height
    eager = args.eager or config.tree.eager
    return TreeConfig(height=height, eager=eager, max_height=config.tree.max_height)


def print_summary_human(summary: CommitSummary) -> None:
    """Print summary in human-readable format."""
    print(f"source: {summary.source_dir}")
    print(f"height: {summary.height}")
    print(f"keys: {summary.key_count}")
    print(f"root_hash: {summary.root_hash}")
    if summary.output_path:
        print(f"written: {summary.output_path}")
    for entry in summary.slices:
        print(f"\nslice[{entry['key']}]:")
        print(f"  {entry['slice']}")
    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")


def commit_cmd(args: Namespace) -> int:
    """
    Execute the commit command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    source_dir = Path(args.source_dir)
    config: RuntimeConfig = args.runtime_config

    if not source_dir.is_dir():
        print(f"Error: Not a directory: {source_dir}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        tree_config = _resolve_tree_config(args, config)
        tree = build_tree(source_dir, tree_config)
    except HashTreeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = CommitSummary(
        source_dir=str(source_dir),
        height=tree.height,
        key_count=len(tree),
        root_hash=tree.get_root_hash_hex(),
    )

    try:
        document = build_document(tree, list(args.keys or []))
    except NotFoundException as e:
        summary.errors.append(e.message)
        document = None

    if document is not None:
        summary.slices = [s.model_dump() for s in document.slices]
        if args.out:
            out_path = Path(args.out)
            out_path.write_text(document.model_dump_json(indent=2), encoding="utf-8")
            summary.output_path = str(out_path)
            logger.info(f"Commitment written to {out_path}")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_RUNTIME_ERROR if summary.errors else EXIT_SUCCESS
