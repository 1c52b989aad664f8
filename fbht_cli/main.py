"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m fbht_cli commit <dir> [--key KEY ...] [--height H] [--eager] [--out PATH] [--json]
    python -m fbht_cli eval <slice|@file> [--json]
    python -m fbht_cli verify <slice|@file> --root HEX [--key KEY] [--height H] [--value HEX] [--json]
    python -m fbht_cli config --init|--show [--path PATH]

Environment Variables:
    FBHT_TREE_HEIGHT    Tree height (default: 17)
    FBHT_EAGER          Recompute digests on write (default: false)
    FBHT_LOG_LEVEL      Log level (default: INFO)
    FBHT_LOG_FILE       Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config.runtime import RuntimeConfig, get_default_config_template
from fbht_cli.commands import commit, evaluate, verify
from fbht_cli.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS


# Default config file locations, checked in order
DEFAULT_CONFIG_PATHS = [
    Path("fbht.yaml"),
    Path(".fbht.yaml"),
    Path.home() / ".config" / "fbht" / "config.yaml",
]


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from a YAML file and/or environment.

    Environment variables override file settings.
    """
    if config_path is not None:
        return RuntimeConfig.from_yaml(config_path).with_env_overrides()

    for default_path in DEFAULT_CONFIG_PATHS:
        if default_path.exists():
            return RuntimeConfig.from_yaml(default_path).with_env_overrides()

    return RuntimeConfig.from_env()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="fbht",
        description="Full binary hash tree CLI - commit files, extract and verify slices.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./fbht.yaml or ~/.config/fbht/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks for unexpected errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- commit command ---
    commit_parser = subparsers.add_parser(
        "commit",
        help="Commit the files of a directory into a tree",
        description="Build a tree keyed by relative path and print its root and requested slices.",
    )
    commit_parser.add_argument(
        "source_dir",
        type=str,
        help="Directory whose files are committed",
    )
    commit_parser.add_argument(
        "--key", "-k",
        dest="keys",
        action="append",
        default=None,
        help="Relative path to extract a slice for (repeatable)",
    )
    commit_parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Tree height (default: from config)",
    )
    commit_parser.add_argument(
        "--eager",
        action="store_true",
        default=False,
        help="Recompute digests on every write",
    )
    commit_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the commitment document (JSON) to this path",
    )
    commit_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    commit_parser.set_defaults(func=commit.commit_cmd)

    # --- eval command ---
    eval_parser = subparsers.add_parser(
        "eval",
        help="Recompute the root digest of a slice",
        description="Evaluate a slice without comparing it to any root.",
    )
    eval_parser.add_argument(
        "slice",
        type=str,
        help="Slice text, or @path to read it from a file",
    )
    eval_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    eval_parser.set_defaults(func=evaluate.eval_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a slice against a trusted root",
        description="Check that a slice evaluates to the trusted root and, optionally, its key and value.",
    )
    verify_parser.add_argument(
        "slice",
        type=str,
        help="Slice text, or @path to read it from a file",
    )
    verify_parser.add_argument(
        "--root", "-r",
        type=str,
        required=True,
        help="Trusted root hash (hex), or @path",
    )
    verify_parser.add_argument(
        "--key", "-k",
        type=str,
        default=None,
        help="Key the slice should prove (checks leaf position)",
    )
    verify_parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Tree height for the position check (default: from config)",
    )
    verify_parser.add_argument(
        "--value",
        type=str,
        default=None,
        help="Value (hex) that must be listed in the slice leaf",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="fbht.yaml",
        help="Path for config file (default: fbht.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (FBHT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: fbht config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
