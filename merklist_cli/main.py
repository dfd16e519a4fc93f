"""
Merklist CLI - Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merklist_cli root <whitelist> [--no-proofs] [--json]
    python -m merklist_cli prove <whitelist> <value>... [--json]
    python -m merklist_cli verify <value> --root R --proof P... [--leaf] [--json]
    python -m merklist_cli verify <value> --report report.json
    python -m merklist_cli config --init | --show

Tree options (root, prove, verify):
    --hash {keccak256,sha256}      Hash algorithm (default: keccak256)
    --sort-pairs / --no-sort-pairs Sort sibling pairs before hashing (default: on)
    --sort-leaves                  Sort leaves before building
    --odd-policy {duplicate,promote}

Environment Variables:
    MERKLIST_SORT_PAIRS         Sort sibling pairs (default: true)
    MERKLIST_ODD_NODE_POLICY    duplicate or promote (default: duplicate)
    MERKLIST_SORT_LEAVES        Sort leaves (default: false)
    MERKLIST_HASH_ALGORITHM     keccak256 or sha256 (default: keccak256)
    MERKLIST_LOG_LEVEL          Log level (default: INFO)
    MERKLIST_LOG_FILE           Also log to this file
    MERKLIST_OUTPUT_FORMAT      human or json (default: human)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.crypto.hashing import supported_algorithms
from core.merkle.merkle_tree import OddNodePolicy
from merklist_cli import __version__
from merklist_cli.commands import prove, root, verify
from merklist_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


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


def add_tree_options(parser: argparse.ArgumentParser) -> None:
    """Add the flags that control tree construction."""
    parser.add_argument(
        "--hash",
        type=str,
        choices=supported_algorithms(),
        default=None,
        help="Hash algorithm for leaves and nodes (default: from config or keccak256)",
    )
    parser.add_argument(
        "--sort-pairs",
        dest="sort_pairs",
        action="store_true",
        default=None,
        help="Sort each sibling pair before hashing (default)",
    )
    parser.add_argument(
        "--no-sort-pairs",
        dest="sort_pairs",
        action="store_false",
        help="Keep left/right order when hashing pairs",
    )
    parser.add_argument(
        "--sort-leaves",
        dest="sort_leaves",
        action="store_true",
        default=None,
        help="Sort leaf digests before building the tree",
    )
    parser.add_argument(
        "--odd-policy",
        type=str,
        choices=[p.value for p in OddNodePolicy],
        default=None,
        help="Handling of an unpaired last node (default: duplicate)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merklist",
        description="Merklist - Build whitelist Merkle roots, generate and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merklist.json or ~/.config/merklist/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Compute the Merkle root of a whitelist",
        description="Build the tree for a whitelist and print its root and all proofs.",
    )
    root_parser.add_argument(
        "whitelist",
        type=str,
        help="Whitelist file (one value per line, or a JSON array)",
    )
    root_parser.add_argument(
        "--no-proofs",
        action="store_true",
        default=False,
        help="Only print the root",
    )
    root_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    add_tree_options(root_parser)
    root_parser.set_defaults(func=root.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Print inclusion proofs for values",
        description="Build the tree for a whitelist and print proofs for the given values.",
    )
    prove_parser.add_argument(
        "whitelist",
        type=str,
        help="Whitelist file (one value per line, or a JSON array)",
    )
    prove_parser.add_argument(
        "values",
        nargs="+",
        help="Values to prove",
    )
    prove_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    add_tree_options(prove_parser)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inclusion proof against a root",
        description="Recompute the root from a value and its proof and compare.",
    )
    verify_parser.add_argument(
        "value",
        type=str,
        help="Whitelisted value (or leaf digest with --leaf)",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Expected Merkle root (0x hex)",
    )
    verify_parser.add_argument(
        "--proof",
        action="append",
        default=None,
        help="Sibling digest, bottom-up; repeat for each level. Prefix with left: or right: to fix the side",
    )
    verify_parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Take root, proof and tree options from a JSON report written by `root --json`",
    )
    verify_parser.add_argument(
        "--leaf",
        action="store_true",
        default=False,
        help="Treat VALUE as an already hashed leaf digest",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    add_tree_options(verify_parser)
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
        default="merklist.json",
        help="Path for config file (default: merklist.json)",
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
        print("You can also use environment variables (MERKLIST_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = args.cli_config
        config_dict = config.runtime.to_dict()
        config_dict["log_file"] = config.log_file
        config_dict["default_output_format"] = config.default_output_format
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    print("Usage: merklist config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=not whitelisted / verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if logging.getLogger().isEnabledFor(logging.DEBUG):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
