"""
Merklist CLI - Root Command

Build the Merkle tree for a whitelist and print its root,
along with a proof for every value.

Usage:
    merklist root whitelist.txt [--no-proofs] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.merkle.merkle_tree import MerkleTree
from core.schemas.errors import MerklistException
from core.schemas.reports import WhitelistReport
from merklist_cli.common import load_whitelist, resolve_tree_options, wants_json


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def print_report_human(report: WhitelistReport) -> None:
    """Print report in human-readable format."""
    print(f"root: {report.root}")
    print(f"hash_algorithm: {report.hash_algorithm}")
    print(f"sort_pairs: {str(report.sort_pairs).lower()}")
    print(f"sort_leaves: {str(report.sort_leaves).lower()}")
    print(f"odd_node_policy: {report.odd_node_policy}")
    print(f"leaves: {report.leaf_count}")
    print(f"depth: {report.depth}")

    if report.entries:
        print(f"\nproofs ({len(report.entries)}):")
        for entry in report.entries:
            print(f"  {entry.value} [index={entry.index}]")
            if not entry.proof:
                print("    (empty)")
            for sibling in entry.proof:
                print(f"    - {sibling}")


def root_cmd(args: Namespace) -> int:
    """
    Execute the root command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    output_json = wants_json(args)

    try:
        values = load_whitelist(Path(args.whitelist))
        options = resolve_tree_options(args)
        tree = MerkleTree.from_values(values, options)
        report = WhitelistReport.from_tree(tree, [] if args.no_proofs else values)
    except (FileNotFoundError, MerklistException, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if output_json:
        print(json.dumps(report.model_dump(mode="json"), indent=2))
    else:
        print_report_human(report)

    logger.info(f"Computed root {report.root} for {report.leaf_count} leaves")
    return EXIT_SUCCESS
