"""
Merklist CLI - Prove Command

Print inclusion proofs for specific values of a whitelist.

Usage:
    merklist prove whitelist.txt VALUE [VALUE ...] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from core.merkle.merkle_proofs import prove_value
from core.merkle.merkle_tree import MerkleTree
from core.schemas.errors import LeafNotFoundError, MerklistException
from core.schemas.reports import ProofEntry
from merklist_cli.common import load_whitelist, resolve_tree_options, wants_json


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_NOT_WHITELISTED = 2


@dataclass
class ProveSummary:
    """Summary of proof generation for CLI output."""
    root: str = ""
    proofs: list[dict[str, Any]] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["missing"]:
            del d["missing"]
        return d

    @property
    def all_found(self) -> bool:
        return not self.missing


def print_summary_human(summary: ProveSummary) -> None:
    """Print summary in human-readable format."""
    print(f"root: {summary.root}")
    for proof in summary.proofs:
        print(f"\n{proof['value']} [index={proof['index']}]")
        print(f"  leaf: {proof['leaf']}")
        if not proof["proof"]:
            print("  proof: (empty)")
        else:
            print("  proof:")
            for sibling in proof["proof"]:
                print(f"    - {sibling}")

    if summary.missing:
        print(f"\nnot whitelisted ({len(summary.missing)}):")
        for value in summary.missing:
            print(f"  ✗ {value}")


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (2 if any value is not whitelisted)
    """
    output_json = wants_json(args)

    try:
        values = load_whitelist(Path(args.whitelist))
        tree = MerkleTree.from_values(values, resolve_tree_options(args))
    except (FileNotFoundError, MerklistException, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = ProveSummary(root=tree.root_hex)
    for value in args.values:
        try:
            proof = prove_value(tree, value)
        except LeafNotFoundError:
            logger.warning(f"Value not whitelisted: {value}")
            summary.missing.append(value)
            continue
        summary.proofs.append(ProofEntry.from_proof(value, proof).model_dump())

    if output_json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.all_found else EXIT_NOT_WHITELISTED
