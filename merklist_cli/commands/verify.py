"""
Merklist CLI - Verify Command

Check a proof against a root, offline. The proof comes either from
--root/--proof flags or from a report written by `merklist root --json`.

Usage:
    merklist verify VALUE --root 0x... --proof 0x... [--proof left:0x...]
    merklist verify VALUE --report report.json
    merklist verify 0x<leaf> --leaf --root 0x... --proof 0x...
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from core.crypto.hashing import from_hex, hash_leaf, to_hex
from core.merkle.merkle_proofs import ProofStep, compute_root
from core.schemas.errors import InvalidProofError, MerklistException
from core.schemas.reports import VerificationReport, WhitelistReport
from merklist_cli.common import resolve_tree_options, wants_json


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def parse_proof_item(item: str) -> Union[ProofStep, str]:
    """
    Parse one --proof argument.

    "left:0x..." / "right:0x..." give an explicit sibling side;
    a bare "0x..." is a sibling without a side (sorted-pair proofs).
    """
    if ":" in item:
        position, _, digest = item.partition(":")
        position = position.strip().lower()
        if position not in ("left", "right"):
            raise ValueError(f"Proof side must be 'left' or 'right', got {position!r}")
        return ProofStep(from_hex(digest.strip()), position)  # type: ignore[arg-type]
    return item.strip()


def load_report(path: Path) -> WhitelistReport:
    """Load a WhitelistReport written by the root command."""
    if not path.exists():
        raise FileNotFoundError(f"Report not found: {path}")
    try:
        return WhitelistReport.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ValueError(f"Invalid report {path}: {e.error_count()} validation errors") from e


def print_report_human(report: VerificationReport) -> None:
    """Print verification result in human-readable format."""
    if report.value is not None:
        print(f"value: {report.value}")
    print(f"leaf: {report.leaf}")
    print(f"root: {report.root}")
    print(f"computed_root: {report.computed_root}")
    print(f"proof_length: {len(report.proof)}")
    print(f"valid: {str(report.valid).lower()}")
    if report.error is not None:
        print(f"\n✗ {report.error.message}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (2 if the proof does not reconstruct the root)
    """
    output_json = wants_json(args)

    try:
        options = resolve_tree_options(args)
        sort_pairs = options.sort_pairs
        hash_algorithm = options.hash_algorithm

        if args.report:
            report_in = load_report(Path(args.report))
            entry = report_in.proof_for(args.value)
            if entry is None:
                print(f"Error: {args.value} is not in report {args.report}", file=sys.stderr)
                return EXIT_VERIFICATION_FAILED
            root = from_hex(report_in.root)
            steps: list[Union[ProofStep, str]]
            if entry.positions:
                steps = [
                    ProofStep(from_hex(sibling), position)
                    for sibling, position in zip(entry.proof, entry.positions)
                ]
            else:
                # Bare siblings, as written by merkletreejs getHexProof
                steps = list(entry.proof)
            sort_pairs = report_in.sort_pairs
            hash_algorithm = report_in.hash_algorithm
        else:
            if not args.root:
                print("Error: --root is required unless --report is given", file=sys.stderr)
                return EXIT_RUNTIME_ERROR
            root = from_hex(args.root)
            steps = [parse_proof_item(item) for item in (args.proof or [])]

        if args.leaf:
            leaf = from_hex(args.value)
            value = None
        else:
            leaf = hash_leaf(args.value, hash_algorithm)
            value = args.value

        computed = compute_root(leaf, steps, sort_pairs, hash_algorithm)
    except (FileNotFoundError, MerklistException, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    valid = computed == root
    report = VerificationReport(
        valid=valid,
        root=to_hex(root),
        computed_root=to_hex(computed),
        leaf=to_hex(leaf),
        value=value,
        proof=[
            to_hex(step.sibling) if isinstance(step, ProofStep) else step.lower()
            for step in steps
        ],
        sort_pairs=sort_pairs,
        hash_algorithm=hash_algorithm,
        error=None if valid else InvalidProofError(root, computed).to_error_model(),
    )

    if output_json:
        print(json.dumps(report.model_dump(mode="json"), indent=2))
    else:
        print_report_human(report)

    if valid:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
