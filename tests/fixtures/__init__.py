"""
Test fixtures package for Merklist tests.

This package provides constants and factory functions for creating test objects:
- whitelist_fixtures.py: sample addresses, leaves, trees and whitelist files

Usage:
    from fixtures import ALICE, make_leaves, make_tree

    def test_something():
        tree = make_tree(["a", "b", "c"])
"""

from .whitelist_fixtures import (
    ALICE,
    BOB,
    CHARLIE,
    EVE,
    WHITELIST,
    ORIGINAL_PROMOTE_ROOT,
    ORIGINAL_PROMOTE_PROOFS,
    make_leaves,
    make_tree,
    write_whitelist,
    flip_bit,
)

__all__ = [
    "ALICE",
    "BOB",
    "CHARLIE",
    "EVE",
    "WHITELIST",
    "ORIGINAL_PROMOTE_ROOT",
    "ORIGINAL_PROMOTE_PROOFS",
    "make_leaves",
    "make_tree",
    "write_whitelist",
    "flip_bit",
]
