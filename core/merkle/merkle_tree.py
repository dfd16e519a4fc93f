"""
Merklist Core - Merkle Tree Implementation
Deterministic Merkle tree construction over whitelist leaves.

This module provides:
- TreeOptions: pair ordering, odd-node policy, leaf ordering, hash algorithm
- MerkleTree: immutable layered tree (level 0 = leaves, last level = root)
- build_tree / build_merkle_root: bottom-up construction
- compute_tree_depth: number of hashing levels above the leaves

Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(encode_value(value))
   - Implemented via core.crypto.hashing.hash_leaf()
2. Parent hashing: parent = H(left + right), with the pair sorted by
   byte value first when sort_pairs is enabled
3. Odd node at a level: paired with itself (DUPLICATE) or carried up
   unchanged (PROMOTE), per TreeOptions.odd_node_policy
4. Empty leaves: EmptyInputError, no tree is returned
5. Single leaf: root = leaf (never hashed with itself)

Storage:
The tree keeps every level as a tuple of digests, so proof generation is
index arithmetic over the stored levels rather than a pointer walk.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from core.crypto.hashing import (
    DEFAULT_HASH_ALGORITHM,
    Value,
    get_hash_function,
    hash_concat,
    hash_leaf,
    to_hex,
)
from core.schemas.errors import EmptyInputError


logger = logging.getLogger(__name__)


class OddNodePolicy(str, Enum):
    """How the unpaired last node of an odd-sized level is handled."""

    DUPLICATE = "duplicate"
    PROMOTE = "promote"


@dataclass(frozen=True)
class TreeOptions:
    """
    Options controlling tree construction.

    Attributes:
        sort_pairs: Sort each sibling pair by byte value before hashing,
            making verification independent of left/right position
        odd_node_policy: DUPLICATE hashes an unpaired node with itself,
            PROMOTE carries it to the next level unchanged
        sort_leaves: Sort leaf digests before building
        hash_algorithm: Name of the hash used for leaves and parents
    """
    sort_pairs: bool = True
    odd_node_policy: OddNodePolicy = OddNodePolicy.DUPLICATE
    sort_leaves: bool = False
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM

    def __post_init__(self) -> None:
        """Normalize policy and algorithm names."""
        if not isinstance(self.odd_node_policy, OddNodePolicy):
            try:
                policy = OddNodePolicy(str(self.odd_node_policy).lower())
            except ValueError:
                raise ValueError(
                    f"Unknown odd node policy: {self.odd_node_policy!r}, "
                    f"expected one of {[p.value for p in OddNodePolicy]}"
                ) from None
            object.__setattr__(self, "odd_node_policy", policy)
        # Raises UnsupportedAlgorithmError for unknown names
        get_hash_function(self.hash_algorithm)
        object.__setattr__(self, "hash_algorithm", self.hash_algorithm.lower())


def merkle_parent(
    left: bytes,
    right: bytes,
    sort_pairs: bool = True,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> bytes:
    """
    Compute the parent hash of two child nodes.

    parent = H(min(l, r) + max(l, r)) when sort_pairs, else H(left + right)

    Args:
        left: Left child hash
        right: Right child hash
        sort_pairs: Order the pair by byte value before concatenating
        hash_algorithm: Hash algorithm name

    Returns:
        Parent hash (32 bytes)
    """
    if sort_pairs and right < left:
        left, right = right, left
    return hash_concat(left, right, hash_algorithm)


def _next_level(level: Sequence[bytes], options: TreeOptions) -> tuple[bytes, ...]:
    parents: list[bytes] = []
    for i in range(0, len(level), 2):
        if i + 1 < len(level):
            parents.append(
                merkle_parent(level[i], level[i + 1], options.sort_pairs, options.hash_algorithm)
            )
        elif options.odd_node_policy is OddNodePolicy.PROMOTE:
            parents.append(level[i])
        else:
            parents.append(
                merkle_parent(level[i], level[i], options.sort_pairs, options.hash_algorithm)
            )
    return tuple(parents)


@dataclass(frozen=True)
class MerkleTree:
    """
    An immutable Merkle tree.

    Build with MerkleTree.build() (from leaf digests) or
    MerkleTree.from_values() (from raw whitelist values).

    Attributes:
        levels: Tuple of levels, each a tuple of digests. levels[0] holds
            the leaves and levels[-1] holds exactly one digest, the root.
        options: The TreeOptions the tree was built with
    """
    levels: tuple[tuple[bytes, ...], ...]
    options: TreeOptions = field(default_factory=TreeOptions)

    def __post_init__(self) -> None:
        """Validate structure."""
        if not self.levels or not self.levels[0]:
            raise EmptyInputError()
        if len(self.levels[-1]) != 1:
            raise ValueError(
                f"Top level must hold exactly one digest, got {len(self.levels[-1])}"
            )

    @classmethod
    def build(
        cls,
        leaves: Iterable[bytes],
        options: Optional[TreeOptions] = None,
    ) -> "MerkleTree":
        """
        Build a tree bottom-up from leaf digests.

        Args:
            leaves: Non-empty sequence of leaf digests. Order is preserved
                unless options.sort_leaves is set.
            options: Construction options (defaults to TreeOptions())

        Returns:
            The constructed MerkleTree

        Raises:
            EmptyInputError: If leaves is empty
            TypeError: If a leaf is not bytes

        Example:
            >>> tree = MerkleTree.build([sha256(b"a"), sha256(b"b")])
            >>> len(tree.root)
            32
        """
        options = options or TreeOptions()
        level = tuple(leaves)

        if not level:
            raise EmptyInputError()
        for leaf in level:
            if not isinstance(leaf, (bytes, bytearray)):
                raise TypeError(f"Leaf digests must be bytes, got {type(leaf).__name__}")
        level = tuple(bytes(leaf) for leaf in level)

        if options.sort_leaves:
            level = tuple(sorted(level))

        if len(set(level)) != len(level):
            logger.debug(
                f"Tree has {len(level) - len(set(level))} duplicate leaves; "
                f"proofs use the first occurrence"
            )

        # Single leaf is its own root
        levels = [level]
        while len(level) > 1:
            level = _next_level(level, options)
            levels.append(level)

        tree = cls(levels=tuple(levels), options=options)
        logger.debug(
            f"Built Merkle tree: leaves={len(levels[0])} depth={tree.depth} "
            f"sort_pairs={options.sort_pairs} odd={options.odd_node_policy.value} "
            f"root={tree.root_hex}"
        )
        return tree

    @classmethod
    def from_values(
        cls,
        values: Iterable[Value],
        options: Optional[TreeOptions] = None,
    ) -> "MerkleTree":
        """
        Hash raw values into leaves and build the tree.

        Args:
            values: Whitelist values (bytes, hex strings or text)
            options: Construction options; the leaf hash uses
                options.hash_algorithm

        Returns:
            The constructed MerkleTree
        """
        options = options or TreeOptions()
        return cls.build(
            [hash_leaf(value, options.hash_algorithm) for value in values],
            options,
        )

    @property
    def root(self) -> bytes:
        """The root digest."""
        return self.levels[-1][0]

    @property
    def root_hex(self) -> str:
        """The root digest as 0x-prefixed hex."""
        return to_hex(self.root)

    @property
    def leaves(self) -> tuple[bytes, ...]:
        return self.levels[0]

    @property
    def leaf_count(self) -> int:
        return len(self.levels[0])

    @property
    def depth(self) -> int:
        """Number of hashing levels above the leaves (0 for a single leaf)."""
        return len(self.levels) - 1

    def index_of(self, leaf: bytes) -> int:
        """
        Position of the first occurrence of leaf in level 0.

        Raises:
            ValueError: If the leaf is not present
        """
        return self.levels[0].index(leaf)

    def __contains__(self, leaf: object) -> bool:
        return leaf in self.levels[0]

    def hash_pair(self, left: bytes, right: bytes) -> bytes:
        """Parent hash using this tree's pair ordering and algorithm."""
        return merkle_parent(left, right, self.options.sort_pairs, self.options.hash_algorithm)


def build_tree(
    leaves: Iterable[bytes],
    options: Optional[TreeOptions] = None,
) -> MerkleTree:
    """Build a MerkleTree from leaf digests. See MerkleTree.build()."""
    return MerkleTree.build(leaves, options)


def build_merkle_root(
    leaves: Iterable[bytes],
    options: Optional[TreeOptions] = None,
) -> bytes:
    """Compute only the root digest for a sequence of leaf digests."""
    return MerkleTree.build(leaves, options).root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the depth of a Merkle tree with given number of leaves.

    Depth counts the hashing levels above the leaves, which is also the
    length of a proof for a leaf that is never left unpaired. Under either
    odd-node policy a level of n nodes has (n + 1) // 2 parents, so the
    depth does not depend on the policy.

    Args:
        num_leaves: Number of leaves in the tree

    Returns:
        Tree depth (0 for an empty or single-leaf tree)
    """
    if num_leaves < 0:
        raise ValueError(f"Leaf count must be non-negative, got {num_leaves}")

    depth = 0
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


__all__ = [
    "OddNodePolicy",
    "TreeOptions",
    "MerkleTree",
    "merkle_parent",
    "build_tree",
    "build_merkle_root",
    "compute_tree_depth",
]
