"""
Merklist Core - Merkle Proofs
Inclusion proof generation and verification.

This module provides:
- ProofStep / MerkleProof: proof data types
- prove_inclusion / prove_index / prove_value: walk a built tree from a
  leaf to the root collecting siblings
- verify_proof: recompute the root from a leaf and its proof
- MerkleProver / MerkleVerifier: class-based convenience wrappers

A proof step records the sibling digest and which side the sibling sits
on. With sort_pairs the side is ignored during verification; without it
the side decides the concatenation order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Literal, Optional, Sequence, Union

from core.crypto.hashing import (
    DEFAULT_HASH_ALGORITHM,
    Value,
    from_hex,
    hash_leaf,
    to_hex,
)
from core.merkle.merkle_tree import MerkleTree, OddNodePolicy, merkle_parent
from core.schemas.errors import InvalidProofError, LeafNotFoundError


logger = logging.getLogger(__name__)


Position = Literal["left", "right"]
_POSITIONS = ("left", "right")


@dataclass(frozen=True)
class ProofStep:
    """
    One level of an inclusion proof.

    Attributes:
        sibling: The sibling digest at this level
        position: Side the sibling sits on relative to the running hash
    """
    sibling: bytes
    position: Position = "right"

    def __post_init__(self) -> None:
        if self.position not in _POSITIONS:
            raise ValueError(f"Proof step position must be 'left' or 'right', got {self.position!r}")

    def to_dict(self) -> dict[str, str]:
        return {"sibling": to_hex(self.sibling), "position": self.position}


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single leaf.

    Attributes:
        leaf: The leaf digest being proven
        index: The 0-based position of the leaf in level 0
        steps: Sibling steps from the leaf level up to just below the root
        root: The root this proof was generated against
        sort_pairs: Pair ordering rule of the source tree
        hash_algorithm: Hash algorithm of the source tree
    """
    leaf: bytes
    index: int
    steps: tuple[ProofStep, ...]
    root: bytes
    sort_pairs: bool = True
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")
        object.__setattr__(self, "steps", tuple(self.steps))

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def siblings(self) -> list[bytes]:
        return [step.sibling for step in self.steps]

    def to_hex(self) -> list[str]:
        """Sibling digests as 0x-prefixed hex, bottom-up."""
        return [to_hex(step.sibling) for step in self.steps]

    def to_dict(self) -> dict[str, Any]:
        return {
            "leaf": to_hex(self.leaf),
            "index": self.index,
            "root": to_hex(self.root),
            "sort_pairs": self.sort_pairs,
            "hash_algorithm": self.hash_algorithm,
            "steps": [step.to_dict() for step in self.steps],
        }


ProofLike = Union[MerkleProof, Sequence[Union[ProofStep, bytes, str, tuple]]]


# =============================================================================
# Proof generation
# =============================================================================

def prove_index(tree: MerkleTree, index: int) -> MerkleProof:
    """
    Generate a proof for the leaf at the given position.

    Algorithm:
    1. Start at the target leaf index
    2. At each level below the root:
       - If the node has a pair partner (index XOR 1), record it
       - If it is the unpaired last node: under DUPLICATE record the node
         itself as its sibling, under PROMOTE record nothing
       - Move up: index = index // 2

    Args:
        tree: A built MerkleTree
        index: 0-based leaf index

    Returns:
        MerkleProof with steps ordered bottom-up

    Raises:
        IndexError: If index is out of range
    """
    if index < 0 or index >= tree.leaf_count:
        raise IndexError(
            f"Leaf index {index} out of range for {tree.leaf_count} leaves"
        )

    steps: list[ProofStep] = []
    current_index = index

    for level in tree.levels[:-1]:
        sibling_index = current_index ^ 1
        if sibling_index < len(level):
            # Odd index means we are the right child, sibling on the left
            position: Position = "left" if current_index % 2 else "right"
            steps.append(ProofStep(level[sibling_index], position))
        elif tree.options.odd_node_policy is OddNodePolicy.DUPLICATE:
            steps.append(ProofStep(level[current_index], "right"))

        current_index //= 2

    return MerkleProof(
        leaf=tree.leaves[index],
        index=index,
        steps=tuple(steps),
        root=tree.root,
        sort_pairs=tree.options.sort_pairs,
        hash_algorithm=tree.options.hash_algorithm,
    )


def prove_inclusion(tree: MerkleTree, leaf: Union[bytes, str]) -> MerkleProof:
    """
    Generate a proof for a leaf digest.

    If the digest appears more than once in the tree, the proof is for
    its first occurrence.

    Args:
        tree: A built MerkleTree
        leaf: Leaf digest to prove (bytes or 0x hex)

    Returns:
        MerkleProof for the first matching leaf

    Raises:
        LeafNotFoundError: If the digest is not a leaf of the tree
        InvalidHexError: If a hex-encoded leaf cannot be decoded
        TypeError: If leaf is neither bytes nor str
    """
    leaf = _as_digest(leaf)
    try:
        index = tree.index_of(leaf)
    except ValueError:
        raise LeafNotFoundError(leaf) from None

    occurrences = tree.leaves.count(leaf)
    if occurrences > 1:
        logger.debug(f"Leaf {to_hex(leaf)} occurs {occurrences} times, proving index {index}")

    proof = prove_index(tree, index)
    logger.debug(f"Generated proof for leaf {to_hex(leaf)} at index {index} ({len(proof)} steps)")
    return proof


def prove_value(tree: MerkleTree, value: Value) -> MerkleProof:
    """
    Hash a raw value with the tree's algorithm and prove the resulting leaf.

    Raises:
        LeafNotFoundError: If the value is not whitelisted
    """
    leaf = hash_leaf(value, tree.options.hash_algorithm)
    try:
        return prove_inclusion(tree, leaf)
    except LeafNotFoundError:
        raise LeafNotFoundError(leaf, value=value) from None


# =============================================================================
# Proof verification
# =============================================================================

def _as_digest(value: Union[bytes, str]) -> bytes:
    if isinstance(value, str):
        return from_hex(value)
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError(f"Digest must be bytes or 0x hex, got {type(value).__name__}")
    return bytes(value)


def _as_step(item: Union[ProofStep, bytes, str, tuple]) -> ProofStep:
    if isinstance(item, ProofStep):
        return item
    if isinstance(item, tuple):
        sibling, position = item
        return ProofStep(_as_digest(sibling), position)
    # Bare sibling without a side: only meaningful with sorted pairs
    return ProofStep(_as_digest(item), "right")


def _normalize_steps(proof: ProofLike) -> list[ProofStep]:
    if isinstance(proof, MerkleProof):
        return list(proof.steps)
    return [_as_step(item) for item in proof]


def compute_root(
    leaf: Union[bytes, str],
    proof: ProofLike,
    sort_pairs: bool = True,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> bytes:
    """
    Fold a proof over a leaf and return the resulting root.

    Raises:
        InvalidHexError: If a hex-encoded digest cannot be decoded
    """
    current = _as_digest(leaf)
    for step in _normalize_steps(proof):
        if step.position == "left":
            current = merkle_parent(step.sibling, current, sort_pairs, hash_algorithm)
        else:
            current = merkle_parent(current, step.sibling, sort_pairs, hash_algorithm)
    return current


def verify_proof(
    root: Union[bytes, str],
    leaf: Union[bytes, str],
    proof: ProofLike,
    sort_pairs: bool = True,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> bool:
    """
    Verify that a leaf belongs to a tree with the given root.

    Algorithm:
    1. Start with current = leaf
    2. For each step (bottom-up):
       - sort_pairs: current = H(sorted(current, sibling))
       - otherwise: sibling on the left -> H(sibling + current),
         sibling on the right -> H(current + sibling)
    3. Valid iff current == root

    Args:
        root: Expected root digest (bytes or 0x hex)
        leaf: Leaf digest (bytes or 0x hex)
        proof: MerkleProof, or a sequence of ProofStep / (sibling, position)
            tuples / bare sibling digests (bytes or 0x hex)
        sort_pairs: Pair ordering rule the tree was built with
        hash_algorithm: Hash algorithm the tree was built with

    Returns:
        True if the proof reconstructs root, False otherwise

    Raises:
        InvalidHexError: If a hex-encoded digest cannot be decoded
    """
    expected = _as_digest(root)
    computed = compute_root(leaf, proof, sort_pairs, hash_algorithm)
    ok = computed == expected
    logger.debug(f"Proof verification {'passed' if ok else 'failed'} for root {to_hex(expected)}")
    return ok


def verify_merkle_proof(proof: MerkleProof, root: Optional[Union[bytes, str]] = None) -> bool:
    """
    Verify a self-describing MerkleProof.

    Uses the proof's own ordering rule and algorithm, against root if
    given, otherwise against the root recorded in the proof.
    """
    return verify_proof(
        proof.root if root is None else root,
        proof.leaf,
        proof,
        sort_pairs=proof.sort_pairs,
        hash_algorithm=proof.hash_algorithm,
    )


def assert_valid_proof(
    root: Union[bytes, str],
    leaf: Union[bytes, str],
    proof: ProofLike,
    sort_pairs: bool = True,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> None:
    """
    Raising variant of verify_proof().

    Raises:
        InvalidProofError: If the proof does not reconstruct root
    """
    expected = _as_digest(root)
    computed = compute_root(leaf, proof, sort_pairs, hash_algorithm)
    if computed != expected:
        raise InvalidProofError(root=expected, computed=computed)


# =============================================================================
# Convenience wrappers
# =============================================================================

class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> tree = MerkleTree.from_values(["0x1111...", "0x2222..."])
        >>> proof = MerkleProver.prove(tree, tree.leaves[1])
        >>> proof.index
        1
    """

    @staticmethod
    def prove(tree: MerkleTree, leaf: bytes) -> MerkleProof:
        """Proof for a leaf digest. Raises LeafNotFoundError if absent."""
        return prove_inclusion(tree, leaf)

    @staticmethod
    def prove_value(tree: MerkleTree, value: Value) -> MerkleProof:
        """Proof for a raw whitelist value."""
        return prove_value(tree, value)

    @staticmethod
    def prove_all(tree: MerkleTree) -> list[MerkleProof]:
        """Proofs for every leaf position, in leaf order."""
        return [prove_index(tree, i) for i in range(tree.leaf_count)]

    @staticmethod
    def hex_proofs(tree: MerkleTree, values: Iterable[Value]) -> dict[str, list[str]]:
        """Map each value (as str) to its hex proof. Raises on the first missing value."""
        result: dict[str, list[str]] = {}
        for value in values:
            key = value if isinstance(value, str) else to_hex(bytes(value))
            result[key] = prove_value(tree, value).to_hex()
        return result


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        """Verify a MerkleProof against its recorded root."""
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_leaf_in_root(
        leaf: Union[bytes, str],
        siblings: ProofLike,
        root: Union[bytes, str],
        sort_pairs: bool = True,
        hash_algorithm: str = DEFAULT_HASH_ALGORITHM,
    ) -> bool:
        """Verify a leaf digest against a root using raw components."""
        return verify_proof(root, leaf, siblings, sort_pairs, hash_algorithm)

    @staticmethod
    def verify_value_in_root(
        value: Value,
        siblings: ProofLike,
        root: Union[bytes, str],
        sort_pairs: bool = True,
        hash_algorithm: str = DEFAULT_HASH_ALGORITHM,
    ) -> bool:
        """Hash a raw value into a leaf and verify it against a root."""
        leaf = hash_leaf(value, hash_algorithm)
        return verify_proof(root, leaf, siblings, sort_pairs, hash_algorithm)


__all__ = [
    "Position",
    "ProofStep",
    "MerkleProof",
    "prove_index",
    "prove_inclusion",
    "prove_value",
    "compute_root",
    "verify_proof",
    "verify_merkle_proof",
    "assert_valid_proof",
    "MerkleProver",
    "MerkleVerifier",
]
