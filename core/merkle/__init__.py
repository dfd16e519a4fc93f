"""
Merklist Core - Merkle Tree and Proofs
Deterministic Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree / TreeOptions / OddNodePolicy: the tree and how it is built
- MerkleProof / ProofStep: inclusion proofs
- prove_inclusion / verify_proof: the core proof operations

Commitment Rules:
1. Leaf hashing: H(encode_value(value)), keccak256 by default
2. Parent hashing: H(left + right), pair sorted by byte value if sort_pairs
3. Odd node: duplicated (default) or promoted unchanged
4. Empty tree: EmptyInputError
5. Single leaf: root = leaf

Usage:
    from core.merkle import MerkleTree, TreeOptions, prove_inclusion, verify_proof
    from core.crypto import hash_leaf

    tree = MerkleTree.from_values(addresses, TreeOptions(sort_pairs=True))
    leaf = hash_leaf(addresses[0])
    proof = prove_inclusion(tree, leaf)
    assert verify_proof(tree.root, leaf, proof, sort_pairs=True)
"""
from .merkle_tree import (
    OddNodePolicy,
    TreeOptions,
    MerkleTree,
    merkle_parent,
    build_tree,
    build_merkle_root,
    compute_tree_depth,
)

from .merkle_proofs import (
    Position,
    ProofStep,
    MerkleProof,
    prove_index,
    prove_inclusion,
    prove_value,
    compute_root,
    verify_proof,
    verify_merkle_proof,
    assert_valid_proof,
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "OddNodePolicy",
    "TreeOptions",
    "MerkleTree",
    "Position",
    "ProofStep",
    "MerkleProof",
    # Core functions
    "merkle_parent",
    "build_tree",
    "build_merkle_root",
    "compute_tree_depth",
    "prove_index",
    "prove_inclusion",
    "prove_value",
    "compute_root",
    "verify_proof",
    "verify_merkle_proof",
    "assert_valid_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
