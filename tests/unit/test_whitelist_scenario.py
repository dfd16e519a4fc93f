"""
Whitelist Scenario Tests

Three whitelisted address-like values A, B, C and one outsider D,
hashed with keccak256 and built with sorted pairs.

- Default (duplicate-odd) tree: 32-byte root, 2-step proof for A,
  A verifies, D is rejected
- Promote-odd tree: root and proofs match the reference vectors
  produced by merkletreejs for the same whitelist
"""
import pytest

from core.crypto.hashing import from_hex, hash_leaf, keccak256, to_hex
from core.merkle.merkle_proofs import prove_inclusion, prove_value, verify_proof
from core.merkle.merkle_tree import MerkleTree, OddNodePolicy, TreeOptions
from core.schemas.errors import LeafNotFoundError

from fixtures import (
    ALICE,
    BOB,
    CHARLIE,
    EVE,
    ORIGINAL_PROMOTE_PROOFS,
    ORIGINAL_PROMOTE_ROOT,
    WHITELIST,
    make_tree,
)


class TestDuplicateOddWhitelist:
    """Scenario with the default odd-node policy."""

    def test_root_is_32_bytes(self, whitelist_tree):
        assert len(whitelist_tree.root) == 32

    def test_alice_proof_has_two_steps(self, whitelist_tree):
        proof = prove_inclusion(whitelist_tree, hash_leaf(ALICE))

        assert len(proof) == 2

    def test_alice_verifies(self, whitelist_tree):
        leaf = hash_leaf(ALICE)
        proof = prove_inclusion(whitelist_tree, leaf)

        assert verify_proof(whitelist_tree.root, leaf, proof, sort_pairs=True)

    def test_every_member_verifies(self, whitelist_tree):
        for value in WHITELIST:
            leaf = hash_leaf(value)
            assert verify_proof(whitelist_tree.root, leaf, prove_inclusion(whitelist_tree, leaf))

    def test_outsider_rejected(self, whitelist_tree):
        with pytest.raises(LeafNotFoundError):
            prove_inclusion(whitelist_tree, hash_leaf(EVE))

    def test_charlie_paired_with_itself(self, whitelist_tree):
        c = hash_leaf(CHARLIE)
        proof = prove_inclusion(whitelist_tree, c)

        assert proof.siblings[0] == c
        assert whitelist_tree.levels[1][1] == keccak256(c + c)

    def test_root_is_stable(self):
        assert make_tree().root == make_tree().root


class TestPromoteOddReferenceVectors:
    """Promote-odd trees reproduce the merkletreejs output."""

    @pytest.fixture
    def tree(self):
        return make_tree(odd_node_policy=OddNodePolicy.PROMOTE, sort_pairs=True)

    def test_leaf_digests(self):
        assert to_hex(hash_leaf(ALICE)) == ORIGINAL_PROMOTE_PROOFS[BOB][0]
        assert to_hex(hash_leaf(BOB)) == ORIGINAL_PROMOTE_PROOFS[ALICE][0]
        assert to_hex(hash_leaf(CHARLIE)) == ORIGINAL_PROMOTE_PROOFS[ALICE][1]

    def test_root(self, tree):
        assert tree.root_hex == ORIGINAL_PROMOTE_ROOT

    @pytest.mark.parametrize("value", WHITELIST)
    def test_proofs(self, tree, value):
        assert prove_value(tree, value).to_hex() == ORIGINAL_PROMOTE_PROOFS[value]

    @pytest.mark.parametrize("value", WHITELIST)
    def test_reference_proofs_verify(self, value):
        assert verify_proof(
            from_hex(ORIGINAL_PROMOTE_ROOT),
            hash_leaf(value),
            ORIGINAL_PROMOTE_PROOFS[value],
            sort_pairs=True,
        )

    def test_charlie_proof_single_step(self, tree):
        assert len(prove_value(tree, CHARLIE)) == 1

    def test_policies_give_different_roots(self, tree):
        assert tree.root != make_tree().root

    def test_outsider_rejected(self, tree):
        with pytest.raises(LeafNotFoundError):
            prove_value(tree, EVE)

    def test_eve_cannot_reuse_alice_proof(self, tree):
        assert not verify_proof(
            tree.root, hash_leaf(EVE), ORIGINAL_PROMOTE_PROOFS[ALICE], sort_pairs=True
        )


class TestSortedLeavesWhitelist:
    """Sorting leaves makes the root independent of whitelist order."""

    def test_order_independent(self):
        options = TreeOptions(sort_leaves=True)

        forward = MerkleTree.from_values(WHITELIST, options)
        reverse = MerkleTree.from_values(list(reversed(WHITELIST)), options)

        assert forward.root == reverse.root

    def test_proofs_still_verify(self):
        tree = MerkleTree.from_values(WHITELIST, TreeOptions(sort_leaves=True))

        for value in WHITELIST:
            leaf = hash_leaf(value)
            assert verify_proof(tree.root, leaf, prove_inclusion(tree, leaf))
