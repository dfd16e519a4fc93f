"""
Report Schema Unit Tests
Tests for core/schemas/reports.py
"""
import pytest

from core.crypto.hashing import hash_leaf, to_hex
from core.merkle.merkle_proofs import prove_value, verify_proof
from core.schemas.errors import LeafNotFoundError
from core.schemas.reports import ProofEntry, VerificationReport, WhitelistReport
from core.schemas.versioning import SCHEMA_VERSION

from fixtures import ALICE, EVE, WHITELIST, make_tree


class TestProofEntry:

    def test_from_proof(self, whitelist_tree):
        proof = prove_value(whitelist_tree, ALICE)
        entry = ProofEntry.from_proof(ALICE, proof)

        assert entry.value == ALICE
        assert entry.leaf == to_hex(hash_leaf(ALICE))
        assert entry.index == 0
        assert entry.proof == proof.to_hex()
        assert len(entry.positions) == len(entry.proof)

    def test_rejects_non_hex(self):
        with pytest.raises(ValueError):
            ProofEntry(value="x", leaf="abc", index=0)

    def test_rejects_uppercase_hex(self):
        with pytest.raises(ValueError):
            ProofEntry(value="x", leaf="0xABCD", index=0)

    def test_positions_optional(self):
        entry = ProofEntry(value="x", leaf="0xab", index=0, proof=["0x01", "0x02"])

        assert entry.positions == []

    def test_positions_must_cover_proof(self):
        with pytest.raises(ValueError, match="positions has 1 entries"):
            ProofEntry(
                value="x",
                leaf="0xab",
                index=0,
                proof=["0x01", "0x02"],
                positions=["left"],
            )


class TestWhitelistReport:

    def test_from_tree(self, whitelist_tree):
        report = WhitelistReport.from_tree(whitelist_tree, WHITELIST)

        assert report.schema_version == SCHEMA_VERSION
        assert report.root == whitelist_tree.root_hex
        assert report.hash_algorithm == "keccak256"
        assert report.odd_node_policy == "duplicate"
        assert report.leaf_count == 3
        assert report.depth == 2
        assert [e.value for e in report.entries] == WHITELIST

    def test_entries_verify(self, whitelist_tree):
        report = WhitelistReport.from_tree(whitelist_tree, WHITELIST)

        for entry in report.entries:
            assert verify_proof(report.root, entry.leaf, entry.proof, report.sort_pairs)

    def test_root_only(self, whitelist_tree):
        report = WhitelistReport.from_tree(whitelist_tree)

        assert report.entries == []

    def test_unknown_value_raises(self, whitelist_tree):
        with pytest.raises(LeafNotFoundError):
            WhitelistReport.from_tree(whitelist_tree, [EVE])

    def test_json_round_trip(self):
        tree = make_tree(odd_node_policy="promote", sort_pairs=False)
        report = WhitelistReport.from_tree(tree, WHITELIST)

        restored = WhitelistReport.model_validate_json(report.model_dump_json())

        assert restored == report
        assert restored.proof_for(ALICE) == report.entries[0]
        assert restored.proof_for(EVE) is None

    def test_unknown_schema_version(self, whitelist_tree):
        data = WhitelistReport.from_tree(whitelist_tree).model_dump()
        data["schema_version"] = "v9"

        with pytest.raises(ValueError, match="Unsupported schema version"):
            WhitelistReport.model_validate(data)


class TestVerificationReport:

    def test_valid_report(self):
        report = VerificationReport(
            valid=True,
            root="0x01",
            computed_root="0x01",
            leaf="0x02",
            hash_algorithm="keccak256",
        )

        assert report.error is None
        assert report.model_dump(mode="json")["valid"] is True
