"""
Merklist Core - Schemas
File: reports.py

Purpose: Serializable report models for roots and proofs.
These are what the CLI prints with --json and what a contract
deployment script would consume.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import MerkleError
from .versioning import SCHEMA_VERSION, assert_supported_schema_version

if TYPE_CHECKING:
    from core.crypto.hashing import Value
    from core.merkle.merkle_proofs import MerkleProof
    from core.merkle.merkle_tree import MerkleTree


_HEX_DIGEST_RE = re.compile(r"^0x[0-9a-f]*$")


def _check_hex(value: str) -> str:
    if not _HEX_DIGEST_RE.match(value):
        raise ValueError(f"Expected lowercase 0x-prefixed hex, got {value!r}")
    return value


def _check_schema_version(value: str) -> str:
    assert_supported_schema_version(value)
    return value


class ProofEntry(BaseModel):
    """Inclusion proof for one whitelisted value."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: str = Field(..., description="The whitelisted value as supplied")
    leaf: str = Field(..., description="Leaf digest (0x hex)")
    index: int = Field(..., ge=0, description="Position of the leaf in level 0")
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling digests, bottom-up (0x hex)",
    )
    positions: list[Literal["left", "right"]] = Field(
        default_factory=list,
        description="Side of each sibling relative to the running hash",
    )

    @field_validator("leaf")
    @classmethod
    def _leaf_is_hex(cls, v: str) -> str:
        return _check_hex(v)

    @field_validator("proof")
    @classmethod
    def _proof_is_hex(cls, v: list[str]) -> list[str]:
        return [_check_hex(item) for item in v]

    @model_validator(mode="after")
    def _positions_match_proof(self) -> "ProofEntry":
        # Positions are optional, but when given there is one per sibling
        if self.positions and len(self.positions) != len(self.proof):
            raise ValueError(
                f"positions has {len(self.positions)} entries, proof has {len(self.proof)}"
            )
        return self

    @classmethod
    def from_proof(cls, value: str, proof: "MerkleProof") -> "ProofEntry":
        return cls(
            value=value,
            leaf="0x" + proof.leaf.hex(),
            index=proof.index,
            proof=proof.to_hex(),
            positions=[step.position for step in proof.steps],
        )


class WhitelistReport(BaseModel):
    """
    Root and proofs for a whole whitelist.

    Records the options the tree was built with, since a proof is only
    meaningful together with them.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default=SCHEMA_VERSION)
    root: str = Field(..., description="Merkle root (0x hex)")
    hash_algorithm: str = Field(...)
    sort_pairs: bool = Field(...)
    sort_leaves: bool = Field(default=False)
    odd_node_policy: Literal["duplicate", "promote"] = Field(...)
    leaf_count: int = Field(..., ge=1)
    depth: int = Field(..., ge=0)
    entries: list[ProofEntry] = Field(default_factory=list)

    @field_validator("schema_version")
    @classmethod
    def _known_version(cls, v: str) -> str:
        return _check_schema_version(v)

    @field_validator("root")
    @classmethod
    def _root_is_hex(cls, v: str) -> str:
        return _check_hex(v)

    @classmethod
    def from_tree(
        cls,
        tree: "MerkleTree",
        values: Sequence["Value"] = (),
    ) -> "WhitelistReport":
        """
        Build a report for a tree, with one entry per value in values.

        Raises:
            LeafNotFoundError: If a value is not a leaf of the tree
        """
        from core.merkle.merkle_proofs import prove_value

        entries = []
        for value in values:
            label = value if isinstance(value, str) else "0x" + bytes(value).hex()
            entries.append(ProofEntry.from_proof(label, prove_value(tree, value)))

        return cls(
            root=tree.root_hex,
            hash_algorithm=tree.options.hash_algorithm,
            sort_pairs=tree.options.sort_pairs,
            sort_leaves=tree.options.sort_leaves,
            odd_node_policy=tree.options.odd_node_policy.value,
            leaf_count=tree.leaf_count,
            depth=tree.depth,
            entries=entries,
        )

    def proof_for(self, value: str) -> Optional[ProofEntry]:
        """Entry for value, or None if not in the report."""
        for entry in self.entries:
            if entry.value == value:
                return entry
        return None


class VerificationReport(BaseModel):
    """Outcome of verifying one proof against a root."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default=SCHEMA_VERSION)
    valid: bool = Field(..., description="Whether the proof reconstructs the root")
    root: str = Field(..., description="Expected root (0x hex)")
    computed_root: str = Field(..., description="Root reconstructed from the proof")
    leaf: str = Field(...)
    value: Optional[str] = Field(default=None)
    proof: list[str] = Field(default_factory=list)
    sort_pairs: bool = Field(default=True)
    hash_algorithm: str = Field(...)
    error: Optional[MerkleError] = Field(default=None)


__all__ = [
    "ProofEntry",
    "WhitelistReport",
    "VerificationReport",
]
