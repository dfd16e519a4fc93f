"""
Whitelist test fixtures.

The three-address whitelist and its expected keccak256 / sorted-pair /
promote-odd root and proofs, as produced by merkletreejs for the same
input. These pin compatibility with JavaScript tooling.
"""

from pathlib import Path
from typing import Optional, Sequence

from core.crypto.hashing import sha256
from core.merkle.merkle_tree import MerkleTree, TreeOptions


ALICE = "0x1111000000000000000000000000000000000000"
BOB = "0x2222000000000000000000000000000000000000"
# 19 bytes, not a well-formed address; kept as-is to match the reference vectors
CHARLIE = "0x33300000000000000000000000000000000000"
# Not whitelisted
EVE = "0x99900000000000000000000000000000000000"

WHITELIST = [ALICE, BOB, CHARLIE]

ORIGINAL_PROMOTE_ROOT = "0x94a66a14ffa68ca771258e789aa59ccc467ba0b3244a6b0ef1683f40d96c5c0a"

ORIGINAL_PROMOTE_PROOFS = {
    ALICE: [
        "0x0808efdc750a8f87b105314e0110fb89feefe2fc5b5c382863f63cba02005088",
        "0xf78d5c92338bdd84d36b56e4e74881e5ead16c527f84121d0c77d8951ca62953",
    ],
    BOB: [
        "0xf9e13b59652e0e761ccd12cf71175628053ecd83fcd27f4ccf01d555e6e6756c",
        "0xf78d5c92338bdd84d36b56e4e74881e5ead16c527f84121d0c77d8951ca62953",
    ],
    CHARLIE: [
        "0x45f6f1b01b3a929605c387398f4919fa4438a40e370c1d40d90f0d9ac78dac14",
    ],
}


def make_leaves(count: int, prefix: str = "leaf") -> list[bytes]:
    """SHA-256 leaves for "leaf0", "leaf1", ..."""
    return [sha256(f"{prefix}{i}".encode()) for i in range(count)]


def make_tree(
    values: Optional[Sequence[str]] = None,
    **options,
) -> MerkleTree:
    """Tree over values (default: the whitelist) with TreeOptions(**options)."""
    return MerkleTree.from_values(list(values or WHITELIST), TreeOptions(**options))


def write_whitelist(directory: Path, values: Sequence[str] = WHITELIST, name: str = "whitelist.txt") -> Path:
    """Write a plain-text whitelist with a comment header and return its path."""
    path = directory / name
    lines = ["# whitelisted addresses", ""]
    lines.extend(values)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def flip_bit(data: bytes, byte_index: int = 0, bit: int = 0) -> bytes:
    """Return data with one bit flipped."""
    buf = bytearray(data)
    buf[byte_index] ^= 1 << bit
    return bytes(buf)
