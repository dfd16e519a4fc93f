"""
Merklist Core - Hashing Utilities
Leaf hashing, hash algorithm registry and hex encoding for Merkle trees.

This module provides:
- Keccak-256 (Ethereum) and SHA-256 hashing of raw bytes
- Value encoding: how a whitelist entry becomes the bytes that get hashed
- Leaf hashing: hash_leaf(value) = H(encode_value(value))
- Hex encoding/decoding with 0x prefix

Determinism Notes:
- Always hash raw bytes exactly as encoded
- No case folding or whitespace stripping of values
- All operations are pure functions
"""
from __future__ import annotations

import hashlib
import re
from typing import Callable, Union

from eth_utils import keccak

from core.schemas.errors import InvalidHexError, UnsupportedAlgorithmError


HashFunction = Callable[[bytes], bytes]
Value = Union[bytes, bytearray, str]

DEFAULT_HASH_ALGORITHM = "keccak256"

# Size in bytes of every digest produced by a supported algorithm
DIGEST_SIZE = 32

_HEX_VALUE_RE = re.compile(r"0x[0-9a-fA-F]*")


def keccak256(data: bytes) -> bytes:
    """
    Compute the Ethereum Keccak-256 hash of raw bytes.

    Note this is the original Keccak padding, not NIST SHA3-256.

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(data)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


HASH_FUNCTIONS: dict[str, HashFunction] = {
    "keccak256": keccak256,
    "sha256": sha256,
}


def supported_algorithms() -> list[str]:
    """Names accepted by get_hash_function(), sorted."""
    return sorted(HASH_FUNCTIONS)


def get_hash_function(algorithm: str = DEFAULT_HASH_ALGORITHM) -> HashFunction:
    """
    Resolve a hash algorithm name to its function.

    Args:
        algorithm: Algorithm name, case-insensitive ("keccak256", "sha256")

    Returns:
        Callable mapping bytes to a 32-byte digest

    Raises:
        UnsupportedAlgorithmError: If the name is not registered
    """
    try:
        return HASH_FUNCTIONS[algorithm.lower()]
    except KeyError:
        raise UnsupportedAlgorithmError(algorithm, supported_algorithms()) from None


def encode_value(value: Value) -> bytes:
    """
    Convert a whitelist value to the bytes that get hashed.

    Rules:
    - bytes / bytearray: used as-is
    - "0x"-prefixed hex string: decoded to raw bytes (odd-length hex is
      left-padded with a zero nibble), so an address hashes as its
      20 address bytes rather than its 42 characters
    - any other string: UTF-8 encoded

    Args:
        value: Raw whitelist value

    Returns:
        Bytes to feed to the leaf hash

    Raises:
        TypeError: If value is not bytes or str
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        if _HEX_VALUE_RE.fullmatch(value):
            digits = value[2:]
            if len(digits) % 2:
                digits = "0" + digits
            return bytes.fromhex(digits)
        return value.encode("utf-8")
    raise TypeError(f"Cannot encode value of type {type(value).__name__}")


def hash_leaf(value: Value, algorithm: str = DEFAULT_HASH_ALGORITHM) -> bytes:
    """
    Hash one input value into a leaf digest.

    Rule: leaf = H(encode_value(value))

    Args:
        value: Raw whitelist value (bytes or str)
        algorithm: Hash algorithm name

    Returns:
        32-byte leaf digest
    """
    return get_hash_function(algorithm)(encode_value(value))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        InvalidHexError: If string doesn't start with 0x, has odd length,
                         or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise InvalidHexError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}...",
            value=hex_string,
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise InvalidHexError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}",
            value=hex_string,
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise InvalidHexError(f"Invalid hex characters in string: {e}", value=hex_string) from e


def hash_concat(left: bytes, right: bytes, algorithm: str = DEFAULT_HASH_ALGORITHM) -> bytes:
    """
    Hash the concatenation of two byte sequences: H(left + right).

    No sorting is applied here; see core.merkle.merkle_tree.merkle_parent.
    """
    return get_hash_function(algorithm)(left + right)


__all__ = [
    "DEFAULT_HASH_ALGORITHM",
    "DIGEST_SIZE",
    "HASH_FUNCTIONS",
    "HashFunction",
    "Value",
    "keccak256",
    "sha256",
    "supported_algorithms",
    "get_hash_function",
    "encode_value",
    "hash_leaf",
    "to_hex",
    "from_hex",
    "hash_concat",
]
