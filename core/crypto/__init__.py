"""
Core cryptographic utilities.

Hashing, value encoding and hex helpers for the Merkle engine.
"""
from .hashing import (
    DEFAULT_HASH_ALGORITHM,
    DIGEST_SIZE,
    keccak256,
    sha256,
    supported_algorithms,
    get_hash_function,
    encode_value,
    hash_leaf,
    to_hex,
    from_hex,
    hash_concat,
)

__all__ = [
    "DEFAULT_HASH_ALGORITHM",
    "DIGEST_SIZE",
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
