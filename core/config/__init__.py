"""
Runtime Configuration Module

Provides configuration loading and management for the Merkle engine.
"""

from .runtime import RuntimeConfig, MerkleConfig

__all__ = [
    "RuntimeConfig",
    "MerkleConfig",
]
