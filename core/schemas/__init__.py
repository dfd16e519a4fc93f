"""
Merklist Core - Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    SchemaVersion,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)

# Error models and exceptions
from .errors import (
    ConfigError,
    EmptyInputError,
    ErrorCodes,
    InvalidHexError,
    InvalidProofError,
    LeafNotFoundError,
    MerkleError,
    MerklistException,
    UnsupportedAlgorithmError,
    WhitelistFormatError,
)

# Report models
from .reports import (
    ProofEntry,
    VerificationReport,
    WhitelistReport,
)

__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "SchemaVersion",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
    # Errors
    "ConfigError",
    "EmptyInputError",
    "ErrorCodes",
    "InvalidHexError",
    "InvalidProofError",
    "LeafNotFoundError",
    "MerkleError",
    "MerklistException",
    "UnsupportedAlgorithmError",
    "WhitelistFormatError",
    # Reports
    "ProofEntry",
    "VerificationReport",
    "WhitelistReport",
]
