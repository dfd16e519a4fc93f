"""
Merklist Core - Schemas
File: errors.py

Purpose: Error taxonomy for the Merkle engine.
Defines both Pydantic models for structured error reporting
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used by the engine and CLI."""

    # Tree construction
    EMPTY_INPUT = "EMPTY_INPUT"

    # Proofs
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"

    # Encoding
    INVALID_HEX = "INVALID_HEX"
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"

    # Input and configuration
    WHITELIST_INVALID = "WHITELIST_INVALID"
    CONFIG_ERROR = "CONFIG_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Error model for structured error reporting.

    Used by the CLI to emit errors as JSON without losing the code.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.LEAF_NOT_FOUND],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerklistException":
        """Convert this error model to a raised exception."""
        return MerklistException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerklistException(Exception):
    """
    Base exception for all Merklist errors.

    Carries structured error information and can be converted
    to a MerkleError model. Nothing in the engine is retryable:
    every operation is deterministic.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLIST_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(MerklistException):
    """Raised when a tree is built from zero leaves."""

    def __init__(self, message: str = "Cannot build a Merkle tree from zero leaves") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_INPUT)


class LeafNotFoundError(MerklistException):
    """Raised when a proof is requested for a leaf that is not in the tree."""

    def __init__(self, leaf: bytes, value: Any = None) -> None:
        details: dict[str, Any] = {"leaf": "0x" + leaf.hex()}
        if value is not None:
            details["value"] = value if isinstance(value, str) else repr(value)
        super().__init__(
            message=f"Leaf 0x{leaf.hex()} is not in the tree",
            code=ErrorCodes.LEAF_NOT_FOUND,
            details=details,
        )
        self.leaf = leaf
        self.value = value


class InvalidProofError(MerklistException):
    """Raised by the asserting verifier when a proof does not reconstruct the root."""

    def __init__(self, root: bytes, computed: bytes) -> None:
        super().__init__(
            message=(
                f"Proof does not reconstruct root: "
                f"expected 0x{root.hex()}, computed 0x{computed.hex()}"
            ),
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details={"root": "0x" + root.hex(), "computed": "0x" + computed.hex()},
        )
        self.root = root
        self.computed = computed


class InvalidHexError(MerklistException, ValueError):
    """Raised when a hex string cannot be decoded."""

    def __init__(self, message: str, value: str | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_HEX,
            details={"value": value} if value is not None else None,
        )


class UnsupportedAlgorithmError(MerklistException, ValueError):
    """Raised when an unknown hash algorithm is requested."""

    def __init__(self, algorithm: str, supported: list[str]) -> None:
        super().__init__(
            message=(
                f"Unsupported hash algorithm: '{algorithm}'. "
                f"Supported algorithms: {supported}"
            ),
            code=ErrorCodes.UNSUPPORTED_ALGORITHM,
            details={"algorithm": algorithm, "supported": supported},
        )


class WhitelistFormatError(MerklistException):
    """Raised when a whitelist file cannot be parsed into values."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.WHITELIST_INVALID,
            details={"path": path} if path else None,
        )


class ConfigError(MerklistException):
    """Raised when configuration values cannot be interpreted."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCodes.CONFIG_ERROR, details=details)
