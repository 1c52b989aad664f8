"""
Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for the full binary hash tree.
Defines both a Pydantic model for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the tree and its verifier."""

    # Construction & Configuration Errors
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"

    # Membership Errors
    KEY_NOT_FOUND = "KEY_NOT_FOUND"

    # Node Access Errors
    ILLEGAL_NODE_ACCESS = "ILLEGAL_NODE_ACCESS"

    # Slice & Verification Errors
    MALFORMED_PROOF = "MALFORMED_PROOF"
    ROOT_MISMATCH = "ROOT_MISMATCH"
    VALUE_MISSING = "VALUE_MISSING"
    LEAF_POSITION_MISMATCH = "LEAF_POSITION_MISMATCH"


# =============================================================================
# Pydantic Error Model (Data Transfer)
# =============================================================================

class TreeError(BaseModel):
    """
    Base error model for structured error communication.

    Used when an error must cross a boundary as data (CLI JSON output,
    verification reports) instead of as a raised exception.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_PROOF],
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


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class HashTreeException(Exception):
    """
    Base exception for all hash tree errors.

    This exception carries structured error information and converts to a
    TreeError model for reports.
    """

    def __init__(
        self,
        message: str,
        code: str = "HASH_TREE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = dict(details or {})
        self.retryable = retryable

    def to_error_model(self) -> TreeError:
        """Convert this exception to a TreeError model."""
        return TreeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ConfigurationException(HashTreeException):
    """Exception raised when a tree is configured with an invalid height."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = dict(details or {})
        if setting:
            full_details["setting"] = setting
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_CONFIGURATION,
            details=full_details,
            retryable=False,
        )


class NotFoundException(HashTreeException):
    """Exception raised when a key must be a member but is absent."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = dict(details or {})
        if key is not None:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=ErrorCodes.KEY_NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class MalformedProofException(HashTreeException):
    """Exception raised when a slice does not parse under the slice grammar."""

    def __init__(
        self,
        message: str,
        position: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = dict(details or {})
        if position is not None:
            full_details["position"] = position
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=full_details,
            retryable=False,
        )


class VerificationFailureException(HashTreeException):
    """
    Exception raised by callers when an evaluated slice does not match
    the trusted root (or the claimed value/position).
    """

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.ROOT_MISMATCH,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            retryable=False,
        )


class IllegalStateException(HashTreeException):
    """Exception raised when a bucket is read on an internal node or children on a leaf."""

    def __init__(
        self,
        message: str,
        node_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = dict(details or {})
        if node_id is not None:
            full_details["node_id"] = node_id
        super().__init__(
            message=message,
            code=ErrorCodes.ILLEGAL_NODE_ACCESS,
            details=full_details,
            retryable=False,
        )


__all__ = [
    "ErrorCodes",
    "TreeError",
    "HashTreeException",
    "ConfigurationException",
    "NotFoundException",
    "MalformedProofException",
    "VerificationFailureException",
    "IllegalStateException",
]
