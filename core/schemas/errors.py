"""
Module 01 - Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for distribution generation.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every exception here is fatal to a batch run: a distribution is either
produced in full or not at all.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Input & Encoding Errors
    ENCODING_ERROR = "ENCODING_ERROR"
    DUPLICATE_ADDRESS = "DUPLICATE_ADDRESS"

    # Tree & Proof Errors
    EMPTY_TREE = "EMPTY_TREE"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"

    # Artifact Errors
    ARTIFACT_FORMAT_ERROR = "ARTIFACT_FORMAT_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class DropError(BaseModel):
    """
    Base error model for structured error reporting.

    Used by the CLI's JSON output mode so failures are machine-readable.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.ENCODING_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "DropException":
        """Convert this error model to a raised exception."""
        return DropException(
            code=self.code,
            message=self.message,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class DropException(Exception):
    """
    Base exception for all distribution errors.

    Carries structured error information and can be converted to a
    DropError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "DROP_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> DropError:
        """Convert this exception to a DropError model."""
        return DropError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EncodingError(DropException):
    """Raised when an address or amount cannot be encoded into a leaf."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field:
            full_details["field"] = field
        if value is not None:
            full_details["value"] = str(value)
        super().__init__(
            message=message,
            code=ErrorCodes.ENCODING_ERROR,
            details=full_details,
        )


class DuplicateAddressError(DropException):
    """Raised when the same recipient address appears more than once."""

    def __init__(
        self,
        address: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["address"] = address
        self.address = address
        super().__init__(
            message=f"Duplicate recipient address: {address}",
            code=ErrorCodes.DUPLICATE_ADDRESS,
            details=full_details,
        )


class EmptyTreeError(DropException):
    """Raised when a tree is requested over zero leaves."""

    def __init__(
        self,
        message: str = "Cannot build a Merkle tree without leaves",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_TREE,
            details=details,
        )


class LeafNotFoundError(DropException):
    """Raised when a proof is requested for a leaf or address not in the tree."""

    def __init__(
        self,
        message: str,
        leaf: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf:
            full_details["leaf"] = leaf
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_NOT_FOUND,
            details=full_details,
        )


class ArtifactFormatError(DropException):
    """Raised when an input or output file cannot be parsed or fails validation."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.ARTIFACT_FORMAT_ERROR,
            details=full_details,
        )
