"""
Module 01 - Schemas & Errors
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Error models and exceptions
from .errors import (
    ArtifactFormatError,
    DropError,
    DropException,
    DuplicateAddressError,
    EmptyTreeError,
    EncodingError,
    ErrorCodes,
    LeafNotFoundError,
)

# Distribution schemas
from .distribution import (
    ADDRESS_PATTERN,
    DECIMAL_PATTERN,
    DIGEST_PATTERN,
    ClaimEntry,
    DistributionArtifact,
    RecipientEntry,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    # Errors
    "ArtifactFormatError",
    "DropError",
    "DropException",
    "DuplicateAddressError",
    "EmptyTreeError",
    "EncodingError",
    "ErrorCodes",
    "LeafNotFoundError",
    # Distribution
    "ADDRESS_PATTERN",
    "DECIMAL_PATTERN",
    "DIGEST_PATTERN",
    "ClaimEntry",
    "DistributionArtifact",
    "RecipientEntry",
    # Verification
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
