"""
Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for allocation, auditing and transfers.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Input & Validation Errors
    INPUT_ERROR = "INPUT_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Allocation Errors
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"

    # Audit & Commitment Errors
    LEAF_HASH_MISMATCH = "LEAF_HASH_MISMATCH"
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Transfer Errors
    WALLET_ERROR = "WALLET_ERROR"
    UNVERIFIED_TRANSFER = "UNVERIFIED_TRANSFER"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class SplitAuditError(BaseModel):
    """
    Base error model for structured error communication.

    Used where an error is reported rather than raised (batch verification
    results, API error envelopes, transfer warnings).
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INPUT_ERROR],
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

class SplitAuditException(Exception):
    """
    Base exception for all split allocation and audit errors.

    Carries structured error information and can be converted
    to a SplitAuditError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "SPLITAUDIT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> SplitAuditError:
        """Convert this exception to a SplitAuditError model."""
        return SplitAuditError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InputException(SplitAuditException):
    """Raised when allocation or batch input is malformed."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.INPUT_ERROR,
            details=full_details,
            retryable=False,
        )


class InvariantViolationException(SplitAuditException):
    """Raised when a ledger's entries do not sum to its total."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVARIANT_VIOLATION,
            details=details,
            retryable=False,
        )


class CanonicalizationException(SplitAuditException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class WalletException(SplitAuditException):
    """Raised by wallet collaborators when an account, broadcast or receipt call fails."""

    def __init__(
        self,
        message: str,
        method: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if method:
            full_details["method"] = method
        super().__init__(
            message=message,
            code=ErrorCodes.WALLET_ERROR,
            details=full_details,
            retryable=False,
        )
