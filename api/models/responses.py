"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "splitaudit-api"
    version: str = "v1"


class AllocateResponse(BaseModel):
    """Response for POST /allocate."""

    ok: bool = True
    ledger: dict[str, Any] = Field(
        ...,
        description="{usdcAmount, totalCents, roundingCorrection, entries}",
    )


class AuditBatchResponse(BaseModel):
    """Response for POST /audit/batch."""

    ok: bool = True
    totalTests: int = Field(..., description="Number of recorded runs")
    roundingIssues: int = Field(..., description="Runs that needed a rounding correction")
    merkleRoot: Optional[str] = Field(default=None, description="Root over record hashes")
    audits: list[dict[str, Any]] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class VerifyBatchResponse(BaseModel):
    """Response for POST /audit/verify."""

    ok: bool
    total_records: int = 0
    claimed_root: Optional[str] = None
    computed_root: Optional[str] = None
    errors: list[ErrorDetail] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
