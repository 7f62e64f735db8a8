"""
API Request Models

Pydantic models for API request bodies. Field types are kept loose where
the domain layer performs its own validation, so malformed allocation
input surfaces as a 400 INPUT_ERROR rather than a generic 422.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AllocateRequest(BaseModel):
    """Request body for POST /allocate."""

    model_config = ConfigDict(populate_by_name=True)

    amount: Any = Field(..., description="Positive payment amount")
    currency: str = Field(
        default="USDC",
        description="USDC (accounting unit) or USD (converted with exchangeRate)",
    )
    exchange_rate: Any = Field(
        default=1.0,
        alias="exchangeRate",
        description="Accounting units per foreign unit",
    )
    rules: Any = Field(
        default_factory=list,
        description="Split rules as a list of {address, percent} or a JSON string",
    )


class AuditBatchRequest(BaseModel):
    """Request body for POST /audit/batch."""

    model_config = ConfigDict(populate_by_name=True)

    test_count: int = Field(
        default=10,
        ge=0,
        le=10000,
        alias="testCount",
        description="Number of allocation runs",
    )
    randomize_exchange_rate: bool = Field(default=False, alias="randomizeExchangeRate")
    randomize_splits: bool = Field(default=False, alias="randomizeSplits")
    fallback_rules: Optional[Any] = Field(
        default=None,
        alias="fallbackRules",
        description="Rules for every run when splits are not randomized (default: server config)",
    )
    seed: Optional[int] = Field(default=None, description="Random seed for a reproducible batch")
