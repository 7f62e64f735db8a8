"""
Schemas & Canonicalization
File: allocation.py

Purpose: Split rules, allocation requests and the reconciled ledger.
Amounts on the ledger are integer cents of the accounting unit;
display strings are derived from cents, never the other way round.
"""

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Currency(str, Enum):
    """Currency of an incoming payment amount."""

    # Settlement stablecoin; amounts pass through unchanged
    ACCOUNTING_UNIT = "USDC"
    # Display currency; converted with the exchange rate
    FOREIGN_UNIT = "USD"


class SplitRule(BaseModel):
    """One recipient and the percentage of the payment it receives."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    address: str = Field(
        ...,
        alias="recipientAddress",
        min_length=1,
        description="Recipient identifier (usually a 0x-prefixed address)",
    )
    percent: float = Field(
        ...,
        ge=0.0,
        description="Share of the payment in percent; a rule set should sum to 100",
    )

    @field_validator("address")
    @classmethod
    def validate_address_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("address must not be empty or whitespace")
        return v

    @field_validator("percent")
    @classmethod
    def validate_percent_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("percent must be a finite number")
        return v


class AllocationRequest(BaseModel):
    """Everything needed to allocate one payment."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    amount: float = Field(..., gt=0.0, description="Payment amount in `currency`")
    currency: Currency = Field(
        default=Currency.ACCOUNTING_UNIT,
        description="Currency the amount is denominated in",
    )
    exchange_rate: float = Field(
        default=1.0,
        gt=0.0,
        alias="exchangeRate",
        description="Accounting units per foreign unit",
    )
    rules: list[SplitRule] = Field(
        default_factory=list,
        description="Split rules in payout order",
    )

    @field_validator("amount", "exchange_rate")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("value must be a finite number")
        return v


class LedgerEntry(BaseModel):
    """One recipient's reconciled share."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str
    percent: float
    cents: int = Field(..., description="Share in cents of the accounting unit")
    usdc: str = Field(..., description="cents / 100 with exactly 2 fractional digits")


class Ledger(BaseModel):
    """
    Reconciled per-recipient breakdown of one payment.

    Invariant: sum(entry.cents) == total_cents whenever entries is non-empty.
    rounding_correction is total_cents minus the sum of the naively rounded
    shares; a non-zero value has already been folded into entries[0].
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    usdc_amount: float = Field(..., description="Amount converted to the accounting unit")
    total_cents: int = Field(..., ge=0)
    entries: list[LedgerEntry] = Field(default_factory=list)
    rounding_correction: int = 0

    @property
    def allocated_cents(self) -> int:
        return sum(entry.cents for entry in self.entries)

    @property
    def is_balanced(self) -> bool:
        """Check that entries account for every cent."""
        return self.allocated_cents == self.total_cents

    @property
    def has_rounding_issue(self) -> bool:
        return self.rounding_correction != 0

    def to_report(self) -> dict:
        """Ledger report with camelCase keys, as served by the API and CLI."""
        return {
            "usdcAmount": self.usdc_amount,
            "totalCents": self.total_cents,
            "roundingCorrection": self.rounding_correction,
            "entries": [
                {
                    "address": e.address,
                    "percent": e.percent,
                    "cents": e.cents,
                    "usdc": e.usdc,
                }
                for e in self.entries
            ],
        }
