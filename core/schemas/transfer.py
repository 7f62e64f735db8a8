"""
Schemas & Canonicalization
File: transfer.py

Purpose: Shapes exchanged with the external wallet/chain client on the
live-transfer path. Receipts are produced by the collaborator, never by
this package.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReceiptLog(BaseModel):
    """A single event log attached to a transaction receipt."""

    model_config = ConfigDict(extra="ignore")

    topics: list[str] = Field(default_factory=list)
    data: str = ""


class TransferReceipt(BaseModel):
    """The subset of a transaction receipt the verifier looks at."""

    model_config = ConfigDict(extra="ignore")

    status: bool = False
    logs: list[ReceiptLog] = Field(default_factory=list)


class TransferOutcome(BaseModel):
    """Result of paying one ledger entry on the live path."""

    model_config = ConfigDict(extra="forbid")

    recipient: str
    cents: int
    amount_units: int = Field(..., description="Amount in the token's smallest unit")
    transaction_hash: Optional[str] = None
    verified: bool = False
    warning: Optional[str] = Field(
        default=None,
        description="Set when the transfer could not be submitted or verified",
    )
    warning_code: Optional[str] = None
