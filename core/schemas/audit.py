"""
Schemas & Canonicalization
File: audit.py

Purpose: Audit records, batches and batch verification results.

An AuditRecord is a hashed snapshot of one allocation run. Its
content_hash covers the canonical JSON of every other field, so a record
is immutable once built. An AuditBatch commits to its records' hashes,
in sequence order, through a Merkle root.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .allocation import Currency, Ledger, SplitRule
from .errors import SplitAuditError


class AuditRecord(BaseModel):
    """One hashed allocation run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sequence_number: int = Field(..., ge=1, description="1-based position in the batch")
    input_amount: float = Field(..., description="Amount as supplied, before conversion")
    currency: Currency
    exchange_rate: float
    split_rules: list[SplitRule]
    ledger: Ledger
    content_hash: str = Field(
        ...,
        description="sha256 hex of the canonical JSON of all other fields",
    )

    def hash_payload(self) -> dict[str, Any]:
        """The exact object the content hash is computed over."""
        return self.model_dump(mode="json", exclude={"content_hash"})

    @property
    def rounding_correction(self) -> int:
        return self.ledger.rounding_correction


class AuditBatch(BaseModel):
    """Ordered audit records of one test run and their Merkle root."""

    model_config = ConfigDict(extra="forbid")

    records: list[AuditRecord] = Field(default_factory=list)
    merkle_root: Optional[str] = Field(
        default=None,
        description="Root over record hashes in sequence order; None when empty",
    )

    @property
    def total_tests(self) -> int:
        return len(self.records)

    @property
    def rounding_issues(self) -> int:
        """Number of runs whose ledger needed a rounding correction."""
        return sum(1 for r in self.records if r.rounding_correction != 0)

    @property
    def leaf_hashes(self) -> list[str]:
        return [r.content_hash for r in self.records]

    def to_report(self) -> dict[str, Any]:
        """Batch report with camelCase keys; verify_batch accepts it back."""
        return {
            "totalTests": self.total_tests,
            "roundingIssues": self.rounding_issues,
            "merkleRoot": self.merkle_root,
            "audits": [r.model_dump(mode="json") for r in self.records],
        }


class BatchRequest(BaseModel):
    """Parameters for an automated allocation test batch."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    test_count: int = Field(default=10, ge=0, alias="testCount")
    randomize_exchange_rate: bool = Field(default=False, alias="randomizeExchangeRate")
    randomize_splits: bool = Field(default=False, alias="randomizeSplits")
    fallback_rules: list[SplitRule] = Field(
        default_factory=list,
        alias="fallbackRules",
        description="Rules used for every run when splits are not randomized",
    )


class BatchVerification(BaseModel):
    """Outcome of re-deriving record hashes and the root of a batch report."""

    model_config = ConfigDict(extra="forbid")

    ok: bool
    total_records: int = 0
    claimed_root: Optional[str] = None
    computed_root: Optional[str] = None
    errors: list[SplitAuditError] = Field(default_factory=list)
