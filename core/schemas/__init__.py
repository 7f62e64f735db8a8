"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ErrorCodes,
    InputException,
    InvariantViolationException,
    SplitAuditError,
    SplitAuditException,
    WalletException,
)

# Allocation schemas
from .allocation import (
    AllocationRequest,
    Currency,
    Ledger,
    LedgerEntry,
    SplitRule,
)

# Audit schemas
from .audit import (
    AuditBatch,
    AuditRecord,
    BatchRequest,
    BatchVerification,
)

# Transfer schemas
from .transfer import (
    ReceiptLog,
    TransferOutcome,
    TransferReceipt,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "CanonicalizationException",
    "ErrorCodes",
    "InputException",
    "InvariantViolationException",
    "SplitAuditError",
    "SplitAuditException",
    "WalletException",
    # Allocation
    "AllocationRequest",
    "Currency",
    "Ledger",
    "LedgerEntry",
    "SplitRule",
    # Audit
    "AuditBatch",
    "AuditRecord",
    "BatchRequest",
    "BatchVerification",
    # Transfer
    "ReceiptLog",
    "TransferOutcome",
    "TransferReceipt",
]
