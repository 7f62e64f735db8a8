"""
Common test fixtures shared by all modules.

Provides factory functions for core SplitAudit data structures:
- SplitRule lists
- AllocationRequest
- AuditBatch (recorded through AuditRecorder)
- TransferReceipt

These are the foundational building blocks used by higher-level tests.
"""

from typing import Any, Optional

from core.allocation.allocator import allocate_request
from core.audit.recorder import AuditRecorder
from core.schemas.allocation import AllocationRequest, Currency, SplitRule
from core.schemas.audit import AuditBatch
from core.schemas.transfer import ReceiptLog, TransferReceipt


RECIPIENT_A = "0x00000000000000000000000000000000000000aa"
RECIPIENT_B = "0x00000000000000000000000000000000000000bb"
RECIPIENT_C = "0x00000000000000000000000000000000000000cc"


def make_rules(*percents: float) -> list[SplitRule]:
    """Create split rules with deterministic addresses, one per percent."""
    if not percents:
        percents = (50.0, 30.0, 20.0)
    addresses = [RECIPIENT_A, RECIPIENT_B, RECIPIENT_C]
    return [
        SplitRule(
            address=addresses[i] if i < len(addresses) else f"0x{i:040x}",
            percent=p,
        )
        for i, p in enumerate(percents)
    ]


def make_request(
    amount: float = 100.0,
    currency: Currency = Currency.ACCOUNTING_UNIT,
    exchange_rate: float = 1.0,
    rules: Optional[list[SplitRule]] = None,
) -> AllocationRequest:
    """Create an AllocationRequest with sensible defaults."""
    return AllocationRequest(
        amount=amount,
        currency=currency,
        exchange_rate=exchange_rate,
        rules=rules if rules is not None else make_rules(),
    )


def make_batch(amounts: Optional[list[float]] = None) -> AuditBatch:
    """Record one allocation per amount and finalize the batch."""
    if amounts is None:
        amounts = [100.0, 10.01, 33.33]
    recorder = AuditRecorder()
    for i, amount in enumerate(amounts, start=1):
        request = make_request(amount=amount, rules=make_rules(50, 50))
        recorder.record(i, request, allocate_request(request))
    return recorder.finalize()


def make_receipt(
    status: bool = True,
    topics: Optional[list[str]] = None,
    data: str = "",
    with_log: bool = True,
) -> TransferReceipt:
    """Create a TransferReceipt with at most one log."""
    logs = [ReceiptLog(topics=topics or [], data=data)] if with_log else []
    return TransferReceipt(status=status, logs=logs)


def make_rpc_receipt(status: str = "0x1", logs: Optional[list[dict[str, Any]]] = None) -> dict[str, Any]:
    """Create a raw eth_getTransactionReceipt result."""
    return {
        "status": status,
        "transactionHash": "0x" + "ab" * 32,
        "logs": logs if logs is not None else [],
    }
