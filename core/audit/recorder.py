"""
Audit Recorder

Wraps allocation runs into hashed audit records and commits a batch of
them to a Merkle root.

Hash rule: content_hash = sha256_hex(dumps_canonical(record minus content_hash))
Root rule: merkle_root = build_merkle_root([content_hash in sequence order])

Records are appended strictly in call order; the order of the leaf list is
part of what the root commits to.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from core.crypto.hashing import hash_canonical_hex
from core.merkle.merkle_tree import build_merkle_root
from core.schemas.allocation import AllocationRequest, Ledger
from core.schemas.audit import AuditBatch, AuditRecord, BatchVerification
from core.schemas.errors import ErrorCodes, InputException, SplitAuditError


logger = logging.getLogger(__name__)


def build_record_payload(
    sequence_number: int,
    request: AllocationRequest,
    ledger: Ledger,
) -> dict[str, Any]:
    """Assemble the hashed portion of an audit record."""
    return {
        "sequence_number": sequence_number,
        "input_amount": request.amount,
        "currency": request.currency,
        "exchange_rate": request.exchange_rate,
        "split_rules": request.rules,
        "ledger": ledger,
    }


def compute_record_hash(record: AuditRecord) -> str:
    """Recompute a record's content hash from its fields."""
    return hash_canonical_hex(record.hash_payload())


def verify_record_hash(record: AuditRecord) -> bool:
    """Check that a record's stored hash matches its content."""
    return compute_record_hash(record) == record.content_hash


class AuditRecorder:
    """
    Accumulates audit records for one batch of allocation runs.

    Usage:
        recorder = AuditRecorder()

        for i, request in enumerate(requests, start=1):
            ledger = allocate_request(request)
            recorder.record(i, request, ledger)

        batch = recorder.finalize()
        print(batch.merkle_root)
    """

    def __init__(self) -> None:
        self._records: list[AuditRecord] = []
        self._hashes: list[str] = []

    def record(
        self,
        sequence_number: int,
        request: AllocationRequest,
        ledger: Ledger,
    ) -> AuditRecord:
        """
        Hash one allocation run and append it to the batch.

        Raises:
            InputException: If sequence_number does not increase.
        """
        if self._records and sequence_number <= self._records[-1].sequence_number:
            raise InputException(
                f"Sequence number {sequence_number} does not follow "
                f"{self._records[-1].sequence_number}",
                field_path="sequence_number",
            )

        payload = build_record_payload(sequence_number, request, ledger)
        content_hash = hash_canonical_hex(payload)

        record = AuditRecord(
            sequence_number=sequence_number,
            input_amount=request.amount,
            currency=request.currency,
            exchange_rate=request.exchange_rate,
            split_rules=list(request.rules),
            ledger=ledger.model_copy(deep=True),
            content_hash=content_hash,
        )

        self._records.append(record)
        self._hashes.append(content_hash)
        return record

    def finalize(self) -> AuditBatch:
        """Commit all records recorded so far to a Merkle root."""
        root = build_merkle_root(self._hashes)
        batch = AuditBatch(records=list(self._records), merkle_root=root)
        logger.info(
            f"Audit batch finalized: {batch.total_tests} records, "
            f"{batch.rounding_issues} rounding corrections, root={root}"
        )
        return batch

    def get_records(self) -> list[AuditRecord]:
        return list(self._records)

    def get_hashes(self) -> list[str]:
        return list(self._hashes)

    def clear(self) -> None:
        self._records.clear()
        self._hashes.clear()

    def __len__(self) -> int:
        return len(self._records)


def verify_batch(report: dict[str, Any] | AuditBatch) -> BatchVerification:
    """
    Re-derive every record hash and the Merkle root of a batch.

    Accepts an AuditBatch or the dict produced by AuditBatch.to_report()
    (for example a report loaded back from disk).

    Returns:
        BatchVerification with ok=False and one error per mismatch.

    Raises:
        InputException: If the report cannot be parsed into records.
    """
    if isinstance(report, AuditBatch):
        records = report.records
        claimed_root: Optional[str] = report.merkle_root
    else:
        audits = report.get("audits")
        if not isinstance(audits, list):
            raise InputException("Batch report has no 'audits' list", field_path="audits")
        try:
            records = [AuditRecord.model_validate(a) for a in audits]
        except ValidationError as e:
            raise InputException(
                "Batch report contains a malformed audit record",
                field_path="audits",
                details={"error_count": e.error_count()},
            ) from e
        claimed_root = report.get("merkleRoot")

    errors: list[SplitAuditError] = []
    previous = 0
    for record in records:
        if record.sequence_number <= previous:
            errors.append(
                SplitAuditError(
                    code=ErrorCodes.INPUT_ERROR,
                    message=f"Record {record.sequence_number} is out of sequence",
                    details={"sequence_number": record.sequence_number},
                )
            )
        previous = record.sequence_number

        computed = compute_record_hash(record)
        if computed != record.content_hash:
            errors.append(
                SplitAuditError(
                    code=ErrorCodes.LEAF_HASH_MISMATCH,
                    message=f"Content hash mismatch for record {record.sequence_number}",
                    details={
                        "sequence_number": record.sequence_number,
                        "stored": record.content_hash,
                        "computed": computed,
                    },
                )
            )

    computed_root = build_merkle_root([compute_record_hash(r) for r in records])
    if computed_root != claimed_root:
        errors.append(
            SplitAuditError(
                code=ErrorCodes.ROOT_MISMATCH,
                message="Merkle root does not match the records",
                details={"claimed": claimed_root, "computed": computed_root},
            )
        )

    if errors:
        logger.warning(f"Batch verification failed with {len(errors)} error(s)")

    return BatchVerification(
        ok=not errors,
        total_records=len(records),
        claimed_root=claimed_root,
        computed_root=computed_root,
        errors=errors,
    )
