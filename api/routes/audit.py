"""
Audit Routes

Run automated allocation test batches and verify batch reports.
"""

from __future__ import annotations

import logging
import random
from typing import Any

from fastapi import APIRouter, Body, Depends

from api.deps import get_runtime_config
from api.models.requests import AuditBatchRequest
from api.models.responses import AuditBatchResponse, ErrorDetail, VerifyBatchResponse

from core.allocation.allocator import parse_split_rules
from core.audit.batch import run_batch
from core.audit.recorder import verify_batch
from core.config.runtime import RuntimeConfig
from core.schemas.audit import BatchRequest


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audit", tags=["audit"])


@router.post("/batch", response_model=AuditBatchResponse)
async def run_audit_batch(
    request: AuditBatchRequest,
    config: RuntimeConfig = Depends(get_runtime_config),
) -> AuditBatchResponse:
    """
    Run N allocation tests, hash each run, and return the batch with
    its Merkle root.

    Fallback rules and seed default to the server configuration.
    """
    raw_rules = request.fallback_rules
    if raw_rules is None:
        raw_rules = config.batch.fallback_rules

    batch_request = BatchRequest(
        test_count=request.test_count,
        randomize_exchange_rate=request.randomize_exchange_rate,
        randomize_splits=request.randomize_splits,
        fallback_rules=parse_split_rules(raw_rules),
    )
    seed = request.seed if request.seed is not None else config.batch.seed

    batch = run_batch(batch_request, rng=random.Random(seed))
    return AuditBatchResponse(ok=True, **batch.to_report())


@router.post("/verify", response_model=VerifyBatchResponse)
async def verify_audit_batch(
    report: dict[str, Any] = Body(..., description="Batch report as returned by /audit/batch"),
) -> VerifyBatchResponse:
    """
    Recompute every record hash and the Merkle root of a batch report.

    Tampering is reported as ok=false with LEAF_HASH_MISMATCH or
    ROOT_MISMATCH errors, not as an HTTP error.
    """
    result = verify_batch(report)
    return VerifyBatchResponse(
        ok=result.ok,
        total_records=result.total_records,
        claimed_root=result.claimed_root,
        computed_root=result.computed_root,
        errors=[
            ErrorDetail(code=e.code, message=e.message, details=e.details)
            for e in result.errors
        ],
    )
