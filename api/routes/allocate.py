"""
Allocate Route

Allocate one payment among split rules.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.models.requests import AllocateRequest
from api.models.responses import AllocateResponse

from core.allocation.allocator import allocate_request, build_request


logger = logging.getLogger(__name__)

router = APIRouter(tags=["allocation"])


@router.post("/allocate", response_model=AllocateResponse)
async def allocate_payment(request: AllocateRequest) -> AllocateResponse:
    """
    Compute the rounding-reconciled ledger for one payment.

    Malformed input returns 400 with code INPUT_ERROR; no allocation
    is attempted.
    """
    allocation = build_request(
        request.amount,
        request.currency,
        request.exchange_rate,
        request.rules,
    )
    ledger = allocate_request(allocation)

    if ledger.rounding_correction:
        logger.info(
            f"Allocation of {ledger.total_cents} cents needed a "
            f"{ledger.rounding_correction} cent correction"
        )

    return AllocateResponse(ok=True, ledger=ledger.to_report())
