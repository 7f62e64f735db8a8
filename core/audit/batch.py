"""
Batch Runner

Automated allocation test runs: generate N allocation requests (random
amounts, optionally random exchange rates and split rules), allocate each,
record it, and commit the batch to a Merkle root.

Generated request per run i (0-based):
    amount        = rng.random() * 500 + 1
    exchange_rate = 0.95 + rng.random() * 0.1   (or 1.0 when not randomized)
    rules         = generate_random_splits(rng, i) (or the fallback rules)
    currency      = FOREIGN_UNIT

Pass a seeded random.Random for a reproducible batch.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional, Sequence

from core.allocation.allocator import allocate_request
from core.schemas.allocation import AllocationRequest, Currency, SplitRule
from core.schemas.audit import AuditBatch, BatchRequest

from .recorder import AuditRecorder


logger = logging.getLogger(__name__)

MIN_RANDOM_RECIPIENTS = 3
MAX_RANDOM_RECIPIENTS = 5


def generate_random_splits(rng: random.Random, test_index: int) -> list[SplitRule]:
    """
    Draw 3-5 recipients with integer percents that sum to exactly 100.

    Every recipient receives at least 1 percent. Addresses are
    ``0xTEST{test_index}_{k}``.
    """
    span = MAX_RANDOM_RECIPIENTS - MIN_RANDOM_RECIPIENTS + 1
    n = math.floor(rng.random() * span) + MIN_RANDOM_RECIPIENTS

    percent_left = 100
    splits: list[SplitRule] = []
    for k in range(n - 1):
        # Leave at least 1 percent for each recipient still to come
        p = math.floor(rng.random() * (percent_left - (n - k - 1))) + 1
        percent_left -= p
        splits.append(SplitRule(address=f"0xTEST{test_index}_{k}", percent=p))
    splits.append(SplitRule(address=f"0xTEST{test_index}_{n - 1}", percent=percent_left))
    return splits


def generate_request(
    rng: random.Random,
    test_index: int,
    batch: BatchRequest,
) -> AllocationRequest:
    """Draw the allocation request for one automated run."""
    amount = rng.random() * 500 + 1
    exchange_rate = (0.95 + rng.random() * 0.1) if batch.randomize_exchange_rate else 1.0

    if batch.randomize_splits:
        rules = generate_random_splits(rng, test_index)
    else:
        rules = list(batch.fallback_rules)

    return AllocationRequest(
        amount=amount,
        currency=Currency.FOREIGN_UNIT,
        exchange_rate=exchange_rate,
        rules=rules,
    )


def record_requests(
    requests: Sequence[AllocationRequest],
    recorder: Optional[AuditRecorder] = None,
) -> AuditBatch:
    """Allocate and record a fixed list of requests, numbered from 1."""
    if recorder is None:
        recorder = AuditRecorder()
    for i, request in enumerate(requests, start=1):
        ledger = allocate_request(request)
        recorder.record(i, request, ledger)
    return recorder.finalize()


def run_batch(
    batch: BatchRequest,
    rng: Optional[random.Random] = None,
    recorder: Optional[AuditRecorder] = None,
) -> AuditBatch:
    """
    Run an automated allocation test batch.

    Args:
        batch: Test count and randomization switches
        rng: Random source; a fresh unseeded Random when omitted
        recorder: Recorder to append to; a new one when omitted

    Returns:
        AuditBatch with one record per run; merkle_root is None when
        test_count is 0
    """
    if rng is None:
        rng = random.Random()
    if recorder is None:
        recorder = AuditRecorder()

    logger.info(
        f"Running {batch.test_count} allocation tests "
        f"(random fx={batch.randomize_exchange_rate}, random splits={batch.randomize_splits})"
    )

    for i in range(batch.test_count):
        request = generate_request(rng, i, batch)
        ledger = allocate_request(request)
        recorder.record(i + 1, request, ledger)

    return recorder.finalize()
