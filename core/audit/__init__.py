"""
Core Audit Module

Hashed audit records of allocation runs, batch Merkle commitments,
and offline re-verification of saved batch reports.
"""

from .recorder import (
    AuditRecorder,
    build_record_payload,
    compute_record_hash,
    verify_batch,
    verify_record_hash,
)
from .batch import (
    generate_random_splits,
    generate_request,
    record_requests,
    run_batch,
)

__all__ = [
    "AuditRecorder",
    "build_record_payload",
    "compute_record_hash",
    "verify_batch",
    "verify_record_hash",
    "generate_random_splits",
    "generate_request",
    "record_requests",
    "run_batch",
]
