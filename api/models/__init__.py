"""API request and response models."""

from api.models.requests import AllocateRequest, AuditBatchRequest
from api.models.responses import (
    AllocateResponse,
    AuditBatchResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    VerifyBatchResponse,
)

__all__ = [
    "AllocateRequest",
    "AuditBatchRequest",
    "AllocateResponse",
    "AuditBatchResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "VerifyBatchResponse",
]
