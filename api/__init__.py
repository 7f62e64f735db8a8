"""
SplitAudit HTTP API (FastAPI)

- POST /allocate - Allocate one payment
- POST /audit/batch - Run an audit batch
- POST /audit/verify - Verify a batch report
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
