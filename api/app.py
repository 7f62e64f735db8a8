"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import (
    APIError,
    api_error_handler,
    domain_error_handler,
    generic_error_handler,
)
from api.routes import allocate, audit, health
from core.schemas.errors import SplitAuditException


def _resolve_log_level() -> int:
    """Resolve log level from SPLITAUDIT_LOG_LEVEL or splitaudit.json, defaulting to INFO."""
    raw = os.getenv("SPLITAUDIT_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "splitaudit.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    data = json.load(f)
            except (OSError, ValueError):
                data = {}
            if isinstance(data, dict):
                raw = data.get("log_level")
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="SplitAudit API",
        description="""
HTTP API for split-payment allocation and Merkle-rooted audit batches.

## Endpoints

- **POST /allocate** - Allocate one payment among split rules
- **POST /audit/batch** - Run an automated allocation test batch
- **POST /audit/verify** - Recompute record hashes and the Merkle root of a batch report
- **GET /health** - Health check
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(SplitAuditException, domain_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(allocate.router)
    app.include_router(audit.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
