"""API route handlers."""

from api.routes import allocate, audit, health

__all__ = ["allocate", "audit", "health"]
