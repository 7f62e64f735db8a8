"""
Runtime Configuration Module

Provides configuration loading and management.
"""

from .runtime import (
    BatchConfig,
    RpcConfig,
    RuntimeConfig,
    TokenConfig,
)

__all__ = [
    "BatchConfig",
    "RpcConfig",
    "RuntimeConfig",
    "TokenConfig",
]
