"""
Runtime Configuration

Central configuration for token settings, the wallet RPC endpoint and
automated batch runs.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "SPLITAUDIT_"

# USDC on Sepolia
DEFAULT_TOKEN_ADDRESS = "0x1c7D4B196Cb0C7AeD2fa9DAB76B76e95D9BA9A02"


@dataclass
class TokenConfig:
    """The ERC-20 token transfers are denominated in."""
    address: str = DEFAULT_TOKEN_ADDRESS
    decimals: int = 6


@dataclass
class RpcConfig:
    """Wallet JSON-RPC endpoint for the live-transfer path."""
    endpoint: Optional[str] = None
    timeout: float = 30.0
    proxy: Optional[str] = None


@dataclass
class BatchConfig:
    """Defaults for automated allocation test batches."""
    test_count: int = 10
    randomize_exchange_rate: bool = False
    randomize_splits: bool = False
    seed: Optional[int] = None
    fallback_rules: list[dict[str, Any]] = field(default_factory=list)


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() in ("1", "true", "yes")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML or JSON file
    - Programmatic construction
    """
    token: TokenConfig = field(default_factory=TokenConfig)
    rpc: RpcConfig = field(default_factory=RpcConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - SPLITAUDIT_TOKEN_ADDRESS: ERC-20 token contract address
        - SPLITAUDIT_TOKEN_DECIMALS: Token decimals (default 6)
        - SPLITAUDIT_RPC_URL: Wallet JSON-RPC endpoint
        - SPLITAUDIT_RPC_TIMEOUT: RPC timeout in seconds
        - SPLITAUDIT_HTTP_PROXY: Proxy URL for RPC calls
        - SPLITAUDIT_TEST_COUNT: Default batch size
        - SPLITAUDIT_RANDOM_FX: Randomize exchange rates (true/false)
        - SPLITAUDIT_RANDOM_SPLITS: Randomize split rules (true/false)
        - SPLITAUDIT_SEED: Random seed for reproducible batches
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}TOKEN_ADDRESS"):
            overrides.setdefault("token", {})["address"] = os.getenv(f"{ENV_PREFIX}TOKEN_ADDRESS")
        if os.getenv(f"{ENV_PREFIX}TOKEN_DECIMALS"):
            overrides.setdefault("token", {})["decimals"] = int(os.getenv(f"{ENV_PREFIX}TOKEN_DECIMALS", "6"))

        if os.getenv(f"{ENV_PREFIX}RPC_URL"):
            overrides.setdefault("rpc", {})["endpoint"] = os.getenv(f"{ENV_PREFIX}RPC_URL")
        if os.getenv(f"{ENV_PREFIX}RPC_TIMEOUT"):
            overrides.setdefault("rpc", {})["timeout"] = float(os.getenv(f"{ENV_PREFIX}RPC_TIMEOUT", "30"))
        if os.getenv(f"{ENV_PREFIX}HTTP_PROXY"):
            overrides.setdefault("rpc", {})["proxy"] = os.getenv(f"{ENV_PREFIX}HTTP_PROXY")

        if os.getenv(f"{ENV_PREFIX}TEST_COUNT"):
            overrides.setdefault("batch", {})["test_count"] = int(os.getenv(f"{ENV_PREFIX}TEST_COUNT", "10"))
        if os.getenv(f"{ENV_PREFIX}RANDOM_FX"):
            overrides.setdefault("batch", {})["randomize_exchange_rate"] = _env_bool(
                f"{ENV_PREFIX}RANDOM_FX", False
            )
        if os.getenv(f"{ENV_PREFIX}RANDOM_SPLITS"):
            overrides.setdefault("batch", {})["randomize_splits"] = _env_bool(
                f"{ENV_PREFIX}RANDOM_SPLITS", False
            )
        if os.getenv(f"{ENV_PREFIX}SEED"):
            overrides.setdefault("batch", {})["seed"] = int(os.getenv(f"{ENV_PREFIX}SEED", "0"))

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML (.yaml/.yml) or JSON file."""
        path = Path(path)
        if path.suffix.lower() in (".yaml", ".yml"):
            return cls.from_yaml(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        token_data = data.get("token") or {}
        rpc_data = data.get("rpc") or {}
        batch_data = data.get("batch") or {}

        return cls(
            token=TokenConfig(**token_data),
            rpc=RpcConfig(**rpc_data),
            batch=BatchConfig(**batch_data),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("token", "rpc", "batch"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "token": {
                "address": self.token.address,
                "decimals": self.token.decimals,
            },
            "rpc": {
                "endpoint": self.rpc.endpoint,
                "timeout": self.rpc.timeout,
                "proxy": self.rpc.proxy,
            },
            "batch": {
                "test_count": self.batch.test_count,
                "randomize_exchange_rate": self.batch.randomize_exchange_rate,
                "randomize_splits": self.batch.randomize_splits,
                "seed": self.batch.seed,
                "fallback_rules": self.batch.fallback_rules,
            },
            "extra": self.extra,
        }
