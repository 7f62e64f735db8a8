"""
CLI Configuration

Configuration management for the SplitAudit CLI.
Supports environment variables and JSON configuration files.

A config file holds CLI settings at the top level and runtime settings
under "token", "rpc" and "batch" (see core.config.runtime).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.config.runtime import ENV_PREFIX, RuntimeConfig


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    # Token, RPC and batch settings
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data: dict[str, Any] = json.load(f)

    config = CLIConfig()
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = data.get("output_format", config.default_output_format)
    config.runtime = RuntimeConfig.from_dict(data)
    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "splitaudit.json",
            Path.cwd() / ".splitaudit.json",
            Path.home() / ".config" / "splitaudit" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", "human")

    config.runtime = config.runtime.with_env_overrides()
    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "INFO",
  "log_file": null,
  "output_format": "human",
  "token": {
    "address": "0x1c7D4B196Cb0C7AeD2fa9DAB76B76e95D9BA9A02",
    "decimals": 6
  },
  "rpc": {
    "endpoint": "http://127.0.0.1:8545",
    "timeout": 30
  },
  "batch": {
    "test_count": 10,
    "randomize_exchange_rate": false,
    "randomize_splits": true,
    "seed": null,
    "fallback_rules": [
      {"address": "0x0000000000000000000000000000000000000001", "percent": 50},
      {"address": "0x0000000000000000000000000000000000000002", "percent": 50}
    ]
  }
}
"""
