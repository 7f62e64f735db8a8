"""
API Dependencies

Dependency injection for the API.
"""

from __future__ import annotations

import logging
from pathlib import Path

from core.config.runtime import RuntimeConfig


logger = logging.getLogger(__name__)


def load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from a config file, then overlay environment variables.

    Search order for config file:
      1. ./splitaudit.json
      2. ./.splitaudit.json
      3. ./splitaudit.yaml
      4. ~/.config/splitaudit/config.json

    Environment variables ALWAYS override config file values.
    """
    search_paths = [
        Path.cwd() / "splitaudit.json",
        Path.cwd() / ".splitaudit.json",
        Path.cwd() / "splitaudit.yaml",
        Path.home() / ".config" / "splitaudit" / "config.json",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            try:
                config = RuntimeConfig.from_file(path)
                logger.info(f"Loaded config from {path}")
                break
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_runtime_config() -> RuntimeConfig:
    """FastAPI dependency providing the runtime configuration."""
    return load_runtime_config()
