"""
Configuration Unit Tests
Tests for core/config/runtime.py and splitaudit_cli/config.py

Environment variables always win over file values.
"""
import json

import pytest

from core.config.runtime import (
    DEFAULT_TOKEN_ADDRESS,
    RuntimeConfig,
)
from splitaudit_cli.config import (
    get_default_config_template,
    load_config,
    load_config_from_file,
)


class TestRuntimeConfig:

    def test_defaults(self):
        config = RuntimeConfig()
        assert config.token.address == DEFAULT_TOKEN_ADDRESS
        assert config.token.decimals == 6
        assert config.rpc.endpoint is None
        assert config.batch.test_count == 10
        assert config.batch.fallback_rules == []

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"batch": {"test_count": 3}})
        assert config.batch.test_count == 3
        assert config.token.decimals == 6

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SPLITAUDIT_RPC_URL", "http://node:8545")
        monkeypatch.setenv("SPLITAUDIT_TOKEN_DECIMALS", "18")
        monkeypatch.setenv("SPLITAUDIT_RANDOM_SPLITS", "true")
        monkeypatch.setenv("SPLITAUDIT_SEED", "7")
        config = RuntimeConfig.from_env()
        assert config.rpc.endpoint == "http://node:8545"
        assert config.token.decimals == 18
        assert config.batch.randomize_splits is True
        assert config.batch.seed == 7

    def test_env_overrides_file_values(self, monkeypatch):
        base = RuntimeConfig.from_dict({"batch": {"test_count": 3, "seed": 1}})
        monkeypatch.setenv("SPLITAUDIT_TEST_COUNT", "50")
        merged = base.with_env_overrides()
        assert merged.batch.test_count == 50
        assert merged.batch.seed == 1
        assert base.batch.test_count == 3

    def test_no_overrides_returns_same(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "runtime.json"
        path.write_text(json.dumps({"rpc": {"endpoint": "http://x", "timeout": 5}}))
        config = RuntimeConfig.from_file(path)
        assert config.rpc.endpoint == "http://x"
        assert config.rpc.timeout == 5

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "runtime.yaml"
        path.write_text("token:\n  decimals: 8\nbatch:\n  randomize_exchange_rate: true\n")
        config = RuntimeConfig.from_file(path)
        assert config.token.decimals == 8
        assert config.batch.randomize_exchange_rate is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_file(tmp_path / "nope.json")

    def test_to_dict_round_trip(self):
        config = RuntimeConfig.from_dict({"batch": {"fallback_rules": [{"address": "A", "percent": 100}]}})
        assert RuntimeConfig.from_dict(config.to_dict()) == config


class TestCLIConfig:

    def test_template_is_valid_json(self, tmp_path):
        path = tmp_path / "splitaudit.json"
        path.write_text(get_default_config_template())
        config = load_config_from_file(path)
        assert config.log_level == "INFO"
        assert config.runtime.batch.randomize_splits is True
        assert len(config.runtime.batch.fallback_rules) == 2

    def test_load_explicit_path(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"log_level": "DEBUG", "output_format": "json"}))
        config = load_config(path)
        assert config.log_level == "DEBUG"
        assert config.default_output_format == "json"

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SPLITAUDIT_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("SPLITAUDIT_RPC_URL", "http://env")
        config = load_config()
        assert config.log_level == "WARNING"
        assert config.runtime.rpc.endpoint == "http://env"

    def test_discovers_cwd_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "splitaudit.json").write_text(json.dumps({"batch": {"test_count": 4}}))
        assert load_config().runtime.batch.test_count == 4
