"""Tests for configuration loader."""

import pytest

from supplier_reputation.config.loader import (
    _apply_env_overrides,
    _convert_env_value,
    _deep_merge_dicts,
    get_config,
    load_config_from_files,
    reload_config,
)
from supplier_reputation.config.schemas import EngineConfig, ResponsivenessConfig
from supplier_reputation.exceptions import ConfigurationError, ErrorCode
from tests.utils.config_mocks import create_engine_config, write_config_dir


pytestmark = pytest.mark.fast


BASE = {
    "engine": {"name": "supplier-reputation", "version": "0.1.0"},
    "logging": {"level": "INFO", "format": "json"},
    "reputation": {
        "loader_timeout_seconds": 10.0,
        "feedback": {"enabled": True, "lookback_days": 365},
        "responsiveness": {"max_suppliers": 50},
    },
}


@pytest.fixture(autouse=True)
def _clear_config_cache():
    reload_config()
    yield
    reload_config()


class TestDeepMergeDicts:
    def test_merge_nested_dicts(self):
        base = {"outer": {"inner1": 1, "inner2": 2}}
        override = {"outer": {"inner2": 3, "inner3": 4}}

        assert _deep_merge_dicts(base, override) == {
            "outer": {"inner1": 1, "inner2": 3, "inner3": 4}
        }

    def test_base_is_not_mutated(self):
        base = {"a": {"b": 1}}
        _deep_merge_dicts(base, {"a": {"b": 2}})

        assert base == {"a": {"b": 1}}


class TestEnvOverrides:
    @pytest.mark.parametrize(
        "raw,expected",
        [("true", True), ("FALSE", False), ("12", 12), ("2.5", 2.5), ("text", "text")],
    )
    def test_convert_env_value(self, raw, expected):
        assert _convert_env_value(raw) == expected

    def test_nested_override(self, monkeypatch):
        monkeypatch.setenv("SUPPLIER_REPUTATION__REPUTATION__FEEDBACK__ENABLED", "false")
        monkeypatch.setenv("SUPPLIER_REPUTATION__DUCKDB__THREADS", "2")

        result = _apply_env_overrides({"reputation": {"feedback": {"enabled": True}}})

        assert result["reputation"]["feedback"]["enabled"] is False
        assert result["duckdb"]["threads"] == 2

    def test_unrelated_variables_ignored(self, monkeypatch):
        monkeypatch.setenv("OTHER__REPUTATION__X", "1")

        assert _apply_env_overrides({}) == {}


class TestLoadConfigFromFiles:
    def test_environment_file_merged(self, tmp_path):
        config_dir = write_config_dir(
            tmp_path, BASE, test={"reputation": {"loader_timeout_seconds": 2.0}}
        )

        config = load_config_from_files(environment="test", config_dir=config_dir)

        assert config["reputation"]["loader_timeout_seconds"] == 2.0
        assert config["reputation"]["feedback"]["enabled"] is True

    def test_missing_environment_file_is_fine(self, tmp_path):
        config_dir = write_config_dir(tmp_path, BASE)

        config = load_config_from_files(environment="staging", config_dir=config_dir)

        assert config == BASE

    def test_missing_base_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_files(config_dir=tmp_path / "nowhere")

        assert exc_info.value.status_code == ErrorCode.CONFIG_LOAD_FAILED

    def test_invalid_yaml(self, tmp_path):
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "base.yaml").write_text("reputation: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config_from_files(config_dir=config_dir)


class TestGetConfig:
    def test_returns_validated_config(self, tmp_path):
        config_dir = write_config_dir(tmp_path, BASE)

        config = get_config(environment="test", config_dir=config_dir)

        assert isinstance(config, EngineConfig)
        assert config.engine.environment == "test"
        assert config.logging.file_enabled is False
        assert config.reputation.responsiveness.max_suppliers == 50
        assert config.reputation.kickoff.on_time_days == 14

    def test_env_override_applies(self, tmp_path, monkeypatch):
        config_dir = write_config_dir(tmp_path, BASE)
        monkeypatch.setenv("SUPPLIER_REPUTATION__REPUTATION__RESPONSIVENESS__MAX_SUPPLIERS", "10")

        config = get_config(environment="test", config_dir=config_dir)

        assert config.reputation.responsiveness.max_suppliers == 10

    def test_env_override_can_be_disabled(self, tmp_path, monkeypatch):
        config_dir = write_config_dir(tmp_path, BASE)
        monkeypatch.setenv("SUPPLIER_REPUTATION__REPUTATION__RESPONSIVENESS__MAX_SUPPLIERS", "10")

        config = get_config(
            environment="test", config_dir=config_dir, apply_env_overrides_flag=False
        )

        assert config.reputation.responsiveness.max_suppliers == 50

    def test_validation_failure_is_configuration_error(self, tmp_path):
        bad = {"reputation": {"loader_timeout_seconds": -1}}
        config_dir = write_config_dir(tmp_path, bad)

        with pytest.raises(ConfigurationError) as exc_info:
            get_config(environment="test", config_dir=config_dir)

        assert exc_info.value.status_code == ErrorCode.CONFIG_VALIDATION_FAILED

    def test_cached_until_reload(self, tmp_path):
        config_dir = write_config_dir(tmp_path, BASE)

        first = get_config(environment="test", config_dir=config_dir)
        assert get_config(environment="test", config_dir=config_dir) is first

        reload_config()
        assert get_config(environment="test", config_dir=config_dir) is not first

    def test_repository_config_loads(self, repo_root):
        config = get_config(environment="test", config_dir=repo_root / "config")

        assert config.reputation.loader_timeout_seconds == 2.0
        assert config.logging.format == "text"
        assert config.duckdb.database_path == ":memory:"


class TestSchemas:
    def test_row_limits_are_bounded(self):
        config = ResponsivenessConfig()

        assert config.participation_row_limit(1) == 500
        assert config.participation_row_limit(20) == 1000
        assert config.participation_row_limit(1000) == 20000
        assert config.message_row_limit(5) == 300
        assert config.message_row_limit(100) == 1000
        assert config.message_row_limit(5000) == 15000

    def test_inverted_bounds_rejected(self):
        with pytest.raises(ValueError):
            ResponsivenessConfig(min_message_rows=500, max_message_rows=100)

    def test_logging_format_aliases(self):
        config = create_engine_config(logging={"format": "pretty"})

        assert config.logging.format == "text"
