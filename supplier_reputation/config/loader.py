"""Configuration loader: minimal file merging + get_config that applies defaults.

`load_config_from_files` only reads and deep-merges YAML files (base + optional
environment). Runtime defaults and environment overrides are applied in
`get_config()` so tests that inspect raw file merging see the unmodified merge.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError, ErrorCode
from .schemas import EngineConfig

ENV_PREFIX = "SUPPLIER_REPUTATION"
DEFAULT_CONFIG_DIR = Path("config")


def _deep_merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def _convert_env_value(value: str) -> Any:
    """Convert environment variable string to appropriate type."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def _apply_env_overrides(config_dict: dict[str, Any], prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Apply environment variable overrides to configuration dictionary.

    Example:
      SUPPLIER_REPUTATION__REPUTATION__FEEDBACK__ENABLED=false
        -> config_dict["reputation"]["feedback"]["enabled"] = False
    """
    result = config_dict.copy()

    for env_key, env_value in os.environ.items():
        if not env_key.startswith(f"{prefix}__"):
            continue

        config_path = env_key[len(f"{prefix}__") :].lower().split("__")

        current = result
        for path_part in config_path[:-1]:
            if path_part not in current or not isinstance(current[path_part], dict):
                current[path_part] = {}
            else:
                current[path_part] = dict(current[path_part])
            current = current[path_part]

        current[config_path[-1]] = _convert_env_value(env_value)

    return result


def _read_yaml(file_path: Path, environment: str | None = None) -> dict[str, Any]:
    try:
        with open(file_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        details: dict[str, Any] = {"file_path": str(file_path)}
        if environment:
            details["environment"] = environment
        raise ConfigurationError(
            f"Failed to parse config {file_path.name}: {e}",
            operation="load_config_from_files",
            details=details,
            status_code=ErrorCode.CONFIG_LOAD_FAILED,
            cause=e,
        ) from e


def load_config_from_files(
    environment: str | None = None, config_dir: Path | None = None
) -> dict[str, Any]:
    """Load configuration from YAML files with environment-specific overrides.

    Only loads `base.yaml` and merges an optional `<environment>.yaml` on top.
    """
    if config_dir is None:
        config_dir = Path(os.getenv(f"{ENV_PREFIX}_CONFIG_DIR", str(DEFAULT_CONFIG_DIR)))

    base_file = Path(config_dir) / "base.yaml"
    if not base_file.exists():
        raise ConfigurationError(
            f"Base configuration file not found: {base_file}",
            operation="load_config_from_files",
            details={"file_path": str(base_file), "config_dir": str(config_dir)},
            status_code=ErrorCode.CONFIG_LOAD_FAILED,
        )

    config = _read_yaml(base_file)

    if environment:
        env_file = Path(config_dir) / f"{environment}.yaml"
        if env_file.exists():
            config = _deep_merge_dicts(config, _read_yaml(env_file, environment))

    return config


@lru_cache(maxsize=1)
def get_config(
    environment: str | None = None,
    config_dir: Path | None = None,
    apply_env_overrides_flag: bool = True,
) -> EngineConfig:
    """Get validated configuration with caching.

    - Load merged file config via `load_config_from_files`
    - Inject runtime defaults (engine metadata, logging flags)
    - Apply environment variable overrides (if requested)
    - Validate and return an EngineConfig instance
    """
    if environment is None:
        environment = os.getenv(f"{ENV_PREFIX}__ENGINE__ENVIRONMENT", "development")

    try:
        config_dict = load_config_from_files(environment=environment, config_dir=config_dir)

        config_dict.setdefault("engine", {})
        config_dict["engine"].setdefault("environment", environment)

        config_dict.setdefault("logging", {})
        logging_cfg = config_dict["logging"]
        logging_cfg.setdefault("level", "INFO")
        logging_cfg.setdefault("format", "json")
        if environment.lower() in ("test", "testing"):
            logging_cfg.setdefault("file_enabled", False)

        if apply_env_overrides_flag:
            config_dict = _apply_env_overrides(config_dict)

        return EngineConfig(**config_dict)

    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed: {e}",
            operation="get_config",
            details={"environment": environment},
            cause=e,
        ) from e
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Configuration loading failed: {e}",
            operation="get_config",
            details={"environment": environment},
            status_code=ErrorCode.CONFIG_LOAD_FAILED,
            cause=e,
        ) from e


def reload_config() -> None:
    """Clear configuration cache to force reload on next access."""
    get_config.cache_clear()
