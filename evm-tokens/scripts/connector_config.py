"""Connector configuration: YAML file plus environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from abi_registry import DEFAULT_ABI_DIR
from subscription_names import SUBSCRIPTION_DELIMITER

DEFAULT_PREFIX = "fly"
DEFAULT_TOPIC = "tokens"

ENV_PREFIX = "EVM_TOKENS_PREFIX"
ENV_TOPIC = "EVM_TOKENS_TOPIC"
ENV_WITH_DATA = "EVM_TOKENS_WITH_DATA"
ENV_ABI_DIR = "EVM_TOKENS_ABI_DIR"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    """Configuration file or environment values are unusable."""


@dataclass(frozen=True)
class ConnectorConfig:
    prefix: str = DEFAULT_PREFIX
    topic: str = DEFAULT_TOPIC
    default_with_data: bool = True
    abi_dir: Path = DEFAULT_ABI_DIR


def _parse_bool(raw: Any, *, field: str) -> bool:
    if isinstance(raw, bool):
        return raw
    normalized = str(raw).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"{field} must be a boolean")


def _validate(config: ConnectorConfig) -> ConnectorConfig:
    if not config.prefix:
        raise ConfigError("prefix cannot be empty")
    if SUBSCRIPTION_DELIMITER in config.prefix:
        raise ConfigError(f"prefix cannot contain '{SUBSCRIPTION_DELIMITER}'")
    if not config.topic:
        raise ConfigError("topic cannot be empty")
    return config


def config_from_mapping(raw: Mapping[str, Any], base: ConnectorConfig | None = None) -> ConnectorConfig:
    config = base or ConnectorConfig()
    updates: dict[str, Any] = {}
    if "prefix" in raw:
        updates["prefix"] = str(raw["prefix"]).strip()
    if "topic" in raw:
        updates["topic"] = str(raw["topic"]).strip()
    if "withData" in raw:
        updates["default_with_data"] = _parse_bool(raw["withData"], field="withData")
    if "abiDir" in raw:
        updates["abi_dir"] = Path(str(raw["abiDir"])).expanduser().resolve()
    return _validate(replace(config, **updates))


def load_config(path: Path | None = None, env: Mapping[str, str] | None = None) -> ConnectorConfig:
    """Build the connector config from an optional YAML file and env vars.

    Environment values win over the file.
    """
    config = ConnectorConfig()
    if path is not None:
        try:
            parsed = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as err:
            raise ConfigError(f"cannot read config {path}: {err}") from err
        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise ConfigError("config file must be a YAML mapping")
        config = config_from_mapping(parsed, config)

    environ = os.environ if env is None else env
    overrides: dict[str, Any] = {}
    if environ.get(ENV_PREFIX):
        overrides["prefix"] = environ[ENV_PREFIX]
    if environ.get(ENV_TOPIC):
        overrides["topic"] = environ[ENV_TOPIC]
    if environ.get(ENV_WITH_DATA):
        overrides["withData"] = environ[ENV_WITH_DATA]
    if environ.get(ENV_ABI_DIR):
        overrides["abiDir"] = environ[ENV_ABI_DIR]
    return config_from_mapping(overrides, config)
