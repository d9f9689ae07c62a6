from __future__ import annotations

from pathlib import Path

import pytest

from _tokens_helpers import ABI_DIR
from connector_config import ConfigError, ConnectorConfig, config_from_mapping, load_config


def test_defaults():
    config = load_config(env={})
    assert config == ConnectorConfig(prefix="fly", topic="tokens", default_with_data=True)
    assert config.abi_dir.resolve() == ABI_DIR.resolve()


def test_yaml_file(tmp_path: Path):
    path = tmp_path / "tokens.yaml"
    path.write_text("prefix: tok\ntopic: erc\nwithData: false\n", encoding="utf-8")
    config = load_config(path, env={})
    assert config.prefix == "tok"
    assert config.topic == "erc"
    assert config.default_with_data is False


def test_empty_yaml_file_keeps_defaults(tmp_path: Path):
    path = tmp_path / "tokens.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path, env={}) == ConnectorConfig()


def test_env_overrides_file(tmp_path: Path):
    path = tmp_path / "tokens.yaml"
    path.write_text("prefix: tok\nwithData: true\n", encoding="utf-8")
    config = load_config(path, env={"EVM_TOKENS_PREFIX": "env", "EVM_TOKENS_WITH_DATA": "no"})
    assert config.prefix == "env"
    assert config.default_with_data is False


def test_abi_dir_override(tmp_path: Path):
    config = load_config(env={"EVM_TOKENS_ABI_DIR": str(tmp_path)})
    assert config.abi_dir == tmp_path.resolve()


@pytest.mark.parametrize(
    "raw",
    [
        {"prefix": "fly:tokens"},
        {"prefix": ""},
        {"topic": ""},
        {"withData": "sometimes"},
    ],
)
def test_invalid_values(raw):
    with pytest.raises(ConfigError):
        config_from_mapping(raw)


def test_non_mapping_yaml(tmp_path: Path):
    path = tmp_path / "tokens.yaml"
    path.write_text("- prefix\n- topic\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path, env={})


def test_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml", env={})
