# sequin-platform test scripts
from __future__ import annotations

import json
from pathlib import Path

import pytest

from sequin_platform import config_base as cb
from sequin_platform.client import SequinClient
from sequin_platform.errors import ConfigError


def test_config_base_honours_env(config_base: Path) -> None:
    assert cb.CONFIG_BASE() == config_base
    assert cb.config_path() == config_base / "config.json"


def test_config_base_defaults_to_project_root(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEQUIN_CONFIG_BASE", raising=False)
    assert cb.CONFIG_BASE() == Path(cb.__file__).resolve().parents[1]


def test_load_config_defaults_when_missing(config_base: Path) -> None:
    cfg = cb.load_config()
    assert cfg["sequin"]["timeout"] == 30.0
    assert cfg["runtime"]["log_level"] == "info"
    assert cfg is not cb.DEFAULT_CFG


def test_load_config_deep_merges_file(config_base: Path) -> None:
    (config_base / "config.json").write_text(json.dumps({"sequin": {"endpoint": "https://sq.local"}}), encoding="utf-8")
    cfg = cb.load_config()
    assert cfg["sequin"]["endpoint"] == "https://sq.local"
    assert cfg["sequin"]["timeout"] == 30.0


def test_env_fills_only_empty_settings(config_base: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (config_base / "config.json").write_text(json.dumps({"sequin": {"endpoint": "https://file"}}), encoding="utf-8")
    monkeypatch.setenv("SEQUIN_ENDPOINT", "https://env")
    monkeypatch.setenv("SEQUIN_API_KEY", "env-key")
    cfg = cb.load_config()
    assert cfg["sequin"]["endpoint"] == "https://file"
    assert cfg["sequin"]["api_key"] == "env-key"


def test_invalid_json_is_a_config_error(config_base: Path) -> None:
    (config_base / "config.json").write_text("{nope", encoding="utf-8")
    with pytest.raises(ConfigError):
        cb.load_config()


def test_non_object_json_is_a_config_error(config_base: Path) -> None:
    (config_base / "config.json").write_text("[]", encoding="utf-8")
    with pytest.raises(ConfigError):
        cb.load_config()


def test_save_then_load_round_trip(config_base: Path) -> None:
    cfg = cb.load_config()
    cfg["sequin"]["endpoint"] = "https://saved"
    cb.save_config(cfg)
    assert cb.load_config()["sequin"]["endpoint"] == "https://saved"
    assert not list(config_base.glob("*.tmp"))


@pytest.mark.parametrize(
    "sequin,env_name",
    [({"api_key": "k"}, "SEQUIN_ENDPOINT"), ({"endpoint": "https://sq"}, "SEQUIN_API_KEY")],
)
def test_client_from_config_names_missing_setting(config_base: Path, sequin: dict, env_name: str) -> None:
    cfg = cb.load_config()
    cfg["sequin"].update(sequin)
    with pytest.raises(ConfigError, match=env_name):
        cb.client_from_config(cfg)


def test_client_from_config_builds_client(config_base: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEQUIN_ENDPOINT", "https://sq.local")
    monkeypatch.setenv("SEQUIN_API_KEY", "k")
    cfg = cb.load_config()
    cfg["sequin"]["version"] = "9.9.9"
    client = cb.client_from_config(cfg)
    assert isinstance(client, SequinClient)
    assert client.endpoint == "https://sq.local"
    assert client.session.headers["User-Agent"] == "sequin-platform/9.9.9"


def test_debug_enabled() -> None:
    assert cb.debug_enabled({"runtime": {"debug": True}})
    assert cb.debug_enabled({"runtime": {"log_level": "DEBUG"}})
    assert not cb.debug_enabled({})
