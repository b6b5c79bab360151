# sequin_platform/config_base.py
# provider configuration: defaults, config.json, environment overrides.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import copy
import json
import os
import secrets
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

from ._logging import log
from .errors import ConfigError

if TYPE_CHECKING:
    from .client import SequinClient

__all__ = [
    "CONFIG_BASE",
    "DEFAULT_CFG",
    "config_path",
    "load_config",
    "save_config",
    "debug_enabled",
    "configure_logging",
    "client_from_config",
]

ENV_ENDPOINT = "SEQUIN_ENDPOINT"
ENV_API_KEY = "SEQUIN_API_KEY"


# ------------------------------------------------------------
# Base dir resolution
# ------------------------------------------------------------
def CONFIG_BASE() -> Path:
    """
    Determine the base directory for config files.

    Priority:
      1) $SEQUIN_CONFIG_BASE if set
      2) Project root (one level up from this package)
    """
    env = os.getenv("SEQUIN_CONFIG_BASE")
    if env:
        return Path(env)

    return Path(__file__).resolve().parents[1]


# Default config structure
DEFAULT_CFG: Dict[str, Any] = {
    # --- Remote control plane ------------------------------------------------
    "sequin": {
        "endpoint": "",                                 # https://api.sequinstream.com (or self-hosted URL). Env: SEQUIN_ENDPOINT
        "api_key": "",                                  # Bearer token. Env: SEQUIN_API_KEY
        "timeout": 30.0,                                # HTTP timeout (seconds); single attempt, no retries
        "version": "dev",                               # Reported in the User-Agent header
    },

    # --- Runtime / Diagnostics ----------------------------------------------
    "runtime": {
        "debug": False,                                 # Emit DEBUG lines (request/response traces)
        "log_level": "info",                            # silent | error | warn | info | debug
    },
}


# ------------------------------------------------------------
# Helpers: paths, IO, merging
# ------------------------------------------------------------
def config_path() -> Path:
    return CONFIG_BASE() / "config.json"


def _read_json(p: Path) -> Dict[str, Any]:
    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: top-level JSON value must be an object")
    return data


def _write_json_atomic(p: Path, data: Dict[str, Any]) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    suffix = f".{time.time_ns()}.{os.getpid()}.{secrets.token_hex(4)}.tmp"
    tmp = p.with_suffix(suffix)

    with tmp.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    tmp.replace(p)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _apply_env(cfg: Dict[str, Any]) -> Dict[str, Any]:
    sq = cfg.setdefault("sequin", {})
    endpoint = (os.getenv(ENV_ENDPOINT) or "").strip()
    api_key = (os.getenv(ENV_API_KEY) or "").strip()
    # explicit config wins over environment
    if endpoint and not str(sq.get("endpoint") or "").strip():
        sq["endpoint"] = endpoint
    if api_key and not str(sq.get("api_key") or "").strip():
        sq["api_key"] = api_key
    return cfg


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Read config.json over the defaults, then fill provider settings from the environment."""
    p = path or config_path()
    user_cfg: Dict[str, Any] = {}
    if p.exists():
        try:
            user_cfg = _read_json(p)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{p}: invalid JSON ({e})") from e

    return _apply_env(_deep_merge(DEFAULT_CFG, user_cfg))


def save_config(cfg: Dict[str, Any], path: Path | None = None) -> None:
    _write_json_atomic(path or config_path(), cfg)


def debug_enabled(cfg: Dict[str, Any]) -> bool:
    rt = cfg.get("runtime") or {}
    return bool(rt.get("debug")) or str(rt.get("log_level") or "").lower() == "debug"


def configure_logging(cfg: Dict[str, Any]) -> None:
    rt = cfg.get("runtime") or {}
    level = str(rt.get("log_level") or "info").strip().lower()
    log.set_level("warn" if level == "warning" else level)
    log.set_debug_gate(lambda: debug_enabled(cfg))


def client_from_config(cfg: Dict[str, Any]) -> "SequinClient":
    from .client import SequinClient

    sq = cfg.get("sequin") or {}
    endpoint = str(sq.get("endpoint") or "").strip()
    api_key = str(sq.get("api_key") or "").strip()

    if not endpoint:
        raise ConfigError(
            "Missing Sequin API endpoint. Set sequin.endpoint in config.json "
            f"or use the {ENV_ENDPOINT} environment variable."
        )
    if not api_key:
        raise ConfigError(
            "Missing Sequin API key. Set sequin.api_key in config.json "
            f"or use the {ENV_API_KEY} environment variable."
        )

    return SequinClient(
        endpoint,
        api_key,
        version=str(sq.get("version") or "dev"),
        timeout=float(sq.get("timeout") or 30.0),
    )
