# sequin_platform/_logging.py
# A small structured logger: colored console lines plus an optional JSON-lines sink.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import datetime
import json
import os
import sys
import threading
from collections.abc import Mapping
from typing import Any, Callable, TextIO

RESET = "\033[0m"
DIM = "\033[90m"
RED = "\033[91m"
YELLOW = "\033[33m"
BLUE = "\033[94m"

LEVELS = {"silent": 60, "error": 40, "warn": 30, "info": 20, "debug": 10}

_SECRET_KEYS = ("password", "api_key", "secret", "access_key", "url")


def _env_bool(name: str) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    return v in ("1", "true", "yes", "on")


def _env_level() -> str:
    v = (os.getenv("SEQUIN_LOG_LEVEL") or "").strip().lower()
    if v == "warning":
        return "warn"
    return v if v in LEVELS else "info"


def _use_color() -> bool:
    if os.getenv("NO_COLOR") is not None:
        return False
    return bool(getattr(sys.stdout, "isatty", lambda: False)())


def redact(fields: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in fields.items():
        if v is not None and any(s in k.lower() for s in _SECRET_KEYS):
            out[k] = "***"
        else:
            out[k] = v
    return out


class Logger:
    def __init__(
        self,
        stream: TextIO | None = None,
        level: str | None = None,
        use_color: bool | None = None,
        show_time: bool = True,
        time_fmt: str = "%Y-%m-%d %H:%M:%S",
        *,
        debug_gate: Callable[[], bool] | None = None,
        _context: Mapping[str, Any] | None = None,
        _json_stream: TextIO | None = None,
        _lock: threading.Lock | None = None,
        _root: "Logger | None" = None,
    ):
        self._root = _root
        self.stream = stream if stream is not None else sys.stderr
        self._level_no = LEVELS.get(level or _env_level(), 20)
        self.use_color = _use_color() if use_color is None else use_color
        self.show_time = show_time
        self.time_fmt = time_fmt
        self.tag_color_map = {
            "DEBUG": YELLOW,
            "INFO": BLUE,
            "WARN": YELLOW,
            "ERROR": RED,
        }
        self._debug_gate = debug_gate
        self._context: dict[str, Any] = dict(_context or {})
        self._json_stream = _json_stream
        self._lock = _lock or threading.Lock()

    # Configuration (children follow the root they were bound from)
    @property
    def level_no(self) -> int:
        return self._root.level_no if self._root else self._level_no

    def set_level(self, level: str) -> None:
        target = self._root or self
        target._level_no = LEVELS.get(level, target._level_no)

    def set_debug_gate(self, gate: Callable[[], bool] | None) -> None:
        (self._root or self)._debug_gate = gate

    def enable_json(self, file_path: str) -> None:
        (self._root or self)._json_stream = open(file_path, "a", encoding="utf-8")

    def close(self) -> None:
        target = self._root or self
        if target._json_stream:
            target._json_stream.close()
            target._json_stream = None

    def _sink(self) -> TextIO | None:
        return (self._root or self)._json_stream

    @property
    def level_name(self) -> str:
        for k, v in LEVELS.items():
            if v == self.level_no:
                return k
        return "info"

    # Context
    def get_context(self) -> dict[str, Any]:
        return dict(self._context)

    def bind(self, **ctx: Any) -> "Logger":
        new_ctx = dict(self._context)
        new_ctx.update(ctx)
        return Logger(
            stream=self.stream,
            level=self.level_name,
            use_color=self.use_color,
            show_time=self.show_time,
            time_fmt=self.time_fmt,
            _context=new_ctx,
            _lock=self._lock,
            _root=self._root or self,
        )

    def child(self, name: str) -> "Logger":
        return self.bind(module=name)

    # Formatting
    def _debug_on(self) -> bool:
        if self.level_no <= LEVELS["debug"] or _env_bool("SEQUIN_DEBUG"):
            return True
        gate = (self._root or self)._debug_gate
        return bool(gate and gate())

    def _fmt_text(self, label: str, msg: str, extra: Mapping[str, Any] | None) -> str:
        mod = str(self._context.get("module") or "").strip()
        col = self.tag_color_map.get(label) if self.use_color else None
        lvl = f"{col}{label}{RESET}" if col else label
        head = f"[{mod}]" if mod else ""
        line = f"{head} {lvl} {msg}".strip()
        if extra:
            tail = " ".join(f"{k}={v}" for k, v in sorted(redact(extra).items()) if v is not None)
            if tail:
                line = f"{line} {tail}"
        if self.show_time:
            ts = datetime.datetime.now().strftime(self.time_fmt)
            prefix = f"{DIM}[{ts}]{RESET}" if self.use_color else f"[{ts}]"
            return f"{prefix} {line}"
        return line

    def _write(self, label: str, msg: str, extra: Mapping[str, Any] | None) -> None:
        text = self._fmt_text(label, msg, extra)
        with self._lock:
            self.stream.write(text + "\n")
            self.stream.flush()
            sink = self._sink()
            if sink:
                payload: dict[str, Any] = {
                    "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="milliseconds"),
                    "level": label,
                    "msg": msg,
                    "ctx": self._context,
                }
                if extra:
                    payload["extra"] = redact(extra)
                sink.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
                sink.flush()

    def _emit(self, severity: str, label: str, *parts: Any, extra: Mapping[str, Any] | None = None) -> None:
        if severity == "debug":
            if not self._debug_on():
                return
        elif self.level_no > LEVELS[severity]:
            return
        self._write(label, " ".join(str(p) for p in parts), extra)

    # Public API
    def debug(self, *parts: Any, extra: Mapping[str, Any] | None = None) -> None:
        self._emit("debug", "DEBUG", *parts, extra=extra)

    def info(self, *parts: Any, extra: Mapping[str, Any] | None = None) -> None:
        self._emit("info", "INFO", *parts, extra=extra)

    def warn(self, *parts: Any, extra: Mapping[str, Any] | None = None) -> None:
        self._emit("warn", "WARN", *parts, extra=extra)

    def error(self, *parts: Any, extra: Mapping[str, Any] | None = None) -> None:
        self._emit("error", "ERROR", *parts, extra=extra)


# default instance
log = Logger()

__all__ = ["Logger", "log", "LEVELS", "redact"]
