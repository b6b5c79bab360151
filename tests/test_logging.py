# sequin-platform test scripts
from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from sequin_platform import config_base as cb
from sequin_platform._logging import LEVELS, Logger, log, redact


def _logger(level: str = "info") -> tuple[Logger, io.StringIO]:
    buf = io.StringIO()
    return Logger(stream=buf, level=level, use_color=False, show_time=False), buf


def test_levels_filter_output(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEQUIN_DEBUG", raising=False)
    lg, buf = _logger("warn")
    lg.info("hidden")
    lg.debug("hidden too")
    lg.warn("shown")
    assert buf.getvalue().strip() == "WARN shown"


def test_one_method_per_level() -> None:
    lg, _ = _logger()
    for name in LEVELS:
        assert callable(getattr(lg, name, None)) or name == "silent"
    assert not hasattr(lg, "warning") and not hasattr(lg, "success")
    assert set(lg.tag_color_map) == {"DEBUG", "INFO", "WARN", "ERROR"}


def test_child_carries_module_and_follows_root_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEQUIN_DEBUG", raising=False)
    lg, buf = _logger("info")
    child = lg.child("backfill")
    lg.set_level("error")
    child.info("dropped")
    child.error("kept")
    assert buf.getvalue().strip() == "[backfill] ERROR kept"


def test_extra_is_redacted() -> None:
    lg, buf = _logger()
    lg.info("created", extra={"id": "db_1", "password": "hunter2", "url": "postgres://u:p@h/db"})
    line = buf.getvalue()
    assert "id=db_1" in line
    assert "hunter2" not in line and "u:p@h" not in line


def test_redact_keeps_none_and_plain_fields() -> None:
    assert redact({"password": None, "name": "x"}) == {"password": None, "name": "x"}


def test_debug_gate(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEQUIN_DEBUG", raising=False)
    lg, buf = _logger()
    lg.debug("off")
    lg.set_debug_gate(lambda: True)
    lg.child("client").debug("on")
    assert buf.getvalue().strip() == "[client] DEBUG on"


def test_json_sink(tmp_path: Path) -> None:
    lg, _ = _logger()
    sink = tmp_path / "log.jsonl"
    lg.enable_json(str(sink))
    lg.bind(module="connection").info("Created connection", extra={"id": "db_1", "password": "x"})
    lg.close()
    row = json.loads(sink.read_text(encoding="utf-8").strip())
    assert row["level"] == "INFO"
    assert row["ctx"] == {"module": "connection"}
    assert row["extra"] == {"id": "db_1", "password": "***"}


def test_configure_logging_sets_root_level() -> None:
    before = log.level_name
    try:
        cb.configure_logging({"runtime": {"log_level": "warning"}})
        assert log.level_name == "warn"
    finally:
        log.set_level(before)
        log.set_debug_gate(None)
