# sequin-platform test scripts
from __future__ import annotations

import io
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sequin_platform._logging import Logger  # noqa: E402


@dataclass
class FakeAPI:
    """Stands in for SequinClient. responses maps method name -> snapshot (or exception to raise)."""

    responses: dict[str, Any] = field(default_factory=dict)
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)
    on_call: Callable[[], None] | None = None

    def _hit(self, name: str, *args: Any) -> Any:
        self.calls.append((name, args))
        if self.on_call is not None:
            self.on_call()
        out = self.responses.get(name)
        if isinstance(out, BaseException):
            raise out
        return out

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def create_connection(self, req: Any) -> Any:
        return self._hit("create_connection", req)

    def get_connection(self, conn_id: str) -> Any:
        return self._hit("get_connection", conn_id)

    def update_connection(self, conn_id: str, req: Any) -> Any:
        return self._hit("update_connection", conn_id, req)

    def delete_connection(self, conn_id: str) -> None:
        self._hit("delete_connection", conn_id)

    def create_sink(self, req: Any) -> Any:
        return self._hit("create_sink", req)

    def get_sink(self, sink_id: str) -> Any:
        return self._hit("get_sink", sink_id)

    def update_sink(self, sink_id: str, req: Any) -> Any:
        return self._hit("update_sink", sink_id, req)

    def delete_sink(self, sink_id: str) -> None:
        self._hit("delete_sink", sink_id)

    def create_backfill(self, sink_ref: str, req: Any) -> Any:
        return self._hit("create_backfill", sink_ref, req)

    def get_backfill(self, sink_ref: str, backfill_id: str) -> Any:
        return self._hit("get_backfill", sink_ref, backfill_id)

    def update_backfill(self, sink_ref: str, backfill_id: str, req: Any) -> Any:
        return self._hit("update_backfill", sink_ref, backfill_id, req)

    def delete_backfill(self, sink_ref: str, backfill_id: str) -> None:
        self._hit("delete_backfill", sink_ref, backfill_id)

    def list_backfills(self, sink_ref: str) -> Any:
        return self._hit("list_backfills", sink_ref)


@pytest.fixture()
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture()
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def logger(log_stream: io.StringIO) -> Logger:
    return Logger(stream=log_stream, level="info", use_color=False, show_time=False)


@pytest.fixture()
def config_base(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("SEQUIN_CONFIG_BASE", str(tmp_path))
    monkeypatch.delenv("SEQUIN_ENDPOINT", raising=False)
    monkeypatch.delenv("SEQUIN_API_KEY", raising=False)
    return tmp_path
