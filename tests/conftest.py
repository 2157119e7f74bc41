"""Shared test fixtures for vsports.

Provides an in-memory stand-in for ``redis.Redis`` with a controllable
clock, a recording diagnostic sink, helpers for building
``httpx.MockTransport`` backed clients, and config isolation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import httpx
import pytest
import redis

from vsports.client import VSportsClient
from vsports.models import ClientConfig
from vsports.output import NullOutput, reset_output


# ---------------------------------------------------------------------------
# Redis double
# ---------------------------------------------------------------------------


class FakeRedis:
    """Dict-backed subset of ``redis.Redis``: ping, get, set (with ``ex``), close.

    Time only moves when :meth:`advance` is called. Setting ``fail_ping``,
    ``fail_reads`` or ``fail_writes`` makes the matching command raise
    ``redis.exceptions.ConnectionError``.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.data: dict[str, tuple[bytes, Optional[float]]] = {}
        self.get_calls: list[str] = []
        self.set_calls: list[tuple[str, bytes, Optional[int]]] = []
        self.fail_ping = False
        self.fail_reads = False
        self.fail_writes = False
        self.closed = False

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def ping(self) -> bool:
        if self.fail_ping:
            raise redis.exceptions.ConnectionError(
                "Error 111 connecting to localhost:6379. Connection refused."
            )
        return True

    def get(self, name: str) -> Optional[bytes]:
        self.get_calls.append(name)
        if self.fail_reads:
            raise redis.exceptions.ConnectionError("Connection reset by peer")
        entry = self.data.get(name)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self.now >= expires_at:
            del self.data[name]
            return None
        return value

    def set(self, name: str, value: bytes, ex: Optional[int] = None) -> bool:
        self.set_calls.append((name, value, ex))
        if self.fail_writes:
            raise redis.exceptions.ConnectionError("Connection reset by peer")
        expires_at = self.now + ex if ex is not None else None
        self.data[name] = (bytes(value), expires_at)
        return True

    def close(self) -> None:
        self.closed = True


class RecordingOutput(NullOutput):
    """A silent sink that remembers debug and error messages."""

    def __init__(self) -> None:
        super().__init__()
        self.debugs: list[str] = []
        self.errors: list[str] = []

    def debug(self, message: str) -> None:
        self.debugs.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Drop the global OutputManager so stale stream references never leak."""
    yield
    reset_output()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def recording_output() -> RecordingOutput:
    return RecordingOutput()


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        apiKey="test-key",
        timeoutSeconds=5,
        redisConfig={"addr": "localhost:6379", "password": "", "db": 0},
        cacheDuration=60,
    )


@pytest.fixture
def make_client(
    client_config: ClientConfig, fake_redis: FakeRedis
) -> Callable[..., VSportsClient]:
    """Factory building a VSportsClient over *fake_redis* and a mock HTTP handler."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        output=None,
        config: Optional[ClientConfig] = None,
    ) -> VSportsClient:
        return VSportsClient(
            config or client_config,
            output,
            redis_client=fake_redis,
            http_transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories at tmp_path and clear every VSPORTS_* variable."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("vsports.config._is_xdg_platform", lambda: True)
    for var in [
        "VSPORTS_CONFIG",
        "VSPORTS_API_KEY",
        "VSPORTS_TIMEOUT",
        "VSPORTS_CACHE_DURATION",
        "VSPORTS_REDIS_ADDR",
        "VSPORTS_REDIS_PASSWORD",
        "VSPORTS_REDIS_DB",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
