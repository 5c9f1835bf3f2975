"""
Shared test fixtures for charger monitor tests.

Provides environment isolation for MonitorSettings tests, recording fakes for
the capability and event sinks, a raw status payload builder, and a mocked
charger API client.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-001)

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest
from chargesync.src.state import DeviceSession

# All MonitorSettings environment variable names, used for cleanup.
_ALL_MONITOR_ENV_VARS = (
    "CHARGER_ID",
    "CHARGER_NAME",
    "POLL_INTERVAL_S",
    "HEALTH_PATH",
    "LOG_LEVEL",
)

CHARGER_ID = "12345"


@pytest.fixture(autouse=True)
def _clean_monitor_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all monitor env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_MONITOR_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Recording sinks
# ---------------------------------------------------------------------------


class RecordingCapabilitySink:
    """Capability sink that records every call in order."""

    def __init__(self) -> None:
        self.values: dict[str, Any] = {}
        self.writes: list[tuple[str, Any]] = []
        self.availability: list[bool] = []

    def set_value(self, name: str, value: Any) -> None:
        self.values[name] = value
        self.writes.append((name, value))

    def set_available(self, available: bool) -> None:
        self.availability.append(available)

    @property
    def available(self) -> bool | None:
        return self.availability[-1] if self.availability else None

    def written_names(self) -> list[str]:
        return [name for name, _ in self.writes]

    def clear(self) -> None:
        self.writes.clear()
        self.availability.clear()


class RecordingEventSink:
    """Event sink that records every emitted event in order."""

    def __init__(self) -> None:
        self.events: list[Any] = []

    def emit(self, event: Any) -> None:
        self.events.append(event)

    def types(self) -> list[type]:
        return [type(e) for e in self.events]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture()
def capability_sink() -> RecordingCapabilitySink:
    return RecordingCapabilitySink()


@pytest.fixture()
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


# ---------------------------------------------------------------------------
# Raw payloads and API
# ---------------------------------------------------------------------------


def build_status_payload(**overrides: Any) -> dict[str, Any]:
    """Return a raw Wallbox status payload with plausible defaults.

    Top-level keys are overridden by keyword; ``config_data`` keys can be
    overridden through ``config={...}``.
    """
    config = {
        "locked": 0,
        "max_charging_current": 16,
        "max_available_current": 32,
        "energy_price": 0.25,
    }
    config.update(overrides.pop("config", {}))
    payload: dict[str, Any] = {
        "status_id": 194,
        "charging_power": 7.4,
        "added_energy": 3.0,
        "user_id": 987,
        "user_name": "Alex",
        "config_data": config,
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def status_payload() -> Callable[..., dict[str, Any]]:
    """Factory fixture for raw status payloads (see build_status_payload)."""
    return build_status_payload


@pytest.fixture()
def api() -> AsyncMock:
    """Mocked charger API client returning a Charging snapshot, no history."""
    client = AsyncMock()
    client.authenticate = AsyncMock(return_value=None)
    client.get_status = AsyncMock(return_value=build_status_payload())
    client.list_sessions = AsyncMock(return_value=[])
    return client


@pytest.fixture()
def session(
    api: AsyncMock,
    capability_sink: RecordingCapabilitySink,
    event_sink: RecordingEventSink,
) -> DeviceSession:
    return DeviceSession(
        charger_id=CHARGER_ID,
        name="Garage",
        api=api,
        capabilities=capability_sink,
        events=event_sink,
    )
