"""
Unit tests for the monitor health writer.

Tests verify:
- record_poll() always sets last_poll_ts; last_success_ts only on success.
- set_device_state() writes availability, status and failure count.
- The health file always contains all five fields.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-011)

TODO:
- None
"""

from __future__ import annotations

import json
from pathlib import Path

from chargesync.src.health import HealthWriter

_FIELDS = {
    "last_poll_ts",
    "last_success_ts",
    "available",
    "status",
    "consecutive_failures",
}


def _read(path: Path) -> dict:
    return json.loads(path.read_text())


class TestRecordPoll:
    """record_poll() tracks attempts and successes separately."""

    def test_successful_poll_sets_both_timestamps(self, tmp_path: Path) -> None:
        health_path = tmp_path / "health.json"
        writer = HealthWriter(health_path)

        writer.record_poll(success=True)

        data = _read(health_path)
        assert data["last_poll_ts"] is not None
        assert data["last_success_ts"] == data["last_poll_ts"]
        # Should be a valid ISO timestamp
        assert "T" in data["last_poll_ts"]

    def test_failed_poll_keeps_last_success(self, tmp_path: Path) -> None:
        health_path = tmp_path / "health.json"
        writer = HealthWriter(health_path)

        writer.record_poll(success=True)
        first_success = _read(health_path)["last_success_ts"]
        writer.record_poll(success=False)

        data = _read(health_path)
        assert data["last_success_ts"] == first_success
        assert data["last_poll_ts"] is not None

    def test_failed_first_poll_has_no_success(self, tmp_path: Path) -> None:
        health_path = tmp_path / "health.json"
        HealthWriter(health_path).record_poll(success=False)
        assert _read(health_path)["last_success_ts"] is None


class TestDeviceState:
    """set_device_state() mirrors the session flags."""

    def test_device_state_written(self, tmp_path: Path) -> None:
        health_path = tmp_path / "health.json"
        writer = HealthWriter(str(health_path))

        writer.set_device_state(
            available=False, status="Disconnected", consecutive_failures=3
        )

        data = _read(health_path)
        assert data["available"] is False
        assert data["status"] == "Disconnected"
        assert data["consecutive_failures"] == 3

    def test_all_fields_always_present(self, tmp_path: Path) -> None:
        health_path = tmp_path / "health.json"
        writer = HealthWriter(health_path)

        writer.set_device_state(available=None, status=None, consecutive_failures=0)
        assert set(_read(health_path)) == _FIELDS

        writer.record_poll(success=True)
        assert set(_read(health_path)) == _FIELDS

    def test_path_accepts_str(self, tmp_path: Path) -> None:
        writer = HealthWriter(str(tmp_path / "h.json"))
        assert isinstance(writer.path, Path)
