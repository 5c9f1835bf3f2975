"""
Health file writer for the charger monitor.

Writes a JSON health file at a configurable path with five fields:
- last_poll_ts: ISO timestamp of the most recent poll attempt.
- last_success_ts: ISO timestamp of the most recent reconciled poll.
- available: Availability flag last written for the device.
- status: Canonical charger status last mirrored.
- consecutive_failures: Failed poll cycles since the last success.

The file is overwritten on every state change, providing a simple liveness
signal that a container HEALTHCHECK or external monitoring can inspect.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-011)

TODO:
- None
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path


class HealthWriter:
    """Writes monitor health status to a JSON file.

    Each mutating method updates the in-memory state and immediately
    rewrites the health file so it always reflects the latest status.

    Args:
        path: Filesystem path for the health JSON file. Accepts str or Path.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._last_poll_ts: str | None = None
        self._last_success_ts: str | None = None
        self._available: bool | None = None
        self._status: str | None = None
        self._consecutive_failures: int = 0

    def record_poll(self, *, success: bool) -> None:
        """Record a poll attempt and write health file.

        Args:
            success: Whether the cycle reconciled a fresh snapshot.
        """
        now = datetime.now(tz=UTC).isoformat()
        self._last_poll_ts = now
        if success:
            self._last_success_ts = now
        self._write()

    def set_device_state(
        self,
        *,
        available: bool | None,
        status: str | None,
        consecutive_failures: int,
    ) -> None:
        """Update the mirrored device state and write health file."""
        self._available = available
        self._status = status
        self._consecutive_failures = consecutive_failures
        self._write()

    def _write(self) -> None:
        """Write the health JSON file with current state."""
        data = {
            "last_poll_ts": self._last_poll_ts,
            "last_success_ts": self._last_success_ts,
            "available": self._available,
            "status": self._status,
            "consecutive_failures": self._consecutive_failures,
        }
        self.path.write_text(json.dumps(data))
