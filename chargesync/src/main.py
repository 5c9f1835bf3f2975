"""
Charger monitor lifecycle and runner.

DeviceMonitor owns one charger's DeviceSession and PollScheduler:
1. **start()**: authenticate with the API, create the session, and start the
   scheduler (one immediate poll, then one per interval).
2. **apply_settings()**: change the poll interval at runtime without an extra
   immediate poll.
3. **stop() / teardown()**: stop scheduling; teardown additionally discards
   any write from a cycle that completes afterwards.

Structured JSON logging is available through configure_logging(). A
HealthWriter, when configured, records the outcome of every poll cycle.

run_monitor() runs a monitor until a shared asyncio.Event is set, letting the
in-flight cycle finish before tearing the session down.

CHANGELOG:
- 2026-10-18: Configure logging from settings.log_level in run_monitor()
- 2026-10-18: Validate the new interval before storing it in apply_settings()
- 2026-10-18: Add reauthenticate() to resume polling after an auth failure
- 2026-10-18: Initial creation (STORY-012)

TODO:
- None
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from chargesync.src.commands import ChargerCommands
from chargesync.src.health import HealthWriter
from chargesync.src.poller import CycleOutcome, poll_once
from chargesync.src.scheduler import PollScheduler
from chargesync.src.state import STATUS, DeviceSession

if TYPE_CHECKING:
    import asyncio

    from chargesync.src.config import MonitorSettings
    from chargesync.src.interfaces import CapabilitySink, ChargerApi, EventSink

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging for the monitor.

    Sets up the root logger with a JSON-formatted handler writing to stderr.
    """

    class _JsonFormatter(logging.Formatter):
        """Minimal JSON log formatter."""

        def format(self, record: logging.LogRecord) -> str:
            log_entry = {
                "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
            }
            if record.exc_info and record.exc_info[1] is not None:
                log_entry["exception"] = self.formatException(record.exc_info)
            return json.dumps(log_entry)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def log_config_summary(settings: MonitorSettings) -> None:
    """Log a config summary at startup."""
    logger.info(
        "Charger monitor starting with config: "
        "charger_id=%s, charger_name=%s, poll_interval_s=%s, "
        "health_path=%s, log_level=%s",
        settings.charger_id,
        settings.charger_name,
        settings.poll_interval_s,
        settings.health_path or "disabled",
        settings.log_level,
    )


# ---------------------------------------------------------------------------
# Device monitor
# ---------------------------------------------------------------------------


class DeviceMonitor:
    """Mirror one charger into the host's capability and event sinks.

    Args:
        settings: Monitor configuration.
        api: Charger API client.
        capabilities: Sink the observables are written to.
        events: Sink lifecycle events are forwarded to.
        health: Optional health file writer updated after every cycle.
    """

    def __init__(
        self,
        *,
        settings: MonitorSettings,
        api: ChargerApi,
        capabilities: CapabilitySink,
        events: EventSink,
        health: HealthWriter | None = None,
    ) -> None:
        self._settings = settings
        self._api = api
        self._capabilities = capabilities
        self._events = events
        self._health = health
        self._session: DeviceSession | None = None
        self._commands: ChargerCommands | None = None
        self._scheduler = PollScheduler(name=settings.charger_name)

    @property
    def session(self) -> DeviceSession | None:
        """The active device session, ``None`` before start()."""
        return self._session

    @property
    def scheduler(self) -> PollScheduler:
        return self._scheduler

    @property
    def commands(self) -> ChargerCommands:
        """Command surface of the monitored charger.

        Raises:
            RuntimeError: If the monitor has not been started.
        """
        if self._commands is None:
            raise RuntimeError("Monitor not started")
        return self._commands

    async def start(self) -> None:
        """Authenticate, create the session and start polling.

        Raises:
            AuthError: If the API rejects the credentials.
            RuntimeError: If the monitor was already started.
        """
        if self._session is not None:
            raise RuntimeError(
                f"Monitor for {self._settings.charger_name} already started"
            )

        logger.info("Device init: %s", self._settings.charger_name)
        await self._api.authenticate()

        self._session = DeviceSession(
            charger_id=self._settings.charger_id,
            name=self._settings.charger_name,
            api=self._api,
            capabilities=self._capabilities,
            events=self._events,
        )
        self._commands = ChargerCommands(self._session)
        self._scheduler.start(self._settings.poll_interval_s, self._cycle)

    def apply_settings(self, *, poll_interval_s: int) -> None:
        """Apply a new poll interval without triggering an extra poll.

        Raises:
            ValueError: If ``poll_interval_s`` is not positive.
        """
        self._scheduler.reconfigure(poll_interval_s)
        self._settings.poll_interval_s = poll_interval_s

    async def reauthenticate(self) -> None:
        """Authenticate again and resume fetching after an auth failure.

        Raises:
            AuthError: If the API still rejects the credentials.
        """
        await self._api.authenticate()
        if self._session is not None and self._session.needs_auth:
            logger.info(
                "Device %s re-authenticated, resuming polls", self._session.name
            )
            self._session.needs_auth = False

    def stop(self) -> None:
        """Stop polling.  A cycle in flight still applies its writes."""
        self._scheduler.stop()

    def teardown(self) -> None:
        """Stop polling and discard writes of any cycle still in flight."""
        self._scheduler.stop()
        if self._session is not None:
            logger.info("Tearing down device %s", self._session.name)
            self._session.torn_down = True

    async def _cycle(self) -> None:
        """One scheduled poll, followed by the health file update."""
        session = self._session
        if session is None:
            return
        outcome = await poll_once(session)

        if self._health is not None:
            try:
                status = session.state.get_or_none(STATUS)
                self._health.set_device_state(
                    available=session.available,
                    status=str(status) if status is not None else None,
                    consecutive_failures=session.consecutive_failures,
                )
                self._health.record_poll(success=outcome is CycleOutcome.RECONCILED)
            except Exception:
                logger.warning("Failed to write health file", exc_info=True)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


async def run_monitor(
    *,
    settings: MonitorSettings,
    api: ChargerApi,
    capabilities: CapabilitySink,
    events: EventSink,
    shutdown_event: asyncio.Event,
) -> None:
    """Run a DeviceMonitor until ``shutdown_event`` is set.

    Configures JSON logging at ``settings.log_level`` before starting.

    On shutdown the scheduler is stopped, the in-flight cycle (if any) is
    allowed to finish, and the session is torn down.

    Raises:
        AuthError: If the initial authentication fails.
    """
    configure_logging(settings.log_level)
    log_config_summary(settings)
    health = HealthWriter(settings.health_path) if settings.health_path else None

    monitor = DeviceMonitor(
        settings=settings,
        api=api,
        capabilities=capabilities,
        events=events,
        health=health,
    )
    await monitor.start()
    try:
        await shutdown_event.wait()
        logger.info("Received shutdown request, stopping monitor")
    finally:
        monitor.stop()
        await monitor.scheduler.wait_idle()
        monitor.teardown()
    logger.info("Shutdown complete")
