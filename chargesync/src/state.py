"""
Per-device mirrored state.

ObservableState holds the last value applied for every observable; it starts
with the :data:`UNSET` sentinel everywhere so the first successful poll writes
every observable.  DeviceSession bundles everything one monitored charger
needs (identity, API handle, sinks, held state, flags) and is the single
object passed into the poll cycle and the commands.

CHANGELOG:
- 2026-10-18: Discard writes after teardown
- 2026-10-18: Initial creation (STORY-006)

TODO:
- None
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from chargesync.src.differ import apply_if_changed

if TYPE_CHECKING:
    from chargesync.src.events import ChargerEvent
    from chargesync.src.interfaces import CapabilitySink, ChargerApi, EventSink

logger = logging.getLogger(__name__)


class _Unset:
    """Marker type for an observable that has never been written."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()

# ---------------------------------------------------------------------------
# Observable names
# ---------------------------------------------------------------------------

STATUS = "status"
LOCKED = "locked"
RUNNING = "running"
MEASURE_POWER = "measure_power"
SESSION_ENERGY = "session_energy"
SESSION_COST = "session_cost"
LIFETIME_ENERGY = "lifetime_energy"
MAX_AVAILABLE_CURRENT = "max_available_current"
MAX_CHARGING_CURRENT = "max_charging_current"
ENERGY_COST = "energy_cost"
USER_ID = "user_id"
USER_NAME = "user_name"

OBSERVABLES: tuple[str, ...] = (
    STATUS,
    LOCKED,
    RUNNING,
    MEASURE_POWER,
    SESSION_ENERGY,
    SESSION_COST,
    LIFETIME_ENERGY,
    MAX_AVAILABLE_CURRENT,
    MAX_CHARGING_CURRENT,
    ENERGY_COST,
    USER_ID,
    USER_NAME,
)
"""Every observable mirrored for a charger."""


class ObservableState:
    """Last-applied value of every observable of one charger."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = dict.fromkeys(OBSERVABLES, UNSET)

    def get(self, name: str) -> Any:
        """Return the held value, or :data:`UNSET`."""
        return self._values[name]

    def get_or_none(self, name: str) -> Any:
        """Return the held value, mapping :data:`UNSET` to ``None``."""
        value = self._values[name]
        return None if value is UNSET else value

    def set(self, name: str, value: Any) -> None:
        if name not in self._values:
            raise KeyError(f"Unknown observable '{name}'")
        self._values[name] = value

    def as_dict(self) -> dict[str, Any]:
        """Return a copy of the held values (UNSET entries included)."""
        return dict(self._values)


@dataclass(slots=True)
class DeviceSession:
    """Everything the core needs to mirror one charger.

    Created when monitoring starts and discarded on teardown.  Only the poll
    cycle mutates :attr:`state`.

    Attributes:
        charger_id: Device key used for every API call.
        api: Charger API client.
        capabilities: Sink the observables are written to.
        events: Sink lifecycle events are forwarded to.
        name: Human-readable device name, for logging.
        state: Held observable values.
        available: Last availability written to the sink, ``None`` before
            the first cycle.
        needs_auth: Set after an AuthError; polling skips the fetch until the
            session has been re-authenticated.
        torn_down: Set on teardown; later writes and events are discarded.
        consecutive_failures: Failed cycles since the last successful one.
    """

    charger_id: str
    api: ChargerApi
    capabilities: CapabilitySink
    events: EventSink
    name: str = ""
    state: ObservableState = field(default_factory=ObservableState)
    available: bool | None = None
    needs_auth: bool = False
    torn_down: bool = False
    consecutive_failures: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.charger_id

    def update(self, name: str, value: Any) -> bool:
        """Apply ``value`` to observable ``name`` if it changed.

        Returns:
            ``True`` if the value was written.
        """
        return apply_if_changed(
            name,
            value,
            lambda: self.state.get(name),
            lambda v: self._write(name, v),
        )

    def update_availability(self, available: bool) -> bool:
        """Apply the availability flag if it changed."""
        return apply_if_changed(
            "available",
            available,
            lambda: self.available,
            self._write_availability,
        )

    def emit(self, event: ChargerEvent) -> None:
        """Forward an event to the event sink unless torn down."""
        if self.torn_down:
            logger.debug("Device %s torn down, dropping event %r", self.name, event)
            return
        self.events.emit(event)

    def _write(self, name: str, value: Any) -> None:
        if self.torn_down:
            logger.debug("Device %s torn down, discarding [%s] write", self.name, name)
            return
        self.capabilities.set_value(name, value)
        self.state.set(name, value)

    def _write_availability(self, available: bool) -> None:
        if self.torn_down:
            logger.debug(
                "Device %s torn down, discarding availability write", self.name
            )
            return
        self.capabilities.set_available(available)
        self.available = available
