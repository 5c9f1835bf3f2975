"""
Lifecycle events derived from charger status transitions.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-007)

TODO:
- None
"""

from __future__ import annotations

from dataclasses import dataclass

from chargesync.src.statuses import ChargerStatus


@dataclass(frozen=True, slots=True)
class StatusChanged:
    """The canonical status changed.

    Attributes:
        old: Status held before this poll, ``None`` on the first poll.
        new: Status derived from the latest snapshot.
    """

    old: ChargerStatus | None
    new: ChargerStatus


@dataclass(frozen=True, slots=True)
class ChargingStarted:
    """The charger entered the Charging status."""


@dataclass(frozen=True, slots=True)
class ChargingEnded:
    """The charger left the Charging status."""


@dataclass(frozen=True, slots=True)
class CarConnected:
    """The charger left the Ready status, i.e. a car was plugged in."""


@dataclass(frozen=True, slots=True)
class CarUnplugged:
    """The charger entered the Ready status, i.e. the car was unplugged."""


ChargerEvent = (
    StatusChanged | ChargingStarted | ChargingEnded | CarConnected | CarUnplugged
)

# Error and Updating are transient states; they only get a StatusChanged.
_SILENT_STATUSES = frozenset({ChargerStatus.ERROR, ChargerStatus.UPDATING})


def status_transition_events(
    old: ChargerStatus | None,
    new: ChargerStatus,
) -> list[ChargerEvent]:
    """Return the events for a status transition, in emission order.

    1. ``StatusChanged(old, new)``; no events at all if ``old == new``.
    2. Stop if ``new`` is Error or Updating.
    3. ``ChargingEnded`` if ``old`` is Charging, else ``CarConnected`` if
       ``old`` is Ready.
    4. ``ChargingStarted`` if ``new`` is Charging, else ``CarUnplugged`` if
       ``new`` is Ready.
    """
    if old == new:
        return []

    events: list[ChargerEvent] = [StatusChanged(old=old, new=new)]
    if new in _SILENT_STATUSES:
        return events

    if old == ChargerStatus.CHARGING:
        events.append(ChargingEnded())
    elif old == ChargerStatus.READY:
        events.append(CarConnected())

    if new == ChargerStatus.CHARGING:
        events.append(ChargingStarted())
    elif new == ChargerStatus.READY:
        events.append(CarUnplugged())

    return events
