"""
Wallbox status code table -- single source of truth.

Maps the integer ``status_id`` reported by the Wallbox cloud API onto a small
set of canonical status names.  The table is fixed; any code not listed maps
to :attr:`ChargerStatus.UNKNOWN` so a firmware update introducing new codes
never breaks a poll cycle.

References:
    - Wallbox cloud API ``/chargers/status/{id}`` response, ``status_id`` field

CHANGELOG:
- 2026-10-18: Initial creation (STORY-003)

TODO:
- None
"""

from __future__ import annotations

from enum import StrEnum


class ChargerStatus(StrEnum):
    """Canonical charger status names."""

    DISCONNECTED = "Disconnected"
    READY = "Ready"
    CHARGING = "Charging"
    PAUSED = "Paused"
    SCHEDULED = "Scheduled"
    WAITING = "Waiting"
    WAITING_MID = "WaitingMID"
    LOCKED = "Locked"
    ERROR = "Error"
    UPDATING = "Updating"
    DISCHARGING = "Discharging"
    UNKNOWN = "Unknown"


# ---------------------------------------------------------------------------
# Code table
# ---------------------------------------------------------------------------

STATUS_CODES: dict[int, ChargerStatus] = {
    0: ChargerStatus.DISCONNECTED,
    14: ChargerStatus.ERROR,
    15: ChargerStatus.ERROR,
    161: ChargerStatus.READY,
    162: ChargerStatus.READY,
    163: ChargerStatus.DISCONNECTED,
    164: ChargerStatus.WAITING,
    165: ChargerStatus.LOCKED,
    166: ChargerStatus.UPDATING,
    177: ChargerStatus.SCHEDULED,
    178: ChargerStatus.PAUSED,
    179: ChargerStatus.SCHEDULED,
    180: ChargerStatus.WAITING,
    181: ChargerStatus.WAITING,
    182: ChargerStatus.PAUSED,
    # Waiting in queue by power sharing / power boost
    183: ChargerStatus.WAITING,
    184: ChargerStatus.WAITING,
    185: ChargerStatus.WAITING,
    186: ChargerStatus.WAITING,
    # MID meter failed / safety margin exceeded
    187: ChargerStatus.WAITING_MID,
    188: ChargerStatus.WAITING_MID,
    # Waiting in queue by eco-smart
    189: ChargerStatus.WAITING,
    193: ChargerStatus.CHARGING,
    194: ChargerStatus.CHARGING,
    195: ChargerStatus.CHARGING,
    196: ChargerStatus.DISCHARGING,
    209: ChargerStatus.LOCKED,
    210: ChargerStatus.LOCKED,
}
"""Maps Wallbox ``status_id`` -> canonical status."""

UNAVAILABLE_STATUSES: frozenset[ChargerStatus] = frozenset(
    {ChargerStatus.DISCONNECTED, ChargerStatus.ERROR}
)
"""Statuses in which the charger itself reports it cannot be used."""


def status_name(code: int) -> ChargerStatus:
    """Return the canonical status for a raw ``status_id``.

    Total over all integers: codes outside :data:`STATUS_CODES` map to
    :attr:`ChargerStatus.UNKNOWN`.
    """
    return STATUS_CODES.get(code, ChargerStatus.UNKNOWN)
