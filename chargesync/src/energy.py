"""
Session cost and lifetime energy calculations.

Both functions are pure and derive their result from the latest snapshot plus
the previously held values only; nothing is persisted between polls.

session_cost():
    The Wallbox API exposes no session-start marker, so a drop in cumulative
    session energy (or an explicit zero) is the only observable session
    boundary.  On a boundary the cost is recomputed from scratch; otherwise
    only the new energy delta is priced, so energy already billed keeps the
    price that was valid when it was delivered.

lifetime_energy():
    Sums the energy of all historical sessions of one charger and adds the
    in-progress session.  Recomputed from the full history on every poll.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-005)

TODO:
- Cache the historical total and only add sessions newer than the last poll
  once the session list exposes a stable ordering key.
"""

from __future__ import annotations

from collections.abc import Iterable

from chargesync.src.models import SessionRecord


def session_cost(
    current_energy: float,
    previous_energy: float | None,
    previous_cost: float | None,
    price: float,
) -> float:
    """Return the cost of the current session.

    Args:
        current_energy: Session energy (kWh) from the latest snapshot.
        previous_energy: Session energy held before this poll, or ``None``
            if nothing has been held yet.
        previous_cost: Session cost held before this poll, or ``None``.
        price: Energy price per kWh from the latest snapshot.

    Returns:
        ``current_energy * price`` when a new session started (energy went
        down) or no session is active (energy is zero); otherwise
        ``previous_cost + (current_energy - previous_energy) * price``.
    """
    prev_energy = previous_energy if previous_energy is not None else 0.0
    prev_cost = previous_cost if previous_cost is not None else 0.0

    if current_energy < prev_energy or current_energy == 0:
        return current_energy * price
    return prev_cost + (current_energy - prev_energy) * price


def lifetime_energy(
    sessions: Iterable[SessionRecord] | None,
    charger_id: str,
    current_session_energy: float,
) -> float:
    """Return the total energy ever delivered by ``charger_id`` in kWh.

    Sessions of other chargers and sessions without an energy value are
    skipped.  A missing or empty session list contributes zero.
    """
    total = 0.0
    for session in sessions or ():
        if session.charger_id == charger_id and session.energy_kwh is not None:
            total += session.energy_kwh
    return total + current_session_energy
