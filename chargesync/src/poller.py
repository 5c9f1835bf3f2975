"""
Single poll cycle for one charger: fetch, normalize, reconcile.

Fetches the charger status through the API client, derives availability and
the canonical status, emits lifecycle events on a status change, and diffs
every observable against the held state so only changed values are written.
Designed to be robust:

- Never propagates an exception to the caller (the scheduler).
- A failed fetch, a malformed payload, or an auth failure marks the device
  unavailable and leaves every held observable at its last-known value.
- A failure deriving or writing one observable is logged and does not stop
  the remaining observables from being reconciled.

CHANGELOG:
- 2026-10-18: Isolate status and availability write failures
- 2026-10-18: Only write session cost once session energy has been applied
- 2026-10-18: Skip fetch while the session awaits re-authentication
- 2026-10-18: Keep lifetime energy when the session list cannot be fetched
- 2026-10-18: Initial creation (STORY-008)

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from chargesync.src.differ import values_equal
from chargesync.src.energy import lifetime_energy, session_cost
from chargesync.src.errors import AuthError
from chargesync.src.events import status_transition_events
from chargesync.src.normalizer import parse_sessions, parse_status
from chargesync.src.state import (
    ENERGY_COST,
    LIFETIME_ENERGY,
    LOCKED,
    MAX_AVAILABLE_CURRENT,
    MAX_CHARGING_CURRENT,
    MEASURE_POWER,
    RUNNING,
    SESSION_COST,
    SESSION_ENERGY,
    STATUS,
    USER_ID,
    USER_NAME,
)
from chargesync.src.statuses import UNAVAILABLE_STATUSES, ChargerStatus, status_name

if TYPE_CHECKING:
    from chargesync.src.models import ChargerSnapshot, SessionRecord
    from chargesync.src.state import DeviceSession

logger = logging.getLogger(__name__)


class CycleOutcome(StrEnum):
    """How a poll cycle ended."""

    RECONCILED = "reconciled"
    FETCH_FAILED = "fetch_failed"
    AUTH_FAILED = "auth_failed"
    AUTH_REQUIRED = "auth_required"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def poll_once(session: DeviceSession) -> CycleOutcome:
    """Execute one fetch-normalize-reconcile cycle for ``session``.

    Catches all exceptions so that the caller's loop is never broken.

    Args:
        session: The device session to poll and reconcile.

    Returns:
        The :class:`CycleOutcome` of this cycle.
    """
    if session.needs_auth:
        logger.warning(
            "Device %s awaits re-authentication, skipping status fetch", session.name
        )
        _mark_failed(session)
        return CycleOutcome.AUTH_REQUIRED

    # -- Fetch --
    try:
        snapshot = parse_status(await session.api.get_status(session.charger_id))
    except AuthError as exc:
        logger.error(
            "Authentication rejected while polling %s: %s", session.name, exc
        )
        session.needs_auth = True
        _mark_failed(session)
        return CycleOutcome.AUTH_FAILED
    except Exception as exc:
        logger.warning("Failed to get charger status for %s: %s", session.name, exc)
        _mark_failed(session)
        return CycleOutcome.FETCH_FAILED

    session.consecutive_failures = 0

    # -- Reconcile --
    status = status_name(snapshot.status_code)
    _check_availability(session, status)
    _reconcile_status(session, status)
    await _reconcile_capabilities(session, snapshot, status)
    return CycleOutcome.RECONCILED


# ---------------------------------------------------------------------------
# Reconciliation steps
# ---------------------------------------------------------------------------


def _mark_failed(session: DeviceSession) -> None:
    session.consecutive_failures += 1
    _set_availability(session, False)


def _set_availability(session: DeviceSession, available: bool) -> bool:
    """Apply the availability flag, isolating a sink failure to it."""
    try:
        return session.update_availability(available)
    except Exception:
        logger.warning(
            "Failed to set availability for %s", session.name, exc_info=True
        )
        return False


def _check_availability(session: DeviceSession, status: ChargerStatus) -> None:
    """Derive availability from the status the charger itself reports."""
    available = status not in UNAVAILABLE_STATUSES
    if _set_availability(session, available) and not available:
        logger.info("Device %s is unavailable (%s)", session.name, status)


def _reconcile_status(session: DeviceSession, status: ChargerStatus) -> None:
    old = session.state.get_or_none(STATUS)
    try:
        changed = session.update(STATUS, status)
    except Exception:
        logger.warning(
            "Failed to reconcile [status] for %s", session.name, exc_info=True
        )
        return
    if not changed:
        return
    logger.info("Setting [status] for %s: %s -> %s", session.name, old, status)
    for event in status_transition_events(old, status):
        try:
            session.emit(event)
        except Exception:
            logger.warning(
                "Event sink failed for %r on %s", event, session.name, exc_info=True
            )


async def _reconcile_capabilities(
    session: DeviceSession,
    snapshot: ChargerSnapshot,
    status: ChargerStatus,
) -> None:
    config = snapshot.config

    _reconcile(session, LOCKED, lambda: config.locked)
    _reconcile(session, RUNNING, lambda: status != ChargerStatus.PAUSED)
    _reconcile(session, MEASURE_POWER, lambda: snapshot.charging_power_kw * 1000)
    _reconcile(session, MAX_AVAILABLE_CURRENT, lambda: config.max_available_current)
    _reconcile(session, MAX_CHARGING_CURRENT, lambda: config.max_charging_current)
    _reconcile(session, ENERGY_COST, lambda: config.energy_price)
    _reconcile(session, USER_ID, lambda: snapshot.user_id)
    _reconcile(session, USER_NAME, lambda: snapshot.user_name)

    await _reconcile_energy(session, snapshot)


async def _reconcile_energy(session: DeviceSession, snapshot: ChargerSnapshot) -> None:
    """Reconcile session energy, session cost and lifetime energy.

    The cost is derived from the session energy and cost held *before* this
    cycle, so both are read before ``session_energy`` is overwritten.  The
    cost is only written once the new session energy has been applied, so a
    rejected energy write never lets the cost bill the same delta twice.
    """
    current_energy = snapshot.session_energy_kwh
    price = snapshot.config.energy_price
    previous_energy = session.state.get_or_none(SESSION_ENERGY)
    previous_cost = session.state.get_or_none(SESSION_COST)

    sessions = await _load_sessions(session)

    _reconcile(session, SESSION_ENERGY, lambda: current_energy)
    if values_equal(session.state.get(SESSION_ENERGY), current_energy):
        _reconcile(
            session,
            SESSION_COST,
            lambda: session_cost(
                current_energy, previous_energy, previous_cost, price
            ),
        )
    elif not session.torn_down:
        # Cost and energy move together; retried next cycle from the same base
        logger.warning(
            "Session energy not applied for %s, deferring [session_cost]",
            session.name,
        )
    if sessions is not None:
        _reconcile(
            session,
            LIFETIME_ENERGY,
            lambda: lifetime_energy(sessions, session.charger_id, current_energy),
        )


async def _load_sessions(session: DeviceSession) -> list[SessionRecord] | None:
    """Fetch the session history, or ``None`` if it cannot be retrieved."""
    try:
        return parse_sessions(await session.api.list_sessions())
    except AuthError as exc:
        logger.error(
            "Authentication rejected while listing sessions for %s: %s",
            session.name,
            exc,
        )
        session.needs_auth = True
        return None
    except Exception as exc:
        logger.warning(
            "Failed to get session list for %s, keeping lifetime energy: %s",
            session.name,
            exc,
        )
        return None


def _reconcile(session: DeviceSession, name: str, compute: Callable[[], Any]) -> None:
    """Derive and apply one observable, isolating any failure to it."""
    try:
        session.update(name, compute())
    except Exception:
        logger.warning(
            "Failed to reconcile [%s] for %s", name, session.name, exc_info=True
        )
