"""
Host-initiated charger commands.

Forwards lock/unlock, pause/resume, maximum charging current and energy price
changes to the charger API for one device session.  The mirrored observables
are not touched here: the next poll cycle picks up the new charger state and
reconciles it like any other change.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-010)

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chargesync.src.state import DeviceSession

logger = logging.getLogger(__name__)


class ChargerCommands:
    """Command surface for one charger.

    API errors are logged and re-raised so the host can report them.

    Args:
        session: The device session whose charger is commanded.
    """

    def __init__(self, session: DeviceSession) -> None:
        self._session = session

    async def set_locked(self, locked: bool) -> None:
        """Lock (``True``) or unlock (``False``) the charger."""
        api = self._session.api
        if locked:
            await self._call("lock", api.lock(self._session.charger_id))
        else:
            await self._call("unlock", api.unlock(self._session.charger_id))

    async def set_running(self, running: bool) -> None:
        """Resume (``True``) or pause (``False``) charging."""
        api = self._session.api
        if running:
            await self._call("resume", api.resume(self._session.charger_id))
        else:
            await self._call("pause", api.pause(self._session.charger_id))

    async def set_max_charging_current(self, amps: float) -> None:
        """Change the maximum charging current for the session.

        Raises:
            ValueError: If ``amps`` is not positive.
        """
        if amps <= 0:
            raise ValueError(f"Charging current must be > 0 A (got {amps})")
        await self._call(
            "set_max_charging_current",
            self._session.api.set_max_charging_current(self._session.charger_id, amps),
        )

    async def set_energy_cost(self, price: float) -> None:
        """Change the energy price per kWh configured on the charger.

        Raises:
            ValueError: If ``price`` is negative.
        """
        if price < 0:
            raise ValueError(f"Energy cost must be >= 0 (got {price})")
        await self._call(
            "set_energy_cost",
            self._session.api.set_energy_cost(self._session.charger_id, price),
        )

    async def _call(self, what: str, pending: Awaitable[None]) -> None:
        logger.info("Sending %s to %s", what, self._session.name)
        try:
            await pending
        except Exception:
            logger.warning(
                "Command %s failed for %s", what, self._session.name, exc_info=True
            )
            raise
