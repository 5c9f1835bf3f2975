"""
Interfaces of the external collaborators.

The mirror core depends only on these protocols.  The host integration layer
supplies the concrete charger API client and the capability / event sinks.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-002)

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from chargesync.src.events import ChargerEvent
    from chargesync.src.models import ChargerSnapshot, SessionRecord


class ChargerApi(Protocol):
    """Async Wallbox cloud API client.

    Implementations raise :class:`~chargesync.src.errors.AuthError` when
    credentials are rejected and :class:`~chargesync.src.errors.FetchError`
    on transport or HTTP failures.
    """

    async def authenticate(self) -> None: ...

    async def get_status(
        self, charger_id: str
    ) -> ChargerSnapshot | Mapping[str, Any]: ...

    async def list_sessions(
        self,
    ) -> Sequence[SessionRecord | Mapping[str, Any]] | Mapping[str, Any] | None: ...

    async def lock(self, charger_id: str) -> None: ...

    async def unlock(self, charger_id: str) -> None: ...

    async def pause(self, charger_id: str) -> None: ...

    async def resume(self, charger_id: str) -> None: ...

    async def set_max_charging_current(self, charger_id: str, amps: float) -> None: ...

    async def set_energy_cost(self, charger_id: str, price: float) -> None: ...


class CapabilitySink(Protocol):
    """Host-side key/value store the mirrored observables are written to."""

    def set_value(self, name: str, value: Any) -> None: ...

    def set_available(self, available: bool) -> None: ...


class EventSink(Protocol):
    """Host-side receiver of lifecycle events."""

    def emit(self, event: ChargerEvent) -> None: ...
