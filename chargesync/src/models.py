"""
Pydantic models for charger telemetry.

Defines the ChargerSnapshot model that represents a single point-in-time read
of the Wallbox status endpoint, and the SessionRecord model for entries of the
historical session list.  Field aliases follow the raw API keys so a status
payload can be validated directly; the Python attribute names are the
normalized ones used by the rest of the package.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-004)

TODO:
- None
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChargerConfig(BaseModel):
    """The ``config_data`` block of a status payload.

    Attributes:
        locked: Whether the charger is locked (raw API sends 0/1).
        max_charging_current: Configured maximum charging current in amps.
        max_available_current: Hardware/installation current limit in amps.
        energy_price: Price per kWh configured on the charger.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    locked: bool
    max_charging_current: float
    max_available_current: float
    energy_price: float


class ChargerSnapshot(BaseModel):
    """A single status read of one charger.

    Produced each poll, consumed by the reconciliation step and discarded.
    Carries no identity beyond the poll that produced it.

    Attributes:
        status_code: Raw Wallbox ``status_id``.
        charging_power_kw: Current charging power in kilowatts.
        session_energy_kwh: Energy delivered in the current session (kWh).
            Monotonic while a session is active; drops on a new session.
        user_id: Identifier of the user bound to the session, if any.
        user_name: Display name of that user, if any.
        config: Charger configuration block.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_code: int = Field(alias="status_id")
    charging_power_kw: float = Field(alias="charging_power")
    session_energy_kwh: float = Field(alias="added_energy")
    user_id: str | None = None
    user_name: str | None = None
    config: ChargerConfig = Field(alias="config_data")

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id_to_str(cls, v: object) -> object:
        """The API sends a numeric user id; the mirror exposes it as a string."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class SessionRecord(BaseModel):
    """One historical charging session as returned by the session list.

    Attributes:
        charger_id: Charger the session belongs to.
        energy_kwh: Energy delivered in the session, or ``None`` when the API
            omits it (e.g. a session still being finalized).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    charger_id: str = Field(alias="charger")
    energy_kwh: float | None = Field(default=None, alias="energy")

    @field_validator("charger_id", mode="before")
    @classmethod
    def _charger_id_to_str(cls, v: object) -> object:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v
