"""
Normalizer that converts raw Wallbox API payloads into validated models.

Takes the JSON-decoded status payload (as returned by the charger API client)
and validates it into a :class:`~chargesync.src.models.ChargerSnapshot`.
Session list payloads are accepted in either the flat form (a sequence of
records) or the Wallbox JSON:API form::

    {"data": [{"attributes": {"charger": 12345, "energy": 7.2, ...}}, ...]}

These are pure functions: no side effects beyond logging, no I/O, no clock.

CHANGELOG:
- 2026-10-18: Accept JSON:API session list shape alongside flat records
- 2026-10-18: Initial creation (STORY-004)

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from chargesync.src.errors import DataShapeError
from chargesync.src.models import ChargerSnapshot, SessionRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Status payload
# ---------------------------------------------------------------------------


def parse_status(payload: ChargerSnapshot | Mapping[str, Any]) -> ChargerSnapshot:
    """Convert a raw status payload into a validated ChargerSnapshot.

    A payload that already is a :class:`ChargerSnapshot` is returned as-is,
    so API clients are free to do their own parsing.

    Args:
        payload: Decoded ``/chargers/status/{id}`` response body.

    Returns:
        The validated snapshot.

    Raises:
        DataShapeError: If the payload is not a mapping, or a required field
            (including the ``config_data`` block) is missing or invalid.
    """
    if isinstance(payload, ChargerSnapshot):
        return payload
    if not isinstance(payload, Mapping):
        raise DataShapeError(
            f"Status payload must be a mapping, got {type(payload).__name__}"
        )
    try:
        return ChargerSnapshot.model_validate(payload)
    except ValidationError as exc:
        raise DataShapeError(f"Malformed status payload: {exc}") from exc


# ---------------------------------------------------------------------------
# Session list payload
# ---------------------------------------------------------------------------


def _session_items(payload: Any) -> Sequence[Any]:
    """Return the list of raw session entries, whatever the envelope."""
    if payload is None:
        return ()
    if isinstance(payload, Mapping):
        data = payload.get("data")
        if data is None:
            return ()
        if not isinstance(data, Sequence) or isinstance(data, str):
            raise DataShapeError("Session list 'data' must be a list")
        return data
    if isinstance(payload, Sequence) and not isinstance(payload, str):
        return payload
    raise DataShapeError(
        f"Session list must be a list or mapping, got {type(payload).__name__}"
    )


def parse_sessions(payload: Any) -> list[SessionRecord]:
    """Convert a raw session list into SessionRecord models.

    ``None``, an empty list, or an envelope without ``data`` all yield an
    empty list.  Individual entries that cannot be interpreted (for example
    a session with no charger id) are skipped with a warning rather than
    failing the whole list.

    Args:
        payload: Decoded session list, flat or JSON:API shaped.

    Returns:
        The sessions that could be interpreted, in payload order.

    Raises:
        DataShapeError: If the envelope itself has the wrong type.
    """
    records: list[SessionRecord] = []
    for item in _session_items(payload):
        if isinstance(item, SessionRecord):
            records.append(item)
            continue
        if isinstance(item, Mapping) and isinstance(item.get("attributes"), Mapping):
            item = item["attributes"]
        try:
            records.append(SessionRecord.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed session entry: %r", item)
    return records
