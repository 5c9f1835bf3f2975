"""
Error taxonomy for the charger API boundary.

All three errors are raised by the charger API client (or by the normalizer
for malformed payloads) and caught at the poll-cycle boundary, where they are
converted into availability transitions and a logged cause.

- AuthError: credentials rejected. Fatal to the device until re-authenticated.
- FetchError: transient transport or HTTP failure. Retried on the next tick.
- DataShapeError: payload arrived but is missing or has invalid fields.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-002)

TODO:
- None
"""

from __future__ import annotations


class ChargerSyncError(Exception):
    """Base class for all charger mirror errors."""


class AuthError(ChargerSyncError):
    """The charger API rejected the configured credentials."""


class FetchError(ChargerSyncError):
    """A request to the charger API failed."""


class DataShapeError(ChargerSyncError):
    """A charger API payload could not be interpreted."""
