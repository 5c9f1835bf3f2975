"""
Read-compare-write gate for observable updates.

Every observable written by the poll cycle passes through
:func:`apply_if_changed`, so a value that did not change never reaches the
capability sink and never triggers a downstream notification.

CHANGELOG:
- 2026-10-18: Treat NaN as equal to NaN so it is not rewritten every cycle
- 2026-10-18: Initial creation (STORY-006)

TODO:
- None
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


def values_equal(a: object, b: object) -> bool:
    """Plain ``==``, except that two float NaNs compare equal."""
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a):
        return math.isnan(b)
    return a == b


def apply_if_changed(
    name: str,
    new_value: V,
    read_current: Callable[[], V],
    write: Callable[[V], None],
) -> bool:
    """Write ``new_value`` only when it differs from the current value.

    Equality is :func:`values_equal`.  Floats are compared exactly: every
    value comes from a single upstream read per cycle, so identical readings
    compare equal.  A NaN reading matches a held NaN.

    Args:
        name: Observable name, used for logging only.
        new_value: Value derived from the latest snapshot.
        read_current: Returns the last-applied value.
        write: Applies a new value.

    Returns:
        ``True`` if ``write`` was called.
    """
    current = read_current()
    if values_equal(new_value, current):
        return False
    logger.debug("Setting [%s]: %r -> %r", name, current, new_value)
    write(new_value)
    return True
