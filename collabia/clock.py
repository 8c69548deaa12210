"""
Collabia — Time helpers.

The swipe quota and the pass deny-list both depend on wall-clock time.  The
services take a ``clock`` and a ``start_of_day`` callable so tests can pin
time instead of reading the system clock.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]
DayBoundary = Callable[[datetime], datetime]


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def local_start_of_day(now: datetime) -> datetime:
    """Midnight of ``now``'s calendar day in the server's local timezone,
    expressed in UTC."""
    local = now.astimezone()
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)


def utc_start_of_day(now: datetime) -> datetime:
    """Midnight of ``now``'s calendar day in UTC."""
    return now.astimezone(timezone.utc).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
