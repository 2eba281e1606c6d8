"""Authoritative time for check-in gating.

The local clock of a station is untrusted: it may be wrong or deliberately
moved forward to unlock check-in early. ``ClockAuthority`` captures the offset
between the local clock and the server clock once, then keeps applying it to
the still-running local clock.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Optional, Protocol

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class ServerTimeSource(Protocol):
    def fetch_server_time(self) -> datetime:
        """Current server time as an aware datetime."""

        raise NotImplementedError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SystemClock:
    """The server's own clock; it is the authority, so no offset applies."""

    def __init__(self, tz: tzinfo = timezone.utc):
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock:
    """Clock frozen at a given instant; moves only when told to."""

    def __init__(self, at: datetime):
        self._at = at

    def now(self) -> datetime:
        return self._at

    def set(self, at: datetime) -> None:
        self._at = at

    def advance(self, delta: timedelta) -> None:
        self._at = self._at + delta


class ClockAuthority:
    """Process-wide authoritative clock.

    Construct once per view/session and hand the same instance to every
    consumer. ``sync_clock`` is meant to run once at initialization; a stale
    offset in a long session is accepted.
    """

    def __init__(
        self,
        source: ServerTimeSource,
        *,
        local_clock: Optional[Callable[[], datetime]] = None,
        tz: tzinfo = timezone.utc,
    ):
        self._source = source
        self._local_clock = local_clock or _utcnow
        self._tz = tz
        self._offset = timedelta(0)
        self._degraded = False
        self._synced = False

    @property
    def offset(self) -> timedelta:
        return self._offset

    @property
    def degraded(self) -> bool:
        """True when the last sync failed and local time is trusted as-is."""
        return self._degraded

    @property
    def synced(self) -> bool:
        return self._synced

    def _local_now(self) -> datetime:
        local = self._local_clock()
        if local.tzinfo is None:
            local = local.replace(tzinfo=self._tz)
        return local

    def sync_clock(self) -> timedelta:
        """Capture ``server_time - local_time_at_receipt``.

        On any failure the offset falls back to zero (degraded mode) instead of
        blocking attendance on a transient outage.
        """
        try:
            server_time = self._source.fetch_server_time()
            local_at_receipt = self._local_now()
            if server_time.tzinfo is None:
                server_time = server_time.replace(tzinfo=self._tz)
            offset = server_time - local_at_receipt
        except (DomainError, ValueError, TypeError) as exc:
            self._offset = timedelta(0)
            self._degraded = True
            self._synced = True
            logger.warning("clock_sync_degraded", extra={"error": str(exc)})
            return self._offset

        self._offset = offset
        self._degraded = False
        self._synced = True
        logger.info("clock_synced", extra={"offset_seconds": offset.total_seconds()})
        return self._offset

    def now(self) -> datetime:
        """Authoritative now, recomputed from the running local clock on every call."""
        return (self._local_now() + self._offset).astimezone(self._tz)
