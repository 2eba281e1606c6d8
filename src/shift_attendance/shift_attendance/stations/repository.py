from __future__ import annotations

from typing import Optional, Protocol

from .model import Station


class StationRepository(Protocol):
    def authenticate(self, token: str) -> Optional[Station]:
        """Active station owning ``token``; None when unknown or not active."""

        raise NotImplementedError

    def register(self, station_name: str) -> tuple[Station, str]:
        """Create an active station and return it with its plaintext token (shown once)."""

        raise NotImplementedError

    def revoke(self, station_id: int) -> bool:
        raise NotImplementedError
