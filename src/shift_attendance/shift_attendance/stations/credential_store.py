from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StationCredentialStore(Protocol):
    def get(self) -> Optional[str]:
        raise NotImplementedError

    def save(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class FileStationCredentialStore(StationCredentialStore):
    """Terminal credential persisted in a local file."""

    def __init__(self, path: str | Path):
        self._path = Path(path).expanduser()

    def get(self) -> Optional[str]:
        try:
            token = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(token.strip(), encoding="utf-8")

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()
            logger.warning("station_credential_cleared", extra={"path": str(self._path)})
