from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from ..common.api_client import ApiClient
from ..common.datetime_utils import parse_timestamp


class HttpServerTimeSource:
    """Reads ``GET /server-time``; accepts an object or a bare timestamp string."""

    def __init__(self, api: ApiClient, *, tz: tzinfo = timezone.utc, path: str = "/server-time"):
        self._api = api
        self._tz = tz
        self._path = path

    def fetch_server_time(self) -> datetime:
        payload = self._api.get(self._path)
        if isinstance(payload, dict):
            value = payload.get("server_time") or payload.get("serverTime") or payload.get("now")
        else:
            value = payload
        return parse_timestamp(value, tz=self._tz)
