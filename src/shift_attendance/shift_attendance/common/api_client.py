from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import requests

from ..core.constants import DEFAULT_HTTP_TIMEOUT_SECONDS, STATION_TOKEN_HEADER
from ..core.exceptions import (
    CollaboratorError,
    DomainError,
    IdentityRejectedError,
    InvalidTransitionError,
    NotFoundError,
    StationInvalidError,
    WindowClosedError,
    error_class_for_code,
)

logger = logging.getLogger(__name__)

# Messages the face verification backend used before it had error codes.
_LEGACY_IDENTITY_MESSAGES = ("Face not matched", "Face data not found")


class ApiClient:
    """Thin JSON client over the REST backend.

    Every non-2xx answer is turned into a DomainError subclass so callers never
    look at HTTP status codes.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        station_token: Optional[Callable[[], Optional[str]]] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout)
        self._session = session or requests.Session()
        self._station_token = station_token

    def get(self, path: str, *, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, *, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def patch(self, path: str, *, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def request(self, method: str, path: str, *, params: Optional[dict] = None, json: Any = None) -> Any:
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {"Accept": "application/json"}
        token = self._station_token() if self._station_token else None
        if token:
            headers[STATION_TOKEN_HEADER] = token

        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning("api_request_failed", extra={"method": method, "url": url, "error": str(exc)})
            raise CollaboratorError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code >= 400:
            raise error_from_response(resp)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise CollaboratorError(f"{method} {path} returned a non-JSON body", upstream_status=resp.status_code) from exc


def error_from_response(resp) -> DomainError:
    """Map an error response (``{"error": {"code", "message"}}`` or legacy shapes)."""

    try:
        body = resp.json()
    except ValueError:
        body = None

    code = None
    message = None
    extra: dict = {}
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            extra = err
            code = err.get("code")
            message = err.get("message")
        else:
            code = body.get("code")
            message = body.get("message") or (err if isinstance(err, str) else None)
    message = message or getattr(resp, "reason", None) or f"HTTP {resp.status_code}"

    cls = error_class_for_code(code)
    if cls is WindowClosedError:
        remaining = extra.get("remaining_seconds")
        return WindowClosedError(message, remaining_seconds=int(remaining) if remaining is not None else None)
    if cls is InvalidTransitionError:
        return InvalidTransitionError(message, state=extra.get("state"))
    if cls is not None:
        return cls(message)

    if resp.status_code == 403:
        return StationInvalidError(message)
    if any(marker in message for marker in _LEGACY_IDENTITY_MESSAGES):
        return IdentityRejectedError(message)
    if resp.status_code == 404:
        return NotFoundError(message)
    return CollaboratorError(message, upstream_status=resp.status_code)
