from __future__ import annotations

from typing import Any

DEFAULT_LIST_KEYS = ("data", "successful_records")


def unwrap_list(payload: Any, *keys: str) -> list:
    """Normalize a list response.

    Collaborators answer either with a bare JSON array or with an object that
    holds the array under one of ``keys`` (``data`` / ``successful_records`` by
    default). Anything else is treated as an empty list.
    """

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys or DEFAULT_LIST_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []
