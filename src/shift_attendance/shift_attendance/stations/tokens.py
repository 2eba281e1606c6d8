from __future__ import annotations

import secrets
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

TOKEN_PREFIX_LENGTH = 8


@dataclass(frozen=True)
class IssuedToken:
    token: str
    prefix: str
    token_hash: str


def token_prefix(token: str) -> str:
    return (token or "")[:TOKEN_PREFIX_LENGTH]


def issue_station_token() -> IssuedToken:
    """New terminal credential; only the hash and the lookup prefix are stored."""
    token = secrets.token_urlsafe(32)
    return IssuedToken(token=token, prefix=token_prefix(token), token_hash=generate_password_hash(token))


def token_matches(token: str, token_hash: str) -> bool:
    return bool(token) and check_password_hash(token_hash, token)
