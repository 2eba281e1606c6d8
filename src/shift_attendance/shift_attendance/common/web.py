"""Helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidTransitionError,
    ValidationError,
    WindowClosedError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def error_payload(exc: DomainError) -> dict:
    err: dict[str, Any] = {"code": exc.code, "message": str(exc)}
    if isinstance(exc, WindowClosedError):
        err["opens_at"] = exc.opens_at.isoformat() if exc.opens_at else None
        err["remaining_seconds"] = exc.remaining_seconds
    elif isinstance(exc, InvalidTransitionError) and exc.state is not None:
        err["state"] = getattr(exc.state, "value", exc.state)
    return {"error": err}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        logger.info(
            "request_rejected",
            extra={"path": request.path, "code": exc.code, "status": exc.http_status},
        )
        return jsonify(error_payload(exc)), exc.http_status


def json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def date_arg(name: str, *, default: Optional[date] = None, alias: Optional[str] = None) -> date:
    raw = request.args.get(name) or (request.args.get(alias) if alias else None)
    if not raw:
        if default is None:
            raise ValidationError(f"'{name}' is required")
        return default
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"'{name}' must be YYYY-MM-DD") from None


def current_role() -> Optional[Role]:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def current_user_id() -> int:
    try:
        return int(session["user_id"])
    except (KeyError, TypeError, ValueError):
        raise AuthorizationError("Login required") from None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user_id()
        return view(*args, **kwargs)

    return wrapper


def manager_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_role() not in (Role.ADMIN, Role.MANAGER):
            raise AuthorizationError("Only managers can access schedules")
        return view(*args, **kwargs)

    return wrapper
