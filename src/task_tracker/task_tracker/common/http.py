"""JSON error responses and bearer-token route guards shared by all controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Callable

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from ..users.service import AuthService, SessionUser

LOG = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (InternalError, 500),
)


def status_for(exc: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = status_for(exc)
        if status >= 500:
            LOG.error("%s %s failed: %s", request.method, request.path, exc)
        return json_error(str(exc), status)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return json_error(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        LOG.exception("Unhandled error on %s %s", request.method, request.path)
        return json_error("Internal server error", 500)


def current_user() -> SessionUser:
    return g.current_user


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


class RouteGuards:
    """``protect`` / ``admin_only`` / ``worker_only`` decorators for JSON routes."""

    def __init__(self, auth_service: AuthService):
        self._auth = auth_service

    def _authenticate(self) -> SessionUser:
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError("Not authorized, no token")
        return self._auth.resolve_token(token.strip())

    def _guard(self, role: Role | None) -> Callable:
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                user = self._authenticate()
                if role is not None and user.role != role:
                    raise AuthorizationError(f"Not authorized as {role.value}")
                g.current_user = user
                return view(*args, **kwargs)

            return wrapper

        return decorator

    @property
    def protect(self) -> Callable:
        return self._guard(None)

    @property
    def admin_only(self) -> Callable:
        return self._guard(Role.ADMIN)

    @property
    def worker_only(self) -> Callable:
        return self._guard(Role.WORKER)
