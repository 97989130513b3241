from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError

logger = logging.getLogger(__name__)


def login_required(view):
    """Identity is placed in the session by the external auth layer."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"message": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"message": "Authentication required"}), 401
        if session.get("role") != Role.ADMIN.value:
            return json_error(AuthorizationError("Admin access required"))
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def client_address() -> str:
    return request.headers.get("X-Forwarded-For") or request.remote_addr or ""


def json_error(exc: Exception):
    """Business errors keep their message; anything else stays opaque."""
    if isinstance(exc, DomainError):
        logger.debug("Rejected %s %s: %s", request.method, request.path, exc)
        return jsonify({"message": str(exc)}), exc.status_code

    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({"message": "Internal server error"}), 500
