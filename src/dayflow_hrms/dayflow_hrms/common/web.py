"""JSON helpers shared by the feature controllers.

Identity lives in the Flask session (`user_id`, `company_id`, `role`) and is
populated by the authentication layer in front of this API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: int
    company_id: Optional[int]
    role: Role


def ok(data: Any = None, message: str = "", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message, "data": None}), status


def current_identity() -> Identity:
    company_id = session.get("company_id")
    return Identity(
        user_id=int(session["user_id"]),
        company_id=int(company_id) if company_id is not None else None,
        role=Role(session["role"]),
    )


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "role" not in session:
            return fail("Authentication required", 401)
        try:
            Role(session["role"])
        except ValueError:
            return fail("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            if session.get("role") not in allowed:
                return fail("You do not have permission to perform this action", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return fail(str(e) or "Forbidden", 403)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(str(e) or "Not found", 404)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e), 400)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", 500)
