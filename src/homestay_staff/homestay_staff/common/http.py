from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Iterable, Optional

from flask import Flask, jsonify, session
from mysql.connector import Error as MySQLError

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, DomainError, ValidationError

logger = logging.getLogger(__name__)

MANAGEMENT_ROLES = (Role.ADMIN, Role.MANAGER)


def _serialize(data: Any) -> Any:
    if hasattr(data, "to_dict"):
        return data.to_dict()
    if isinstance(data, (list, tuple)):
        return [_serialize(d) for d in data]
    if isinstance(data, dict):
        return {k: _serialize(v) for k, v in data.items()}
    return data


def success(data: Any = None, message: str = "Success", status: int = 200):
    return jsonify({"success": True, "message": message, "data": _serialize(data)}), status


def paginated(page, message: str = "Success"):
    return success(
        {
            "items": page.items,
            "pagination": {
                "page": page.page,
                "limit": page.limit,
                "total": page.total,
                "total_pages": page.total_pages,
            },
        },
        message,
    )


def error(message: str, status: int = 400, *, code: Optional[str] = None, **details: Any):
    body: dict[str, Any] = {"success": False, "message": message}
    if code:
        body["code"] = code
    body.update({k: _serialize(v) for k, v in details.items()})
    return jsonify(body), status


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Optional[Role]:
    role = session.get("role")
    try:
        return Role(role) if role else None
    except ValueError:
        return None


def is_management() -> bool:
    return current_role() in MANAGEMENT_ROLES


def ensure_self_or_management(staff_id: int) -> None:
    """Staff may only read their own records."""
    if not is_management() and current_user_id() != int(staff_id):
        raise AuthorizationError("Access denied")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error("Authentication required", 401, code="unauthenticated")
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed: Iterable[Role] = roles

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error("Authentication required", 401, code="unauthenticated")
            if current_role() not in allowed:
                return error("Access denied", 403, code="forbidden")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        details: dict[str, Any] = {}
        if isinstance(exc, ValidationError) and exc.errors:
            details["errors"] = exc.errors
        if isinstance(exc, ConflictError):
            details["conflicts"] = exc.conflicts
        logger.info("Request rejected", extra={"code": exc.code, "reason": exc.message})
        return error(exc.message, exc.status_code, code=exc.code, **details)

    @app.errorhandler(MySQLError)
    def handle_storage_error(exc: MySQLError):
        logger.exception("Database error")
        return error("Internal server error", 500, code="storage_error")
