from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, jsonify

from app.argus.models import User


def user_is_admin(user: User | None) -> bool:
    return bool(user and user.role == "admin")


def require_login(fn: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(fn)
    def wrapped(*args: Any, **kwargs: Any):
        if getattr(g, "current_user", None) is None:
            return jsonify(error="Not logged in"), 401
        return fn(*args, **kwargs)

    return wrapped


def require_admin(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Login check first (401), then role check (403)."""

    @wraps(fn)
    def wrapped(*args: Any, **kwargs: Any):
        user: User | None = getattr(g, "current_user", None)
        if user is None:
            return jsonify(error="Not logged in"), 401
        if not user_is_admin(user):
            return jsonify(error="Admin only"), 403
        return fn(*args, **kwargs)

    return wrapped
