from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import abort, g

from app.kitchenops.models import User


def user_is_admin(user: User | None) -> bool:
    return bool(user and user.is_active and user.is_admin)


def require_login(fn: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(fn)
    def wrapped(*args: Any, **kwargs: Any):
        user: User | None = getattr(g, "current_user", None)
        if not user or not user.is_active:
            # Keep the token failure reason (expired vs. invalid) when we have one.
            abort(401, description=getattr(g, "auth_error", None) or "Access denied. No token provided.")
        return fn(*args, **kwargs)

    return wrapped


def require_admin(fn: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(fn)
    def wrapped(*args: Any, **kwargs: Any):
        user: User | None = getattr(g, "current_user", None)
        if not user or not user.is_active:
            abort(401, description=getattr(g, "auth_error", None) or "Access denied. No token provided.")
        # Authenticated but not an admin → 403
        if not user_is_admin(user):
            abort(403, description="Access denied. Admin privileges required.")
        return fn(*args, **kwargs)

    return wrapped
