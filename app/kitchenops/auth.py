from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import datetime, timedelta

from flask import Blueprint, abort, current_app, g, request
from werkzeug.security import check_password_hash, generate_password_hash

from app.kitchenops.audit import record_event
from app.kitchenops.db import db_session
from app.kitchenops.models import User
from app.kitchenops.rbac import require_admin, require_login
from app.kitchenops.tokens import TokenError, bearer_token_from_header, issue_token, read_token
from app.kitchenops.utils import clean_text, json_object_body

bp = Blueprint("auth", __name__)
_login_attempts: dict[str, list[datetime]] = defaultdict(list)
_LOGIN_RATE_LIMIT = 5
_LOGIN_RATE_WINDOW = 300  # seconds
_MIN_PIN_LENGTH = 4


def _check_rate_limit(ip: str) -> bool:
    now = datetime.utcnow()
    cutoff = now - timedelta(seconds=_LOGIN_RATE_WINDOW)
    _login_attempts[ip] = [t for t in _login_attempts[ip] if t > cutoff]
    return len(_login_attempts[ip]) >= _LOGIN_RATE_LIMIT


def _record_attempt(ip: str) -> None:
    _login_attempts[ip].append(datetime.utcnow())


def load_current_user() -> None:
    """
    Loads g.current_user from the Authorization bearer token.
    Also assigns a simple per-request request_id (for audit/log correlation).
    """
    if not getattr(g, "request_id", None):
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    g.current_user = None
    g.auth_error = None

    token = bearer_token_from_header(request.headers.get("Authorization"))
    if not token:
        return

    try:
        claims = read_token(token)
    except TokenError as e:
        g.auth_error = str(e)
        return

    try:
        user = db_session().get(User, int(claims["id"]))
    except (TypeError, ValueError):
        g.auth_error = "Invalid or expired token."
        return
    if not user or not user.is_active:
        g.auth_error = "User not found."
        return
    g.current_user = user


@bp.post("/login")
def login_post():
    payload = json_object_body()
    username = clean_text(payload.get("username"))
    pin = str(payload.get("pin") or "")
    ip = request.remote_addr or "unknown"

    if not username or not pin:
        return {"message": "Username and PIN are required."}, 400

    if _check_rate_limit(ip):
        return {"message": "Too many login attempts. Please wait 5 minutes."}, 429

    _record_attempt(ip)

    s = db_session()
    user = s.query(User).filter(User.username == username).one_or_none()
    if not user or not user.is_active:
        current_app.logger.info("Login for unknown user %r (request_id=%s)", username, g.request_id)
        return {"message": "User not found."}, 404
    if not check_password_hash(user.pin_hash, pin):
        record_event(
            s,
            actor=None,
            action="auth.login_failed",
            entity_type="User",
            entity_id=str(user.id),
            reason="Invalid PIN",
            metadata={"username": username},
        )
        s.commit()
        return {"message": "Invalid PIN."}, 401

    _login_attempts[ip].clear()
    record_event(s, actor=user, action="auth.login", entity_type="User", entity_id=str(user.id))
    s.commit()
    return {"message": "Login successful.", "token": issue_token(user.token_claims())}


@bp.post("/register")
@require_admin
def register_post():
    payload = json_object_body()
    username = clean_text(payload.get("username"))
    pin = str(payload.get("pin") or "")

    if not username or not pin:
        return {"message": "Username and PIN are required."}, 400
    if len(pin) < _MIN_PIN_LENGTH or not pin.isdigit():
        return {"message": f"PIN must be at least {_MIN_PIN_LENGTH} digits."}, 400

    s = db_session()
    if s.query(User).filter(User.username == username).one_or_none():
        return {"message": "User already exists."}, 409

    user = User(
        username=username,
        pin_hash=generate_password_hash(pin),
        is_admin=bool(payload.get("isAdmin")),
        is_active=True,
    )
    s.add(user)
    s.flush()
    record_event(
        s,
        actor=g.current_user,
        action="user.create",
        entity_type="User",
        entity_id=str(user.id),
        metadata={"username": username, "is_admin": user.is_admin},
    )
    s.commit()
    return {"message": "User created successfully.", "user": user.username}, 201


@bp.get("/me")
@require_login
def me():
    user: User = g.current_user
    if not user:
        abort(401)
    return user.token_claims()
