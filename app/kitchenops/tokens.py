"""
Bearer tokens for the dashboard client.

Tokens are HS256 JWTs carrying the user's id, username and admin flag. The
client decodes the payload for navigation; the server verifies signature and
expiry on every request and re-checks the user row.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from flask import Flask, current_app

_ALGORITHM = "HS256"


class TokenError(Exception):
    """Raised when a bearer token is malformed, tampered with or expired."""


def issue_token(claims: dict[str, Any], app: Flask | None = None) -> str:
    app = app or current_app
    payload = dict(claims)
    max_age = int(app.config.get("TOKEN_MAX_AGE_SECONDS") or 0)
    if max_age:
        payload["exp"] = datetime.now(tz=timezone.utc) + timedelta(seconds=max_age)
    return jwt.encode(payload, app.config["SECRET_KEY"], algorithm=_ALGORITHM)


def read_token(token: str, app: Flask | None = None) -> dict[str, Any]:
    app = app or current_app
    try:
        claims = jwt.decode(token, app.config["SECRET_KEY"], algorithms=[_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise TokenError("Token has expired.") from e
    except jwt.InvalidTokenError as e:
        raise TokenError("Invalid token.") from e
    if "id" not in claims:
        raise TokenError("Invalid token.")
    return claims


def bearer_token_from_header(header_value: str | None) -> str | None:
    if not header_value:
        return None
    scheme, _, value = header_value.strip().partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return None
    return value.strip()
