from datetime import datetime, timedelta, timezone
import hmac
import logging
import os
import secrets
import uuid

import jwt

from app.core.config import admin_credentials, auth_required

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWT_EXP_HOURS = 12


def _get_jwt_secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise ValueError("JWT_SECRET is required")
    if len(secret) < 32:
        raise ValueError("JWT_SECRET must be at least 32 characters")
    return secret


def check_credentials(username: str, password: str) -> bool:
    expected_username, expected_password = admin_credentials()
    username_ok = hmac.compare_digest(str(username).encode(), expected_username.encode())
    password_ok = hmac.compare_digest(str(password).encode(), expected_password.encode())
    return username_ok and password_ok


def create_access_token(username: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(username),
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + timedelta(hours=JWT_EXP_HOURS),
    }
    return jwt.encode(payload, _get_jwt_secret(), algorithm=JWT_ALGORITHM)


def issue_login_token(username: str) -> str:
    """
    Signed token when JWT_SECRET is usable. With token checks off the token is
    never read back, so a missing secret falls back to an opaque random value;
    with checks on the secret is mandatory.
    """
    try:
        return create_access_token(username)
    except ValueError as exc:
        if auth_required():
            raise
        logger.warning("Issuing unsigned login token", extra={"reason": str(exc)})
        return secrets.token_urlsafe(32)


def verify_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, _get_jwt_secret(), algorithms=[JWT_ALGORITHM])
    except Exception as exc:
        raise ValueError("Invalid or expired token") from exc

    if "sub" not in payload:
        raise ValueError("Invalid token claims")

    return payload
