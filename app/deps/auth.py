from typing import Optional

from fastapi import HTTPException, Request

from app.core.config import auth_required
from app.services.auth_service import verify_token


def _parse_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = auth_header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=401, detail="Invalid Authorization header")

    return parts[1].strip()


def require_staff(request: Request) -> Optional[str]:
    """
    Staff-only endpoints. Token checking is opt-in (GARAGE_REQUIRE_AUTH);
    with it off, the login token is accepted but never validated.
    """
    if not auth_required():
        return None

    token = _parse_bearer_token(request)

    try:
        claims = verify_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    username = str(claims.get("sub"))
    request.state.username = username
    return username
