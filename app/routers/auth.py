import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from app.services.auth_service import check_credentials, issue_login_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    message: str = "Login successful"


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest):
    if not check_credentials(payload.username, payload.password):
        logger.warning("Rejected admin login", extra={"username": payload.username})
        raise HTTPException(status_code=401, detail="Invalid credentials")

    try:
        token = issue_login_token(payload.username)
    except ValueError as exc:
        logger.error("Cannot issue token", extra={"reason": str(exc)})
        raise HTTPException(status_code=500, detail="Login is not configured") from exc

    return {"success": True, "token": token, "message": "Login successful"}
