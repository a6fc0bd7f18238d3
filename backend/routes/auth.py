"""Login / logout routes backed by the pluggable Authenticator."""

import logging
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from schemas import LoginRequest, LoginResponse, User
from services.auth import Authenticator, SessionRegistry
from routes.deps import bearer, get_authenticator, get_current_user, get_sessions

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    authenticator: Authenticator = Depends(get_authenticator),
    sessions: SessionRegistry = Depends(get_sessions),
):
    """Exchange credentials for a bearer token."""
    user = authenticator.authenticate(data.role, {"username": data.username, "password": data.password})
    if user is None:
        logger.info(f"Rejected {data.role.value} login for {data.username}")
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return LoginResponse(token=sessions.issue(user), user=user)


@router.post("/logout", status_code=204)
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(bearer),
    sessions: SessionRegistry = Depends(get_sessions),
):
    """Revoke the current token (no-op when absent)."""
    if credentials is not None:
        sessions.revoke(credentials.credentials)


@router.get("/me", response_model=User)
async def me(user: User = Depends(get_current_user)):
    return user
