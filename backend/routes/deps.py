"""Shared FastAPI dependencies: app-scoped services and the signed-in user."""

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from schemas import User
from services.auth import Authenticator, SessionRegistry
from services.errors import AuthenticationError
from services.generation_gateway import GenerationGateway
from services.inflight import InFlightRegistry
from services.record_store import RecordStore

bearer = HTTPBearer(auto_error=False)


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_gateway(request: Request) -> GenerationGateway:
    return request.app.state.gateway


def get_registry(request: Request) -> InFlightRegistry:
    return request.app.state.registry


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer),
    sessions: SessionRegistry = Depends(get_sessions),
) -> User:
    """Resolve the bearer token to a User or reject with 401."""
    try:
        return sessions.require(credentials.credentials if credentials else None)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
