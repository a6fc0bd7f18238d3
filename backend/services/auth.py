"""
Authentication collaborator and session tokens.

The synthesis core only ever sees the resulting User; how credentials are
checked is up to the Authenticator plugged into the app.
"""

import json
import logging
import secrets
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from schemas import Role, User
from services.errors import AuthenticationError

logger = logging.getLogger(__name__)

# Demo accounts used when ACCOUNTS_JSON is not configured
DEFAULT_ACCOUNTS: List[dict] = [
    {
        "id": "CLIENT-8293",
        "username": "client@zerobuild.ai",
        "password": "123456",
        "role": "CLIENT",
        "display_name": "client",
    },
    {
        "id": "ADMIN-0001",
        "username": "admin@zerobuild.ai",
        "password": "789000",
        "role": "ADMIN",
        "display_name": "admin",
    },
]


class Authenticator(ABC):
    @abstractmethod
    def authenticate(self, role: Role, credentials: Dict[str, str]) -> Optional[User]:
        """Return the matching User, or None when the credentials are rejected."""


class StaticAccountAuthenticator(Authenticator):
    """Checks username/password against a fixed account list."""

    def __init__(self, accounts: List[dict]):
        self._accounts = {a["username"].lower(): a for a in accounts}

    def authenticate(self, role: Role, credentials: Dict[str, str]) -> Optional[User]:
        username = (credentials.get("username") or "").strip().lower()
        password = credentials.get("password") or ""
        account = self._accounts.get(username)
        if account is None:
            return None
        if not secrets.compare_digest(account["password"].encode(), password.encode()):
            return None
        if Role(account["role"]) is not Role(role):
            return None
        return User(
            id=account["id"],
            username=account["username"],
            role=Role(account["role"]),
            display_name=account.get("display_name") or account["username"].split("@")[0],
        )


def load_accounts(raw: str = "") -> List[dict]:
    """Parse an ACCOUNTS_JSON value, falling back to the demo accounts."""
    if not raw:
        return DEFAULT_ACCOUNTS
    try:
        accounts = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"ACCOUNTS_JSON is not valid JSON: {e}") from e
    if not isinstance(accounts, list):
        raise ValueError("ACCOUNTS_JSON must be a JSON list of accounts")
    for account in accounts:
        missing = {"id", "username", "password", "role"} - set(account)
        if missing:
            raise ValueError(f"Account entry missing fields: {sorted(missing)}")
    logger.info(f"Loaded {len(accounts)} account(s) from ACCOUNTS_JSON")
    return accounts


class SessionRegistry:
    """Opaque bearer tokens for signed-in users, kept in memory."""

    def __init__(self):
        self._sessions: Dict[str, User] = {}

    def issue(self, user: User) -> str:
        token = secrets.token_urlsafe(32)
        self._sessions[token] = user
        return token

    def resolve(self, token: str) -> Optional[User]:
        return self._sessions.get(token)

    def require(self, token: Optional[str]) -> User:
        """Like resolve(), but a missing or unknown token is an AuthenticationError."""
        if not token:
            raise AuthenticationError("Not authenticated")
        user = self._sessions.get(token)
        if user is None:
            raise AuthenticationError("Invalid or expired session")
        return user

    def revoke(self, token: str) -> None:
        self._sessions.pop(token, None)
