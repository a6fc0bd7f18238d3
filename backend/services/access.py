"""Role-aware record lookup."""

from typing import Optional

from schemas import LookupResult, Role, User
from services.errors import ValidationError
from services.record_store import CollectionKind, RecordStore


class AccessScope:
    """
    Query surface over the record store.

    Clients only ever see their own records; administrators look up any
    client id across both collections.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def resolve_client_id(self, requester: Optional[User], target_client_id: Optional[str] = None) -> str:
        if requester is None:
            raise ValidationError("You must be signed in to view records")
        if requester.role is Role.CLIENT:
            return requester.id
        client_id = (target_client_id or "").strip()
        if not client_id:
            raise ValidationError("A client ID is required for administrator lookup")
        return client_id

    async def query(self, requester: Optional[User], target_client_id: Optional[str] = None) -> LookupResult:
        client_id = self.resolve_client_id(requester, target_client_id)
        projects = await self.store.filter_by_client(CollectionKind.PROJECTS, client_id)
        rooms = await self.store.filter_by_client(CollectionKind.ROOMS, client_id)
        return LookupResult(projects=projects, rooms=rooms)
