"""Ownership-scoped record lookup for clients and administrators."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from schemas import LookupResult, User
from services.access import AccessScope
from services.errors import ValidationError
from services.record_store import RecordStore
from routes.deps import get_current_user, get_record_store

router = APIRouter(prefix="/api", tags=["lookup"])


@router.get("/lookup", response_model=LookupResult)
async def lookup(
    client_id: Optional[str] = Query(default=None, description="Client to look up (administrators only)"),
    user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
):
    """
    Projects and rooms for a client.

    Clients always get their own records; ``client_id`` is ignored for them.
    An unknown id yields empty lists.
    """
    try:
        return await AccessScope(store).query(user, client_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
