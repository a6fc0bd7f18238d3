"""Room redesign routes."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from schemas import RoomRecord, RoomSynthesisRequest, User
from services.errors import DuplicateSynthesisError, GatewayError, SynthesisCancelled, ValidationError
from services.generation_gateway import GenerationGateway
from services.inflight import InFlightRegistry
from services.record_store import CollectionKind, RecordStore
from services.synthesis import RoomSynthesisOrchestrator
from routes.deps import get_current_user, get_gateway, get_record_store, get_registry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/rooms", tags=["rooms"])


@router.post("/synthesize", response_model=RoomRecord)
async def synthesize_room(
    data: RoomSynthesisRequest,
    user: User = Depends(get_current_user),
    gateway: GenerationGateway = Depends(get_gateway),
    store: RecordStore = Depends(get_record_store),
    registry: InFlightRegistry = Depends(get_registry),
):
    """Generate a room render and itemized interior budget and store the record."""
    orchestrator = RoomSynthesisOrchestrator(gateway, store, registry)
    try:
        return await orchestrator.synthesize(data.draft, data.base_image, user)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (DuplicateSynthesisError, SynthesisCancelled) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except GatewayError:
        raise HTTPException(status_code=502, detail="Interior synthesis failed. Please try again.")


@router.get("", response_model=List[RoomRecord])
async def list_my_rooms(
    user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
):
    """The signed-in user's own rooms, most recent first."""
    return await store.filter_by_client(CollectionKind.ROOMS, user.id)
