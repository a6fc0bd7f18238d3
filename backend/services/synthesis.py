"""
Synthesis orchestrators for buildings and rooms.

A synthesis validates the draft, fans out to the generation gateway,
waits for every call, and only then builds one immutable record and
appends it to the store. Any failure leaves the store untouched.

Record ids are four random digits on a fixed prefix and may collide.
"""

import logging
import random
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

from schemas import (
    ColorRange,
    Language,
    LocationType,
    Perspective,
    ProjectDraft,
    ProjectDraftIn,
    ProjectRecord,
    RoomDraft,
    RoomDraftIn,
    RoomRecord,
    User,
)
from services.design_constants import (
    BUILDING_TYPES,
    COLORS,
    CULTURE_MODES,
    DEFAULT_FLOORS,
    DEFAULT_ROOMS_PER_FLOOR,
)
from services.errors import GatewayError, SynthesisCancelled, ValidationError
from services.generation_gateway import GenerationGateway
from services.inflight import InFlightRegistry, draft_key
from services.join import CancellationToken, join_all
from services.record_store import RecordStore

logger = logging.getLogger(__name__)


# ============================================================================
# IDS
# ============================================================================

def generate_project_id() -> str:
    return f"PRJ-{random.randint(1000, 9999)}"


def generate_room_id() -> str:
    return f"ROOM-{random.randint(1000, 9999)}"


# ============================================================================
# DRAFT BUILDERS
# ============================================================================

def validate_project_draft(draft: ProjectDraft) -> ProjectDraft:
    if not draft.title.strip():
        raise ValidationError("Please provide a project title")
    if draft.dimensions.area <= 0:
        raise ValidationError("Please provide the site dimensions (area must be positive)")
    return draft


def build_project_draft(data: ProjectDraftIn) -> ProjectDraft:
    """Turn a partially-filled building form into a validated draft."""
    title = (data.title or "").strip()
    if not title:
        raise ValidationError("Please provide a project title")
    if data.dimensions.area <= 0:
        raise ValidationError("Please provide the site dimensions (area must be positive)")

    return ProjectDraft(
        title=title,
        client_name=(data.client_name or "").strip(),
        building_type=data.building_type or BUILDING_TYPES[0],
        location=data.location or LocationType.URBAN,
        style=data.style or CULTURE_MODES[0],
        floors=data.floors or DEFAULT_FLOORS,
        rooms_per_floor=data.rooms_per_floor or DEFAULT_ROOMS_PER_FLOOR,
        budget=(data.budget or "").strip(),
        main_color=data.main_color or COLORS[0]["value"],
        dimensions=data.dimensions,
    )


def validate_room_draft(draft: RoomDraft) -> RoomDraft:
    if not draft.room_type.strip():
        raise ValidationError("Please provide a room type")
    if draft.dimensions.area <= 0:
        raise ValidationError("Please provide the room dimensions (area must be positive)")
    return draft


def build_room_draft(data: RoomDraftIn) -> RoomDraft:
    """Turn a partially-filled room form into a validated draft."""
    room_type = (data.room_type or "").strip()
    if not room_type:
        raise ValidationError("Please provide a room type")
    if data.dimensions.area <= 0:
        raise ValidationError("Please provide the room dimensions (area must be positive)")

    return RoomDraft(
        room_type=room_type,
        dimensions=data.dimensions,
        budget=(data.budget or "").strip() or "0",
        primary_color=data.primary_color or COLORS[0]["name"],
        color_range=data.color_range or ColorRange.NEUTRAL,
    )


# ============================================================================
# ORCHESTRATORS
# ============================================================================

class _Orchestrator:
    """Shared fan-out / join / append sequence."""

    kind = "record"

    def __init__(self, gateway: GenerationGateway, store: RecordStore,
                 registry: Optional[InFlightRegistry] = None):
        self.gateway = gateway
        self.store = store
        self.registry = registry if registry is not None else InFlightRegistry()

    async def _run(self, key: str, requester: User,
                   calls: Callable[[], Dict[str, Any]],
                   assemble: Callable[[Dict[str, Any]], Any],
                   token: Optional[CancellationToken]):
        async with self.registry.claim(key):
            logger.info(f"Starting {self.kind} synthesis for {requester.id} "
                        f"via {self.gateway.name} gateway")
            try:
                results = await join_all(calls(), token)
            except (GatewayError, SynthesisCancelled) as e:
                logger.warning(f"{self.kind.capitalize()} synthesis failed for {requester.id}: {e}")
                raise

            record = assemble(results)
            if token is not None and token.cancelled:
                logger.info(f"{self.kind.capitalize()} {record.id} discarded, synthesis was cancelled")
                raise SynthesisCancelled("Synthesis was cancelled")
            try:
                await self.store.append(record, token)
            except SynthesisCancelled:
                logger.info(f"{self.kind.capitalize()} {record.id} discarded, cancelled while waiting to store")
                raise
        return record


def _require_user(requester: Optional[User]) -> User:
    if requester is None:
        raise ValidationError("You must be signed in to generate designs")
    return requester


class SynthesisOrchestrator(_Orchestrator):
    """Building synthesis: renders, narrative, interior render and budget."""

    kind = "project"

    async def synthesize(
        self,
        draft: Union[ProjectDraft, ProjectDraftIn],
        base_image: Optional[str],
        requester: Optional[User],
        language: Language = Language.EN,
        token: Optional[CancellationToken] = None,
    ) -> ProjectRecord:
        requester = _require_user(requester)
        if isinstance(draft, ProjectDraftIn):
            draft = build_project_draft(draft)
        else:
            validate_project_draft(draft)

        def calls():
            return {
                "renders": self.gateway.generate_building_renders(draft, base_image, Perspective.FRONT),
                "narrative": self.gateway.get_architectural_analysis(draft, language),
                "interior": self.gateway.generate_interior_render(draft),
                "budget": self.gateway.get_budget_breakdown(draft),
            }

        def assemble(results) -> ProjectRecord:
            renders = results["renders"]
            dims = draft.dimensions
            return ProjectRecord(
                id=generate_project_id(),
                client_id=requester.id,
                client_name=requester.display_name or draft.client_name or "Private Client",
                title=draft.title,
                building_type=draft.building_type,
                location=draft.location,
                style=draft.style,
                floors=draft.floors,
                rooms_per_floor=draft.rooms_per_floor,
                budget=draft.budget,
                main_color=draft.main_color,
                length=dims.length,
                breadth=dims.breadth,
                area=dims.area,
                before_image=base_image or renders.before,
                after_image=renders.after,
                after_image_side=renders.after_side,
                interior_image=results["interior"],
                narrative=results["narrative"],
                budget_breakdown=list(results["budget"]),
                created_at=datetime.now(timezone.utc),
            )

        key = draft_key(draft, requester.id, base_image, language)
        return await self._run(key, requester, calls, assemble, token)


class RoomSynthesisOrchestrator(_Orchestrator):
    """Room synthesis: custom render and itemized interior budget."""

    kind = "room"

    async def synthesize(
        self,
        draft: Union[RoomDraft, RoomDraftIn],
        base_image: Optional[str],
        requester: Optional[User],
        token: Optional[CancellationToken] = None,
    ) -> RoomRecord:
        requester = _require_user(requester)
        if isinstance(draft, RoomDraftIn):
            draft = build_room_draft(draft)
        else:
            validate_room_draft(draft)

        def calls():
            return {
                "render": self.gateway.generate_custom_room_render(draft, base_image),
                "items": self.gateway.get_interior_itemized_budget(draft),
            }

        def assemble(results) -> RoomRecord:
            dims = draft.dimensions
            return RoomRecord(
                id=generate_room_id(),
                client_id=requester.id,
                room_type=draft.room_type,
                length=dims.length,
                breadth=dims.breadth,
                area=dims.area,
                budget=draft.budget,
                primary_color=draft.primary_color,
                color_range=draft.color_range,
                before_image=base_image,
                after_image=results["render"],
                items=list(results["items"]),
                created_at=datetime.now(timezone.utc),
            )

        key = draft_key(draft, requester.id, base_image)
        return await self._run(key, requester, calls, assemble, token)
