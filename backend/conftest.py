"""Shared test doubles: a scriptable generation gateway and store helpers."""

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

from schemas import (
    BudgetLineItem,
    BuildingRenders,
    Dimensions,
    InteriorItem,
    Language,
    Perspective,
    PlotAnalysis,
    ProjectDraftIn,
    ProjectRecord,
    Role,
    RoomDraftIn,
    RoomRecord,
    User,
)
from services.errors import GatewayError
from services.generation_gateway import GenerationGateway
from services.record_store import RecordStore


class FakeGateway(GenerationGateway):
    """Records every call; operations named in *fail_on* raise GatewayError."""

    name = "fake"

    def __init__(self, fail_on=(), gate: Optional[asyncio.Event] = None,
                 plot: Optional[PlotAnalysis] = None, before: Optional[str] = None):
        self.fail_on = set(fail_on)
        self.gate = gate
        self.plot = plot
        self.before = before
        self.calls: List[str] = []

    async def _call(self, operation, result):
        self.calls.append(operation)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if operation in self.fail_on:
            raise GatewayError(f"{operation} exploded", operation)
        return result

    async def analyze_plot_image(self, image):
        return await self._call("analyze_plot_image", self.plot)

    async def generate_building_renders(self, draft, base_image, perspective=Perspective.FRONT):
        return await self._call(
            "generate_building_renders",
            BuildingRenders(before=self.before, after=f"after:{draft.title}"),
        )

    async def get_architectural_analysis(self, draft, language=Language.EN):
        return await self._call("get_architectural_analysis", f"analysis[{Language(language).value}]")

    async def generate_interior_render(self, draft):
        return await self._call("generate_interior_render", "interior-image")

    async def get_budget_breakdown(self, draft):
        return await self._call("get_budget_breakdown", [
            BudgetLineItem(category="Structure", item="RCC frame", estimate="₹10,00,000", source="test"),
            BudgetLineItem(category="Finishes", item="Paint", estimate="₹2,00,000", source="test"),
        ])

    async def generate_custom_room_render(self, draft, base_image=None):
        return await self._call("generate_custom_room_render", f"room:{draft.room_type}")

    async def get_interior_itemized_budget(self, draft):
        return await self._call("get_interior_itemized_budget", [
            InteriorItem(name="Sofa", price="₹40,000", buy_link="https://example.com/sofa"),
        ])


CLIENT = User(id="CLIENT-8293", username="client@zerobuild.ai", role=Role.CLIENT, display_name="client")
OTHER_CLIENT = User(id="CLIENT-1111", username="other@zerobuild.ai", role=Role.CLIENT, display_name="other")
ADMIN = User(id="ADMIN-0001", username="admin@zerobuild.ai", role=Role.ADMIN, display_name="admin")


def project_draft(title="Skyline Mansion", area=4500.0, **kwargs) -> ProjectDraftIn:
    return ProjectDraftIn(
        title=title,
        dimensions=Dimensions(length=50, breadth=90, area=area),
        budget="1,20,00,000",
        **kwargs,
    )


def room_draft(room_type="Master Bedroom", area=168.0) -> RoomDraftIn:
    return RoomDraftIn(room_type=room_type, dimensions=Dimensions(length=12, breadth=14, area=area))


def make_project(record_id="PRJ-1001", client_id="CLIENT-8293", title="Skyline Mansion") -> ProjectRecord:
    return ProjectRecord(
        id=record_id,
        client_id=client_id,
        client_name="client",
        title=title,
        building_type="Luxury Villa",
        location="URBAN",
        style="contemporary",
        floors=3,
        rooms_per_floor=5,
        budget="1,20,00,000",
        main_color="#475569",
        length=50,
        breadth=90,
        area=4500,
        created_at=datetime.now(timezone.utc),
    )


def make_room(record_id="ROOM-2001", client_id="CLIENT-8293", room_type="Bedroom") -> RoomRecord:
    return RoomRecord(
        id=record_id,
        client_id=client_id,
        room_type=room_type,
        length=12,
        breadth=14,
        area=168,
        budget="50000",
        primary_color="Slate Grey",
        created_at=datetime.now(timezone.utc),
    )


async def new_store() -> RecordStore:
    store = RecordStore("sqlite+aiosqlite://")
    await store.init()
    return store
