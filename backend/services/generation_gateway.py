"""
Generation Gateway — boundary to the image/text generation services.

The synthesis orchestrators depend only on this interface. Every
implementation must raise GatewayError when a call cannot produce a
usable result; the orchestrators never retry.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import List, Optional

from schemas import (
    BudgetLineItem,
    BuildingRenders,
    InteriorItem,
    Language,
    Perspective,
    PlotAnalysis,
    ProjectDraft,
    RoomDraft,
)


class GenerationGateway(ABC):
    """Async operations offered by a generation backend."""

    name = "abstract"

    @abstractmethod
    async def analyze_plot_image(self, image: str) -> Optional[PlotAnalysis]:
        """Estimate plot length/breadth/area from a site photo, or None."""

    @abstractmethod
    async def generate_building_renders(
        self,
        draft: ProjectDraft,
        base_image: Optional[str],
        perspective: Perspective = Perspective.FRONT,
    ) -> BuildingRenders:
        """Front exterior render; a SIDE request adds the side view in after_side."""

    @abstractmethod
    async def get_architectural_analysis(self, draft: ProjectDraft, language: Language) -> str:
        """Narrative architectural analysis in *language*."""

    @abstractmethod
    async def generate_interior_render(self, draft: ProjectDraft) -> str:
        """Interior concept render."""

    @abstractmethod
    async def get_budget_breakdown(self, draft: ProjectDraft) -> List[BudgetLineItem]:
        """Ordered construction budget lines."""

    @abstractmethod
    async def generate_custom_room_render(self, draft: RoomDraft, base_image: Optional[str] = None) -> str:
        """Render of the redesigned room."""

    @abstractmethod
    async def get_interior_itemized_budget(self, draft: RoomDraft) -> List[InteriorItem]:
        """Ordered list of purchasable interior items."""


# ============================================================================
# HELPERS
# ============================================================================

def extract_json_from_response(text: str):
    """Extract a JSON object or array from model response text."""
    # Try ```json blocks first
    json_match = re.search(r'```json\s*(.*?)\s*```', text, re.DOTALL)
    if json_match:
        try:
            return json.loads(json_match.group(1))
        except json.JSONDecodeError:
            pass

    # Try a bare object or array, whichever opens first
    patterns = [r'\{.*\}', r'\[.*\]']
    if '{' not in text or 0 <= text.find('[') < text.find('{'):
        patterns.reverse()
    for pattern in patterns:
        json_match = re.search(pattern, text, re.DOTALL)
        if json_match:
            try:
                return json.loads(json_match.group())
            except json.JSONDecodeError:
                pass

    return None


def describe_project(draft: ProjectDraft) -> str:
    """One-paragraph brief of a building draft for prompts."""
    dims = draft.dimensions
    return (
        f"Project: {draft.title}\n"
        f"Building type: {draft.building_type}\n"
        f"Location: {draft.location.value.lower()}\n"
        f"Style: {draft.style}\n"
        f"Plot: {dims.length} ft x {dims.breadth} ft, {dims.area} sq ft\n"
        f"Floors: {draft.floors}, rooms per floor: {draft.rooms_per_floor}\n"
        f"Budget: INR {draft.budget or 'unspecified'}\n"
        f"Primary colour: {draft.main_color}"
    )


def describe_room(draft: RoomDraft) -> str:
    """One-paragraph brief of a room draft for prompts."""
    dims = draft.dimensions
    return (
        f"Room: {draft.room_type}\n"
        f"Size: {dims.length} ft x {dims.breadth} ft, {dims.area} sq ft\n"
        f"Budget: INR {draft.budget}\n"
        f"Primary colour: {draft.primary_color} ({draft.color_range.value} palette)"
    )
