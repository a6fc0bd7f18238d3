"""
Grok (xAI) Generation Gateway.

Uses xAI's Grok API (OpenAI-compatible) for architectural narratives,
budget breakdowns, interior item lists, site photo analysis and renders.

When no GROK_API_KEY is configured the rule-based FallbackGenerationGateway
is used instead, so the service still produces complete (placeholder)
records offline.
"""

import base64
import html
import logging
from typing import List, Optional
from urllib.parse import quote_plus

import openai
from pydantic import ValidationError as PydanticValidationError

from config import (
    GROK_API_KEY,
    GROK_MODEL,
    GROK_IMAGE_MODEL,
    GROK_VISION_MODEL,
    GROK_BASE_URL,
    GATEWAY_TIMEOUT,
)
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
from services.design_constants import BUDGET_SHARES, COLORS, catalogue_for, rate_for
from services.errors import GatewayError
from services.generation_gateway import (
    GenerationGateway,
    describe_project,
    describe_room,
    extract_json_from_response,
)

logger = logging.getLogger(__name__)

# Lazy-initialized OpenAI client (for xAI Grok)
_grok_client = None
_gateway: Optional[GenerationGateway] = None


def _get_grok_client():
    """Lazy initialization of the async Grok client using the OpenAI SDK."""
    global _grok_client
    if _grok_client is None and GROK_API_KEY:
        _grok_client = openai.AsyncOpenAI(
            api_key=GROK_API_KEY,
            base_url=GROK_BASE_URL,
            timeout=GATEWAY_TIMEOUT,
        )
    return _grok_client


def get_gateway() -> GenerationGateway:
    """Process-wide gateway: Grok when configured, rule-based otherwise."""
    global _gateway
    if _gateway is None:
        client = _get_grok_client()
        if client is None:
            logger.warning("GROK_API_KEY not set, using rule-based generation gateway")
            _gateway = FallbackGenerationGateway()
        else:
            _gateway = GrokGenerationGateway(client)
    return _gateway


# ============================================================================
# PROMPTS
# ============================================================================

ARCHITECT_SYSTEM_PROMPT = """You are a **Senior Architect, Visualiser and Quantity Surveyor** \
working for an Indian design-build studio. You turn a short project brief into \
construction-ready analysis. Be concrete, use the dimensions you are given and \
NEVER invent plot dimensions that are not in the brief."""

ANALYSIS_PROMPT = """Write a professional architectural analysis of the project below.

Cover, in order:
1. **Site & Orientation** — how the plot size and location shape the design
2. **Massing & Zoning** — floors, rooms per floor, circulation
3. **Style & Materials** — how the requested style and colour are expressed
4. **Construction Sequence** — numbered construction steps from site works to handover

Respond in {language}. Use Markdown headings."""

BUDGET_PROMPT = """Produce an itemised construction budget for the project below, in INR.

Respond ONLY with a JSON array:
```json
[
  {"category": "<Site|Structure|Finishes|MEP|Exterior|Contingency>", "item": "<what>", \
"estimate": "<amount in INR>", "source": "<basis of the estimate>"}
]
```"""

INTERIOR_BUDGET_PROMPT = """List the furniture and fittings needed to redesign the room below \
within its budget. Prefer items available from Indian online retailers.

Respond ONLY with a JSON array:
```json
[
  {"name": "<item>", "price": "<price in INR>", "buy_link": "<product or search URL>"}
]
```"""

PLOT_ANALYSIS_PROMPT = """This is a photo or sketch of a building plot. Estimate its \
dimensions in feet only if they are written on it or can be read reliably.

Respond ONLY with JSON:
```json
{"length": <feet or null>, "breadth": <feet or null>, "total_area": <sq ft or null>}
```"""

SITE_DESCRIPTION_PROMPT = """Describe this site photo in two sentences for an architectural \
visualiser: terrain, surroundings, light and any existing structures."""

_LANGUAGE_NAMES = {
    Language.EN: "English",
    Language.HI: "Hindi",
    Language.TE: "Telugu",
}


def _render_prompt(draft: ProjectDraft, perspective: Perspective, site: str = "") -> str:
    prompt = (
        f"Photorealistic {perspective.value} exterior architectural render of a "
        f"{draft.floors}-storey {draft.style} {draft.building_type} in a "
        f"{draft.location.value.lower()} setting on a {draft.dimensions.length:g} x "
        f"{draft.dimensions.breadth:g} ft plot. Dominant facade colour {draft.main_color}."
    )
    if site:
        prompt += f" Existing site: {site}"
    return prompt


def _positive(value) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


# ============================================================================
# GROK GATEWAY
# ============================================================================

class GrokGenerationGateway(GenerationGateway):
    """Generation gateway backed by the xAI Grok API."""

    name = "grok"

    def __init__(self, client):
        self.client = client

    async def _chat(self, operation: str, system: str, content, temperature: float = 0.7,
                    max_tokens: int = 2048, model: str = GROK_MODEL) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": content},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            logger.warning(f"Grok {operation} failed: {e}")
            raise GatewayError(f"{operation} failed: {e}", operation) from e

        reply = response.choices[0].message.content if response.choices else None
        if not reply:
            raise GatewayError(f"{operation} returned an empty response", operation)
        return reply

    async def _image(self, operation: str, prompt: str) -> str:
        try:
            response = await self.client.images.generate(
                model=GROK_IMAGE_MODEL,
                prompt=prompt,
                n=1,
                response_format="b64_json",
            )
        except openai.OpenAIError as e:
            logger.warning(f"Grok {operation} failed: {e}")
            raise GatewayError(f"{operation} failed: {e}", operation) from e

        if not response.data:
            raise GatewayError(f"{operation} returned no image", operation)
        image = response.data[0]
        if image.b64_json:
            return f"data:image/jpeg;base64,{image.b64_json}"
        if image.url:
            return image.url
        raise GatewayError(f"{operation} returned no image", operation)

    async def _vision(self, operation: str, prompt: str, image: str) -> str:
        content = [
            {"type": "image_url", "image_url": {"url": image}},
            {"type": "text", "text": prompt},
        ]
        return await self._chat(operation, ARCHITECT_SYSTEM_PROMPT, content,
                                temperature=0.2, max_tokens=512, model=GROK_VISION_MODEL)

    def _json_list(self, operation: str, reply: str) -> list:
        data = extract_json_from_response(reply)
        if isinstance(data, dict):
            # Some replies wrap the list: {"items": [...]}
            data = next((v for v in data.values() if isinstance(v, list)), None)
        if not isinstance(data, list):
            raise GatewayError(f"{operation} returned no JSON list", operation)
        return data

    # ---- Building ----

    async def analyze_plot_image(self, image: str) -> Optional[PlotAnalysis]:
        reply = await self._vision("analyze_plot_image", PLOT_ANALYSIS_PROMPT, image)
        data = extract_json_from_response(reply)
        if not isinstance(data, dict):
            return None
        analysis = PlotAnalysis(
            length=_positive(data.get("length")),
            breadth=_positive(data.get("breadth")),
            total_area=_positive(data.get("total_area", data.get("totalArea"))),
        )
        if analysis.length is None and analysis.breadth is None and analysis.total_area is None:
            return None
        return analysis

    async def generate_building_renders(self, draft: ProjectDraft, base_image: Optional[str],
                                        perspective: Perspective = Perspective.FRONT) -> BuildingRenders:
        site = ""
        if base_image:
            site = await self._vision("describe_site", SITE_DESCRIPTION_PROMPT, base_image)
        front = await self._image("generate_building_renders", _render_prompt(draft, Perspective.FRONT, site))
        if perspective is Perspective.SIDE:
            side = await self._image("generate_building_renders", _render_prompt(draft, Perspective.SIDE, site))
            return BuildingRenders(after=front, after_side=side)
        return BuildingRenders(after=front)

    async def get_architectural_analysis(self, draft: ProjectDraft, language: Language) -> str:
        prompt = ANALYSIS_PROMPT.format(language=_LANGUAGE_NAMES[Language(language)])
        return await self._chat("get_architectural_analysis",
                                ARCHITECT_SYSTEM_PROMPT + "\n\n" + prompt,
                                describe_project(draft))

    async def generate_interior_render(self, draft: ProjectDraft) -> str:
        prompt = (
            f"Photorealistic interior concept render of the main living space of a "
            f"{draft.style} {draft.building_type}, accent colour {draft.main_color}, "
            f"natural light, wide angle."
        )
        return await self._image("generate_interior_render", prompt)

    async def get_budget_breakdown(self, draft: ProjectDraft) -> List[BudgetLineItem]:
        reply = await self._chat("get_budget_breakdown",
                                 ARCHITECT_SYSTEM_PROMPT + "\n\n" + BUDGET_PROMPT,
                                 describe_project(draft), temperature=0.3)
        rows = self._json_list("get_budget_breakdown", reply)
        try:
            return [
                BudgetLineItem(
                    category=str(row.get("category", "")),
                    item=str(row.get("item", "")),
                    estimate=str(row.get("estimate", "")),
                    source=str(row.get("source", "")),
                )
                for row in rows
            ]
        except (AttributeError, PydanticValidationError) as e:
            raise GatewayError(f"get_budget_breakdown returned malformed items: {e}",
                               "get_budget_breakdown") from e

    # ---- Room ----

    async def generate_custom_room_render(self, draft: RoomDraft, base_image: Optional[str] = None) -> str:
        prompt = (
            f"Photorealistic interior render of a redesigned {draft.room_type}, "
            f"{draft.dimensions.length:g} x {draft.dimensions.breadth:g} ft, "
            f"{draft.color_range.value} palette around {draft.primary_color}."
        )
        if base_image:
            current = await self._vision("describe_room", SITE_DESCRIPTION_PROMPT, base_image)
            prompt += f" Keep the existing layout: {current}"
        return await self._image("generate_custom_room_render", prompt)

    async def get_interior_itemized_budget(self, draft: RoomDraft) -> List[InteriorItem]:
        reply = await self._chat("get_interior_itemized_budget",
                                 ARCHITECT_SYSTEM_PROMPT + "\n\n" + INTERIOR_BUDGET_PROMPT,
                                 describe_room(draft), temperature=0.3)
        rows = self._json_list("get_interior_itemized_budget", reply)
        try:
            return [
                InteriorItem(
                    name=str(row.get("name", "")),
                    price=str(row.get("price", "")),
                    buy_link=str(row.get("buy_link", row.get("buyLink", ""))),
                )
                for row in rows
            ]
        except (AttributeError, PydanticValidationError) as e:
            raise GatewayError(f"get_interior_itemized_budget returned malformed items: {e}",
                               "get_interior_itemized_budget") from e


# ============================================================================
# FALLBACK — Rule-based when no API is available
# ============================================================================

def _hex_color(color: str) -> str:
    if color.startswith("#"):
        return color
    for entry in COLORS:
        if entry["name"].lower() == color.lower():
            return entry["value"]
    return COLORS[0]["value"]


def _placeholder_image(title: str, subtitle: str, color: str) -> str:
    """SVG placeholder render as a data URL."""
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" width="800" height="450">'
        f'<rect width="100%" height="100%" fill="{html.escape(_hex_color(color), quote=True)}"/>'
        f'<text x="40" y="210" font-family="sans-serif" font-size="36" fill="#ffffff">{html.escape(title)}</text>'
        f'<text x="40" y="260" font-family="sans-serif" font-size="20" fill="#e2e8f0">{html.escape(subtitle)}</text>'
        '</svg>'
    )
    return "data:image/svg+xml;base64," + base64.b64encode(svg.encode("utf-8")).decode("ascii")


def _inr(amount: float) -> str:
    return f"₹{amount:,.0f}"


class FallbackGenerationGateway(GenerationGateway):
    """Deterministic rule-based gateway used when Grok is not configured."""

    name = "fallback"

    async def analyze_plot_image(self, image: str) -> Optional[PlotAnalysis]:
        return None

    async def generate_building_renders(self, draft: ProjectDraft, base_image: Optional[str],
                                        perspective: Perspective = Perspective.FRONT) -> BuildingRenders:
        dims = draft.dimensions

        def view(p: Perspective) -> str:
            return _placeholder_image(
                draft.title,
                f"{p.value} view · {draft.style} {draft.building_type} · {dims.area:g} sq ft",
                draft.main_color,
            )

        if perspective is Perspective.SIDE:
            return BuildingRenders(after=view(Perspective.FRONT), after_side=view(Perspective.SIDE))
        return BuildingRenders(after=view(Perspective.FRONT))

    async def get_architectural_analysis(self, draft: ProjectDraft, language: Language) -> str:
        dims = draft.dimensions
        built_up = dims.area * draft.floors
        return (
            f"## Site & Orientation\n"
            f"{draft.title} sits on a {dims.length:g} x {dims.breadth:g} ft "
            f"({dims.area:g} sq ft) {draft.location.value.lower()} plot.\n\n"
            f"## Massing & Zoning\n"
            f"{draft.floors} floor(s) with {draft.rooms_per_floor} rooms per floor, "
            f"about {built_up:,.0f} sq ft built-up.\n\n"
            f"## Style & Materials\n"
            f"{draft.style.capitalize()} {draft.building_type} finished in {draft.main_color}.\n\n"
            f"## Construction Sequence\n"
            f"1. Site survey, soil test and approvals\n"
            f"2. Excavation and foundation\n"
            f"3. RCC frame and slabs, one floor at a time\n"
            f"4. Masonry, MEP rough-in and plastering\n"
            f"5. Flooring, joinery, paint and handover\n\n"
            f"_Rule-based analysis (AI unavailable). Add GROK_API_KEY for a detailed "
            f"analysis in {_LANGUAGE_NAMES[Language(language)]}._"
        )

    async def generate_interior_render(self, draft: ProjectDraft) -> str:
        return _placeholder_image(draft.title, f"interior concept · {draft.style}", draft.main_color)

    async def get_budget_breakdown(self, draft: ProjectDraft) -> List[BudgetLineItem]:
        rate = rate_for(draft.building_type)
        total = draft.dimensions.area * draft.floors * rate
        source = f"Rule-based estimate at {_inr(rate)}/sq ft"
        return [
            BudgetLineItem(category=category, item=item, estimate=_inr(total * share), source=source)
            for category, item, share in BUDGET_SHARES
        ]

    async def generate_custom_room_render(self, draft: RoomDraft, base_image: Optional[str] = None) -> str:
        return _placeholder_image(
            draft.room_type,
            f"{draft.dimensions.area:g} sq ft · {draft.color_range.value} palette",
            draft.primary_color,
        )

    async def get_interior_itemized_budget(self, draft: RoomDraft) -> List[InteriorItem]:
        return [
            InteriorItem(
                name=name,
                price=_inr(price),
                buy_link=f"https://www.google.com/search?tbm=shop&q={quote_plus(name)}",
            )
            for name, price in catalogue_for(draft.room_type)
        ]
