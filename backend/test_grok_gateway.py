"""Grok gateway parsing/error mapping and the rule-based fallback gateway."""

import asyncio
import base64
from types import SimpleNamespace

import httpx
import openai
import pytest

from schemas import Dimensions, Language, Perspective, ProjectDraftIn, RoomDraftIn
from services import grok_gateway
from services.errors import GatewayError
from services.generation_gateway import extract_json_from_response
from services.grok_gateway import FallbackGenerationGateway, GrokGenerationGateway
from services.synthesis import build_project_draft, build_room_draft

DRAFT = build_project_draft(ProjectDraftIn(
    title="Skyline Mansion",
    building_type="Urban Apartment",
    floors=2,
    dimensions=Dimensions(length=40, breadth=30, area=1200),
))
ROOM = build_room_draft(RoomDraftIn(room_type="Guest Bedroom", dimensions=Dimensions(length=10, breadth=12, area=120)))


class FakeCompletions:
    def __init__(self, replies=(), error=None):
        self.replies = list(replies)
        self.error = error
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.replies.pop(0))
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeImages:
    def __init__(self, error=None):
        self.error = error
        self.prompts = []

    async def generate(self, **kwargs):
        self.prompts.append(kwargs["prompt"])
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=[SimpleNamespace(b64_json="QUJD", url=None)])


def grok(replies=(), chat_error=None, image_error=None):
    completions = FakeCompletions(replies, chat_error)
    images = FakeImages(image_error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions), images=images)
    return GrokGenerationGateway(client), completions, images


def connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", "https://api.x.ai/v1/chat/completions"))


# ---------- JSON extraction ----------

def test_extract_json_prefers_fenced_block():
    text = 'Here you go:\n```json\n[{"a": 1}]\n```\nThanks {"b": 2}'
    assert extract_json_from_response(text) == [{"a": 1}]


def test_extract_json_object_with_nested_list():
    assert extract_json_from_response('Result: {"rooms": [1, 2]} done') == {"rooms": [1, 2]}


def test_extract_json_bare_array():
    assert extract_json_from_response('Items: [{"name": "Lamp"}]') == [{"name": "Lamp"}]


def test_extract_json_gives_up_on_prose():
    assert extract_json_from_response("no structured data here") is None


# ---------- Grok gateway ----------

def test_budget_breakdown_is_parsed():
    reply = '```json\n[{"category": "Site", "item": "Foundation", "estimate": 250000, "source": "CPWD"}]\n```'
    gateway, completions, _ = grok([reply])
    items = asyncio.run(gateway.get_budget_breakdown(DRAFT))
    assert [(i.category, i.estimate) for i in items] == [("Site", "250000")]
    assert "Skyline Mansion" in completions.requests[0]["messages"][1]["content"]


def test_interior_items_accept_camel_case_links():
    reply = '{"items": [{"name": "Bed", "price": "₹30,000", "buyLink": "https://shop/bed"}]}'
    gateway, _, _ = grok([reply])
    items = asyncio.run(gateway.get_interior_itemized_budget(ROOM))
    assert items[0].buy_link == "https://shop/bed"


def test_unparsable_budget_is_a_gateway_error():
    gateway, _, _ = grok(["I cannot estimate this."])
    with pytest.raises(GatewayError) as excinfo:
        asyncio.run(gateway.get_budget_breakdown(DRAFT))
    assert excinfo.value.operation == "get_budget_breakdown"


def test_transport_errors_become_gateway_errors():
    gateway, _, _ = grok(chat_error=connection_error())
    with pytest.raises(GatewayError) as excinfo:
        asyncio.run(gateway.get_architectural_analysis(DRAFT, Language.EN))
    assert isinstance(excinfo.value.__cause__, openai.APIConnectionError)


def test_image_errors_become_gateway_errors():
    gateway, _, _ = grok(image_error=connection_error())
    with pytest.raises(GatewayError):
        asyncio.run(gateway.generate_interior_render(DRAFT))


def test_analysis_requests_the_language():
    gateway, completions, _ = grok(["## Site & Orientation\n..."])
    text = asyncio.run(gateway.get_architectural_analysis(DRAFT, Language.TE))
    assert text.startswith("## Site")
    assert "Telugu" in completions.requests[0]["messages"][0]["content"]


def test_render_returns_data_url_and_describes_site_first():
    gateway, completions, images = grok(["A flat corner plot with two trees."])
    renders = asyncio.run(gateway.generate_building_renders(DRAFT, "data:image/jpeg;base64,SITE", Perspective.FRONT))
    assert renders.after == "data:image/jpeg;base64,QUJD"
    assert renders.before is None and renders.after_side is None
    assert completions.requests[0]["model"] == grok_gateway.GROK_VISION_MODEL
    assert "two trees" in images.prompts[0]


def test_side_render_adds_a_separate_side_view():
    gateway, _, images = grok()
    renders = asyncio.run(gateway.generate_building_renders(DRAFT, None, Perspective.SIDE))
    assert len(images.prompts) == 2
    assert "front exterior" in images.prompts[0]
    assert "side exterior" in images.prompts[1]
    assert renders.after and renders.after_side


def test_plot_analysis_parses_positive_numbers_only():
    gateway, _, _ = grok(['```json\n{"length": 40, "breadth": -3, "total_area": "1200"}\n```'])
    analysis = asyncio.run(gateway.analyze_plot_image("data:image/jpeg;base64,PLOT"))
    assert (analysis.length, analysis.breadth, analysis.total_area) == (40, None, 1200)


def test_plot_analysis_without_readings_is_absent():
    gateway, _, _ = grok(['{"length": null, "breadth": null, "total_area": null}'])
    assert asyncio.run(gateway.analyze_plot_image("data:image/jpeg;base64,PLOT")) is None


# ---------- Fallback gateway ----------

def test_fallback_budget_scales_with_area_and_floors():
    items = asyncio.run(FallbackGenerationGateway().get_budget_breakdown(DRAFT))
    assert [i.category for i in items][:2] == ["Site", "Structure"]
    # Urban Apartment: 1200 sq ft x 2 floors x 2600/sq ft, 35% structure
    assert items[1].estimate == "₹2,184,000"


def svg_text(data_url):
    prefix = "data:image/svg+xml;base64,"
    assert data_url.startswith(prefix)
    return base64.b64decode(data_url[len(prefix):]).decode("utf-8")


def test_fallback_renders_are_svg_data_urls():
    renders = asyncio.run(FallbackGenerationGateway().generate_building_renders(DRAFT, None, Perspective.FRONT))
    assert renders.after_side is None
    svg = svg_text(renders.after)
    assert "Skyline Mansion" in svg
    assert "front view" in svg


def test_fallback_side_request_keeps_front_in_after():
    renders = asyncio.run(FallbackGenerationGateway().generate_building_renders(DRAFT, None, Perspective.SIDE))
    assert "front view" in svg_text(renders.after)
    assert "side view" in svg_text(renders.after_side)


def test_fallback_room_items_follow_room_type():
    items = asyncio.run(FallbackGenerationGateway().get_interior_itemized_budget(ROOM))
    assert items[0].name == "Queen bed with storage"
    assert items[0].buy_link.startswith("https://")


def test_fallback_plot_analysis_is_absent():
    assert asyncio.run(FallbackGenerationGateway().analyze_plot_image("x")) is None


def test_get_gateway_without_key_uses_fallback(monkeypatch):
    monkeypatch.setattr(grok_gateway, "GROK_API_KEY", "")
    monkeypatch.setattr(grok_gateway, "_grok_client", None)
    monkeypatch.setattr(grok_gateway, "_gateway", None)
    assert isinstance(grok_gateway.get_gateway(), FallbackGenerationGateway)
