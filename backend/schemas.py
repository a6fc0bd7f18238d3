"""Pydantic schemas: domain value objects, drafts, records and API bodies."""

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ---------- Enums ----------
class DimensionField(str, enum.Enum):
    LENGTH = "length"
    BREADTH = "breadth"
    AREA = "area"


class LocationType(str, enum.Enum):
    URBAN = "URBAN"
    RURAL = "RURAL"
    COASTAL = "COASTAL"


class ColorRange(str, enum.Enum):
    WARM = "warm"
    COOL = "cool"
    NEUTRAL = "neutral"
    VIBRANT = "vibrant"


class Language(str, enum.Enum):
    EN = "en"
    HI = "hi"
    TE = "te"


class Perspective(str, enum.Enum):
    FRONT = "front"
    SIDE = "side"


class Role(str, enum.Enum):
    CLIENT = "CLIENT"
    ADMIN = "ADMIN"


# ---------- Geometry ----------
class Dimensions(BaseModel):
    """Plot or room footprint in feet / square feet."""
    length: float = Field(default=0.0, ge=0)
    breadth: float = Field(default=0.0, ge=0)
    area: float = Field(default=0.0, ge=0)

    class Config:
        frozen = True


# ---------- Users ----------
class User(BaseModel):
    id: str
    username: str
    role: Role
    display_name: str = ""

    class Config:
        frozen = True


# ---------- Gateway value objects ----------
class BudgetLineItem(BaseModel):
    category: str
    item: str
    estimate: str
    source: str = ""

    class Config:
        frozen = True


class InteriorItem(BaseModel):
    name: str
    price: str
    buy_link: str = ""

    class Config:
        frozen = True


class PlotAnalysis(BaseModel):
    length: Optional[float] = None
    breadth: Optional[float] = None
    total_area: Optional[float] = None


class BuildingRenders(BaseModel):
    before: Optional[str] = None
    after: str
    after_side: Optional[str] = None


# ---------- Drafts ----------
class ProjectDraftIn(BaseModel):
    """Partially-filled building form, as posted by a client."""
    title: Optional[str] = None
    client_name: Optional[str] = None
    building_type: Optional[str] = None
    location: Optional[LocationType] = None
    style: Optional[str] = None
    floors: Optional[int] = Field(default=None, ge=1)
    rooms_per_floor: Optional[int] = Field(default=None, ge=1)
    budget: Optional[str] = None
    main_color: Optional[str] = None
    dimensions: Dimensions = Dimensions()


class ProjectDraft(BaseModel):
    """Validated building description; only built by build_project_draft()."""
    title: str
    client_name: str
    building_type: str
    location: LocationType
    style: str
    floors: int
    rooms_per_floor: int
    budget: str
    main_color: str
    dimensions: Dimensions

    class Config:
        frozen = True


class RoomDraftIn(BaseModel):
    room_type: Optional[str] = None
    dimensions: Dimensions = Dimensions()
    budget: Optional[str] = None
    primary_color: Optional[str] = None
    color_range: Optional[ColorRange] = None


class RoomDraft(BaseModel):
    room_type: str
    dimensions: Dimensions
    budget: str
    primary_color: str
    color_range: ColorRange

    class Config:
        frozen = True


# ---------- Records ----------
class ProjectRecord(BaseModel):
    id: str
    client_id: str
    client_name: str
    title: str
    building_type: str
    location: LocationType
    style: str
    floors: int
    rooms_per_floor: int
    budget: str
    main_color: str
    length: float
    breadth: float
    area: float
    before_image: Optional[str] = None
    after_image: Optional[str] = None
    after_image_side: Optional[str] = None
    interior_image: Optional[str] = None
    narrative: Optional[str] = None
    budget_breakdown: Optional[list[BudgetLineItem]] = None
    created_at: datetime

    class Config:
        frozen = True

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(length=self.length, breadth=self.breadth, area=self.area)


class RoomRecord(BaseModel):
    id: str
    client_id: str
    room_type: str
    length: float
    breadth: float
    area: float
    budget: str
    primary_color: str
    color_range: ColorRange = ColorRange.NEUTRAL
    before_image: Optional[str] = None
    after_image: Optional[str] = None
    items: Optional[list[InteriorItem]] = None
    created_at: datetime

    class Config:
        frozen = True

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(length=self.length, breadth=self.breadth, area=self.area)


class LookupResult(BaseModel):
    projects: list[ProjectRecord] = []
    rooms: list[RoomRecord] = []


# ---------- Auth ----------
class LoginRequest(BaseModel):
    role: Role
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str
    user: User


# ---------- Geometry API ----------
class ReconcileRequest(BaseModel):
    current: Dimensions = Dimensions()
    field: DimensionField
    value: float = Field(..., ge=0)


class PlotAnalysisRequest(BaseModel):
    image: str = Field(..., description="data: URL or https URL of the site photo")
    current: Dimensions = Dimensions()


class PlotAnalysisResponse(BaseModel):
    analysis: Optional[PlotAnalysis] = None
    dimensions: Dimensions


# ---------- Synthesis API ----------
class ProjectSynthesisRequest(BaseModel):
    draft: ProjectDraftIn
    base_image: Optional[str] = None
    language: Language = Language.EN


class RoomSynthesisRequest(BaseModel):
    draft: RoomDraftIn
    base_image: Optional[str] = None
