"""SQLAlchemy ORM rows backing the record store."""

from datetime import datetime, timezone
from sqlalchemy import Column, String, Float, Integer, DateTime, Text, JSON
from database import Base


def utcnow():
    return datetime.now(timezone.utc)


class ProjectRow(Base):
    __tablename__ = "projects"

    # Surrogate key gives insertion order; record ids are not unique.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, index=True, nullable=False)
    client_id = Column(String, index=True, nullable=False)
    client_name = Column(String, nullable=False, default="")
    title = Column(String, nullable=False)
    building_type = Column(String, nullable=False)
    location = Column(String, nullable=False)
    style = Column(String, nullable=False)
    floors = Column(Integer, nullable=False)
    rooms_per_floor = Column(Integer, nullable=False)
    budget = Column(String, nullable=False, default="")
    main_color = Column(String, nullable=False)
    length = Column(Float, nullable=False, default=0.0)
    breadth = Column(Float, nullable=False, default=0.0)
    area = Column(Float, nullable=False)
    before_image = Column(Text, nullable=True)
    after_image = Column(Text, nullable=True)
    after_image_side = Column(Text, nullable=True)
    interior_image = Column(Text, nullable=True)
    narrative = Column(Text, nullable=True)
    budget_breakdown = Column(JSON, nullable=True)  # list of BudgetLineItem dicts
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class RoomRow(Base):
    __tablename__ = "rooms"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, index=True, nullable=False)
    client_id = Column(String, index=True, nullable=False)
    room_type = Column(String, nullable=False)
    length = Column(Float, nullable=False, default=0.0)
    breadth = Column(Float, nullable=False, default=0.0)
    area = Column(Float, nullable=False)
    budget = Column(String, nullable=False, default="0")
    primary_color = Column(String, nullable=False)
    color_range = Column(String, nullable=False, default="neutral")
    before_image = Column(Text, nullable=True)
    after_image = Column(Text, nullable=True)
    items = Column(JSON, nullable=True)  # list of InteriorItem dicts
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
