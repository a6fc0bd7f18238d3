"""
Record store — write-once, ownership-tagged project and room collections.

Both collections iterate most-recent-first. Record ids are not unique,
so rows are keyed by an insertion sequence instead.

Every session runs under one store-wide lock: the in-memory engine shares a
single connection, and a session closing mid-append would roll back the
pending insert.
"""

import asyncio
import enum
import logging
from datetime import timezone
from typing import List, Optional, Union

from sqlalchemy import func, select

from config import DATABASE_URL
from database import build_engine, build_session_factory, init_db
from models import ProjectRow, RoomRow
from schemas import ProjectRecord, RoomRecord
from services.errors import SynthesisCancelled
from services.join import CancellationToken

logger = logging.getLogger(__name__)

Record = Union[ProjectRecord, RoomRecord]


class CollectionKind(str, enum.Enum):
    PROJECTS = "projects"
    ROOMS = "rooms"


_ROWS = {
    CollectionKind.PROJECTS: (ProjectRow, ProjectRecord),
    CollectionKind.ROOMS: (RoomRow, RoomRecord),
}


def _kind_of(record: Record) -> CollectionKind:
    if isinstance(record, ProjectRecord):
        return CollectionKind.PROJECTS
    if isinstance(record, RoomRecord):
        return CollectionKind.ROOMS
    raise TypeError(f"Cannot store {type(record).__name__}")


def _to_row(kind: CollectionKind, record: Record):
    row_type, _ = _ROWS[kind]
    columns = record.model_dump(mode="json")
    columns["created_at"] = record.created_at
    return row_type(**columns)


def _to_record(kind: CollectionKind, row) -> Record:
    _, record_type = _ROWS[kind]
    record = record_type.model_validate(row, from_attributes=True)
    if record.created_at.tzinfo is None:
        # SQLite drops the offset; everything is stored in UTC
        record = record.model_copy(update={"created_at": record.created_at.replace(tzinfo=timezone.utc)})
    return record


class RecordStore:
    """Async SQLAlchemy-backed store for finalized records."""

    def __init__(self, database_url: str = DATABASE_URL):
        self.engine = build_engine(database_url)
        self._session = build_session_factory(self.engine)
        self._lock = asyncio.Lock()

    async def init(self):
        await init_db(self.engine)

    async def close(self):
        await self.engine.dispose()

    async def append(self, record: Record, token: Optional[CancellationToken] = None) -> None:
        """
        Store *record*; it becomes the first item of its collection.

        A *token* cancelled while waiting for the lock aborts the write
        with SynthesisCancelled.
        """
        kind = _kind_of(record)
        row = _to_row(kind, record)
        async with self._lock:
            if token is not None and token.cancelled:
                raise SynthesisCancelled("Synthesis was cancelled")
            async with self._session() as db:
                db.add(row)
                await db.commit()
        logger.info(f"Stored {kind.value[:-1]} {record.id} for client {record.client_id}")

    async def filter_by_client(self, kind: CollectionKind, client_id: str) -> List[Record]:
        """Records owned by *client_id*, most recent first; empty when none match."""
        kind = CollectionKind(kind)
        row_type, _ = _ROWS[kind]
        async with self._lock, self._session() as db:
            result = await db.execute(
                select(row_type)
                .where(row_type.client_id == client_id)
                .order_by(row_type.seq.desc())
            )
            return [_to_record(kind, row) for row in result.scalars().all()]

    async def list_all(self, kind: CollectionKind) -> List[Record]:
        kind = CollectionKind(kind)
        row_type, _ = _ROWS[kind]
        async with self._lock, self._session() as db:
            result = await db.execute(select(row_type).order_by(row_type.seq.desc()))
            return [_to_record(kind, row) for row in result.scalars().all()]

    async def count(self, kind: CollectionKind) -> int:
        kind = CollectionKind(kind)
        row_type, _ = _ROWS[kind]
        async with self._lock, self._session() as db:
            result = await db.execute(select(func.count()).select_from(row_type))
            return result.scalar_one()
