"""
Deck persistence boundary.

The pipeline hands over one composed deck and accepts whatever id and
timestamps the store assigns.  ``SqlDeckStore`` is the SQLModel-backed
implementation; anything with the same methods can stand in for it.
"""

from typing import Any, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlmodel.ext.asyncio.session import AsyncSession

from pitchwright.models.pitch_deck import PitchDeckRecord


class DeckStore(Protocol):
    async def create(self, record: PitchDeckRecord) -> PitchDeckRecord: ...

    async def get(self, deck_id: UUID) -> PitchDeckRecord | None: ...

    async def list(self, kind: str | None = None, status: str | None = None) -> list[PitchDeckRecord]: ...

    async def update(self, deck_id: UUID, changes: dict[str, Any]) -> PitchDeckRecord | None: ...

    async def delete(self, deck_id: UUID) -> bool: ...


class SqlDeckStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, record: PitchDeckRecord) -> PitchDeckRecord:
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        return record

    async def get(self, deck_id: UUID) -> PitchDeckRecord | None:
        return await self.db.get(PitchDeckRecord, deck_id)

    async def list(self, kind: str | None = None, status: str | None = None) -> list[PitchDeckRecord]:
        query = select(PitchDeckRecord)
        if kind is not None:
            query = query.where(PitchDeckRecord.kind == kind)
        if status is not None:
            query = query.where(PitchDeckRecord.status == status)
        query = query.order_by(PitchDeckRecord.created_at.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update(self, deck_id: UUID, changes: dict[str, Any]) -> PitchDeckRecord | None:
        record = await self.get(deck_id)
        if record is None:
            return None
        for field, value in changes.items():
            setattr(record, field, value)
        record.touch()
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        return record

    async def delete(self, deck_id: UUID) -> bool:
        record = await self.get(deck_id)
        if record is None:
            return False
        await self.db.delete(record)
        await self.db.flush()
        return True
