"""
Shared FastAPI dependencies: single source of truth for DI.

Routers import get_db, get_deck_store and get_pipeline from HERE; tests
swap them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from pitchwright.core.pipeline import PitchDeckPipeline, build_default_pipeline
from pitchwright.db.database import get_db as _get_db
from pitchwright.db.deck_store import DeckStore, SqlDeckStore

__all__ = ["get_db", "get_deck_store", "get_pipeline"]


async def get_db() -> AsyncSession:
    """Yield an async database session."""
    async for session in _get_db():
        yield session


async def get_deck_store(db: AsyncSession = Depends(get_db)) -> DeckStore:
    return SqlDeckStore(db)


@lru_cache(maxsize=1)
def get_pipeline() -> PitchDeckPipeline:
    """One pipeline per process; it holds collaborators, never run state."""
    return build_default_pipeline()
