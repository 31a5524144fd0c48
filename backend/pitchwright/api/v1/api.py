"""API v1: aggregates all routers under a single prefix."""

from fastapi import APIRouter

from pitchwright.api.v1.routers import pitch_decks, research

router = APIRouter()
router.include_router(pitch_decks.router)
router.include_router(research.router)
