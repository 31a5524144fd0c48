import uuid
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status

from pitchwright.api.deps import get_deck_store, get_pipeline
from pitchwright.controllers import pitch_deck_controller
from pitchwright.core.config import settings
from pitchwright.core.pipeline import PitchDeckPipeline
from pitchwright.db.deck_store import DeckStore
from pitchwright.schemas.deck import CompletePitchDeck
from pitchwright.schemas.pitch_deck import (
    PitchDeckRead,
    PitchDeckSummary,
    PitchDeckUpdate,
    StandardDeckCreate,
)
from pitchwright.schemas.request import PitchDeckRequest

router = APIRouter(prefix="/pitch-decks", tags=["pitch-decks"])


@router.post("/generate", response_model=CompletePitchDeck, status_code=status.HTTP_201_CREATED)
async def generate_pitch_deck(
    payload: PitchDeckRequest,
    response: Response,
    pipeline: PitchDeckPipeline = Depends(get_pipeline),
    store: DeckStore = Depends(get_deck_store),
):
    """Research, outline, lay out and compose a complete deck, then store it."""
    record, deck = await pitch_deck_controller.generate_deck(payload, pipeline, store)
    response.headers["Location"] = f"{settings.API_V1_STR}/pitch-decks/{record.id}"
    return deck


@router.post("/", response_model=PitchDeckRead, status_code=status.HTTP_201_CREATED)
async def create_standard_deck(
    payload: StandardDeckCreate,
    store: DeckStore = Depends(get_deck_store),
):
    """Create a template deck from hand-written content."""
    return await pitch_deck_controller.create_standard_deck(payload, store)


@router.get("/", response_model=list[PitchDeckSummary])
async def list_pitch_decks(
    kind: Literal["generated", "standard"] | None = Query(None, description="Filter by lifecycle"),
    deck_status: Literal["draft", "generating", "completed", "failed"] | None = Query(
        None, alias="status", description="Filter by status"
    ),
    store: DeckStore = Depends(get_deck_store),
):
    return await pitch_deck_controller.list_decks(store, kind=kind, status=deck_status)


@router.get("/{deck_id}", response_model=PitchDeckRead)
async def get_pitch_deck(deck_id: uuid.UUID, store: DeckStore = Depends(get_deck_store)):
    return await pitch_deck_controller.get_deck(deck_id, store)


@router.patch("/{deck_id}", response_model=PitchDeckRead)
async def update_pitch_deck(
    deck_id: uuid.UUID,
    payload: PitchDeckUpdate,
    store: DeckStore = Depends(get_deck_store),
):
    return await pitch_deck_controller.update_deck(deck_id, payload, store)


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pitch_deck(deck_id: uuid.UUID, store: DeckStore = Depends(get_deck_store)):
    await pitch_deck_controller.delete_deck(deck_id, store)


@router.get("/{deck_id}/exports/{format_name}")
async def export_pitch_deck(
    deck_id: uuid.UUID,
    format_name: str,
    store: DeckStore = Depends(get_deck_store),
):
    """One export of a generated deck; 404 when that format is unavailable."""
    body, media_type = await pitch_deck_controller.get_export(deck_id, format_name, store)
    return Response(content=body, media_type=media_type)
