import logging
import uuid

from fastapi import HTTPException

from pitchwright.core.exporters import export_format
from pitchwright.core.pipeline import PitchDeckPipeline, parse_request
from pitchwright.db.deck_store import DeckStore
from pitchwright.models.pitch_deck import DeckKind, DeckStatus, PitchDeckRecord
from pitchwright.schemas.deck import CompletePitchDeck
from pitchwright.schemas.pitch_deck import (
    PitchDeckUpdate,
    ResearchInsightsRead,
    ResearchSourceRead,
    StandardDeckCreate,
)
from pitchwright.schemas.request import PitchDeckRequest

logger = logging.getLogger(__name__)

EXPORT_MEDIA_TYPES = {
    "json": "application/json",
    "markdown": "text/markdown",
    "html": "text/html",
    "powerpoint": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}


async def generate_deck(
    payload: PitchDeckRequest, pipeline: PitchDeckPipeline, store: DeckStore
) -> tuple[PitchDeckRecord, CompletePitchDeck]:
    """Run a full generation and persist the composed deck."""
    profile = parse_request(payload)
    deck = await pipeline.generate(profile)

    record = PitchDeckRecord(
        kind=DeckKind.generated.value,
        title=deck.outline.title,
        company_name=profile.company_name,
        description=deck.outline.executive_summary,
        status=DeckStatus.completed.value,
        theme=profile.theme.value,
        slide_count=len(deck.slides),
        quality_degraded=deck.metadata.quality_degraded,
        deck=deck.model_dump(mode="json", by_alias=True),
    )
    record = await store.create(record)
    logger.info("Stored generated deck %s for %s", record.id, profile.company_name)
    return record, deck


async def create_standard_deck(payload: StandardDeckCreate, store: DeckStore) -> PitchDeckRecord:
    slides = payload.content.get("slides")
    record = PitchDeckRecord(
        kind=DeckKind.standard.value,
        title=payload.title,
        company_name=payload.company_name,
        description=payload.description,
        status=DeckStatus.draft.value,
        theme=payload.theme.value,
        slide_count=len(slides) if isinstance(slides, list) else 0,
        content=payload.content,
    )
    return await store.create(record)


async def list_decks(store: DeckStore, kind: str | None = None, status: str | None = None) -> list[PitchDeckRecord]:
    return await store.list(kind=kind, status=status)


async def get_deck(deck_id: uuid.UUID, store: DeckStore) -> PitchDeckRecord:
    record = await store.get(deck_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Pitch deck not found")
    return record


async def update_deck(deck_id: uuid.UUID, payload: PitchDeckUpdate, store: DeckStore) -> PitchDeckRecord:
    record = await get_deck(deck_id, store)
    changes = payload.model_dump(exclude_unset=True)

    if "content" in changes:
        if record.kind != DeckKind.standard.value:
            raise HTTPException(status_code=400, detail="Generated decks cannot take free-form content.")
        slides = (changes["content"] or {}).get("slides")
        changes["slide_count"] = len(slides) if isinstance(slides, list) else 0
    if "status" in changes and changes["status"] is not None:
        changes["status"] = changes["status"].value

    updated = await store.update(deck_id, changes)
    if updated is None:
        raise HTTPException(status_code=404, detail="Pitch deck not found")
    return updated


async def delete_deck(deck_id: uuid.UUID, store: DeckStore) -> None:
    if not await store.delete(deck_id):
        raise HTTPException(status_code=404, detail="Pitch deck not found")


async def get_export(deck_id: uuid.UUID, format_name: str, store: DeckStore) -> tuple[str, str]:
    """Return ``(body, media_type)`` for one export of a generated deck."""
    record = await get_deck(deck_id, store)
    if record.deck is None:
        raise HTTPException(status_code=404, detail="This deck has no generated content to export")

    deck = CompletePitchDeck.model_validate(record.deck)
    body = export_format(deck, format_name)
    if body is None:
        raise HTTPException(status_code=404, detail=f"Export format '{format_name}' is not available")
    return body, EXPORT_MEDIA_TYPES.get(format_name, "text/plain")


async def research_insights(payload: dict, pipeline: PitchDeckPipeline) -> ResearchInsightsRead:
    profile = parse_request(payload)
    research, insights = await pipeline.research_insights(profile)
    return ResearchInsightsRead(
        company_name=profile.company_name,
        sources=[
            ResearchSourceRead(
                url=s.url, title=s.title, word_count=s.word_count, fetch_latency_ms=s.fetch_latency_ms
            )
            for s in research.sources
        ],
        sources_attempted=research.attempted,
        failed_urls=[*research.failed_urls, *research.timed_out_urls],
        insights=insights,
    )
