"""
Generation pipeline: request → research → insights → outline → layouts →
assets → composed slides → exports.

Validation happens before any I/O.  A failed fetch, asset or narrative call
only degrades the deck, and the reasons are recorded on
``metadata.degradationReasons``.  Insight extraction that overruns the run
deadline is fatal, as is a broken contract between stages.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import pydantic

from pitchwright.core.ai_generators import AgentInsightExtractor, AgentNarrativeWriter, NarrativeWriter
from pitchwright.core.assets import ImageSearcher, VisualAssetResolver, summarize_visual_assets
from pitchwright.core.composer import check_consistency, compose_slides
from pitchwright.core.concurrency import Deadline
from pitchwright.core.config import settings
from pitchwright.core.errors import PipelineTimeoutError, ValidationError
from pitchwright.core.exporters import export_deck
from pitchwright.core.insights import InsightExtractor, RuleBasedInsightExtractor
from pitchwright.core.layouts import assign_layouts
from pitchwright.core.outline import build_outline
from pitchwright.core.providers import GoogleSearchClient, HttpSourceFetcher, default_image_searcher
from pitchwright.core.research import ResearchAggregator, SearchClient, SourceFetcher
from pitchwright.core.themes import resolve_theme
from pitchwright.schemas.deck import CompletePitchDeck, GenerationMetadata
from pitchwright.schemas.insights import InsightSet
from pitchwright.schemas.outline import DeckNarrative
from pitchwright.schemas.request import BusinessProfile, PitchDeckRequest
from pitchwright.schemas.research import ResearchResult

logger = logging.getLogger(__name__)


@dataclass
class PipelineCollaborators:
    search_client: SearchClient
    fetcher: SourceFetcher
    insight_extractor: InsightExtractor
    image_searcher: ImageSearcher
    narrative_writer: NarrativeWriter | None = None


def validation_details(exc: pydantic.ValidationError) -> list[dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]


def parse_request(payload: Any) -> BusinessProfile:
    """Validate a raw request into a frozen profile, or raise ``ValidationError``."""
    if isinstance(payload, BusinessProfile):
        return payload
    try:
        request = PitchDeckRequest.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError("Invalid pitch deck request", details=validation_details(exc)) from exc
    return request.to_profile()


class PitchDeckPipeline:
    def __init__(
        self,
        collaborators: PipelineCollaborators,
        *,
        timeout: float | None = None,
        outline_reserve: float | None = None,
        research_concurrency: int | None = None,
        fetch_timeout: float | None = None,
        asset_concurrency: int | None = None,
        asset_timeout: float | None = None,
    ) -> None:
        self.collaborators = collaborators
        self.timeout = timeout if timeout is not None else settings.GENERATION_TIMEOUT_SECONDS
        self.outline_reserve = (
            outline_reserve if outline_reserve is not None else settings.OUTLINE_RESERVE_SECONDS
        )
        self.research = ResearchAggregator(
            collaborators.search_client,
            collaborators.fetcher,
            concurrency=research_concurrency,
            fetch_timeout=fetch_timeout,
        )
        self.assets = VisualAssetResolver(
            collaborators.image_searcher,
            concurrency=asset_concurrency,
            timeout=asset_timeout,
        )

    async def _collect_research(self, profile: BusinessProfile, deadline: Deadline) -> ResearchResult:
        # Research may not eat the time reserved for insights and the outline
        research_deadline = Deadline(max(0.0, deadline.remaining() - self.outline_reserve))
        return await self.research.collect(profile, research_deadline)

    async def _extract_insights(
        self, profile: BusinessProfile, research: ResearchResult, deadline: Deadline
    ) -> InsightSet:
        if deadline.expired:
            raise PipelineTimeoutError("Run deadline passed before insights could be extracted")
        try:
            return await asyncio.wait_for(
                self.collaborators.insight_extractor.extract(profile, research.sources),
                timeout=deadline.remaining(),
            )
        except asyncio.TimeoutError:
            raise PipelineTimeoutError(
                "Insight extraction did not finish before the run deadline",
                details={"timeoutSeconds": self.timeout},
            ) from None

    async def _write_narrative(
        self,
        profile: BusinessProfile,
        insights: InsightSet,
        deadline: Deadline,
        reasons: list[str],
    ) -> DeckNarrative | None:
        writer = self.collaborators.narrative_writer
        if writer is None:
            return None
        if deadline.expired:
            reasons.append("narrative writer skipped at run deadline")
            return None
        try:
            return await asyncio.wait_for(writer.write(profile, insights), timeout=deadline.remaining())
        except asyncio.TimeoutError:
            logger.warning("Narrative writer timed out; using generated narrative")
            reasons.append("narrative writer timed out")
        except Exception:
            logger.exception("Narrative writer failed; using generated narrative")
            reasons.append("narrative writer failed")
        return None

    async def research_insights(self, payload: Any) -> tuple[ResearchResult, InsightSet]:
        """Research and insight extraction only, no deck."""
        profile = parse_request(payload)
        deadline = Deadline(self.timeout)
        research = await self._collect_research(profile, deadline)
        insights = await self._extract_insights(profile, research, deadline)
        return research, insights

    async def generate(self, payload: Any) -> CompletePitchDeck:
        started = time.perf_counter()
        profile = parse_request(payload)
        tokens = resolve_theme(profile.theme)
        deadline = Deadline(self.timeout)
        reasons: list[str] = []

        logger.info(
            "Generating deck for %s (audience=%s, stage=%s, depth=%s, theme=%s)",
            profile.company_name, profile.target_audience, profile.funding_stage,
            profile.research_depth.value, profile.theme.value,
        )

        research = await self._collect_research(profile, deadline)
        if research.failed_urls:
            reasons.append(f"{len(research.failed_urls)} research source(s) failed to load")
        if research.timed_out_urls:
            reasons.append(f"{len(research.timed_out_urls)} research source(s) timed out")
        if research.attempted == 0:
            reasons.append("no research sources found")

        insights = await self._extract_insights(profile, research, deadline)
        narrative = await self._write_narrative(profile, insights, deadline, reasons)
        outline = build_outline(profile, insights, narrative)

        assignments = assign_layouts(outline.slides, tokens)
        resolution = await self.assets.resolve(assignments, profile, tokens, deadline)
        if resolution.failed_count:
            reasons.append(f"{resolution.failed_count} visual asset(s) unavailable")

        slides = compose_slides(outline, resolution.assignments, tokens, profile.slide_aspect_ratio)
        consistency = check_consistency(slides, tokens)
        visual_assets = summarize_visual_assets([b for slide in slides for b in slide.blocks])

        deck = CompletePitchDeck(
            outline=outline,
            slides=slides,
            design_tokens=tokens,
            visual_assets=visual_assets,
            consistency=consistency,
            metadata=GenerationMetadata(
                generated_at=datetime.now(timezone.utc),
                processing_time_ms=int((time.perf_counter() - started) * 1000),
                research_source_count=len(research.sources),
                research_sources_attempted=research.attempted,
                failed_asset_count=resolution.failed_count,
                quality_degraded=bool(reasons),
                degradation_reasons=reasons,
            ),
        )
        deck.export_formats = export_deck(deck)

        logger.info(
            "Deck for %s ready: %d slide(s), %d source(s), degraded=%s",
            profile.company_name, len(slides), len(research.sources), bool(reasons),
        )
        return deck


def build_default_pipeline() -> PitchDeckPipeline:
    use_llm = settings.LLM_ENABLED and bool(settings.OPENAI_API_KEY)
    collaborators = PipelineCollaborators(
        search_client=GoogleSearchClient(),
        fetcher=HttpSourceFetcher(),
        insight_extractor=AgentInsightExtractor() if use_llm else RuleBasedInsightExtractor(),
        image_searcher=default_image_searcher(),
        narrative_writer=AgentNarrativeWriter() if use_llm else None,
    )
    return PitchDeckPipeline(collaborators)
