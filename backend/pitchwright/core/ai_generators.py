"""
Language-model collaborators for a generation run.

Agents
------
- **insight agent**   – Sorts research text into the fixed insight taxonomy
- **narrative agent** – Writes the deck-level subtitle, summary, overview and call to action

Both are optional.  They are built on first use (building an OpenAI-backed
agent needs an API key) and every call has a deterministic fallback: the
rule-based extractor for insights, and the outline builder's own narrative
when no writer is configured or the writer fails.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Protocol

from pydantic_ai import Agent

from pitchwright.core.config import settings
from pitchwright.core.insights import (
    MAX_SNIPPETS_PER_CATEGORY,
    InsightExtractor,
    RuleBasedInsightExtractor,
    profile_insights,
)
from pitchwright.schemas.insights import InsightCategory, InsightSet
from pitchwright.schemas.outline import DeckNarrative
from pitchwright.schemas.request import BusinessProfile
from pitchwright.schemas.research import ResearchSource

logger = logging.getLogger(__name__)

MAX_SOURCE_CHARS = 4000


# ---------------------------------------------------------------------------
# 1.  Insight agent  (structured extraction)
# ---------------------------------------------------------------------------

_INSIGHT_SYSTEM_PROMPT = """\
You are a startup research analyst.  Given a company profile and a set of \
research documents, extract short, factual snippets for each business-insight \
category: market_size, competitive_advantage, problem_statement, solution, \
business_model, target_market, financial_projections, team_credentials, \
traction, risks, key_metrics, industry_trends.

Rules:
- Copy facts from the documents; never invent numbers.
- Prefer sentences that contain concrete figures.
- At most 5 snippets per category, most specific first.
- Leave a category as an empty list when nothing relevant was found.
"""


@lru_cache(maxsize=1)
def get_insight_agent() -> Agent:
    return Agent(
        model=settings.LLM_MODEL,
        output_type=InsightSet,
        system_prompt=_INSIGHT_SYSTEM_PROMPT,
        retries=2,
    )


# ---------------------------------------------------------------------------
# 2.  Narrative agent  (deck-level prose)
# ---------------------------------------------------------------------------

_NARRATIVE_SYSTEM_PROMPT = """\
You are a world-class pitch-deck strategist.  Given a company profile and its \
categorized insights, write the deck-level copy:

- **subtitle**: one line under the company name, max 12 words
- **executive_summary**: 2-3 sentences covering problem, solution and opportunity
- **company_overview**: 2 sentences describing what the company does and for whom
- **call_to_action**: one closing sentence addressed to the audience

Write persuasive copy, not labels.  Never invent numbers that are not in the data.
"""


@lru_cache(maxsize=1)
def get_narrative_agent() -> Agent:
    return Agent(
        model=settings.LLM_MODEL,
        output_type=DeckNarrative,
        system_prompt=_NARRATIVE_SYSTEM_PROMPT,
        retries=2,
    )


class NarrativeWriter(Protocol):
    async def write(self, profile: BusinessProfile, insights: InsightSet) -> DeckNarrative: ...


# ===================================================================
# Collaborators
# ===================================================================

def _profile_payload(profile: BusinessProfile) -> str:
    return json.dumps(profile.model_dump(mode="json", exclude_none=True), indent=2)


def merge_with_profile(profile: BusinessProfile, extracted: InsightSet) -> InsightSet:
    """Explicit profile fields win; agent output fills the rest, capped per category."""
    explicit = profile_insights(profile)
    values = {
        category.value: (explicit[category] or extracted.get(category))[:MAX_SNIPPETS_PER_CATEGORY]
        for category in InsightCategory
    }
    return InsightSet(**values)


class AgentInsightExtractor:
    """LLM extraction with the rule-based extractor as fallback."""

    def __init__(self, fallback: InsightExtractor | None = None) -> None:
        self.fallback = fallback or RuleBasedInsightExtractor()

    async def extract(self, profile: BusinessProfile, sources: list[ResearchSource]) -> InsightSet:
        if not sources:
            return await self.fallback.extract(profile, sources)

        documents = "\n\n".join(
            f"[{i + 1}] {source.title} ({source.url})\n{source.content[:MAX_SOURCE_CHARS]}"
            for i, source in enumerate(sources)
        )
        prompt = (
            f"Company profile:\n{_profile_payload(profile)}\n\n"
            f"Research documents:\n{documents}"
        )
        try:
            result = await get_insight_agent().run(prompt)
        except Exception:
            logger.exception("Insight agent failed for %s; using rule-based extraction", profile.company_name)
            return await self.fallback.extract(profile, sources)
        return merge_with_profile(profile, result.output)


class AgentNarrativeWriter:
    async def write(self, profile: BusinessProfile, insights: InsightSet) -> DeckNarrative:
        prompt = (
            f"Company profile:\n{_profile_payload(profile)}\n\n"
            f"Insights:\n{json.dumps(insights.model_dump(), indent=2)}"
        )
        result = await get_narrative_agent().run(prompt)
        return result.output
