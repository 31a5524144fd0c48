"""
Insight extraction into the fixed business taxonomy.

For every category the explicit profile fields win; only categories the
profile says nothing about are mined from research text.  Research snippets
are ranked deterministically (specificity, then source order, then sentence
order), so identical inputs always yield identical output.
"""

from __future__ import annotations

import logging
import re
from typing import Protocol

from pitchwright.schemas.insights import InsightCategory, InsightSet
from pitchwright.schemas.request import BusinessProfile
from pitchwright.schemas.research import ResearchSource

logger = logging.getLogger(__name__)

MAX_SNIPPETS_PER_CATEGORY = 5
MIN_SENTENCE_LENGTH = 20
MAX_SENTENCE_LENGTH = 300

CATEGORY_KEYWORDS: dict[InsightCategory, tuple[str, ...]] = {
    InsightCategory.market_size: ("market size", "market", "billion", "tam", "addressable"),
    InsightCategory.competitive_advantage: ("advantage", "unique", "differentiat", "better than", "moat"),
    InsightCategory.problem_statement: ("problem", "challenge", "pain", "struggle", "inefficien"),
    InsightCategory.solution: ("solution", "solve", "platform", "enables", "approach"),
    InsightCategory.business_model: ("business model", "subscription", "pricing", "revenue model", "saas", "fee"),
    InsightCategory.target_market: ("customer", "segment", "demographic", "audience", "buyers"),
    InsightCategory.financial_projections: ("projection", "forecast", "revenue", "profit", "arr"),
    InsightCategory.team_credentials: ("team", "founder", "experience", "background", "ceo"),
    InsightCategory.traction: ("users", "customers", "adoption", "growth", "pilot", "signed"),
    InsightCategory.risks: ("risk", "threat", "concern", "regulat", "uncertain"),
    InsightCategory.key_metrics: ("metric", "kpi", "conversion", "retention", "churn", "cac", "ltv"),
    InsightCategory.industry_trends: ("trend", "emerging", "future", "shift", "adoption of"),
}

_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
_FIGURE_RE = re.compile(r"\$\s?\d|\d+(?:\.\d+)?\s?%|\d+(?:\.\d+)?x\b|\d[\d,.]*\s?(?:billion|million|thousand|bn|[mbk])\b", re.I)


class InsightExtractor(Protocol):
    async def extract(self, profile: BusinessProfile, sources: list[ResearchSource]) -> InsightSet: ...


def profile_insights(profile: BusinessProfile) -> dict[InsightCategory, list[str]]:
    """Snippets taken directly from explicit profile fields."""
    found: dict[InsightCategory, list[str]] = {category: [] for category in InsightCategory}

    def add(category: InsightCategory, text: str | None) -> None:
        if text:
            found[category].append(text)

    add(InsightCategory.problem_statement, profile.problem_statement)
    add(InsightCategory.solution, profile.solution or profile.description)
    add(InsightCategory.target_market, profile.target_market)
    add(InsightCategory.competitive_advantage, profile.competitive_advantage)
    add(InsightCategory.traction, profile.traction)

    if profile.business_type:
        add(InsightCategory.business_model, f"{profile.business_type} business model")
    if profile.revenue:
        add(InsightCategory.financial_projections, f"Current revenue of {profile.revenue}")
        add(InsightCategory.key_metrics, f"Revenue: {profile.revenue}")
        add(InsightCategory.traction, f"Generating {profile.revenue} in revenue")
    if profile.funding_amount:
        add(InsightCategory.financial_projections, f"Raising {profile.funding_amount} to fund the next stage of growth")
    if profile.team_size:
        add(InsightCategory.team_credentials, f"Team of {profile.team_size} people")

    return found


def split_sentences(text: str) -> list[str]:
    return [
        s.strip()
        for s in _SENTENCE_SPLIT_RE.split(text)
        if MIN_SENTENCE_LENGTH <= len(s.strip()) <= MAX_SENTENCE_LENGTH
    ]


def specificity(sentence: str, keywords: tuple[str, ...]) -> int:
    lowered = sentence.lower()
    score = sum(1 for keyword in keywords if keyword in lowered)
    if score and _FIGURE_RE.search(sentence):
        score += 2
    return score


def research_insights(sources: list[ResearchSource]) -> dict[InsightCategory, list[str]]:
    """Mine research text per category, ranked by specificity then position."""
    sentences: list[tuple[int, int, str]] = []
    for source_index, source in enumerate(sources):
        texts = [source.title, source.content]
        position = 0
        for text in texts:
            for sentence in split_sentences(text):
                sentences.append((source_index, position, sentence))
                position += 1

    found: dict[InsightCategory, list[str]] = {}
    for category, keywords in CATEGORY_KEYWORDS.items():
        scored = []
        for source_index, position, sentence in sentences:
            score = specificity(sentence, keywords)
            if score:
                scored.append((-score, source_index, position, sentence))
        scored.sort()

        seen: set[str] = set()
        picked: list[str] = []
        for *_rank, sentence in scored:
            key = sentence.lower()
            if key in seen:
                continue
            seen.add(key)
            picked.append(sentence)
            if len(picked) == MAX_SNIPPETS_PER_CATEGORY:
                break
        found[category] = picked
    return found


def extract_insights(profile: BusinessProfile, sources: list[ResearchSource]) -> InsightSet:
    """Profile fields first; research text only for categories still empty."""
    explicit = profile_insights(profile)
    mined = research_insights(sources)

    values: dict[str, list[str]] = {}
    for category in InsightCategory:
        values[category.value] = explicit[category] or mined.get(category, [])

    insights = InsightSet(**values)
    logger.info("Extracted insights for %s: %s", profile.company_name, insights.summary())
    return insights


class RuleBasedInsightExtractor:
    """Deterministic keyword extractor; performs no I/O."""

    async def extract(self, profile: BusinessProfile, sources: list[ResearchSource]) -> InsightSet:
        return extract_insights(profile, sources)
