"""
Research aggregation.

Turns a business profile into an ordered, de-duplicated list of fetched
research sources.  Search and fetch are external collaborators; a failed or
slow source is dropped and recorded, never fatal.
"""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from typing import Protocol
from urllib.parse import urlsplit, urlunsplit

from pitchwright.core.concurrency import Deadline, gather_bounded
from pitchwright.core.config import settings
from pitchwright.core.errors import ResearchFetchError
from pitchwright.schemas.request import BusinessProfile, ResearchDepth
from pitchwright.schemas.research import RawDocument, ResearchResult, ResearchSource, SearchHit

logger = logging.getLogger(__name__)

SOURCE_LIMITS: dict[ResearchDepth, int] = {
    ResearchDepth.basic: 3,
    ResearchDepth.comprehensive: 8,
    ResearchDepth.expert: 15,
}

HITS_PER_QUERY = 3

AUTHORITATIVE_DOMAINS = (
    "statista.com", "mckinsey.com", "pwc.com", "deloitte.com",
    "bloomberg.com", "reuters.com", "techcrunch.com", "forbes.com",
    "harvard.edu", "mit.edu", "stanford.edu", "wikipedia.org",
)

_WS_RE = re.compile(r"\s+")


class SearchClient(Protocol):
    async def search(self, query: str, count: int) -> list[SearchHit]: ...


class SourceFetcher(Protocol):
    async def fetch(self, url: str) -> RawDocument: ...


def canonicalize_url(url: str) -> str:
    """Normalize a URL for de-duplication.

    Scheme and host are lower-cased, ``http`` is folded into ``https``, the
    fragment is dropped and a trailing slash on the path is ignored.
    """
    parts = urlsplit(url.strip())
    scheme = (parts.scheme or "https").lower()
    if scheme == "http":
        scheme = "https"
    path = parts.path.rstrip("/")
    return urlunsplit((scheme, parts.netloc.lower(), path, parts.query, ""))


def build_search_queries(profile: BusinessProfile) -> list[str]:
    company = profile.company_name
    queries = [
        f"{company} company overview",
        f"{company} business model",
        f"{company} market opportunity",
        f"{company} competition analysis",
    ]
    if profile.industry:
        queries += [
            f"{profile.industry} market size statistics",
            f"{profile.industry} industry trends",
            f"{profile.industry} competitive landscape",
        ]
    queries += [f"{company} {topic}" for topic in profile.specific_topics]
    return queries


def dedupe_hits(hits: list[SearchHit]) -> list[SearchHit]:
    seen: set[str] = set()
    unique = []
    for hit in hits:
        key = canonicalize_url(hit.url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(hit)
    return unique


def relevance_score(hit: SearchHit, query: str, position: int) -> float:
    """Score a search hit for ranking.

    Starts at ``100 - position`` within its query's results, adds 20 for an
    authoritative domain, then up to 15 for query terms found in the title
    and up to 10 for terms found in the snippet.
    """
    score = 100.0 - position
    host = urlsplit(hit.url).hostname or ""
    if any(host == domain or host.endswith("." + domain) for domain in AUTHORITATIVE_DOMAINS):
        score += 20

    terms = query.lower().split()
    if terms:
        title = hit.title.lower()
        snippet = hit.snippet.lower()
        score += 15 * sum(term in title for term in terms) / len(terms)
        score += 10 * sum(term in snippet for term in terms) / len(terms)
    return round(score, 4)


def rank_hits(hits_by_query: list[tuple[str, list[SearchHit]]]) -> list[SearchHit]:
    """Score, sort and de-duplicate hits from every query.

    Ties go to the earlier query, then the earlier hit, so the order is
    deterministic.  A URL seen twice keeps its best-ranked copy.
    """
    scored = []
    for query_index, (query, hits) in enumerate(hits_by_query):
        for position, hit in enumerate(hits):
            score = relevance_score(hit, query, position)
            scored.append((-score, query_index, position, hit.model_copy(update={"relevance_score": score})))
    scored.sort(key=lambda entry: entry[:3])
    return dedupe_hits([entry[3] for entry in scored])


def normalize_text(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


class ResearchAggregator:
    """Search → rank and de-duplicate → cap by depth → fetch with bounded fan-out."""

    def __init__(
        self,
        search_client: SearchClient,
        fetcher: SourceFetcher,
        *,
        concurrency: int | None = None,
        fetch_timeout: float | None = None,
    ) -> None:
        self.search_client = search_client
        self.fetcher = fetcher
        self.concurrency = concurrency if concurrency is not None else settings.RESEARCH_FETCH_CONCURRENCY
        self.fetch_timeout = (
            fetch_timeout if fetch_timeout is not None else settings.RESEARCH_FETCH_TIMEOUT_SECONDS
        )

    async def find_candidates(self, profile: BusinessProfile, deadline: Deadline | None = None) -> list[SearchHit]:
        queries = build_search_queries(profile)

        async def _search(query: str) -> list[SearchHit]:
            return await self.search_client.search(query, HITS_PER_QUERY)

        outcomes = await gather_bounded(
            queries,
            _search,
            limit=self.concurrency,
            item_timeout=self.fetch_timeout,
            deadline=deadline,
        )

        hits_by_query: list[tuple[str, list[SearchHit]]] = []
        for query, outcome in zip(queries, outcomes):
            if outcome.ok:
                hits_by_query.append((query, (outcome.value or [])[:HITS_PER_QUERY]))
            else:
                logger.warning("Search failed for query %r: %s", query, outcome.error or "timed out")

        limit = SOURCE_LIMITS[profile.research_depth]
        return rank_hits(hits_by_query)[:limit]

    async def fetch_source(self, hit: SearchHit) -> ResearchSource:
        started = time.perf_counter()
        raw = await self.fetcher.fetch(hit.url)
        latency_ms = int((time.perf_counter() - started) * 1000)

        content = normalize_text(raw.text)
        if not content:
            raise ResearchFetchError(hit.url, f"No readable text at {hit.url}")

        return ResearchSource(
            url=hit.url,
            title=normalize_text(raw.title) or hit.title,
            content=content,
            fetched_at=datetime.now(timezone.utc),
            fetch_latency_ms=latency_ms,
            word_count=len(content.split(" ")),
            image_count=raw.image_count,
            link_count=raw.link_count,
        )

    async def collect(self, profile: BusinessProfile, deadline: Deadline | None = None) -> ResearchResult:
        """Fetch research for *profile*; failed sources are dropped and recorded."""
        candidates = await self.find_candidates(profile, deadline)
        logger.info(
            "Fetching %d research source(s) for %s (depth=%s)",
            len(candidates), profile.company_name, profile.research_depth.value,
        )

        outcomes = await gather_bounded(
            candidates,
            self.fetch_source,
            limit=self.concurrency,
            item_timeout=self.fetch_timeout,
            deadline=deadline,
        )

        result = ResearchResult(attempted=len(candidates))
        for hit, outcome in zip(candidates, outcomes):
            if outcome.ok:
                result.sources.append(outcome.value)
            elif outcome.timed_out:
                logger.warning("Research fetch timed out: %s", hit.url)
                result.timed_out_urls.append(hit.url)
            else:
                logger.warning("Research fetch failed: %s (%s)", hit.url, outcome.error)
                result.failed_urls.append(hit.url)

        logger.info("Research complete: %d/%d source(s) usable", len(result.sources), len(candidates))
        return result
