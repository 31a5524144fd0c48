"""Shared fixtures: deterministic fakes for every pipeline collaborator."""

import asyncio
import re
from urllib.parse import quote_plus
from uuid import UUID

import pytest

from pitchwright.core.insights import RuleBasedInsightExtractor
from pitchwright.core.pipeline import PipelineCollaborators, PitchDeckPipeline
from pitchwright.models.pitch_deck import PitchDeckRecord
from pitchwright.schemas.assets import ImageSearchResult
from pitchwright.schemas.research import RawDocument, SearchHit

RESEARCH_TEXT = (
    "The global AI market size is projected to reach $190 billion by 2025. "
    "Small businesses struggle with the problem of manual data entry every week. "
    "Our platform solves this with an automated workflow that enables 3x faster reporting. "
    "Customers report 40% lower costs after adoption of the product. "
    "The founding team has deep experience building data products at scale. "
    "Pricing follows a subscription business model with tiered plans. "
    "Revenue is forecast to grow 120% year over year according to analyst projections. "
    "Over 10,000 users signed up during the pilot program. "
    "Regulatory risk remains a concern for companies handling personal data. "
    "An emerging trend is the shift toward AI copilots inside business software."
)


class FakeSearchClient:
    """Three unique URLs per query; records every query it sees."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.queries: list[str] = []

    async def search(self, query: str, count: int) -> list[SearchHit]:
        self.queries.append(query)
        if self.fail:
            raise RuntimeError("search backend unavailable")
        slug = re.sub(r"\W+", "-", query.lower()).strip("-")
        return [
            SearchHit(title=f"{query} result {i}", url=f"https://research.example.com/{slug}/{i}")
            for i in range(count)
        ]


class FakeFetcher:
    """Returns canned research text; can fail, stall or go empty per URL."""

    def __init__(
        self,
        fail: bool = False,
        fail_urls: tuple[str, ...] = (),
        slow_urls: tuple[str, ...] = (),
        delay: float = 0.0,
        text: str = RESEARCH_TEXT,
    ):
        self.fail = fail
        self.fail_urls = set(fail_urls)
        self.slow_urls = set(slow_urls)
        self.delay = delay
        self.text = text
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> RawDocument:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay or url in self.slow_urls:
                await asyncio.sleep(self.delay if url not in self.slow_urls else 5.0)
            else:
                await asyncio.sleep(0)
            if self.fail or url in self.fail_urls:
                raise ConnectionError(f"could not reach {url}")
            return RawDocument(url=url, title="Industry report", text=self.text, image_count=2, link_count=5)
        finally:
            self.in_flight -= 1


class FakeImageSearcher:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.queries: list[str] = []

    async def search(self, query: str, count: int) -> list[ImageSearchResult]:
        self.queries.append(query)
        if self.fail:
            raise ConnectionError("image service down")
        return [
            ImageSearchResult(
                url=f"https://images.example.com/{quote_plus(query)}-{i}.jpg",
                title=query,
                source="fake",
                license="commercial",
            )
            for i in range(count)
        ]


class InMemoryDeckStore:
    def __init__(self):
        self.records: dict[UUID, PitchDeckRecord] = {}

    async def create(self, record: PitchDeckRecord) -> PitchDeckRecord:
        self.records[record.id] = record
        return record

    async def get(self, deck_id: UUID) -> PitchDeckRecord | None:
        return self.records.get(deck_id)

    async def list(self, kind: str | None = None, status: str | None = None) -> list[PitchDeckRecord]:
        return [
            r for r in self.records.values()
            if (kind is None or r.kind == kind) and (status is None or r.status == status)
        ]

    async def update(self, deck_id: UUID, changes: dict) -> PitchDeckRecord | None:
        record = self.records.get(deck_id)
        if record is None:
            return None
        for field, value in changes.items():
            setattr(record, field, value)
        record.touch()
        return record

    async def delete(self, deck_id: UUID) -> bool:
        return self.records.pop(deck_id, None) is not None


def build_pipeline(
    search_client=None,
    fetcher=None,
    image_searcher=None,
    insight_extractor=None,
    narrative_writer=None,
    **options,
) -> PitchDeckPipeline:
    collaborators = PipelineCollaborators(
        search_client=search_client or FakeSearchClient(),
        fetcher=fetcher or FakeFetcher(),
        insight_extractor=insight_extractor or RuleBasedInsightExtractor(),
        image_searcher=image_searcher or FakeImageSearcher(),
        narrative_writer=narrative_writer,
    )
    options.setdefault("timeout", 10.0)
    options.setdefault("outline_reserve", 1.0)
    return PitchDeckPipeline(collaborators, **options)


@pytest.fixture
def search_client():
    return FakeSearchClient()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def image_searcher():
    return FakeImageSearcher()


@pytest.fixture
def deck_store():
    return InMemoryDeckStore()


@pytest.fixture
def acme_request() -> dict:
    return {
        "companyName": "Acme AI",
        "industry": "technology",
        "targetAudience": "investors",
        "fundingStage": "seed",
        "researchDepth": "basic",
        "theme": "modern",
    }
