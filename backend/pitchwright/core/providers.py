"""
Default HTTP-backed collaborators: web search, page fetch and image search.

Each one satisfies a protocol the pipeline depends on, so tests (and other
deployments) can swap them for fakes.
"""

from __future__ import annotations

import logging
from urllib.parse import quote_plus, urlsplit

import httpx
from bs4 import BeautifulSoup

from pitchwright.core.config import settings
from pitchwright.schemas.assets import Dimensions, ImageSearchResult
from pitchwright.schemas.research import RawDocument, SearchHit

logger = logging.getLogger(__name__)

_STRIP_TAGS = ["script", "style", "nav", "footer", "header", "aside", "noscript", "iframe", "form"]


class GoogleSearchClient:
    """Google Programmable Search.  Returns nothing when not configured."""

    def __init__(self, api_key: str | None = None, engine_id: str | None = None, timeout: float = 10.0) -> None:
        self.api_key = api_key if api_key is not None else settings.GOOGLE_SEARCH_API_KEY
        self.engine_id = engine_id if engine_id is not None else settings.GOOGLE_SEARCH_ENGINE_ID
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.engine_id)

    async def search(self, query: str, count: int) -> list[SearchHit]:
        if not self.configured:
            logger.warning("Web search not configured; skipping query %r", query)
            return []

        params = {"key": self.api_key, "cx": self.engine_id, "q": query, "num": min(count, 10)}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(settings.GOOGLE_SEARCH_ENDPOINT, params=params)
            response.raise_for_status()
            items = response.json().get("items", [])

        return [
            SearchHit(title=item.get("title", ""), url=item["link"], snippet=item.get("snippet", ""))
            for item in items
            if item.get("link")
        ]


class HttpSourceFetcher:
    """Fetch a page over HTTP and reduce it to readable text."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout or settings.RESEARCH_FETCH_TIMEOUT_SECONDS

    async def fetch(self, url: str) -> RawDocument:
        headers = {
            "User-Agent": settings.HTTP_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True, headers=headers) as client:
            response = await client.get(url)
            response.raise_for_status()
        return parse_html_document(url, response.text)


def parse_html_document(url: str, html: str) -> RawDocument:
    soup = BeautifulSoup(html, "html.parser")
    title = soup.title.get_text(strip=True) if soup.title else ""

    image_count = len(soup.find_all("img"))
    link_count = len(soup.find_all("a", href=True))

    for tag in soup(_STRIP_TAGS):
        tag.decompose()

    root = soup.find("main") or soup.find("article") or soup.body or soup
    text = root.get_text(separator=" ", strip=True)

    return RawDocument(url=url, title=title, text=text, image_count=image_count, link_count=link_count)


class PexelsImageSearcher:
    """Photo search through the Pexels API."""

    def __init__(self, api_key: str | None = None, timeout: float = 10.0) -> None:
        self.api_key = api_key if api_key is not None else settings.PEXELS_API_KEY
        self.timeout = timeout

    async def search(self, query: str, count: int) -> list[ImageSearchResult]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                settings.PEXELS_API_URL,
                params={"query": query, "per_page": count},
                headers={"Authorization": self.api_key},
            )
            response.raise_for_status()
            photos = response.json().get("photos", [])

        results = []
        for photo in photos:
            src = photo.get("src", {})
            url = src.get("large") or src.get("original")
            if not url:
                continue
            results.append(
                ImageSearchResult(
                    url=url,
                    thumbnail_url=src.get("medium", url),
                    title=photo.get("alt") or query,
                    source="pexels",
                    license="commercial",
                    dimensions=Dimensions(width=photo.get("width", 800), height=photo.get("height", 600)),
                    format=_extract_format(url),
                )
            )
        return results


class PlaceholderImageSearcher:
    """Deterministic placeholder images for deployments without an image API."""

    base_url = "https://placehold.co"

    async def search(self, query: str, count: int) -> list[ImageSearchResult]:
        text = quote_plus(query)
        return [
            ImageSearchResult(
                url=f"{self.base_url}/800x600/0066cc/ffffff?text={text}-{i + 1}",
                thumbnail_url=f"{self.base_url}/200x150/0066cc/ffffff?text={text}-{i + 1}",
                title=f"{query} {i + 1}",
                source="placeholder",
                license="public-domain",
                dimensions=Dimensions(width=800, height=600),
                format="png",
            )
            for i in range(count)
        ]


def _extract_format(url: str) -> str:
    path = urlsplit(url).path.lower()
    for ext in ("png", "webp", "gif", "svg", "jpeg", "jpg"):
        if path.endswith(f".{ext}"):
            return "jpg" if ext == "jpeg" else ext
    return "jpg"


def default_image_searcher():
    if settings.PEXELS_API_KEY:
        return PexelsImageSearcher()
    return PlaceholderImageSearcher()
