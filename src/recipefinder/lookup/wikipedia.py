"""Wikipedia chef search.

Search hits are filtered by title exclusions and culinary indicators.
Hits that merely look like a person's name are confirmed through the
page summary before they are suggested.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from recipefinder.configuration.settings import LookupSettings
from recipefinder.errors import LookupFailure, LookupParseError

from .client import ResilientLookupClient
from .normalizer import NormalizedQuery
from .transport import HttpTransport
from .validation import GENERIC_EXCLUDE_TERMS, PERSON_VALIDATOR, strip_parentheticals

logger = logging.getLogger(__name__)

CULINARY_INDICATORS = (
    "chef",
    "cook",
    "culinary",
    "restaurant",
    "kitchen",
    "cuisine",
    "michelin",
    "cookbook",
    "recipe",
    "food",
    "gastronomy",
)

# Occupation words an extract must mention to confirm a person is a chef
CULINARY_OCCUPATIONS = ("chef", "cook", "restaurateur", "culinary", "pastry", "baker")

_TITLE_PERSON_RE = re.compile(r"^[A-Z][a-z]+ [A-Z][a-z]+")
_HTML_TAG_RE = re.compile(r"<[^>]+>")


class PageSummary(BaseModel):
    """Lead section of a Wikipedia page."""

    title: str
    description: Optional[str] = None
    extract: str = ""
    url: Optional[str] = None

    def mentions_any(self, words) -> bool:
        text = f"{self.description or ''} {self.extract}".lower()
        return any(word in text for word in words)


def clean_chef_title(title: str) -> str:
    """Page title -> chef name, or empty string when it is not a name."""
    name = strip_parentheticals(title)
    if len(name) < 3 or not PERSON_VALIDATOR(name):
        return ""
    return name


def _hit_text(page: Dict[str, Any]) -> str:
    snippet = page.get("description") or page.get("excerpt") or ""
    return _HTML_TAG_RE.sub("", str(snippet))


class WikipediaClient:
    """Thin client over the search and page-summary endpoints."""

    def __init__(
        self,
        settings: Optional[LookupSettings] = None,
        http: Optional[HttpTransport] = None,
    ):
        self.settings = settings or LookupSettings()
        self.http = http or HttpTransport(
            user_agent=self.settings.user_agent,
            timeout=self.settings.request_timeout_seconds,
        )

    async def search_pages(self, text: str, limit: int) -> List[Dict[str, Any]]:
        data = await self.http.get_json(
            self.settings.wikipedia_search_url, {"q": text, "limit": limit}
        )
        if not isinstance(data, dict):
            raise LookupParseError("Wikipedia search response is not an object")
        pages = data.get("pages") or []
        if not isinstance(pages, list):
            raise LookupParseError("Wikipedia search 'pages' is not a list")
        return [page for page in pages if isinstance(page, dict) and page.get("title")]

    async def fetch_summary(self, title: str) -> PageSummary:
        """Page summary; raises :class:`LookupFailure` on any failure."""
        url = f"{self.settings.wikipedia_summary_url}/{quote(title.replace(' ', '_'), safe='')}"
        data = await self.http.get_json(url)
        if not isinstance(data, dict):
            raise LookupParseError(f"Summary for '{title}' is not an object")
        urls = data.get("content_urls") or {}
        desktop = (urls.get("desktop") or {}) if isinstance(urls, dict) else None
        if not isinstance(desktop, dict):
            raise LookupParseError(f"Summary for '{title}' has malformed content_urls")
        try:
            return PageSummary(
                title=data.get("title") or title,
                description=data.get("description"),
                extract=data.get("extract") or "",
                url=desktop.get("page"),
            )
        except ValidationError as e:
            raise LookupParseError(f"Malformed summary for '{title}': {e.error_count()} invalid fields") from e

    async def get_page_summary(self, title: str) -> Optional[PageSummary]:
        """Page summary, or ``None`` when it cannot be retrieved."""
        if not title or not title.strip():
            return None
        try:
            return await self.fetch_summary(title.strip())
        except LookupFailure as e:
            logger.warning(f"Wikipedia summary failed for '{title}' [{e.code}]: {e.message}")
            return None


class WikipediaChefSearchStrategy:
    """Lookup strategy searching Wikipedia for ``"<query> chef"``."""

    name = "wikipedia_search"

    def __init__(self, client: WikipediaClient, limit: int = 10):
        self.client = client
        self.limit = limit

    async def execute(self, query: NormalizedQuery) -> List[str]:
        pages = await self.client.search_pages(f"{query.raw.strip()} chef", self.limit)

        titles: List[str] = []
        for page in pages:
            title = str(page["title"])
            if await self._is_likely_chef(title, _hit_text(page)):
                titles.append(title)
        return titles

    async def _is_likely_chef(self, title: str, snippet: str) -> bool:
        lowered = title.lower()
        if any(term in lowered for term in GENERIC_EXCLUDE_TERMS):
            return False

        text = f"{lowered} {snippet.lower()}"
        if any(indicator in text for indicator in CULINARY_INDICATORS):
            return True

        if not _TITLE_PERSON_RE.match(title):
            return False
        try:
            summary = await self.client.fetch_summary(title)
        except LookupFailure as e:
            logger.debug(f"Could not verify '{title}' [{e.code}], skipping")
            return False
        return summary.mentions_any(CULINARY_OCCUPATIONS)


def build_wikipedia_chef_client(
    settings: Optional[LookupSettings] = None,
    http: Optional[HttpTransport] = None,
    **client_kwargs,
) -> ResilientLookupClient:
    settings = settings or LookupSettings()
    client = WikipediaClient(settings, http)
    return ResilientLookupClient(
        namespace="wikipedia_chef",
        strategies=[WikipediaChefSearchStrategy(client, limit=settings.default_limit)],
        extract=clean_chef_title,
        settings=settings,
        **client_kwargs,
    )
