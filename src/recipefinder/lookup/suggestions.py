"""Static-first suggestions with optional remote enhancement.

``suggest`` answers from the static catalogs only, so it is instant and
never touches the network. ``enhanced`` asks the remote lookup clients
registered for a kind and merges their answer with the catalog matches.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from recipefinder.configuration.settings import LookupSettings

from .catalog import CATALOGS
from .client import ResilientLookupClient
from .completion import TextCompletionProvider, build_ai_chef_client, build_restaurant_client
from .normalizer import normalize
from .ranking import sort_by_relevance
from .transport import HttpTransport
from .validation import dedupe
from .wikidata import (
    build_chef_client,
    build_cuisine_client,
    build_dish_client,
    build_ingredient_client,
    make_transport,
)
from .wikipedia import build_wikipedia_chef_client

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 10
MAX_ENHANCED_SUGGESTIONS = 15
POPULAR_COUNT = 12
# Fewer static matches than this hints that enhanced search may help
FEW_RESULTS = 8


class SuggestionKind(str, Enum):
    CHEF = "chef"
    DISH = "dish"
    INGREDIENT = "ingredient"
    CUISINE = "cuisine"
    RESTAURANT = "restaurant"


class SuggestionSource(str, Enum):
    STATIC_MATCH = "static_match"
    NO_MATCH = "no_match"
    STATIC_POPULAR = "static_popular"
    STATIC_COMPREHENSIVE = "static_comprehensive"


class SuggestionResult(BaseModel):
    """Suggestions for one query plus where they came from."""

    suggestions: List[str] = Field(default_factory=list)
    query: str = ""
    source: str
    has_more_results: bool = False


RemoteClients = Mapping[str, Sequence[Tuple[str, ResilientLookupClient]]]


def exact_matches(items: Sequence[str], query: str) -> List[str]:
    needle = normalize(query)
    return [item for item in items if normalize(item) == needle]


def partial_matches(items: Sequence[str], query: str) -> List[str]:
    needle = normalize(query)
    return [item for item in items if needle in normalize(item)]


def word_matches(items: Sequence[str], query: str) -> List[str]:
    """Items sharing a word with the query, either way round."""
    query_words = normalize(query).split()
    matches = []
    for item in items:
        item_words = normalize(item).split()
        if any(q in w or w in q for q in query_words for w in item_words):
            matches.append(item)
    return matches


class SuggestionService:
    """Suggestion entry point for every entity kind.

    Example:
        service = SuggestionService(remote={"dish": [("wikidata", dish_client)]})
        result = await service.enhanced("dish", "ratatouille")
    """

    def __init__(
        self,
        remote: Optional[RemoteClients] = None,
        catalogs: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        self.remote: Dict[str, List[Tuple[str, ResilientLookupClient]]] = {
            kind: list(clients) for kind, clients in (remote or {}).items()
        }
        self.catalogs = dict(catalogs or CATALOGS)

    def _catalog(self, kind: str) -> Sequence[str]:
        kind = SuggestionKind(kind).value
        return self.catalogs.get(kind, ())

    def suggest(self, kind: str, query: str = "") -> SuggestionResult:
        """Instant catalog suggestions for ``query``."""
        catalog = self._catalog(kind)
        query = (query or "").strip()

        if SuggestionKind(kind) is SuggestionKind.CUISINE:
            return self._suggest_cuisine(catalog, query)

        if not query:
            return SuggestionResult(
                suggestions=list(catalog[:POPULAR_COUNT])[:MAX_SUGGESTIONS],
                query="popular",
                source=SuggestionSource.STATIC_POPULAR.value,
            )

        exact = exact_matches(catalog, query)
        partial = [item for item in partial_matches(catalog, query) if item not in exact]
        fuzzy: List[str] = []
        if not exact and not partial and SuggestionKind(kind) is SuggestionKind.CHEF:
            fuzzy = word_matches(catalog, query)

        suggestions = sort_by_relevance(exact + partial + fuzzy, query)
        if not suggestions:
            return SuggestionResult(
                query=query, source=SuggestionSource.NO_MATCH.value, has_more_results=True
            )
        return SuggestionResult(
            suggestions=suggestions[:MAX_SUGGESTIONS],
            query=query,
            source=SuggestionSource.STATIC_MATCH.value,
            has_more_results=len(suggestions) < FEW_RESULTS,
        )

    def _suggest_cuisine(self, catalog: Sequence[str], query: str) -> SuggestionResult:
        if not query:
            return SuggestionResult(
                suggestions=list(catalog[:MAX_SUGGESTIONS]),
                query="popular",
                source=SuggestionSource.STATIC_POPULAR.value,
            )
        matches = partial_matches(catalog, query)
        if not matches:
            return SuggestionResult(
                suggestions=list(catalog[:MAX_SUGGESTIONS]),
                query=query,
                source=SuggestionSource.STATIC_POPULAR.value,
            )
        return SuggestionResult(
            suggestions=sort_by_relevance(matches, query)[:MAX_SUGGESTIONS],
            query=query,
            source=SuggestionSource.STATIC_MATCH.value,
        )

    async def enhanced(self, kind: str, query: str) -> SuggestionResult:
        """Remote-backed suggestions merged with catalog matches.

        Raises:
            ValueError: If ``query`` is empty or ``kind`` is unknown
        """
        if not query or not query.strip():
            raise ValueError("Query is required for enhanced search")
        query = query.strip()
        static = partial_matches(self._catalog(kind), query)

        for provider, client in self.remote.get(SuggestionKind(kind).value, []):
            results = await client.lookup(query, limit=MAX_SUGGESTIONS)
            if results:
                logger.info(f"Enhanced {kind} suggestions for '{query}' from {provider}")
                return SuggestionResult(
                    suggestions=dedupe(results + static)[:MAX_ENHANCED_SUGGESTIONS],
                    query=query,
                    source=f"{provider}_enhanced",
                )

        return SuggestionResult(
            suggestions=static[:MAX_ENHANCED_SUGGESTIONS],
            query=query,
            source=SuggestionSource.STATIC_COMPREHENSIVE.value,
        )


def build_default_service(
    settings: Optional[LookupSettings] = None,
    http: Optional[HttpTransport] = None,
    completion_provider: Optional[TextCompletionProvider] = None,
) -> SuggestionService:
    """Service wired to the public Wikidata and Wikipedia endpoints.

    A text-completion provider, when given, adds AI chef and restaurant
    suggestions after the encyclopedic sources.
    """
    settings = settings or LookupSettings()
    http = http or make_transport(settings)

    remote: Dict[str, List[Tuple[str, ResilientLookupClient]]] = {
        "chef": [
            ("wikidata", build_chef_client(settings, http)),
            ("wikipedia", build_wikipedia_chef_client(settings, http)),
        ],
        "dish": [("wikidata", build_dish_client(settings, http))],
        "ingredient": [("wikidata", build_ingredient_client(settings, http))],
        "cuisine": [("wikidata", build_cuisine_client(settings, http))],
    }
    if completion_provider is not None:
        remote["chef"].append(("ai", build_ai_chef_client(completion_provider, settings)))
        remote["restaurant"] = [("ai", build_restaurant_client(completion_provider, settings))]
    return SuggestionService(remote=remote)
