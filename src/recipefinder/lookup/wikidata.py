"""Wikidata knowledge-graph lookups.

Builds resilient lookup clients for chefs, dishes, ingredients and
cuisines on top of the public SPARQL endpoint, plus a small directory
for chef details.

Entities used:
    Q3499072   chef (occupation, P106)
    Q746549    dish
    Q1362230   meal
    Q1968435   cuisine
    P5930      Open Food Facts food category ID
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel, Field

from recipefinder.configuration.settings import LookupSettings
from recipefinder.errors import LookupFailure

from .client import ResilientLookupClient
from .normalizer import NormalizedQuery, is_too_short, off_id
from .strategies import LookupStrategy
from .transport import HttpTransport, SparqlEndpoint, sparql_literal
from .validation import (
    CUISINE_VALIDATOR,
    DISH_VALIDATOR,
    INGREDIENT_VALIDATOR,
    capitalize_words,
    extract_chef_name,
)

logger = logging.getLogger(__name__)

CHEF_LANGUAGES = ("en", "fr", "es", "it")
DISH_LANGUAGES = ("en", "fr", "es", "it")

QueryBuilder = Callable[[NormalizedQuery], Optional[str]]

_EXCLUDE_FICTIONAL = """
    FILTER NOT EXISTS { ?chef wdt:P31 wd:Q95074 }
    FILTER NOT EXISTS { ?chef wdt:P31 wd:Q15632617 }
    FILTER NOT EXISTS { ?chef wdt:P31 wd:Q15773317 }"""

_DISH_CLASSES = """
    { ?dish wdt:P31 wd:Q746549 . }
    UNION { ?dish wdt:P31 ?dishType . ?dishType wdt:P279* wd:Q746549 . }
    UNION { ?dish wdt:P31 wd:Q1362230 . ?dish wdt:P186 ?material . }"""


def lang_filter(var: str, languages: Sequence[str]) -> str:
    """``FILTER(LANG(?var) IN ("en", ...))``."""
    langs = ", ".join(sparql_literal(lang) for lang in languages)
    return f"FILTER(LANG(?{var}) IN ({langs}))"


def label_filter(var: str, values: Sequence[str], exact: bool) -> str:
    """OR-ed equality or substring tests of ``LCASE(?var)`` against ``values``."""
    if exact:
        tests = [f"LCASE(?{var}) = {sparql_literal(v)}" for v in values]
    else:
        tests = [f"CONTAINS(LCASE(?{var}), {sparql_literal(v)})" for v in values]
    return f"FILTER({' || '.join(tests)})"


class SparqlLabelStrategy:
    """Lookup strategy running one SPARQL template and returning labels.

    The builder may return ``None`` when the strategy does not apply to a
    query (e.g. shortened forms of a one-word query); the strategy is then
    skipped.
    """

    def __init__(
        self,
        name: str,
        endpoint: SparqlEndpoint,
        build_query: QueryBuilder,
        label_var: str,
    ):
        self.name = name
        self.endpoint = endpoint
        self.build_query = build_query
        self.label_var = label_var

    async def execute(self, query: NormalizedQuery) -> Optional[List[str]]:
        sparql = self.build_query(query)
        if sparql is None:
            return None
        rows = await self.endpoint.select(sparql)
        return [row[self.label_var] for row in rows if row.get(self.label_var)]

    def __repr__(self) -> str:
        return f"SparqlLabelStrategy({self.name!r})"


# ---------------------------------------------------------------------------
# Chefs
# ---------------------------------------------------------------------------


def chef_label_query(label_test: str, limit: int) -> str:
    return f"""
SELECT DISTINCT ?chef ?chefLabel WHERE {{
    ?chef wdt:P106 wd:Q3499072 .
    ?chef rdfs:label ?chefLabel .
    {lang_filter("chefLabel", CHEF_LANGUAGES)}
    FILTER({label_test})
    {_EXCLUDE_FICTIONAL}
}}
ORDER BY ?chefLabel
LIMIT {limit}
"""


def _chef_contains(select: Callable[[NormalizedQuery], Optional[str]], limit: int) -> QueryBuilder:
    def build(query: NormalizedQuery) -> Optional[str]:
        term = select(query)
        if not term:
            return None
        return chef_label_query(f"CONTAINS(LCASE(?chefLabel), {sparql_literal(term)})", limit)

    return build


def _first_token(query: NormalizedQuery) -> Optional[str]:
    shortened = query.shortened
    return shortened[0] if shortened else None


def _last_token(query: NormalizedQuery) -> Optional[str]:
    shortened = query.shortened
    return shortened[-1] if len(shortened) > 1 else None


def _folded_if_different(query: NormalizedQuery) -> Optional[str]:
    return query.normalized if query.normalized != query.text else None


def chef_strategies(endpoint: SparqlEndpoint, limit: int) -> List[LookupStrategy]:
    """Chef strategies in priority order, from strict to loose."""

    def regex(query: NormalizedQuery) -> str:
        test = f"REGEX(LCASE(?chefLabel), {sparql_literal(query.pattern)}, \"i\")"
        return chef_label_query(test, limit)

    return [
        SparqlLabelStrategy("contains", endpoint, _chef_contains(lambda q: q.text, limit), "chefLabel"),
        SparqlLabelStrategy(
            "contains_folded", endpoint, _chef_contains(_folded_if_different, limit), "chefLabel"
        ),
        SparqlLabelStrategy(
            "contains_first_token", endpoint, _chef_contains(_first_token, limit), "chefLabel"
        ),
        SparqlLabelStrategy(
            "contains_last_token", endpoint, _chef_contains(_last_token, limit), "chefLabel"
        ),
        SparqlLabelStrategy("regex", endpoint, regex, "chefLabel"),
    ]


# ---------------------------------------------------------------------------
# Dishes
# ---------------------------------------------------------------------------


def dish_query(query: NormalizedQuery, exact: bool, limit: int) -> str:
    return f"""
SELECT DISTINCT ?dish ?dishLabel WHERE {{
    {_DISH_CLASSES}
    ?dish rdfs:label ?dishLabel .
    {lang_filter("dishLabel", DISH_LANGUAGES)}
    {label_filter("dishLabel", query.variants, exact)}
}}
ORDER BY ?dishLabel
LIMIT {limit}
"""


def dish_strategies(endpoint: SparqlEndpoint, limit: int) -> List[LookupStrategy]:
    return [
        SparqlLabelStrategy("exact", endpoint, lambda q: dish_query(q, True, limit), "dishLabel"),
        SparqlLabelStrategy("partial", endpoint, lambda q: dish_query(q, False, limit), "dishLabel"),
    ]


# ---------------------------------------------------------------------------
# Ingredients
# ---------------------------------------------------------------------------


def ingredient_off_id_query(query: NormalizedQuery, limit: int) -> str:
    return f"""
SELECT DISTINCT ?ingredient ?ingredientLabel WHERE {{
    ?ingredient wdt:P5930 {sparql_literal(off_id(query.text))} .
    ?ingredient rdfs:label ?ingredientLabel .
    {lang_filter("ingredientLabel", ("en",))}
}}
LIMIT {limit}
"""


def ingredient_label_query(query: NormalizedQuery, exact: bool, limit: int) -> str:
    return f"""
SELECT DISTINCT ?ingredient ?ingredientLabel WHERE {{
    ?ingredient wdt:P5930 ?offId .
    ?ingredient rdfs:label ?ingredientLabel .
    {lang_filter("ingredientLabel", ("en",))}
    {label_filter("ingredientLabel", query.variants, exact)}
}}
ORDER BY ?ingredientLabel
LIMIT {limit}
"""


def ingredient_strategies(endpoint: SparqlEndpoint, limit: int) -> List[LookupStrategy]:
    return [
        SparqlLabelStrategy(
            "off_id", endpoint, lambda q: ingredient_off_id_query(q, limit), "ingredientLabel"
        ),
        SparqlLabelStrategy(
            "exact", endpoint, lambda q: ingredient_label_query(q, True, limit), "ingredientLabel"
        ),
        SparqlLabelStrategy(
            "partial", endpoint, lambda q: ingredient_label_query(q, False, limit), "ingredientLabel"
        ),
    ]


# ---------------------------------------------------------------------------
# Cuisines
# ---------------------------------------------------------------------------


def cuisine_query(query: NormalizedQuery, exact: bool, limit: int) -> str:
    return f"""
SELECT DISTINCT ?cuisine ?cuisineLabel WHERE {{
    ?cuisine wdt:P31 wd:Q1968435 .
    ?cuisine rdfs:label ?cuisineLabel .
    {lang_filter("cuisineLabel", ("en",))}
    {label_filter("cuisineLabel", query.variants, exact)}
}}
ORDER BY ?cuisineLabel
LIMIT {limit}
"""


def cuisine_strategies(endpoint: SparqlEndpoint, limit: int) -> List[LookupStrategy]:
    return [
        SparqlLabelStrategy("exact", endpoint, lambda q: cuisine_query(q, True, limit), "cuisineLabel"),
        SparqlLabelStrategy(
            "partial", endpoint, lambda q: cuisine_query(q, False, limit), "cuisineLabel"
        ),
    ]


# ---------------------------------------------------------------------------
# Client builders
# ---------------------------------------------------------------------------


def make_transport(settings: LookupSettings) -> HttpTransport:
    return HttpTransport(user_agent=settings.user_agent, timeout=settings.request_timeout_seconds)


def _endpoint(
    settings: LookupSettings, http: Optional[HttpTransport], use_post: bool = True
) -> SparqlEndpoint:
    return SparqlEndpoint(settings.wikidata_endpoint, http or make_transport(settings), use_post=use_post)


def build_chef_client(
    settings: Optional[LookupSettings] = None,
    http: Optional[HttpTransport] = None,
    **client_kwargs,
) -> ResilientLookupClient:
    settings = settings or LookupSettings()
    endpoint = _endpoint(settings, http)
    return ResilientLookupClient(
        namespace="chef",
        strategies=chef_strategies(endpoint, settings.default_limit),
        extract=extract_chef_name,
        settings=settings,
        **client_kwargs,
    )


def build_dish_client(
    settings: Optional[LookupSettings] = None,
    http: Optional[HttpTransport] = None,
    **client_kwargs,
) -> ResilientLookupClient:
    settings = settings or LookupSettings()
    endpoint = _endpoint(settings, http, use_post=False)
    return ResilientLookupClient(
        namespace="dish",
        strategies=dish_strategies(endpoint, 15),
        extract=capitalize_words,
        validate=DISH_VALIDATOR,
        settings=settings,
        **client_kwargs,
    )


def build_ingredient_client(
    settings: Optional[LookupSettings] = None,
    http: Optional[HttpTransport] = None,
    **client_kwargs,
) -> ResilientLookupClient:
    settings = settings or LookupSettings()
    endpoint = _endpoint(settings, http, use_post=False)
    return ResilientLookupClient(
        namespace="ingredient",
        strategies=ingredient_strategies(endpoint, settings.default_limit),
        extract=capitalize_words,
        validate=INGREDIENT_VALIDATOR,
        settings=settings,
        **client_kwargs,
    )


def build_cuisine_client(
    settings: Optional[LookupSettings] = None,
    http: Optional[HttpTransport] = None,
    **client_kwargs,
) -> ResilientLookupClient:
    settings = settings or LookupSettings()
    endpoint = _endpoint(settings, http, use_post=False)
    return ResilientLookupClient(
        namespace="cuisine",
        strategies=cuisine_strategies(endpoint, settings.default_limit),
        extract=capitalize_words,
        validate=CUISINE_VALIDATOR,
        settings=settings,
        **client_kwargs,
    )


# ---------------------------------------------------------------------------
# Chef directory
# ---------------------------------------------------------------------------


class ChefDetails(BaseModel):
    """Knowledge-graph facts about one chef."""

    uri: str
    label: str
    description: Optional[str] = None
    nationality: Optional[str] = None
    birth_date: Optional[str] = Field(None, description="ISO timestamp as returned by Wikidata")


class WikidataChefDirectory:
    """Chef detail and by-cuisine queries outside the suggestion flow.

    Both operations fail open: failures are logged and turned into
    ``None`` or an empty list.
    """

    def __init__(
        self,
        settings: Optional[LookupSettings] = None,
        http: Optional[HttpTransport] = None,
    ):
        self.settings = settings or LookupSettings()
        self.endpoint = _endpoint(self.settings, http)

    async def get_chef_details(self, name: str) -> Optional[ChefDetails]:
        if is_too_short(name, self.settings.min_query_length):
            return None

        sparql = f"""
SELECT ?chef ?chefLabel ?description ?nationality ?birthDate WHERE {{
    ?chef wdt:P106 wd:Q3499072 .
    ?chef rdfs:label ?chefLabel .
    FILTER(LANG(?chefLabel) = "en")
    FILTER(LCASE(?chefLabel) = {sparql_literal(name.strip().lower())})
    OPTIONAL {{ ?chef schema:description ?description . FILTER(LANG(?description) = "en") }}
    OPTIONAL {{ ?chef wdt:P27 ?country . ?country rdfs:label ?nationality . FILTER(LANG(?nationality) = "en") }}
    OPTIONAL {{ ?chef wdt:P569 ?birthDate }}
}}
LIMIT 1
"""
        try:
            rows = await self.endpoint.select(sparql)
        except LookupFailure as e:
            logger.warning(f"Chef details lookup failed for '{name}' [{e.code}]: {e.message}")
            return None

        if not rows:
            return None
        row = rows[0]
        return ChefDetails(
            uri=row.get("chef", ""),
            label=row.get("chefLabel", name),
            description=row.get("description"),
            nationality=row.get("nationality"),
            birth_date=row.get("birthDate"),
        )

    async def search_chefs_by_cuisine(self, cuisine: str, limit: int = 10) -> List[str]:
        """Chefs whose style (P136) or nationality (P27) label mentions ``cuisine``."""
        if is_too_short(cuisine, self.settings.min_query_length):
            return []

        term = sparql_literal(cuisine.strip().lower())
        sparql = f"""
SELECT DISTINCT ?chef ?chefLabel WHERE {{
    ?chef wdt:P106 wd:Q3499072 .
    ?chef rdfs:label ?chefLabel .
    FILTER(LANG(?chefLabel) = "en")
    {{
        ?chef wdt:P136 ?style .
        ?style rdfs:label ?styleLabel .
        FILTER(LANG(?styleLabel) = "en")
        FILTER(CONTAINS(LCASE(?styleLabel), {term}))
    }} UNION {{
        ?chef wdt:P27 ?country .
        ?country rdfs:label ?countryLabel .
        FILTER(LANG(?countryLabel) = "en")
        FILTER(CONTAINS(LCASE(?countryLabel), {term}))
    }}
    {_EXCLUDE_FICTIONAL}
}}
ORDER BY ?chefLabel
LIMIT {limit}
"""
        try:
            rows = await self.endpoint.select(sparql)
        except LookupFailure as e:
            logger.warning(f"Chef search by cuisine failed for '{cuisine}' [{e.code}]: {e.message}")
            return []

        names = [extract_chef_name(row.get("chefLabel", "")) for row in rows]
        return list(dict.fromkeys(name for name in names if name))[:limit]
