"""Resilient external lookups for suggestion features.

Provides cached, circuit-broken, multi-strategy lookups against public
knowledge sources:
- Query normalization with accent-folded variants
- TTL cache and circuit breaker owned by each client
- Ordered strategy fallback with per-strategy failure isolation
- Entity-specific extraction, validation and relevance sorting
- Wikidata, Wikipedia and AI-completion clients
- Static-first suggestion service

Lookups never raise: failures are logged and surface as empty results.
"""

from recipefinder.lookup.cache import CacheEntry, TTLCache
from recipefinder.lookup.circuit_breaker import CircuitBreaker, CircuitState
from recipefinder.lookup.client import LookupOutcome, LookupReport, ResilientLookupClient
from recipefinder.lookup.completion import (
    CompletionStrategy,
    TextCompletionProvider,
    build_ai_chef_client,
    build_restaurant_client,
)
from recipefinder.lookup.normalizer import (
    NormalizedQuery,
    accent_pattern,
    accent_variants,
    normalize,
    off_id,
    shortened_variants,
)
from recipefinder.lookup.ranking import relevance_key, sort_by_relevance
from recipefinder.lookup.strategies import (
    AttemptStatus,
    FunctionStrategy,
    LookupStrategy,
    OrchestrationResult,
    StrategyAttempt,
    run_strategies,
)
from recipefinder.lookup.suggestions import (
    SuggestionKind,
    SuggestionResult,
    SuggestionService,
    build_default_service,
)
from recipefinder.lookup.transport import HttpTransport, SparqlEndpoint, sparql_literal
from recipefinder.lookup.validation import (
    CUISINE_VALIDATOR,
    DISH_VALIDATOR,
    INGREDIENT_VALIDATOR,
    PERSON_VALIDATOR,
    EntityValidator,
    extract_chef_name,
    strip_disambiguation,
)
from recipefinder.lookup.wikidata import (
    ChefDetails,
    WikidataChefDirectory,
    build_chef_client,
    build_cuisine_client,
    build_dish_client,
    build_ingredient_client,
)
from recipefinder.lookup.wikipedia import (
    PageSummary,
    WikipediaChefSearchStrategy,
    WikipediaClient,
    build_wikipedia_chef_client,
)

__all__ = [
    # Core
    "ResilientLookupClient",
    "LookupReport",
    "LookupOutcome",
    "TTLCache",
    "CacheEntry",
    "CircuitBreaker",
    "CircuitState",
    # Queries
    "NormalizedQuery",
    "normalize",
    "accent_variants",
    "accent_pattern",
    "shortened_variants",
    "off_id",
    # Strategies
    "LookupStrategy",
    "FunctionStrategy",
    "StrategyAttempt",
    "AttemptStatus",
    "OrchestrationResult",
    "run_strategies",
    # Results
    "EntityValidator",
    "PERSON_VALIDATOR",
    "DISH_VALIDATOR",
    "INGREDIENT_VALIDATOR",
    "CUISINE_VALIDATOR",
    "extract_chef_name",
    "strip_disambiguation",
    "relevance_key",
    "sort_by_relevance",
    # Providers
    "HttpTransport",
    "SparqlEndpoint",
    "sparql_literal",
    "ChefDetails",
    "WikidataChefDirectory",
    "build_chef_client",
    "build_dish_client",
    "build_ingredient_client",
    "build_cuisine_client",
    "PageSummary",
    "WikipediaClient",
    "WikipediaChefSearchStrategy",
    "build_wikipedia_chef_client",
    "TextCompletionProvider",
    "CompletionStrategy",
    "build_restaurant_client",
    "build_ai_chef_client",
    # Suggestions
    "SuggestionKind",
    "SuggestionResult",
    "SuggestionService",
    "build_default_service",
]
