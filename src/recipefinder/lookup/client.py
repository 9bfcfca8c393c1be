"""Generic resilient lookup client.

One client instance serves one entity kind. It owns its cache and its
circuit breaker, and is parameterized by an ordered list of strategies,
an extraction function and a validation predicate.

Control flow of a lookup:
    normalize -> cache -> circuit breaker -> strategies in order
    -> extract/validate/dedupe -> relevance sort -> cache -> return

Suggestion features must degrade gracefully, so ``lookup`` never raises:
every failure path is logged and converted to an empty list.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from recipefinder.configuration.settings import LookupSettings

from .cache import TTLCache
from .circuit_breaker import CircuitBreaker
from .normalizer import NormalizedQuery, is_too_short
from .ranking import sort_by_relevance
from .strategies import LookupStrategy, StrategyAttempt, run_strategies
from .validation import Extractor, Validator, clean_candidates

logger = logging.getLogger(__name__)


class LookupOutcome(str, Enum):
    """How a lookup was answered."""

    CACHE_HIT = "cache_hit"
    SUCCESS = "success"
    NO_RESULT = "no_result"
    VALIDATION_SKIP = "validation_skip"
    CIRCUIT_OPEN = "circuit_open"
    FAILURE = "failure"


@dataclass
class LookupReport:
    """Results of one lookup plus how they were obtained."""

    query: str
    results: List[str] = field(default_factory=list)
    outcome: LookupOutcome = LookupOutcome.NO_RESULT
    strategy: Optional[str] = None
    attempts: List[StrategyAttempt] = field(default_factory=list)
    elapsed_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "results": self.results,
            "outcome": self.outcome.value,
            "strategy": self.strategy,
            "attempts": [
                {"strategy": a.strategy, "status": a.status.value, "error": a.error_code}
                for a in self.attempts
            ],
            "elapsed_ms": self.elapsed_ms,
        }


class ResilientLookupClient:
    """Cached, circuit-broken, multi-strategy suggestion lookup.

    Example:
        client = ResilientLookupClient(
            namespace="dish",
            strategies=[exact_strategy, partial_strategy],
            extract=capitalize_words,
            validate=DISH_VALIDATOR,
        )
        dishes = await client.lookup("ratatouille")
    """

    def __init__(
        self,
        namespace: str,
        strategies: Sequence[LookupStrategy],
        extract: Optional[Extractor] = None,
        validate: Optional[Validator] = None,
        *,
        settings: Optional[LookupSettings] = None,
        limit: Optional[int] = None,
        cache: Optional[TTLCache] = None,
        breaker: Optional[CircuitBreaker] = None,
        clock: Callable[[], float] = time.monotonic,
        sort_results: bool = True,
    ):
        """Initialize the client.

        Args:
            namespace: Entity kind, prefixes every cache key
            strategies: Strategies in priority order
            extract: Label cleanup applied to every raw candidate
            validate: Plausibility predicate for cleaned candidates
            settings: Shared lookup policy (TTL, breaker, limits)
            limit: Default number of results returned
            cache: Cache to use instead of a private one
            breaker: Circuit breaker to use instead of a private one
            clock: Monotonic clock, injectable for tests
            sort_results: Order results by relevance to the query
        """
        self.settings = settings or LookupSettings()
        self.namespace = namespace
        self.strategies = list(strategies)
        self.extract = extract or (lambda label: label.strip())
        self.validate = validate or (lambda name: bool(name))
        self.limit = limit or self.settings.default_limit
        self.min_query_length = self.settings.min_query_length
        self.single_flight = self.settings.single_flight
        self.sort_results = sort_results
        self._clock = clock
        self.cache = cache or TTLCache(self.settings.cache_ttl_seconds, clock=clock)
        self.breaker = breaker or CircuitBreaker(
            max_failures=self.settings.max_failures,
            failure_window=self.settings.failure_window_seconds,
            clock=clock,
            name=namespace,
        )
        self._inflight: Dict[str, asyncio.Future] = {}

    def cache_key(self, query: NormalizedQuery) -> str:
        return f"{self.namespace}:{query.normalized}"

    async def lookup(self, query: str, limit: Optional[int] = None) -> List[str]:
        """Return up to ``limit`` suggestions for ``query``; never raises."""
        report = await self.lookup_with_report(query, limit=limit)
        return report.results

    async def lookup_with_report(self, query: str, limit: Optional[int] = None) -> LookupReport:
        """Like :meth:`lookup` but also reports how the answer was produced."""
        start_time = self._clock()
        limit = self.limit if limit is None else limit

        if is_too_short(query, self.min_query_length):
            return LookupReport(query=query or "", outcome=LookupOutcome.VALIDATION_SKIP)

        prepared = NormalizedQuery.from_raw(query)
        key = self.cache_key(prepared)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Using cached {self.namespace} results for '{prepared.normalized}'")
            return LookupReport(query=query, results=cached[:limit], outcome=LookupOutcome.CACHE_HIT)

        if self.breaker.is_open():
            logger.warning(f"Circuit breaker open, skipping {self.namespace} lookup")
            return LookupReport(query=query, outcome=LookupOutcome.CIRCUIT_OPEN)

        if self.single_flight:
            report = await self._coalesced(prepared, key)
        else:
            report = await self._run_pipeline(prepared, key)

        report.results = report.results[:limit]
        report.elapsed_ms = int((self._clock() - start_time) * 1000)
        if report.outcome is LookupOutcome.SUCCESS:
            logger.info(
                f"Found {len(report.results)} {self.namespace} suggestions for "
                f"'{query}' via {report.strategy} ({report.elapsed_ms}ms)"
            )
        return report

    async def _coalesced(self, prepared: NormalizedQuery, key: str) -> LookupReport:
        future = self._inflight.get(key)
        if future is None:
            future = asyncio.ensure_future(self._run_pipeline(prepared, key))
            self._inflight[key] = future
            future.add_done_callback(lambda _: self._inflight.pop(key, None))
        shared = await asyncio.shield(future)
        return LookupReport(
            query=prepared.raw,
            results=list(shared.results),
            outcome=shared.outcome,
            strategy=shared.strategy,
            attempts=list(shared.attempts),
        )

    async def _run_pipeline(self, prepared: NormalizedQuery, key: str) -> LookupReport:
        try:
            orchestration = await run_strategies(prepared, self.strategies, refine=self._refine)
        except Exception as e:
            logger.error(f"{self.namespace} lookup error for '{prepared.raw}': {e!r}", exc_info=True)
            self.breaker.record_failure()
            return LookupReport(query=prepared.raw, outcome=LookupOutcome.FAILURE)

        if not orchestration.completed:
            codes = ", ".join(a.error_code or "?" for a in orchestration.failures)
            logger.error(f"All {self.namespace} strategies failed for '{prepared.raw}' ({codes})")
            self.breaker.record_failure()
            return LookupReport(
                query=prepared.raw,
                outcome=LookupOutcome.FAILURE,
                attempts=orchestration.attempts,
            )

        results = orchestration.results
        if self.sort_results:
            results = sort_by_relevance(results, prepared.normalized)
        self.cache.put(key, results)

        if not results:
            logger.info(f"No {self.namespace} suggestions for '{prepared.raw}'")
            return LookupReport(
                query=prepared.raw,
                outcome=LookupOutcome.NO_RESULT,
                attempts=orchestration.attempts,
            )

        self.breaker.record_success()
        return LookupReport(
            query=prepared.raw,
            results=list(results),
            outcome=LookupOutcome.SUCCESS,
            strategy=orchestration.winner,
            attempts=orchestration.attempts,
        )

    def _refine(self, labels: List[str]) -> List[str]:
        return clean_candidates(labels, self.extract, self.validate)

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info(f"{self.namespace} lookup cache cleared")

    def health(self) -> Dict[str, Any]:
        """Breaker and cache state for monitoring."""
        return {
            "namespace": self.namespace,
            "circuit_state": self.breaker.state.value,
            "recent_failures": self.breaker.failure_count,
            "cache": self.cache.stats(),
        }
