"""Query strategies and their fallback orchestration.

A strategy is one way of asking a provider for candidates (exact label
match, partial match, identifier match, regex match...). Strategies are
tried strictly in order, one network call at a time, and the first one
that yields at least one usable candidate wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence, runtime_checkable

from recipefinder.errors import LookupFailure

from .normalizer import NormalizedQuery

logger = logging.getLogger(__name__)


@runtime_checkable
class LookupStrategy(Protocol):
    """One retrieval approach against an upstream provider.

    ``execute`` returns raw candidate labels, possibly empty, and raises
    a :class:`~recipefinder.errors.LookupFailure` subclass on timeout,
    transport or parse failure. Returning ``None`` means the strategy does
    not apply to the query; it is then skipped and not recorded.
    """

    name: str

    async def execute(self, query: NormalizedQuery) -> Optional[List[str]]:
        ...


class FunctionStrategy:
    """Adapter turning an async callable into a :class:`LookupStrategy`."""

    def __init__(self, name: str, func: Callable[[NormalizedQuery], Awaitable[List[str]]]):
        self.name = name
        self._func = func

    async def execute(self, query: NormalizedQuery) -> List[str]:
        return await self._func(query)

    def __repr__(self) -> str:
        return f"FunctionStrategy({self.name!r})"


class AttemptStatus(str, Enum):
    RESULTS = "results"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class StrategyAttempt:
    """Outcome of running one strategy."""

    strategy: str
    status: AttemptStatus
    results: List[str] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def error_code(self) -> Optional[str]:
        if self.error is None:
            return None
        return getattr(self.error, "code", type(self.error).__name__)


@dataclass
class OrchestrationResult:
    """Combined outcome of a strategy run."""

    results: List[str] = field(default_factory=list)
    winner: Optional[str] = None
    attempts: List[StrategyAttempt] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        """False only when every strategy that ran failed."""
        return not self.attempts or len(self.failures) < len(self.attempts)

    @property
    def failures(self) -> List[StrategyAttempt]:
        return [a for a in self.attempts if a.status is AttemptStatus.FAILED]


async def run_strategies(
    query: NormalizedQuery,
    strategies: Sequence[LookupStrategy],
    refine: Optional[Callable[[List[str]], List[str]]] = None,
) -> OrchestrationResult:
    """Run ``strategies`` in order until one yields usable candidates.

    Args:
        query: Prepared query handed to every strategy
        strategies: Strategies in priority order
        refine: Optional extraction/validation applied to each strategy's
            raw output before deciding whether it is empty

    Returns:
        OrchestrationResult with the winning candidates and every attempt.
        Exhausting all strategies without candidates is not a failure.
    """
    outcome = OrchestrationResult()

    for strategy in strategies:
        try:
            raw = await strategy.execute(query)
        except LookupFailure as e:
            logger.warning(f"Strategy {strategy.name} failed [{e.code}]: {e.message}")
            outcome.attempts.append(
                StrategyAttempt(strategy=strategy.name, status=AttemptStatus.FAILED, error=e)
            )
            continue
        except Exception as e:
            logger.warning(f"Strategy {strategy.name} raised unexpectedly: {e!r}", exc_info=True)
            outcome.attempts.append(
                StrategyAttempt(strategy=strategy.name, status=AttemptStatus.FAILED, error=e)
            )
            continue

        if raw is None:
            logger.debug(f"Strategy {strategy.name} does not apply to '{query.normalized}'")
            continue

        results = refine(list(raw)) if refine is not None else list(raw)
        if results:
            outcome.attempts.append(
                StrategyAttempt(strategy=strategy.name, status=AttemptStatus.RESULTS, results=results)
            )
            outcome.results = results
            outcome.winner = strategy.name
            return outcome

        logger.debug(f"Strategy {strategy.name} found nothing for '{query.normalized}'")
        outcome.attempts.append(StrategyAttempt(strategy=strategy.name, status=AttemptStatus.EMPTY))

    return outcome
