"""Tests for strategy fallback orchestration."""

import pytest

from recipefinder.errors import LookupParseError, LookupTimeoutError, LookupTransportError
from recipefinder.lookup.normalizer import NormalizedQuery
from recipefinder.lookup.strategies import (
    AttemptStatus,
    FunctionStrategy,
    LookupStrategy,
    OrchestrationResult,
    run_strategies,
)


@pytest.fixture
def query():
    return NormalizedQuery.from_raw("ratatouille")


@pytest.mark.asyncio
async def test_first_non_empty_strategy_wins(query, make_strategy):
    """Test the first non-empty strategy answer wins."""
    first = make_strategy("exact", [])
    second = make_strategy("partial", ["Ratatouille"])
    third = make_strategy("regex", ["Never"])

    outcome = await run_strategies(query, [first, second, third])

    assert outcome.results == ["Ratatouille"]
    assert outcome.winner == "partial"
    assert third.calls == 0
    assert [a.status for a in outcome.attempts] == [AttemptStatus.EMPTY, AttemptStatus.RESULTS]


@pytest.mark.asyncio
async def test_failure_is_isolated_from_next_strategy(query, make_strategy):
    """Test a failing strategy does not stop the next one."""
    failing = make_strategy("exact", LookupTimeoutError("slow"))
    working = make_strategy("partial", ["Ratatouille"])

    outcome = await run_strategies(query, [failing, working])

    assert outcome.results == ["Ratatouille"]
    assert outcome.attempts[0].status is AttemptStatus.FAILED
    assert outcome.attempts[0].error_code == "LOOKUP_TIMEOUT"
    assert outcome.completed


@pytest.mark.asyncio
async def test_unexpected_exception_is_isolated(query, make_strategy):
    """Test unexpected exceptions are recorded as failures."""
    broken = make_strategy("exact", KeyError("boom"))
    working = make_strategy("partial", ["Ratatouille"])

    outcome = await run_strategies(query, [broken, working])

    assert outcome.results == ["Ratatouille"]
    assert outcome.attempts[0].error_code == "KeyError"


@pytest.mark.asyncio
async def test_all_empty_is_completed_without_results(query, make_strategy):
    """Test all-empty answers complete with no results."""
    outcome = await run_strategies(query, [make_strategy("a", []), make_strategy("b", [])])

    assert outcome.results == []
    assert outcome.winner is None
    assert outcome.completed
    assert outcome.failures == []


@pytest.mark.asyncio
async def test_all_failed_is_not_completed(query, make_strategy):
    """Test all-failed strategies do not complete."""
    outcome = await run_strategies(
        query,
        [
            make_strategy("a", LookupTransportError("down", status_code=503)),
            make_strategy("b", LookupParseError("garbage")),
        ],
    )

    assert not outcome.completed
    assert [a.error_code for a in outcome.failures] == [
        "LOOKUP_TRANSPORT_ERROR",
        "LOOKUP_PARSE_ERROR",
    ]


@pytest.mark.asyncio
async def test_failed_then_empty_is_completed(query, make_strategy):
    """Test a failure followed by an empty answer completes."""
    outcome = await run_strategies(
        query, [make_strategy("a", LookupTimeoutError()), make_strategy("b", [])]
    )

    assert outcome.completed
    assert outcome.results == []


@pytest.mark.asyncio
async def test_refine_decides_emptiness(query, make_strategy):
    """Test emptiness is judged after refinement."""
    first = make_strategy("a", ["List of dishes"])
    second = make_strategy("b", ["Ratatouille"])

    outcome = await run_strategies(
        query,
        [first, second],
        refine=lambda labels: [label for label in labels if not label.startswith("List")],
    )

    assert outcome.winner == "b"
    assert outcome.results == ["Ratatouille"]


@pytest.mark.asyncio
async def test_strategies_receive_the_prepared_query(query, make_strategy):
    """Test strategies receive the normalized query."""
    strategy = make_strategy("a", ["x"])

    await run_strategies(query, [strategy])

    assert strategy.queries == [query]


@pytest.mark.asyncio
async def test_function_strategy_adapter(query):
    """Test FunctionStrategy wraps a coroutine function."""
    async def lookup(q):
        return [q.normalized.title()]

    strategy = FunctionStrategy("fn", lookup)

    assert isinstance(strategy, LookupStrategy)
    assert await strategy.execute(query) == ["Ratatouille"]


def test_no_strategies_counts_as_completed():
    """Test an empty strategy list completes."""
    assert OrchestrationResult().completed


@pytest.mark.asyncio
async def test_inapplicable_strategy_is_skipped(query, make_strategy):
    """Test strategies returning None are skipped."""
    async def not_applicable(q):
        return None

    failing = make_strategy("exact", LookupTimeoutError())

    outcome = await run_strategies(query, [FunctionStrategy("tokens", not_applicable), failing])

    assert [a.strategy for a in outcome.attempts] == ["exact"]
    assert not outcome.completed
