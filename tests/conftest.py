"""Shared test fixtures."""

from __future__ import annotations

import json
from typing import Callable, List, Sequence, Union

import httpx
import pytest

from recipefinder.configuration.settings import LookupSettings


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubStrategy:
    """Strategy returning canned answers in sequence and counting calls.

    Each answer is either a list of labels or an exception to raise. The
    last answer repeats once the sequence is exhausted.
    """

    def __init__(self, name: str, *answers: Union[List[str], Exception]):
        self.name = name
        self.answers = list(answers) or [[]]
        self.calls = 0
        self.queries = []

    async def execute(self, query):
        self.queries.append(query)
        answer = self.answers[min(self.calls, len(self.answers) - 1)]
        self.calls += 1
        if isinstance(answer, Exception):
            raise answer
        return list(answer)


def sparql_payload(var: str, labels: Sequence[str]) -> dict:
    return {
        "head": {"vars": [var]},
        "results": {
            "bindings": [{var: {"type": "literal", "value": label}} for label in labels]
        },
    }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_strategy() -> Callable[..., StubStrategy]:
    return StubStrategy


@pytest.fixture
def lookup_settings() -> LookupSettings:
    return LookupSettings()


@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def mock_transport_factory(recorded_requests):
    """Build an ``httpx.MockTransport`` from a request -> response function."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return httpx.MockTransport(recording_handler)

    return factory


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode(), headers={"Content-Type": "application/json"})


@pytest.fixture
def sparql_response() -> Callable[[str, Sequence[str]], httpx.Response]:
    def build(var: str, labels: Sequence[str], status_code: int = 200) -> httpx.Response:
        return json_response(sparql_payload(var, labels), status_code)

    return build


@pytest.fixture
def json_response_factory():
    return json_response
