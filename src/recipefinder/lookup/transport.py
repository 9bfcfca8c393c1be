"""HTTP access to lookup providers.

Every upstream call is bounded by a timeout and every failure is
classified as one of three kinds so logs can tell them apart:

- ``LookupTimeoutError``: no answer within the timeout
- ``LookupTransportError``: unreachable host or non-2xx status
- ``LookupParseError``: body is not JSON or lacks the expected shape
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List, Mapping, Optional

import httpx

from recipefinder.configuration.settings import DEFAULT_USER_AGENT
from recipefinder.errors import LookupParseError, LookupTimeoutError, LookupTransportError

logger = logging.getLogger(__name__)


class HttpTransport:
    """JSON-over-HTTP caller shared by the lookup strategies.

    Example:
        transport = HttpTransport(timeout=5.0)
        data = await transport.get_json("https://example.org/search", {"q": "tofu"})
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the transport.

        Args:
            user_agent: Descriptive client identifier sent with every call
            timeout: Per-call timeout in seconds
            transport: Optional httpx transport (mock transports in tests)
        """
        self.timeout = timeout
        self.headers = {
            "Accept": "application/json",
            "User-Agent": user_agent,
        }
        self._transport = transport

    async def get_json(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._request("GET", url, params=params)

    async def post_form_json(self, url: str, data: Mapping[str, Any]) -> Any:
        return await self._request("POST", url, data=data)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        start_time = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._send(method, url, **kwargs), timeout=self.timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise LookupTimeoutError(
                f"{method} {url} timed out after {self.timeout:.1f}s",
                details={"url": url},
            ) from e
        except httpx.RequestError as e:
            raise LookupTransportError(
                f"{method} {url} failed: {e.__class__.__name__}",
                details={"url": url},
            ) from e

        elapsed = int((time.monotonic() - start_time) * 1000)
        logger.debug(f"{method} {url} -> {response.status_code} ({elapsed}ms)")

        if not response.is_success:
            raise LookupTransportError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
                details={"url": url},
            )

        try:
            return response.json()
        except ValueError as e:
            raise LookupParseError(
                f"Response from {url} is not valid JSON", details={"url": url}
            ) from e

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers=self.headers,
            transport=self._transport,
        ) as client:
            return await client.request(method, url, **kwargs)


def sparql_literal(text: str) -> str:
    """Quote ``text`` as a SPARQL string literal."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'


class SparqlEndpoint:
    """Knowledge-graph query engine speaking the SPARQL JSON results format."""

    def __init__(self, url: str, transport: HttpTransport, use_post: bool = True):
        self.url = url
        self.transport = transport
        self.use_post = use_post

    async def select(self, query: str) -> List[Dict[str, str]]:
        """Run a SELECT query and flatten each binding to ``{var: value}``."""
        if self.use_post:
            data = await self.transport.post_form_json(self.url, {"query": query, "format": "json"})
        else:
            data = await self.transport.get_json(self.url, {"query": query, "format": "json"})
        return parse_bindings(data)


def parse_bindings(data: Any) -> List[Dict[str, str]]:
    """Extract ``results.bindings`` from a SPARQL JSON document."""
    try:
        bindings = data["results"]["bindings"]
    except (KeyError, TypeError) as e:
        raise LookupParseError("SPARQL response has no results.bindings") from e
    if not isinstance(bindings, list):
        raise LookupParseError("SPARQL results.bindings is not a list")

    rows: List[Dict[str, str]] = []
    for binding in bindings:
        if not isinstance(binding, dict):
            raise LookupParseError("SPARQL binding is not an object")
        row = {}
        for var, cell in binding.items():
            if isinstance(cell, dict) and "value" in cell:
                row[var] = str(cell["value"])
        rows.append(row)
    return rows
