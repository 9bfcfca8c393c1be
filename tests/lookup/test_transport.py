"""Tests for HTTP transport and SPARQL helpers."""

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from recipefinder.errors import LookupParseError, LookupTimeoutError, LookupTransportError
from recipefinder.lookup.transport import HttpTransport, SparqlEndpoint, parse_bindings, sparql_literal


@pytest.mark.asyncio
async def test_get_json_sends_identifying_headers(mock_transport_factory, recorded_requests, json_response_factory):
    """Test GET sends User-Agent and Accept headers."""
    transport = HttpTransport(
        user_agent="RecipeFinderTests/1.0",
        transport=mock_transport_factory(lambda request: json_response_factory({"ok": True})),
    )

    data = await transport.get_json("https://example.org/search", {"q": "tofu"})

    assert data == {"ok": True}
    request = recorded_requests[0]
    assert request.headers["User-Agent"] == "RecipeFinderTests/1.0"
    assert request.headers["Accept"] == "application/json"
    assert request.url.params["q"] == "tofu"


@pytest.mark.asyncio
async def test_post_form_json_encodes_body(mock_transport_factory, recorded_requests, json_response_factory):
    """Test POST form encoding."""
    transport = HttpTransport(
        transport=mock_transport_factory(lambda request: json_response_factory({"ok": True}))
    )

    await transport.post_form_json("https://example.org/sparql", {"query": "SELECT 1", "format": "json"})

    request = recorded_requests[0]
    assert request.method == "POST"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert parse_qs(request.content.decode()) == {"query": ["SELECT 1"], "format": ["json"]}


@pytest.mark.asyncio
async def test_non_success_status_is_transport_error(mock_transport_factory):
    """Test non-2xx status raises a transport error."""
    transport = HttpTransport(transport=mock_transport_factory(lambda request: httpx.Response(503)))

    with pytest.raises(LookupTransportError) as exc_info:
        await transport.get_json("https://example.org/search")

    assert exc_info.value.status_code == 503
    assert exc_info.value.details["status_code"] == 503


@pytest.mark.asyncio
async def test_connection_error_is_transport_error(mock_transport_factory):
    """Test connection errors raise a transport error."""
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    transport = HttpTransport(transport=mock_transport_factory(handler))

    with pytest.raises(LookupTransportError) as exc_info:
        await transport.get_json("https://example.org/search")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_httpx_timeout_is_timeout_error(mock_transport_factory):
    """Test httpx timeouts raise a timeout error."""
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    transport = HttpTransport(transport=mock_transport_factory(handler))

    with pytest.raises(LookupTimeoutError):
        await transport.get_json("https://example.org/search")


@pytest.mark.asyncio
async def test_slow_response_is_bounded_by_timeout(mock_transport_factory, json_response_factory):
    """Test slow responses are cut off by the timeout."""
    async def handler(request):
        await asyncio.sleep(1)
        return json_response_factory({})

    transport = HttpTransport(timeout=0.05, transport=mock_transport_factory(handler))

    with pytest.raises(LookupTimeoutError) as exc_info:
        await transport.get_json("https://example.org/search")

    assert exc_info.value.code == "LOOKUP_TIMEOUT"


@pytest.mark.asyncio
async def test_invalid_json_is_parse_error(mock_transport_factory):
    """Test invalid JSON raises a parse error."""
    transport = HttpTransport(
        transport=mock_transport_factory(lambda request: httpx.Response(200, content=b"<html>"))
    )

    with pytest.raises(LookupParseError):
        await transport.get_json("https://example.org/search")


def test_sparql_literal_escapes_quotes_and_backslashes():
    """Test SPARQL literal escaping."""
    assert sparql_literal('say "hi"') == '"say \\"hi\\""'
    assert sparql_literal("a\\b") == '"a\\\\b"'
    assert sparql_literal("line\nbreak") == '"line\\nbreak"'


def test_sparql_literal_neutralizes_injection():
    """Test SPARQL literal injection is neutralized."""
    literal = sparql_literal('x") } DROP ALL #')

    assert literal.startswith('"x\\")')
    assert literal.count('"') - literal.count('\\"') == 2


def test_parse_bindings_flattens_values():
    """Test binding values are flattened."""
    data = {
        "results": {
            "bindings": [
                {"chef": {"type": "uri", "value": "http://www.wikidata.org/entity/Q1"},
                 "chefLabel": {"type": "literal", "value": "Julia Child"}},
                {"chefLabel": {"type": "literal", "value": "Paul Bocuse"}},
            ]
        }
    }

    assert parse_bindings(data) == [
        {"chef": "http://www.wikidata.org/entity/Q1", "chefLabel": "Julia Child"},
        {"chefLabel": "Paul Bocuse"},
    ]


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"results": {}},
        {"results": {"bindings": "nope"}},
        {"results": {"bindings": ["nope"]}},
        ["not", "a", "dict"],
    ],
)
def test_parse_bindings_rejects_bad_shapes(data):
    """Test malformed bindings raise a parse error."""
    with pytest.raises(LookupParseError):
        parse_bindings(data)


@pytest.mark.asyncio
async def test_sparql_endpoint_get_mode(mock_transport_factory, recorded_requests, sparql_response):
    """Test SPARQL endpoint GET mode."""
    http = HttpTransport(transport=mock_transport_factory(lambda request: sparql_response("x", ["A"])))
    endpoint = SparqlEndpoint("https://query.example.org/sparql", http, use_post=False)

    rows = await endpoint.select("SELECT ?x WHERE {}")

    assert rows == [{"x": "A"}]
    request = recorded_requests[0]
    assert request.method == "GET"
    assert request.url.params["format"] == "json"
    assert request.url.params["query"] == "SELECT ?x WHERE {}"
