"""Tests for catalog suggestions and enhanced search."""

import pytest

from recipefinder.lookup.catalog import COMMON_CUISINES, COMMON_DISHES
from recipefinder.lookup.client import ResilientLookupClient
from recipefinder.lookup.suggestions import (
    MAX_SUGGESTIONS,
    SuggestionService,
    build_default_service,
    partial_matches,
    word_matches,
)
from recipefinder.lookup.validation import DISH_VALIDATOR, capitalize_words


def remote_client(clock, strategy, namespace="dish"):
    return ResilientLookupClient(
        namespace=namespace,
        strategies=[strategy],
        extract=capitalize_words,
        validate=DISH_VALIDATOR,
        clock=clock,
    )


# ---------------------------------------------------------------------------
# Matching helpers
# ---------------------------------------------------------------------------


def test_partial_matches_ignore_case_and_accents():
    """Test partial catalog matches ignore case and accents."""
    assert partial_matches(["Crème Brûlée", "Cream Tea"], "CREME") == ["Crème Brûlée"]


def test_word_matches_either_direction():
    """Test word matches in either direction."""
    items = ["Gordon Ramsay", "Julia Child", "Ina Garten"]

    assert word_matches(items, "gordon smith") == ["Gordon Ramsay"]
    assert word_matches(items, "garte") == ["Ina Garten"]


# ---------------------------------------------------------------------------
# Static suggestions
# ---------------------------------------------------------------------------


def test_empty_query_returns_popular_items():
    """Test an empty query returns popular items."""
    result = SuggestionService().suggest("dish")

    assert result.suggestions == list(COMMON_DISHES[:MAX_SUGGESTIONS])
    assert result.query == "popular"
    assert result.source == "static_popular"
    assert result.has_more_results is False


def test_matches_are_ranked_exact_prefix_then_substring():
    """Test catalog match ranking."""
    service = SuggestionService(catalogs={"dish": ["Pad Thai", "Thai Green Curry", "Tom Yum", "thai"]})

    result = service.suggest("dish", " Thai ")

    assert result.suggestions == ["thai", "Thai Green Curry", "Pad Thai"]
    assert result.query == "Thai"
    assert result.source == "static_match"
    assert result.has_more_results is True


def test_accented_catalog_entries_match_plain_query():
    """Test accented catalog entries match plain queries."""
    result = SuggestionService().suggest("dish", "creme")

    assert result.suggestions == ["Crème Brûlée"]


def test_many_matches_are_truncated():
    """Test many matches are truncated."""
    catalog = [f"Pasta {n}" for n in range(12)]

    result = SuggestionService(catalogs={"dish": catalog}).suggest("dish", "pasta")

    assert len(result.suggestions) == MAX_SUGGESTIONS
    assert result.has_more_results is False


def test_no_match_hints_at_enhanced_search():
    """Test no match suggests enhanced search."""
    result = SuggestionService().suggest("dish", "chicken soup")

    assert result.suggestions == []
    assert result.source == "no_match"
    assert result.has_more_results is True


def test_chef_suggestions_fall_back_to_word_matches():
    """Test chef suggestions fall back to word matches."""
    result = SuggestionService().suggest("chef", "gordon smith")

    assert result.suggestions == ["Gordon Ramsay"]
    assert result.source == "static_match"


def test_unknown_kind_is_rejected():
    """Test unknown suggestion kinds are rejected."""
    with pytest.raises(ValueError):
        SuggestionService().suggest("planet", "mars")


# ---------------------------------------------------------------------------
# Cuisines
# ---------------------------------------------------------------------------


def test_cuisine_popular():
    """Test popular cuisines for an empty query."""
    result = SuggestionService().suggest("cuisine", "")

    assert result.suggestions == list(COMMON_CUISINES[:10])
    assert result.source == "static_popular"


def test_cuisine_match():
    """Test cuisine matching."""
    result = SuggestionService().suggest("cuisine", "ital")

    assert result.suggestions == ["Italian"]
    assert result.source == "static_match"
    assert result.has_more_results is False


def test_cuisine_without_match_shows_popular():
    """Test cuisine fallback to popular entries."""
    result = SuggestionService().suggest("cuisine", "martian")

    assert result.suggestions == list(COMMON_CUISINES[:10])
    assert result.query == "martian"
    assert result.source == "static_popular"


# ---------------------------------------------------------------------------
# Enhanced search
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_enhanced_requires_query():
    """Test enhanced suggestions require a query."""
    with pytest.raises(ValueError):
        await SuggestionService().enhanced("dish", "  ")


@pytest.mark.asyncio
async def test_enhanced_merges_remote_and_catalog(clock, make_strategy):
    """Test enhanced results merge remote and catalog entries."""
    client = remote_client(clock, make_strategy("exact", ["pad see ew", "Pad Thai"]))
    service = SuggestionService(
        remote={"dish": [("wikidata", client)]},
        catalogs={"dish": ["Pad Thai", "Pad Kra Pao"]},
    )

    result = await service.enhanced("dish", "pad")

    assert result.suggestions == ["Pad Thai", "Pad See Ew", "Pad Kra Pao"]
    assert result.source == "wikidata_enhanced"
    assert result.query == "pad"


@pytest.mark.asyncio
async def test_enhanced_tries_providers_in_order(clock, make_strategy):
    """Test enhanced search tries providers in order."""
    empty = remote_client(clock, make_strategy("exact", []))
    backup = remote_client(clock, make_strategy("exact", ["Pho Bo"]), namespace="dish_backup")
    never = make_strategy("exact", ["Never"])
    service = SuggestionService(
        remote={"dish": [("wikidata", empty), ("backup", backup), ("late", remote_client(clock, never))]},
        catalogs={"dish": []},
    )

    result = await service.enhanced("dish", "pho")

    assert result.suggestions == ["Pho Bo"]
    assert result.source == "backup_enhanced"
    assert never.calls == 0


@pytest.mark.asyncio
async def test_enhanced_falls_back_to_catalog(clock, make_strategy):
    """Test enhanced search falls back to the catalog."""
    client = remote_client(clock, make_strategy("exact", []))
    service = SuggestionService(remote={"dish": [("wikidata", client)]})

    result = await service.enhanced("dish", "pizza")

    assert result.suggestions == ["Margherita Pizza"]
    assert result.source == "static_comprehensive"


@pytest.mark.asyncio
async def test_enhanced_without_remote_clients():
    """Test enhanced search without remote clients."""
    result = await SuggestionService().enhanced("restaurant", "noma")

    assert result.suggestions == ["Noma"]
    assert result.source == "static_comprehensive"


# ---------------------------------------------------------------------------
# Default wiring
# ---------------------------------------------------------------------------


class NullProvider:
    async def complete(self, prompt):
        return ""


def test_default_service_wiring():
    """Test default service wiring."""
    service = build_default_service()

    assert [name for name, _ in service.remote["chef"]] == ["wikidata", "wikipedia"]
    assert set(service.remote) == {"chef", "dish", "ingredient", "cuisine"}


def test_default_service_with_completion_provider():
    """Test default service with a completion provider."""
    service = build_default_service(completion_provider=NullProvider())

    assert [name for name, _ in service.remote["chef"]] == ["wikidata", "wikipedia", "ai"]
    assert [client.namespace for _, client in service.remote["restaurant"]] == ["restaurant"]
