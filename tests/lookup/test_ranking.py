"""Tests for relevance ordering."""

from recipefinder.lookup.ranking import relevance_key, sort_by_relevance


def test_exact_then_prefix_then_position():
    """Test exact matches rank before prefix and position matches."""
    result = sort_by_relevance(["Chef Ramsay", "chef", "Master Chef"], "chef")

    assert result == ["chef", "Chef Ramsay", "Master Chef"]


def test_shorter_candidate_wins_ties():
    """Test shorter candidates win ties."""
    result = sort_by_relevance(["Pasta Primavera", "Pasta"], "pas")

    assert result == ["Pasta", "Pasta Primavera"]


def test_lexicographic_tiebreak():
    """Test lexicographic tie-break."""
    assert sort_by_relevance(["Pho Ga", "Pho Bo"], "pho") == ["Pho Bo", "Pho Ga"]


def test_non_matching_candidates_sort_last():
    """Test non-matching candidates sort last."""
    result = sort_by_relevance(["Zucchini", "Pineapple", "Apple"], "app")

    assert result == ["Apple", "Pineapple", "Zucchini"]


def test_matching_ignores_accents():
    """Test relevance matching ignores accents."""
    result = sort_by_relevance(["Sour Cream", "Crème Brûlée"], "creme")

    assert result == ["Crème Brûlée", "Sour Cream"]


def test_empty_query_keeps_order():
    """Test an empty query keeps input order."""
    items = ["b", "a", "c"]

    assert sort_by_relevance(items, "  ") == ["b", "a", "c"]


def test_sort_is_pure():
    """Test sorting does not mutate its input."""
    items = ["Master Chef", "chef"]

    sort_by_relevance(items, "chef")

    assert items == ["Master Chef", "chef"]


def test_relevance_key_is_deterministic():
    """Test relevance keys are deterministic."""
    assert relevance_key("Chef Ramsay", "chef") == relevance_key("Chef Ramsay", "chef")
    assert relevance_key("chef", "CHEF")[0] == 0
