"""Relevance ordering of suggestion candidates."""

from __future__ import annotations

import sys
from typing import Iterable, List, Tuple

from .normalizer import normalize


def relevance_key(candidate: str, query: str) -> Tuple[int, int, int, int, str, str]:
    """Sort key ranking ``candidate`` by closeness to ``query``.

    Priority: exact match, prefix match, earliest substring position,
    shorter candidate, then lexicographic order. Matching is
    case-insensitive and accent-insensitive; candidates that do not
    contain the query at all sort after every candidate that does.
    """
    folded = normalize(candidate)
    needle = normalize(query)
    index = folded.find(needle) if needle else 0
    return (
        0 if folded == needle else 1,
        0 if folded.startswith(needle) else 1,
        index if index >= 0 else sys.maxsize,
        len(candidate),
        candidate.lower(),
        candidate,
    )


def sort_by_relevance(candidates: Iterable[str], query: str) -> List[str]:
    """Return a new list ordered by :func:`relevance_key`.

    An empty query leaves the order untouched.
    """
    items = list(candidates)
    if not query or not query.strip():
        return items
    return sorted(items, key=lambda candidate: relevance_key(candidate, query))
