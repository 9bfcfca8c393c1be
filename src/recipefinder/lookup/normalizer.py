"""Query normalization and query-variant generation.

Knowledge-graph labels are stored with their diacritics ("café",
"crème brûlée") while users usually type without them. Every lookup
therefore works from a canonical, accent-folded key and a set of
accented variants that can be matched against the stored labels.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

# Base Latin letter -> its common accented forms
ACCENT_MAP: Dict[str, Tuple[str, ...]] = {
    "a": ("à", "á", "â", "ã", "ä", "å"),
    "e": ("è", "é", "ê", "ë"),
    "i": ("ì", "í", "î", "ï"),
    "o": ("ò", "ó", "ô", "õ", "ö"),
    "u": ("ù", "ú", "û", "ü"),
    "n": ("ñ",),
    "c": ("ç",),
}

# Characters with special meaning in XPath/SPARQL regular expressions
_REGEX_SPECIALS = set(".*+?^${}()|[]\\")

_WHITESPACE_RE = re.compile(r"\s+")


def fold_accents(text: str) -> str:
    """Strip combining diacritical marks after Unicode decomposition."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(text: str) -> str:
    """Canonical matching key: trimmed, lower-cased, accent-folded."""
    return fold_accents(text.strip().lower())


def accent_variants(query: str) -> List[str]:
    """Lower-cased query plus one copy per accented form of each base letter.

    Every occurrence of the base letter is substituted in a copy, so
    ``"cafe"`` yields ``"café"``, ``"cafè"``, ``"càfe"`` and so on.
    Order is stable and duplicates are removed.
    """
    lowered = query.strip().lower()
    variants = [lowered]
    for base, accents in ACCENT_MAP.items():
        if base not in lowered:
            continue
        for accent in accents:
            variants.append(lowered.replace(base, accent))
    return list(dict.fromkeys(variants))


def accent_pattern(query: str) -> str:
    """Regular expression matching ``query`` with or without accents.

    Each foldable letter becomes an alternation group such as
    ``(e|è|é|ê|ë)``; other regex metacharacters are escaped.
    """
    parts: List[str] = []
    for ch in query.strip().lower():
        base = fold_accents(ch)
        if base in ACCENT_MAP:
            parts.append("(" + "|".join((base,) + ACCENT_MAP[base]) + ")")
        elif ch in _REGEX_SPECIALS:
            parts.append("\\" + ch)
        else:
            parts.append(ch)
    return "".join(parts)


def shortened_variants(query: str, min_length: int = 2) -> List[str]:
    """First and last token of a multi-word query.

    Single-word queries have no shortened form.
    """
    tokens = query.strip().lower().split()
    if len(tokens) < 2:
        return []
    candidates = [tokens[0], tokens[-1]]
    return [t for t in dict.fromkeys(candidates) if len(t) >= min_length]


def off_id(query: str) -> str:
    """Open Food Facts identifier form of an ingredient name."""
    return _WHITESPACE_RE.sub("-", query.strip().lower())


@dataclass(frozen=True)
class NormalizedQuery:
    """A user query prepared for lookup strategies.

    Attributes:
        raw: The query exactly as received
        text: Trimmed, lower-cased query (accents kept)
        normalized: Accent-folded canonical key
    """

    raw: str
    text: str
    normalized: str
    variants: Tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def from_raw(cls, raw: str) -> "NormalizedQuery":
        text = raw.strip().lower()
        normalized = fold_accents(text)
        variants = accent_variants(normalized)
        if text not in variants:
            variants.append(text)
        return cls(raw=raw, text=text, normalized=normalized, variants=tuple(variants))

    @property
    def pattern(self) -> str:
        return accent_pattern(self.normalized)

    @property
    def shortened(self) -> List[str]:
        return shortened_variants(self.normalized)

    def __len__(self) -> int:
        return len(self.normalized)


def is_too_short(raw: str, min_length: int = 2) -> bool:
    """True when a query should be skipped without any lookup."""
    return raw is None or len(raw.strip()) < min_length
