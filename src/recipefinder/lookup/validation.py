"""Turning raw provider labels into clean candidate names.

Extraction cleans a label (disambiguation suffixes, capitalization);
validation rejects labels that are not plausible instances of the target
entity kind. Both are plain functions so each entity kind composes its
own pair.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Pattern, Sequence, Tuple

Extractor = Callable[[str], str]
Validator = Callable[[str], bool]

_TRAILING_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)$")
_ANY_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)")

CHEF_DISAMBIGUATION_KEYWORDS: Tuple[str, ...] = (
    "chef",
    "cook",
    "restaurateur",
    "born",
    "died",
)

# Titles of non-article or aggregate pages
GENERIC_EXCLUDE_TERMS: Tuple[str, ...] = (
    "disambiguation",
    "category:",
    "list of",
    "template:",
    "user:",
    "file:",
    "talk:",
    "wikipedia:",
    "help:",
    "portal:",
    "project:",
)

NON_PERSON_WORDS: Tuple[str, ...] = (
    "show",
    "series",
    "program",
    "channel",
    "network",
    "tv",
    "television",
    "movie",
    "film",
    "book",
    "magazine",
    "restaurant",
    "kitchen",
    "company",
    "inc",
    "ltd",
    "corp",
    "group",
    "brand",
    "empire",
    "kingdom",
    "nation",
)

NON_FOOD_WORDS: Tuple[str, ...] = (
    "television",
    "tv series",
    "film",
    "album",
    "song",
    "company",
    "restaurant chain",
    "inc.",
    "ltd",
    "corporation",
    "brand",
)

# Letters (accented included), spaces, hyphens, apostrophes and dots
PERSON_NAME_RE = re.compile(r"^(?:[^\W\d_]|[\s\-'.])+$")

# Honorific followed by a name, or "First M. Last"
PERSON_LIKE_RE = re.compile(
    r"^(?:(?:Chef|Sir|Dame|Dr|Mr|Mrs|Ms|Lady|Lord)\.?\s+[A-Z][a-z]+"
    r"|[A-Z][a-z]+\s+[A-Z]\.\s+[A-Z][a-z]+)"
)


def strip_disambiguation(
    label: str,
    keywords: Sequence[str] = CHEF_DISAMBIGUATION_KEYWORDS,
) -> str:
    """Drop a trailing ``(...)`` suffix when it mentions one of ``keywords``.

    ``"Jamie Oliver (chef)"`` becomes ``"Jamie Oliver"`` while
    ``"Chicken (Tikka)"`` is left untouched.
    """
    cleaned = label.strip()
    match = _TRAILING_PARENTHETICAL_RE.search(cleaned)
    if not match:
        return cleaned
    suffix = match.group(0).lower()
    if any(keyword in suffix for keyword in keywords):
        return cleaned[: match.start()].strip()
    return cleaned


def strip_parentheticals(label: str) -> str:
    """Remove every parenthetical, whatever it contains."""
    return _ANY_PARENTHETICAL_RE.sub("", label).strip()


def capitalize_words(text: str) -> str:
    """``"crème BRÛLÉE"`` -> ``"Crème Brûlée"``."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


def dedupe(items: Iterable[str]) -> List[str]:
    """Case-sensitive de-duplication keeping first-seen order."""
    return list(dict.fromkeys(item for item in items if item))


def looks_like_person(text: str) -> bool:
    return bool(PERSON_LIKE_RE.match(text.strip()))


@dataclass(frozen=True)
class EntityValidator:
    """Plausibility rules for one entity kind.

    Attributes:
        kind: Entity kind name used in logs
        exclude_terms: Case-insensitive substrings that reject a candidate
        min_length: Shortest acceptable candidate
        max_length: Longest acceptable candidate
        required_pattern: Candidate must match this pattern when set
        reject_person_like: Reject strings that look like person names
        reject_all_caps: Reject acronyms longer than three characters
    """

    kind: str
    exclude_terms: Tuple[str, ...] = GENERIC_EXCLUDE_TERMS
    min_length: int = 2
    max_length: int = 100
    required_pattern: Optional[Pattern[str]] = None
    reject_person_like: bool = False
    reject_all_caps: bool = False
    extra_checks: Tuple[Validator, ...] = field(default=())

    def __call__(self, candidate: str) -> bool:
        return self.is_valid(candidate)

    def is_valid(self, candidate: str) -> bool:
        if not candidate:
            return False
        text = candidate.strip()
        if not self.min_length <= len(text) <= self.max_length:
            return False

        lowered = text.lower()
        if any(term in lowered for term in self.exclude_terms):
            return False
        if self.required_pattern is not None and not self.required_pattern.match(text):
            return False
        if self.reject_all_caps and len(text) > 3 and text == text.upper():
            return False
        if self.reject_person_like and looks_like_person(text):
            return False
        return all(check(text) for check in self.extra_checks)


def _starts_upper(text: str) -> bool:
    return text[:1].isupper()


def _no_non_person_words(text: str) -> bool:
    words = re.findall(r"[a-z]+", text.lower())
    return not any(word in NON_PERSON_WORDS for word in words)


PERSON_VALIDATOR = EntityValidator(
    kind="person",
    required_pattern=PERSON_NAME_RE,
    reject_all_caps=True,
    extra_checks=(_starts_upper, _no_non_person_words),
)

DISH_VALIDATOR = EntityValidator(
    kind="dish",
    exclude_terms=GENERIC_EXCLUDE_TERMS + NON_FOOD_WORDS,
    max_length=80,
    reject_person_like=True,
)

INGREDIENT_VALIDATOR = EntityValidator(
    kind="ingredient",
    exclude_terms=GENERIC_EXCLUDE_TERMS + NON_FOOD_WORDS,
    max_length=60,
    reject_person_like=True,
)

CUISINE_VALIDATOR = EntityValidator(
    kind="cuisine",
    exclude_terms=GENERIC_EXCLUDE_TERMS + NON_FOOD_WORDS,
    max_length=60,
    reject_person_like=True,
)

RESTAURANT_VALIDATOR = EntityValidator(
    kind="restaurant",
    exclude_terms=GENERIC_EXCLUDE_TERMS,
    max_length=80,
)


def extract_chef_name(label: str) -> str:
    """Clean a knowledge-graph chef label; empty string if not a name."""
    name = strip_disambiguation(label)
    return name if PERSON_VALIDATOR(name) else ""


def clean_candidates(
    labels: Iterable[str],
    extract: Extractor,
    validate: Validator,
) -> List[str]:
    """Extract, validate and de-duplicate provider labels."""
    cleaned = (extract(label) for label in labels)
    return dedupe(name for name in cleaned if name and validate(name))
