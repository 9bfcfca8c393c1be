"""AI text-completion provider as a lookup strategy.

The provider is an opaque collaborator: anything with an async
``complete(prompt) -> str`` method. Its answer is expected to be a plain
list, one name per line.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

from recipefinder.configuration.settings import LookupSettings
from recipefinder.errors import LookupFailure, LookupTransportError

from .client import ResilientLookupClient
from .normalizer import NormalizedQuery
from .validation import PERSON_VALIDATOR, RESTAURANT_VALIDATOR, strip_disambiguation

logger = logging.getLogger(__name__)

PromptBuilder = Callable[[NormalizedQuery], str]

# "1. ", "2) ", "- ", "* ", "• "
_LIST_MARKER_RE = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")


@runtime_checkable
class TextCompletionProvider(Protocol):
    async def complete(self, prompt: str) -> str:
        ...


def _with_context(prompt: str, context: Optional[Dict[str, Any]]) -> str:
    if not context:
        return prompt
    return f"{prompt}\n\nContext: {json.dumps(context, sort_keys=True)}"


def chef_prompt(context: Optional[Dict[str, Any]] = None, count: int = 5) -> PromptBuilder:
    def build(query: NormalizedQuery) -> str:
        text = query.raw.strip()
        return _with_context(
            f'Suggest {count} famous chefs whose names contain "{text}" or who are known for '
            f"{text} cuisine.\nReturn only their names, one per line, no descriptions or extra text.",
            context,
        )

    return build


def restaurant_prompt(context: Optional[Dict[str, Any]] = None, count: int = 5) -> PromptBuilder:
    def build(query: NormalizedQuery) -> str:
        text = query.raw.strip()
        return _with_context(
            f'Suggest {count} famous restaurants whose names contain "{text}" or are known for '
            f"{text} cuisine/style.\nReturn only restaurant names, one per line, no descriptions "
            "or extra text.",
            context,
        )

    return build


def parse_completion_list(text: str, max_items: int = 5) -> List[str]:
    """Split a completion into list items, dropping markers and blank lines."""
    items = []
    for line in text.splitlines():
        item = _LIST_MARKER_RE.sub("", line).strip().strip('"').strip()
        if item:
            items.append(item)
    return items[:max_items]


class CompletionStrategy:
    """Lookup strategy asking a text-completion provider for names.

    Provider errors of any kind are reported as
    :class:`~recipefinder.errors.LookupTransportError` so the orchestrator
    treats them like any other upstream failure.
    """

    def __init__(
        self,
        provider: TextCompletionProvider,
        prompt_builder: PromptBuilder,
        name: str = "ai_completion",
        max_items: int = 5,
    ):
        self.provider = provider
        self.prompt_builder = prompt_builder
        self.name = name
        self.max_items = max_items

    async def execute(self, query: NormalizedQuery) -> List[str]:
        prompt = self.prompt_builder(query)
        try:
            text = await self.provider.complete(prompt)
        except LookupFailure:
            raise
        except Exception as e:
            raise LookupTransportError(
                f"Completion provider failed: {e.__class__.__name__}: {e}",
                details={"strategy": self.name},
            ) from e
        if not isinstance(text, str):
            raise LookupTransportError(
                f"Completion provider returned {type(text).__name__}, expected text",
                details={"strategy": self.name},
            )
        return parse_completion_list(text, self.max_items)


def build_restaurant_client(
    provider: TextCompletionProvider,
    settings: Optional[LookupSettings] = None,
    context: Optional[Dict[str, Any]] = None,
    **client_kwargs,
) -> ResilientLookupClient:
    return ResilientLookupClient(
        namespace="restaurant",
        strategies=[CompletionStrategy(provider, restaurant_prompt(context), name="ai_restaurants")],
        validate=RESTAURANT_VALIDATOR,
        settings=settings,
        **client_kwargs,
    )


def build_ai_chef_client(
    provider: TextCompletionProvider,
    settings: Optional[LookupSettings] = None,
    context: Optional[Dict[str, Any]] = None,
    **client_kwargs,
) -> ResilientLookupClient:
    return ResilientLookupClient(
        namespace="ai_chef",
        strategies=[CompletionStrategy(provider, chef_prompt(context), name="ai_chefs")],
        extract=strip_disambiguation,
        validate=PERSON_VALIDATOR,
        settings=settings,
        **client_kwargs,
    )
