from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping, Sequence

from starlette.concurrency import run_in_threadpool

from snapshelf.app.domain.models import (
    SUGGESTION_TIERS,
    ChatRole,
    ChatTurn,
    Suggestion,
    SuggestionBundle,
)
from snapshelf.app.infra.db.base import ItemRepository, Row
from snapshelf.services.errors import ExtractionShapeError
from snapshelf.services.gemini_client import GeminiClient, load_prompt
from snapshelf.services.json_extract import extract_first_json_object

logger = logging.getLogger(__name__)

SUGGESTIONS_PROMPT = "SUGGESTIONS_PROMPT.txt"
CHAT_PROMPT = "CHAT_PROMPT.txt"

SUMMARY_FIELDS = ("name", "grape", "region", "country", "style", "rating")
DEFAULT_PRICE_CEILING = "£20"
SUGGESTION_MIN_ITEMS = 3
SUGGESTIONS_MAX_TOKENS = 4000
CHAT_MAX_TOKENS = 2000

CHAT_ACKNOWLEDGEMENT = (
    "I understand. I will help you discover new wines based on your collection, "
    "focusing on your ratings and suggesting UK-available wines under {price_ceiling}."
)

def no_wines_bundle() -> SuggestionBundle:
    return SuggestionBundle.placeholder(
        name="No wines logged yet",
        reason="Start logging wines to get personalized suggestions!",
    )


def not_enough_bundle(wine_type: str, min_items: int = SUGGESTION_MIN_ITEMS) -> SuggestionBundle:
    label = wine_type.strip().lower()
    return SuggestionBundle.placeholder(
        name=f"Not enough {label} wines logged yet",
        reason=f"Log at least {min_items} {label} wines to get personalized {label} suggestions.",
    )


def summarize_collection(wines: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Compact view of the collection; purchase details stay out of the prompt."""
    return [{key: wine.get(key) for key in SUMMARY_FIELDS} for wine in wines]


def filter_by_type(wines: Iterable[Row], wine_type: str) -> list[Row]:
    needle = wine_type.strip().lower()
    return [wine for wine in wines if needle in str(wine.get("style") or "").lower()]


def _collection_json(wines: Iterable[Mapping[str, Any]]) -> str:
    return json.dumps(summarize_collection(wines), indent=2, ensure_ascii=False)


def build_suggestions_prompt(wines: Iterable[Mapping[str, Any]], price_ceiling: str = DEFAULT_PRICE_CEILING) -> str:
    return load_prompt(
        SUGGESTIONS_PROMPT,
        collection=_collection_json(wines),
        price_ceiling=price_ceiling,
    )


def build_chat_turns(
    wines: Iterable[Mapping[str, Any]],
    history: Sequence[ChatTurn],
    message: str,
    price_ceiling: str = DEFAULT_PRICE_CEILING,
) -> list[dict[str, str]]:
    """Preamble pair, then the prior conversation, then the new message."""
    preamble = load_prompt(CHAT_PROMPT, collection=_collection_json(wines), price_ceiling=price_ceiling)
    turns = [
        ChatTurn(ChatRole.USER, preamble),
        ChatTurn(ChatRole.ASSISTANT, CHAT_ACKNOWLEDGEMENT.format(price_ceiling=price_ceiling)),
        *history,
        ChatTurn(ChatRole.USER, message),
    ]
    return [turn.to_dict() for turn in turns]


def parse_suggestion_bundle(text: str) -> SuggestionBundle:
    data = extract_first_json_object(text).unwrap()

    tiers: dict[str, list[Suggestion]] = {}
    for tier in SUGGESTION_TIERS:
        entries = data.get(tier)
        if not isinstance(entries, list):
            raise ExtractionShapeError(f"Suggestion response is missing the '{tier}' list")
        tiers[tier] = [Suggestion.from_dict(entry) for entry in entries if isinstance(entry, dict)]
    return SuggestionBundle(**tiers)


async def get_bulk_suggestions(
    repo: ItemRepository,
    model: GeminiClient,
    user_name: str,
    wine_type: str | None = None,
    *,
    price_ceiling: str = DEFAULT_PRICE_CEILING,
    min_items: int = SUGGESTION_MIN_ITEMS,
    max_tokens: int = SUGGESTIONS_MAX_TOKENS,
) -> SuggestionBundle:
    wines = await run_in_threadpool(repo.list_for_user, user_name)
    if not wines:
        return no_wines_bundle()

    if wine_type and wine_type.strip():
        wines = filter_by_type(wines, wine_type)
        if len(wines) < min_items:
            logger.info(
                "Skipping suggestions: user=%s has %d %s wines (min %d)",
                user_name, len(wines), wine_type, min_items,
            )
            return not_enough_bundle(wine_type, min_items)

    prompt = build_suggestions_prompt(wines, price_ceiling)
    reply = await model.complete([{"role": "user", "content": prompt}], max_tokens=max_tokens)
    return parse_suggestion_bundle(reply.text)


async def run_chat(
    repo: ItemRepository,
    model: GeminiClient,
    user_name: str,
    message: str,
    history: Sequence[ChatTurn] = (),
    *,
    price_ceiling: str = DEFAULT_PRICE_CEILING,
    max_tokens: int = CHAT_MAX_TOKENS,
) -> str:
    wines = await run_in_threadpool(repo.list_for_user, user_name)
    turns = build_chat_turns(wines, history, message, price_ceiling)
    reply = await model.complete(turns, max_tokens=max_tokens)
    return reply.text
