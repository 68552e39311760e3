from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from snapshelf.app.config import settings
from snapshelf.app.deps import get_language_model, get_wine_repository
from snapshelf.app.domain.models import ChatTurn
from snapshelf.app.infra.db.base import ItemRepository
from snapshelf.app.routers.common import MISSING_FIELDS, NOT_AUTHENTICATED
from snapshelf.app.schemas.suggestions import (
    ChatSuggestionsRequest,
    ChatSuggestionsResponse,
    SuggestionBundleResponse,
)
from snapshelf.services import suggestions as suggestion_service
from snapshelf.services.gemini_client import GeminiClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["suggestions"])


@router.get("/getsuggestions", response_model=SuggestionBundleResponse)
async def get_suggestions(
    user_name: Optional[str] = Query(default=None),
    wine_type: Optional[str] = Query(default=None),
    repo: ItemRepository = Depends(get_wine_repository),
    model: GeminiClient = Depends(get_language_model),
) -> SuggestionBundleResponse:
    if not user_name:
        raise HTTPException(status_code=401, detail=NOT_AUTHENTICATED)
    try:
        bundle = await suggestion_service.get_bulk_suggestions(
            repo,
            model,
            user_name,
            wine_type,
            price_ceiling=settings.SUGGESTION_PRICE_CEILING,
            min_items=settings.SUGGESTION_MIN_ITEMS,
            max_tokens=settings.SUGGESTIONS_MAX_TOKENS,
        )
    except Exception as exc:
        logger.exception("Failed to generate suggestions for user=%s", user_name)
        raise HTTPException(status_code=500, detail=str(exc) or "Failed to generate suggestions")
    return SuggestionBundleResponse(**bundle.to_dict())


@router.post("/chatsuggestions", response_model=ChatSuggestionsResponse)
async def chat_suggestions(
    payload: ChatSuggestionsRequest,
    repo: ItemRepository = Depends(get_wine_repository),
    model: GeminiClient = Depends(get_language_model),
) -> ChatSuggestionsResponse:
    if not payload.user_name or not payload.message:
        raise HTTPException(status_code=400, detail=MISSING_FIELDS)

    history = [ChatTurn(turn.role, turn.content) for turn in payload.chat_history or []]
    try:
        text = await suggestion_service.run_chat(
            repo,
            model,
            payload.user_name,
            payload.message,
            history,
            price_ceiling=settings.SUGGESTION_PRICE_CEILING,
            max_tokens=settings.CHAT_MAX_TOKENS,
        )
    except Exception as exc:
        logger.exception("Failed to process chat message for user=%s", payload.user_name)
        raise HTTPException(status_code=500, detail=str(exc) or "Failed to process chat message")
    return ChatSuggestionsResponse(response=text)
