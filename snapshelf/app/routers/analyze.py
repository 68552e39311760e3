from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from snapshelf.app.config import settings
from snapshelf.app.deps import get_language_model
from snapshelf.app.routers.common import MISSING_FIELDS
from snapshelf.app.schemas.analyze import AnalyzeRequest, AnalyzeResponse, TextBlock
from snapshelf.services.errors import ModelServiceError
from snapshelf.services.gemini_client import GeminiClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["analyze"])


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    payload: AnalyzeRequest,
    model: GeminiClient = Depends(get_language_model),
) -> AnalyzeResponse:
    """
    Forward extraction content blocks to the model as one user turn.
    The caller pulls the JSON object out of the returned text.
    """
    if not payload.content:
        raise HTTPException(status_code=400, detail=MISSING_FIELDS)

    blocks = [block.model_dump() for block in payload.content]
    max_tokens = payload.max_tokens or settings.ANALYZE_MAX_TOKENS
    try:
        reply = await model.complete([{"role": "user", "content": blocks}], max_tokens=max_tokens)
    except ModelServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception as exc:
        logger.exception("Unexpected error while analyzing content")
        raise HTTPException(status_code=500, detail=str(exc))

    return AnalyzeResponse(
        content=[TextBlock(text=reply.text)],
        model=reply.model,
        stop_reason=reply.stop_reason,
    )
