# snapshelf/app/routers/wines.py
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from snapshelf.app.deps import get_wine_repository
from snapshelf.app.infra.db.base import ItemRepository
from snapshelf.app.routers.common import MISSING_FIELDS, NOT_AUTHENTICATED, call_store
from snapshelf.app.schemas.wines import DeleteResponse, DeleteWineRequest, SaveWineRequest

log = logging.getLogger("wines")
router = APIRouter(prefix="/api", tags=["wines"])


@router.get("/getwines")
async def get_wines(
    user_name: Optional[str] = Query(default=None),
    repo: ItemRepository = Depends(get_wine_repository),
) -> list[dict[str, Any]]:
    if not user_name:
        raise HTTPException(status_code=401, detail=NOT_AUTHENTICATED)
    return await call_store("list wines", repo.list_for_user, user_name)


@router.post("/savewine")
async def save_wine(
    payload: SaveWineRequest,
    repo: ItemRepository = Depends(get_wine_repository),
) -> dict[str, Any]:
    if not payload.user_name:
        raise HTTPException(status_code=400, detail="User name is required")
    return await call_store("save wine", repo.insert, payload.to_row())


@router.delete("/deletewine", response_model=DeleteResponse)
async def delete_wine(
    payload: DeleteWineRequest,
    repo: ItemRepository = Depends(get_wine_repository),
) -> DeleteResponse:
    if payload.wine_id in (None, "") or not payload.user_name:
        raise HTTPException(status_code=400, detail=MISSING_FIELDS)
    await call_store(
        "delete wine",
        repo.delete_for_user,
        str(payload.wine_id),
        payload.user_name,
        not_found="Wine not found",
    )
    log.info("Wine %s deleted for %s", payload.wine_id, payload.user_name)
    return DeleteResponse(success=True)
