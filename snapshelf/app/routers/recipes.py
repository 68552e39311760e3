# snapshelf/app/routers/recipes.py
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from snapshelf.app.deps import get_recipe_repository
from snapshelf.app.infra.db.base import ItemRepository
from snapshelf.app.routers.common import MISSING_FIELDS, NOT_AUTHENTICATED, call_store
from snapshelf.app.schemas.recipes import DeleteRecipeRequest, SaveRecipeRequest
from snapshelf.app.schemas.wines import DeleteResponse

router = APIRouter(prefix="/api", tags=["recipes"])


@router.get("/getrecipes")
async def get_recipes(
    user_name: Optional[str] = Query(default=None),
    repo: ItemRepository = Depends(get_recipe_repository),
) -> list[dict[str, Any]]:
    if not user_name:
        raise HTTPException(status_code=401, detail=NOT_AUTHENTICATED)
    return await call_store("list recipes", repo.list_for_user, user_name)


@router.post("/saverecipe")
async def save_recipe(
    payload: SaveRecipeRequest,
    repo: ItemRepository = Depends(get_recipe_repository),
) -> dict[str, Any]:
    if (
        not payload.title
        or payload.ingredients is None
        or payload.instructions is None
        or not payload.user_name
    ):
        raise HTTPException(status_code=400, detail=MISSING_FIELDS)
    return await call_store("save recipe", repo.insert, payload.to_row())


@router.delete("/deleterecipe", response_model=DeleteResponse)
async def delete_recipe(
    payload: DeleteRecipeRequest,
    repo: ItemRepository = Depends(get_recipe_repository),
) -> DeleteResponse:
    if payload.recipe_id in (None, "") or not payload.user_name:
        raise HTTPException(status_code=400, detail=MISSING_FIELDS)
    await call_store(
        "delete recipe",
        repo.delete_for_user,
        str(payload.recipe_id),
        payload.user_name,
        not_found="Recipe not found",
    )
    return DeleteResponse(success=True)
