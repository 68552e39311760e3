# snapshelf/app/deps.py (singletons exposed as FastAPI dependencies)

from __future__ import annotations

from fastapi import Depends
from supabase import Client, create_client

from snapshelf.app.config import settings
from snapshelf.app.domain.models import ItemKind
from snapshelf.app.infra.db.base import ItemRepository
from snapshelf.app.infra.db.supabase_items_repo import SupabaseItemRepository
from snapshelf.services.gemini_client import GeminiClient

_client: Client | None = None
_model: GeminiClient | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_ANON_KEY)
    return _client


def get_wine_repository(supa: Client = Depends(get_supabase)) -> ItemRepository:
    return SupabaseItemRepository(supa, ItemKind.WINE)


def get_recipe_repository(supa: Client = Depends(get_supabase)) -> ItemRepository:
    return SupabaseItemRepository(supa, ItemKind.RECIPE)


def get_language_model() -> GeminiClient:
    global _model
    if _model is None:
        _model = GeminiClient(
            api_key=settings.GEMINI_API_KEY.get_secret_value(),
            model_name=settings.GEMINI_MODEL,
        )
    return _model
