from __future__ import annotations

import os

import pytest

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

from fastapi.testclient import TestClient

from snapshelf.app.deps import get_language_model, get_recipe_repository, get_wine_repository
from snapshelf.app.main import app
from tests.stubs import InMemoryItemRepository, LanguageModelStub


@pytest.fixture
def wine_repo() -> InMemoryItemRepository:
    return InMemoryItemRepository("wines")


@pytest.fixture
def recipe_repo() -> InMemoryItemRepository:
    return InMemoryItemRepository("recipes")


@pytest.fixture
def model() -> LanguageModelStub:
    return LanguageModelStub()


@pytest.fixture
def client(wine_repo, recipe_repo, model):
    app.dependency_overrides[get_wine_repository] = lambda: wine_repo
    app.dependency_overrides[get_recipe_repository] = lambda: recipe_repo
    app.dependency_overrides[get_language_model] = lambda: model
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
