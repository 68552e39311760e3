from __future__ import annotations

import pytest

from snapshelf.app.domain.models import (
    SUGGESTION_TIERS,
    ChatRole,
    ChatTurn,
    ExtractedWine,
    ItemKind,
    Suggestion,
    SuggestionBundle,
)


class TestItemKind:
    def test_table_names(self) -> None:
        assert ItemKind.RECIPE.table == "recipes"
        assert ItemKind.WINE.table == "wines"

    def test_from_string(self) -> None:
        assert ItemKind("wine") is ItemKind.WINE

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            ItemKind("cheese")


class TestChatTurn:
    def test_role_coerced_from_string(self) -> None:
        turn = ChatTurn("assistant", "Try a Fiano")
        assert turn.role is ChatRole.ASSISTANT
        assert turn.to_dict() == {"role": "assistant", "content": "Try a Fiano"}

    def test_invalid_role(self) -> None:
        with pytest.raises(ValueError):
            ChatTurn("system", "hello")

    def test_frozen(self) -> None:
        turn = ChatTurn(ChatRole.USER, "hi")
        with pytest.raises(AttributeError):
            turn.content = "changed"  # type: ignore[misc]


class TestExtractedWine:
    def test_defaults_are_empty(self) -> None:
        wine = ExtractedWine(name="Chianti Classico")
        assert wine.to_dict() == {
            "name": "Chianti Classico",
            "grape": "",
            "year": "",
            "region": "",
            "country": "",
            "style": "",
        }


class TestSuggestion:
    def test_from_dict_turns_none_into_empty(self) -> None:
        suggestion = Suggestion.from_dict({"name": "Barbera d'Asti", "price": None, "region": "Piedmont"})
        assert suggestion.name == "Barbera d'Asti"
        assert suggestion.price == ""
        assert suggestion.reason == ""

    def test_from_dict_stringifies(self) -> None:
        suggestion = Suggestion.from_dict({"name": "X", "price": 12})
        assert suggestion.price == "12"


class TestSuggestionBundle:
    def test_to_dict_has_all_tiers(self) -> None:
        data = SuggestionBundle().to_dict()
        assert tuple(data) == SUGGESTION_TIERS
        assert all(entries == [] for entries in data.values())

    def test_placeholder(self) -> None:
        bundle = SuggestionBundle.placeholder(name="No wines logged yet", reason="Start logging")
        data = bundle.to_dict()
        assert data["probably"][0]["name"] == "No wines logged yet"
        assert data["probably"][0]["reason"] == "Start logging"
        assert data["might"] == []
        assert data["brave"] == []
