from __future__ import annotations

import asyncio
import base64

import pytest

from snapshelf.app.domain.models import ExtractedRecipe, ExtractedWine, ItemKind
from snapshelf.services.errors import ExtractionShapeError, JsonExtractionError, UnsupportedFileTypeError
from snapshelf.services.extraction import (
    build_extraction_content,
    parse_extraction,
    parse_recipe_extraction,
    parse_wine_extraction,
)
from snapshelf.services.image_prep import SelectedFile


def _file(name: str, media_type: str, data: bytes = b"payload") -> SelectedFile:
    return SelectedFile(name=name, media_type=media_type, data=data)


class TestBuildExtractionContent:
    def test_blocks_in_order_then_prompt(self) -> None:
        files = [
            _file("page1.jpg", "image/jpeg", b"one"),
            _file("card.pdf", "application/pdf", b"two"),
            _file("page2.png", "image/png", b"three"),
        ]
        content = asyncio.run(build_extraction_content(files, ItemKind.RECIPE))

        assert [block["type"] for block in content] == ["image", "document", "image", "text"]
        assert content[0]["source"] == {
            "type": "base64",
            "media_type": "image/jpeg",
            "data": base64.b64encode(b"one").decode("ascii"),
        }
        assert content[1]["source"]["media_type"] == "application/pdf"
        assert "recipe" in content[-1]["text"].lower()

    def test_wine_prompt(self) -> None:
        content = asyncio.run(build_extraction_content([_file("label.jpg", "image/jpeg")], "wine"))
        assert "wine" in content[-1]["text"].lower()

    def test_unsupported_type_fails_whole_batch(self) -> None:
        files = [_file("ok.jpg", "image/jpeg"), _file("notes.txt", "text/plain")]
        with pytest.raises(UnsupportedFileTypeError, match="text/plain"):
            asyncio.run(build_extraction_content(files, ItemKind.RECIPE))


class TestParseRecipeExtraction:
    def test_valid_recipe(self) -> None:
        text = '```json\n{"title": " Scones ", "ingredients": ["225g flour", "", " 1 egg "], "instructions": ["Mix", "Bake"]}\n```'
        recipe = parse_recipe_extraction(text)
        assert recipe == ExtractedRecipe(
            title="Scones",
            ingredients=["225g flour", "1 egg"],
            instructions=["Mix", "Bake"],
        )

    def test_missing_title(self) -> None:
        with pytest.raises(ExtractionShapeError):
            parse_recipe_extraction('{"title": "", "ingredients": [], "instructions": []}')

    def test_ingredients_must_be_list(self) -> None:
        with pytest.raises(ExtractionShapeError):
            parse_recipe_extraction('{"title": "Soup", "ingredients": "water", "instructions": []}')

    def test_no_json(self) -> None:
        with pytest.raises(JsonExtractionError):
            parse_recipe_extraction("I could not read that image.")


class TestParseWineExtraction:
    def test_valid_wine(self) -> None:
        wine = parse_wine_extraction(
            'Sure! {"name": "Chianti Classico", "grape": "Sangiovese", "year": 2019, '
            '"region": "Tuscany", "country": "Italy", "style": null}'
        )
        assert wine == ExtractedWine(
            name="Chianti Classico",
            grape="Sangiovese",
            year="2019",
            region="Tuscany",
            country="Italy",
            style="",
        )

    def test_missing_name_key(self) -> None:
        with pytest.raises(ExtractionShapeError):
            parse_wine_extraction('{"grape": "Merlot"}')

    def test_nested_value_rejected(self) -> None:
        with pytest.raises(ExtractionShapeError):
            parse_wine_extraction('{"name": "X", "region": {"area": "Rhone"}}')


class TestParseExtraction:
    def test_dispatches_on_kind(self) -> None:
        assert isinstance(parse_extraction('{"name": "Rioja"}', "wine"), ExtractedWine)
        recipe = parse_extraction('{"title": "Pie", "ingredients": [], "instructions": []}', ItemKind.RECIPE)
        assert isinstance(recipe, ExtractedRecipe)
