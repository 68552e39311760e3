from __future__ import annotations

import asyncio
import base64
from typing import Any, Iterable

from snapshelf.app.domain.models import ExtractedRecipe, ExtractedWine, ItemKind
from snapshelf.services.errors import ExtractionShapeError, UnsupportedFileTypeError
from snapshelf.services.gemini_client import load_prompt
from snapshelf.services.image_prep import SelectedFile
from snapshelf.services.json_extract import extract_first_json_object

PDF_MEDIA_TYPE = "application/pdf"

EXTRACTION_PROMPTS = {
    ItemKind.RECIPE: "RECIPE_EXTRACTION_PROMPT.txt",
    ItemKind.WINE: "WINE_EXTRACTION_PROMPT.txt",
}

WINE_FIELDS = ("name", "grape", "year", "region", "country", "style")

ContentBlock = dict[str, Any]


def _encode_file(selected: SelectedFile) -> ContentBlock:
    if selected.media_type == PDF_MEDIA_TYPE:
        block_type = "document"
    elif selected.is_image:
        block_type = "image"
    else:
        raise UnsupportedFileTypeError(selected.media_type)

    return {
        "type": block_type,
        "source": {
            "type": "base64",
            "media_type": selected.media_type,
            "data": base64.b64encode(selected.data).decode("ascii"),
        },
    }


async def build_extraction_content(
    files: Iterable[SelectedFile],
    kind: ItemKind | str,
) -> list[ContentBlock]:
    """One block per file in order, then the extraction instructions."""
    kind = ItemKind(kind)
    blocks = await asyncio.gather(*(asyncio.to_thread(_encode_file, selected) for selected in files))
    content = list(blocks)
    content.append({"type": "text", "text": load_prompt(EXTRACTION_PROMPTS[kind])})
    return content


def _clean_lines(values: list[Any]) -> list[str]:
    return [str(value).strip() for value in values if value is not None and str(value).strip()]


def parse_recipe_extraction(text: str) -> ExtractedRecipe:
    data = extract_first_json_object(text).unwrap()

    title = data.get("title")
    ingredients = data.get("ingredients")
    instructions = data.get("instructions")
    if not isinstance(title, str) or not title.strip():
        raise ExtractionShapeError("Response format is invalid: missing recipe title")
    if not isinstance(ingredients, list) or not isinstance(instructions, list):
        raise ExtractionShapeError("Response format is invalid: ingredients and instructions must be lists")

    return ExtractedRecipe(
        title=title.strip(),
        ingredients=_clean_lines(ingredients),
        instructions=_clean_lines(instructions),
    )


def parse_wine_extraction(text: str) -> ExtractedWine:
    data = extract_first_json_object(text).unwrap()

    if "name" not in data:
        raise ExtractionShapeError("Response format is invalid: missing wine name")

    values: dict[str, str] = {}
    for key in WINE_FIELDS:
        value = data.get(key)
        if isinstance(value, (dict, list)):
            raise ExtractionShapeError(f"Response format is invalid: {key} must be text")
        values[key] = "" if value is None else str(value).strip()
    return ExtractedWine(**values)


def parse_extraction(text: str, kind: ItemKind | str) -> ExtractedRecipe | ExtractedWine:
    if ItemKind(kind) is ItemKind.RECIPE:
        return parse_recipe_extraction(text)
    return parse_wine_extraction(text)
