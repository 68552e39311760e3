from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from snapshelf.services.errors import JsonExtractionError

FENCE_RE = re.compile(r"```(?:json)?\s*", flags=re.IGNORECASE)

NO_JSON_MESSAGE = "Could not extract valid JSON from the model response"


@dataclass(frozen=True)
class JsonExtraction:
    ok: bool
    value: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    def unwrap(self) -> dict[str, Any]:
        if not self.ok or self.value is None:
            raise JsonExtractionError(self.error or NO_JSON_MESSAGE)
        return self.value


def strip_code_fences(text: str) -> str:
    return FENCE_RE.sub("", text).strip()


def _balanced_end(text: str, start: int) -> int:
    """Index just past the brace closing text[start], or -1 if unbalanced."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index + 1
    return -1


def _candidates(text: str) -> Iterator[str]:
    """Top-level brace spans only; objects nested in a malformed one are skipped."""
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end == -1:
            # Stray opening brace in prose
            start = text.find("{", start + 1)
            continue
        yield text[start:end]
        start = text.find("{", end)


def extract_first_json_object(text: str | None) -> JsonExtraction:
    """
    Pull the first balanced JSON object out of free model text.

    Markdown fences are removed first; each brace-delimited candidate is then
    tried in order of appearance and the first one that parses as an object wins.
    """
    if not text or not text.strip():
        return JsonExtraction(ok=False, error=NO_JSON_MESSAGE)

    cleaned = strip_code_fences(text)
    for candidate in _candidates(cleaned):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return JsonExtraction(ok=True, value=value)

    return JsonExtraction(ok=False, error=NO_JSON_MESSAGE)
