from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from pathlib import Path
from string import Template
from typing import Any, Mapping, Sequence

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from snapshelf.services.errors import (
    ModelConfigurationError,
    ModelServiceError,
    RateLimitedError,
    ServiceError,
)

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"

# Turns use the chat-completion shape: role + (text | list of content blocks)
Turn = Mapping[str, Any]


class PromptFileError(ServiceError):
    pass


def load_prompt(name: str, **values: str) -> str:
    """Read a prompt template from the package and fill its $placeholders."""
    file_path = PROMPTS_DIR / name
    try:
        template = file_path.read_text(encoding="utf-8")
    except FileNotFoundError as not_found_error:
        raise PromptFileError(f"Prompt file not found: {file_path}") from not_found_error
    except OSError as io_error:
        raise PromptFileError(f"Unable to read prompt file: {io_error}") from io_error
    return Template(template).safe_substitute(values)


@dataclass
class ModelReply:
    text: str
    model: str
    stop_reason: str | None = None


def _block_to_part(block: Mapping[str, Any]) -> types.Part:
    block_type = block.get("type")
    if block_type == "text":
        return types.Part.from_text(text=str(block.get("text") or ""))
    if block_type in ("image", "document"):
        source = block.get("source") or {}
        try:
            data = base64.b64decode(source.get("data") or "", validate=True)
        except (binascii.Error, ValueError) as decode_error:
            raise ModelServiceError(f"Invalid base64 payload in {block_type} block", status_code=400) from decode_error
        return types.Part.from_bytes(data=data, mime_type=str(source.get("media_type") or ""))
    raise ModelServiceError(f"Unsupported content block type: {block_type}", status_code=400)


def _turn_to_content(turn: Turn) -> types.Content:
    role = "model" if turn.get("role") == "assistant" else "user"
    content = turn.get("content")
    if isinstance(content, str):
        parts = [types.Part.from_text(text=content)]
    else:
        parts = [_block_to_part(block) for block in content or []]
    return types.Content(role=role, parts=parts)


class GeminiClient:
    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash") -> None:
        self.api_key = api_key
        self.model_name = model_name
        self._client = self._configure_api()

    def _configure_api(self) -> genai.Client:
        if not self.api_key:
            raise ModelConfigurationError("Missing Google API key.")
        return genai.Client(api_key=self.api_key)

    async def complete(self, turns: Sequence[Turn], max_tokens: int) -> ModelReply:
        """Send role-tagged turns to the model and return its text reply."""
        contents = [_turn_to_content(turn) for turn in turns]
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=types.GenerateContentConfig(max_output_tokens=max_tokens),
            )
        except genai_errors.APIError as err:
            status_code = getattr(err, "code", None) or 502
            message = getattr(err, "message", None) or str(err)
            if status_code == 429 or "RESOURCE_EXHAUSTED" in str(err):
                raise RateLimitedError() from err
            logger.error("Gemini request failed: status=%s message=%s", status_code, message)
            raise ModelServiceError(message or "Model request failed", status_code=int(status_code)) from err

        text = response.text
        if not text:
            raise ModelServiceError("Model response did not include text content.")

        stop_reason = None
        if response.candidates and response.candidates[0].finish_reason:
            reason = response.candidates[0].finish_reason
            stop_reason = str(getattr(reason, "value", reason)).lower()

        return ModelReply(text=text, model=self.model_name, stop_reason=stop_reason)
