from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class Base64Source(BaseModel):
    type: Literal["base64"] = "base64"
    media_type: str = Field(..., min_length=1)
    data: str


class ImageBlock(BaseModel):
    type: Literal["image"]
    source: Base64Source


class DocumentBlock(BaseModel):
    type: Literal["document"]
    source: Base64Source


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


ContentBlock = Annotated[
    Union[ImageBlock, DocumentBlock, TextBlock],
    Field(discriminator="type"),
]


class AnalyzeRequest(BaseModel):
    content: Optional[list[ContentBlock]] = None
    max_tokens: Optional[int] = Field(default=None, ge=1, le=8192)


class AnalyzeResponse(BaseModel):
    content: list[TextBlock]
    model: str
    stop_reason: Optional[str] = None
