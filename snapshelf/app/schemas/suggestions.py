from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class SuggestionItem(BaseModel):
    name: str = ""
    grape: str = ""
    region: str = ""
    country: str = ""
    style: str = ""
    price: str = ""
    reason: str = ""


class SuggestionBundleResponse(BaseModel):
    probably: list[SuggestionItem] = Field(default_factory=list)
    might: list[SuggestionItem] = Field(default_factory=list)
    brave: list[SuggestionItem] = Field(default_factory=list)


class ChatTurnIn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatSuggestionsRequest(BaseModel):
    user_name: Optional[str] = None
    message: Optional[str] = None
    chat_history: Optional[list[ChatTurnIn]] = None


class ChatSuggestionsResponse(BaseModel):
    response: str
