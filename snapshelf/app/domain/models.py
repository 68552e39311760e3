# snapshelf/app/domain/models.py
"""
Domain models for the recipe and wine catalog.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class ItemKind(str, Enum):
    """Which catalog variant an item belongs to."""
    RECIPE = "recipe"
    WINE = "wine"

    @property
    def table(self) -> str:
        return f"{self.value}s"


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatTurn:
    """One turn of a suggestion chat. Lives only in client memory."""
    role: ChatRole
    content: str

    def __post_init__(self) -> None:
        # Accept plain strings from JSON payloads
        object.__setattr__(self, "role", ChatRole(self.role))

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class ExtractedRecipe:
    """Fields read off a recipe card by the model."""
    title: str
    ingredients: list[str]
    instructions: list[str]


@dataclass
class ExtractedWine:
    """Fields read off a wine label by the model. Unreadable fields stay empty."""
    name: str = ""
    grape: str = ""
    year: str = ""
    region: str = ""
    country: str = ""
    style: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


SUGGESTION_TIERS = ("probably", "might", "brave")
SUGGESTION_FIELDS = ("name", "grape", "region", "country", "style", "price", "reason")


@dataclass
class Suggestion:
    name: str = ""
    grape: str = ""
    region: str = ""
    country: str = ""
    style: str = ""
    price: str = ""
    reason: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Suggestion":
        values = {}
        for key in SUGGESTION_FIELDS:
            value = data.get(key)
            values[key] = "" if value is None else str(value)
        return cls(**values)


@dataclass
class SuggestionBundle:
    """
    Three tiers of wine suggestions:
    - probably: close matches to highly rated wines
    - might: outside-the-box picks
    - brave: adventurous picks that still fit the taste profile
    """
    probably: list[Suggestion] = field(default_factory=list)
    might: list[Suggestion] = field(default_factory=list)
    brave: list[Suggestion] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        return {
            tier: [asdict(entry) for entry in getattr(self, tier)]
            for tier in SUGGESTION_TIERS
        }

    @classmethod
    def placeholder(cls, name: str, reason: str) -> "SuggestionBundle":
        """A bundle with a single explanatory entry in the first tier."""
        return cls(probably=[Suggestion(name=name, reason=reason)])
