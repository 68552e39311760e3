# snapshelf/app/schemas/recipes.py
from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel


class SaveRecipeRequest(BaseModel):
    title: Optional[str] = None
    ingredients: Optional[list[str]] = None
    instructions: Optional[list[str]] = None
    notes: Optional[str] = None
    user_name: Optional[str] = None

    def to_row(self) -> dict:
        return {
            "title": self.title,
            "ingredients": self.ingredients,
            "instructions": self.instructions,
            "notes": self.notes or "",
            "user_name": self.user_name,
        }


class DeleteRecipeRequest(BaseModel):
    recipe_id: Optional[Union[int, str]] = None
    user_name: Optional[str] = None
