# snapshelf/app/schemas/wines.py
from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SaveWineRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: Optional[str] = None
    grape: Optional[str] = None
    year: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    style: Optional[str] = None
    price: Optional[str] = None
    where_bought: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=0, le=10)
    user_name: Optional[str] = None

    def to_row(self) -> dict:
        return {
            "name": self.name or "",
            "grape": self.grape or "",
            "year": self.year or "",
            "region": self.region or "",
            "country": self.country or "",
            "style": self.style or "",
            "price": self.price or "",
            "where_bought": self.where_bought or "",
            "rating": self.rating,
            "user_name": self.user_name,
        }


class DeleteWineRequest(BaseModel):
    wine_id: Optional[Union[int, str]] = None
    user_name: Optional[str] = None


class DeleteResponse(BaseModel):
    success: bool = True
