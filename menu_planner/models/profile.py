"""Household profile and recipe models."""

from pydantic import BaseModel, Field
from typing import Optional, Literal
from uuid import uuid4


def _new_id() -> str:
    return str(uuid4())


class Profile(BaseModel):
    """A household member whose needs the menu must cover."""

    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1)
    age: int = Field(ge=0, le=130)
    gender: Literal["male", "female", "other"]
    activity_level: Literal["sedentary", "light", "moderate", "high"]
    notes: Optional[str] = None  # e.g. "basketball player"


class Recipe(BaseModel):
    """A family recipe offered to the planner as a hint."""

    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1)
    ingredients: str = ""
