"""Shopping list models."""

from pydantic import BaseModel, Field
from typing import List
from uuid import uuid4


class ShoppingListItem(BaseModel):
    """Single line of the shopping list."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=1)
    quantity: str  # free text, e.g. "500g", "3 onions"


class ShoppingListCategory(BaseModel):
    """Items grouped by supermarket section."""

    name: str
    items: List[ShoppingListItem]


class ShoppingList(BaseModel):
    """Consolidated shopping list for a whole plan."""

    categories: List[ShoppingListCategory]
