"""Meal and menu plan models."""

from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Tuple
from datetime import date


MealSlot = Literal["breakfast", "lunch", "dinner"]
MEAL_SLOTS: Tuple[str, ...] = ("breakfast", "lunch", "dinner")

# (day index, meal slot)
Coordinate = Tuple[int, str]


class NutritionInfo(BaseModel):
    """Estimated nutrition per serving."""

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)


class Meal(BaseModel):
    """A planned dish.

    Right after plan generation only ``name`` is set. Once details are
    fetched the meal carries ingredients, preparation, nutrition and a note.
    """

    name: str = Field(min_length=1)
    ingredients: Optional[List[str]] = None
    preparation: Optional[str] = None
    nutrition: Optional[NutritionInfo] = None
    motivational_note: Optional[str] = None

    @property
    def is_detailed(self) -> bool:
        return bool(self.ingredients)

    @property
    def steps(self) -> List[str]:
        """Preparation split into its newline-separated steps."""
        if not self.preparation:
            return []
        return [line.strip() for line in self.preparation.split("\n") if line.strip()]


class MealDetails(BaseModel):
    """Result of a detail expansion request. Every field is mandatory."""

    name: str = Field(min_length=1)
    ingredients: List[str] = Field(min_length=1)
    preparation: str = Field(min_length=1)
    nutrition: NutritionInfo
    motivational_note: str


class DayMenu(BaseModel):
    """One day of the plan."""

    day: str
    date: date
    breakfast: Optional[Meal] = None
    lunch: Optional[Meal] = None
    dinner: Optional[Meal] = None

    def meals(self) -> List[Tuple[str, Meal]]:
        """Planned meals of the day as (slot, meal) pairs, in slot order."""
        return [
            (slot, getattr(self, slot))
            for slot in MEAL_SLOTS
            if getattr(self, slot) is not None
        ]


MenuPlan = List[DayMenu]
