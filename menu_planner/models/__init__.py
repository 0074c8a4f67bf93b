"""Data models for Menu Planner."""

from .profile import Profile, Recipe
from .meal import (
    MEAL_SLOTS,
    Coordinate,
    DayMenu,
    Meal,
    MealDetails,
    MealSlot,
    MenuPlan,
    NutritionInfo,
)
from .shopping import ShoppingList, ShoppingListCategory, ShoppingListItem

__all__ = [
    "Profile",
    "Recipe",
    "MEAL_SLOTS",
    "Coordinate",
    "DayMenu",
    "Meal",
    "MealDetails",
    "MealSlot",
    "MenuPlan",
    "NutritionInfo",
    "ShoppingList",
    "ShoppingListCategory",
    "ShoppingListItem",
]
