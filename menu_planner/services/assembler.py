"""Copy-on-write merges of fresh results into structures the caller holds.

None of these functions mutate their arguments. Entries that are not
touched keep their identity, so viewers holding the old structure never
see a half-updated plan.
"""

from typing import List, Optional, Sequence

from menu_planner.models import (
    MEAL_SLOTS,
    DayMenu,
    Meal,
    MealDetails,
    ShoppingList,
    ShoppingListCategory,
)


def _check_slot(slot: str) -> None:
    if slot not in MEAL_SLOTS:
        raise ValueError(f"Unknown meal slot {slot!r}, expected one of {MEAL_SLOTS}")


def meal_at(plan: Sequence[DayMenu], day_index: int, slot: str) -> Optional[Meal]:
    """Meal at a (day, slot) coordinate, or None when the slot is empty."""
    _check_slot(slot)
    if not 0 <= day_index < len(plan):
        raise IndexError(f"Day index {day_index} outside a {len(plan)} day plan")
    return getattr(plan[day_index], slot)


def needs_details(plan: Sequence[DayMenu], day_index: int, slot: str) -> bool:
    """True when the coordinate holds a meal that has not been detailed yet."""
    meal = meal_at(plan, day_index, slot)
    return meal is not None and not meal.is_detailed


def apply_meal_details(
    plan: Sequence[DayMenu],
    day_index: int,
    slot: str,
    details: MealDetails,
) -> List[DayMenu]:
    """
    Return a new plan where only ``(day_index, slot)`` is detailed.

    The planned name is kept; everything else comes from ``details``.
    """
    meal = meal_at(plan, day_index, slot)
    if meal is None:
        raise LookupError(f"No {slot} planned on day {day_index}")

    detailed = meal.model_copy(
        update={
            "ingredients": list(details.ingredients),
            "preparation": details.preparation,
            "nutrition": details.nutrition,
            "motivational_note": details.motivational_note,
        }
    )
    updated = list(plan)
    updated[day_index] = plan[day_index].model_copy(update={slot: detailed})
    return updated


def refresh_selection(selection: Optional[Meal], updated: Meal) -> Optional[Meal]:
    """
    Refresh a displayed copy of a meal that was just detailed.

    Matches by name. Two days can share a dish name, so callers that know
    the coordinate of their selection should compare coordinates instead.
    """
    if selection is not None and selection.name == updated.name:
        return updated
    return selection


def remove_shopping_item(
    shopping_list: ShoppingList,
    category_name: str,
    item_id: str,
) -> ShoppingList:
    """New shopping list without the given item. Unknown ids are ignored."""
    categories = []
    for category in shopping_list.categories:
        if category.name == category_name:
            items = [item for item in category.items if item.id != item_id]
            if len(items) != len(category.items):
                category = category.model_copy(update={"items": items})
        categories.append(category)
    return shopping_list.model_copy(update={"categories": categories})


def visible_categories(shopping_list: ShoppingList) -> List[ShoppingListCategory]:
    """Categories worth rendering: those with at least one item."""
    return [category for category in shopping_list.categories if category.items]
