"""Per-session planner state: profiles, recipes, the current plan and selection."""

import logging
from datetime import date
from typing import Dict, List, Optional

from menu_planner.models import (
    Coordinate,
    DayMenu,
    Meal,
    Profile,
    Recipe,
    ShoppingList,
)
from menu_planner.services.ai_planner import MenuPlanner
from menu_planner.services.assembler import (
    apply_meal_details,
    meal_at,
    refresh_selection,
    remove_shopping_item,
)

logger = logging.getLogger(__name__)


class PlanInProgressError(RuntimeError):
    """A plan is already being generated for this session."""


def default_profiles() -> List[Profile]:
    """Starter household shown before the user edits anything."""
    return [
        Profile(id="1", name="Teenager 1", age=15, gender="male", activity_level="high", notes="Basketball player"),
        Profile(id="2", name="Teenager 2", age=12, gender="female", activity_level="high", notes="Basketball player"),
        Profile(id="3", name="Adult 1", age=50, gender="male", activity_level="moderate"),
        Profile(id="4", name="Adult 2", age=50, gender="female", activity_level="moderate"),
    ]


class PlannerSession:
    """
    State owned by one user session.

    The plan is only ever replaced wholesale, never edited in place. Detail
    fetches are numbered per coordinate and a completion that is no longer
    the latest for its coordinate, or that belongs to a plan that has since
    been replaced, is discarded.
    """

    def __init__(
        self,
        planner: MenuPlanner,
        profiles: Optional[List[Profile]] = None,
        recipes: Optional[List[Recipe]] = None,
    ):
        self.planner = planner
        self.profiles: List[Profile] = list(profiles) if profiles is not None else default_profiles()
        self.recipes: List[Recipe] = list(recipes or [])
        self.plan: Optional[List[DayMenu]] = None
        self.selected_meal: Optional[Meal] = None
        self.selected_coordinate: Optional[Coordinate] = None
        self.shopping_list: Optional[ShoppingList] = None
        self._plan_in_flight = False
        self._plan_generation = 0
        self._detail_sequence: Dict[Coordinate, int] = {}

    @property
    def family_size(self) -> int:
        return len(self.profiles)

    async def generate_plan(
        self,
        duration: int = 7,
        start_date: Optional[date] = None,
        include_breakfasts: bool = False,
    ) -> List[DayMenu]:
        """Generate and store a new plan, clearing everything derived from the old one."""
        if not self.profiles:
            raise ValueError("Please add at least one family profile.")
        if self._plan_in_flight:
            raise PlanInProgressError("A menu plan is already being generated.")

        self._plan_in_flight = True
        try:
            plan = await self.planner.generate_plan(
                self.profiles,
                self.recipes,
                duration,
                start_date or date.today(),
                include_breakfasts,
            )
        finally:
            self._plan_in_flight = False

        self.plan = plan
        self._plan_generation += 1
        self._detail_sequence.clear()
        self.selected_meal = None
        self.selected_coordinate = None
        self.shopping_list = None
        return plan

    def select_meal(self, day_index: int, slot: str) -> Optional[Meal]:
        if self.plan is None:
            return None
        self.selected_meal = meal_at(self.plan, day_index, slot)
        self.selected_coordinate = (day_index, slot) if self.selected_meal else None
        return self.selected_meal

    def clear_selection(self) -> None:
        self.selected_meal = None
        self.selected_coordinate = None

    async def fetch_details(self, day_index: int, slot: str) -> Optional[Meal]:
        """
        Make sure the meal at (day_index, slot) is detailed.

        Empty or already detailed slots return immediately without calling
        the model. On failure the plan is left as it was and the error
        propagates to the caller.
        """
        if self.plan is None:
            return None
        meal = meal_at(self.plan, day_index, slot)
        if meal is None or meal.is_detailed:
            return meal

        coordinate = (day_index, slot)
        sequence = self._detail_sequence.get(coordinate, 0) + 1
        self._detail_sequence[coordinate] = sequence
        generation = self._plan_generation

        details = await self.planner.generate_details(meal.name, self.family_size)

        if generation != self._plan_generation:
            logger.info("Discarding details for %r: the plan was replaced", meal.name)
            return None
        if self._detail_sequence.get(coordinate) != sequence:
            logger.info("Discarding stale details for %r at %s", meal.name, coordinate)
            return meal_at(self.plan, day_index, slot)

        current = meal_at(self.plan, day_index, slot)
        if current is not None and current.is_detailed:
            return current

        self.plan = apply_meal_details(self.plan, day_index, slot, details)
        updated = meal_at(self.plan, day_index, slot)

        if self.selected_coordinate is not None:
            if self.selected_coordinate == coordinate:
                self.selected_meal = updated
        else:
            self.selected_meal = refresh_selection(self.selected_meal, updated)
        return updated

    async def generate_shopping_list(self) -> ShoppingList:
        if not self.plan:
            raise ValueError("Generate a menu plan first.")
        self.shopping_list = await self.planner.generate_shopping_list(self.plan, self.profiles)
        return self.shopping_list

    def remove_shopping_item(self, category_name: str, item_id: str) -> Optional[ShoppingList]:
        if self.shopping_list is not None:
            self.shopping_list = remove_shopping_item(self.shopping_list, category_name, item_id)
        return self.shopping_list
