"""AI-powered menu planning on top of the Gemini provider."""

import asyncio
import logging
from datetime import date
from typing import List, Optional, Sequence

from menu_planner.config import Settings, get_settings
from menu_planner.models import DayMenu, MealDetails, Profile, Recipe, ShoppingList
from menu_planner.services.gemini import GeminiClient
from menu_planner.services.parser import (
    parse_meal_details,
    parse_menu_plan,
    parse_shopping_list,
)
from menu_planner.services.prompts import (
    PromptRequest,
    build_details_prompt,
    build_plan_prompt,
    build_shopping_list_prompt,
)
from menu_planner.services.retry import RetryPolicy, Sleep, call_with_retry

logger = logging.getLogger(__name__)


class MenuPlanner:
    """Builds prompts, calls the model with retries and validates the reply.

    Holds no session state: every method takes its full input and returns
    a new value or raises a ``PlannerError``.
    """

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        settings: Optional[Settings] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self.client = client or GeminiClient(self.settings)
        self.retry_policy = retry_policy or RetryPolicy.from_settings(self.settings)
        self._sleep = sleep

    async def _query(self, request: PromptRequest) -> str:
        return await call_with_retry(
            lambda: self.client.generate(request),
            self.retry_policy,
            sleep=self._sleep,
            label=f"Gemini {request.name} request",
        )

    async def generate_plan(
        self,
        profiles: Sequence[Profile],
        recipes: Sequence[Recipe],
        duration: int,
        start_date: date,
        include_breakfasts: bool = False,
    ) -> List[DayMenu]:
        """Generate a names-only menu plan for the family."""
        request = build_plan_prompt(
            profiles,
            recipes,
            duration,
            start_date,
            include_breakfasts,
            region=self.settings.planner_region,
            cuisine=self.settings.planner_cuisine,
            language=self.settings.output_language,
        )
        logger.info(
            "Generating %d day plan from %s for %d profiles (breakfasts: %s)",
            duration,
            start_date.isoformat(),
            len(profiles),
            include_breakfasts,
        )
        text = await self._query(request)
        return parse_menu_plan(text, duration, start_date, include_breakfasts)

    async def generate_details(self, meal_name: str, family_size: int) -> MealDetails:
        """Fetch ingredients, preparation, nutrition and a note for one dish."""
        request = build_details_prompt(
            meal_name, family_size, language=self.settings.output_language
        )
        logger.info("Fetching details for %r (family of %d)", meal_name, family_size)
        text = await self._query(request)
        return parse_meal_details(text, meal_name)

    async def generate_shopping_list(
        self,
        plan: Sequence[DayMenu],
        profiles: Sequence[Profile],
    ) -> ShoppingList:
        """Consolidated, categorised shopping list for the whole plan."""
        request = build_shopping_list_prompt(
            plan, profiles, language=self.settings.output_language
        )
        logger.info("Generating shopping list for a %d day plan", len(plan))
        text = await self._query(request)
        return parse_shopping_list(text)
