"""API routes for menu generation, recipe details and shopping lists."""

from datetime import date
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from menu_planner.models import DayMenu, MealDetails, Profile, Recipe, ShoppingList
from menu_planner.services.ai_planner import MenuPlanner
from menu_planner.services.errors import PlannerError


router = APIRouter(prefix="/api/v1", tags=["Menu Planner"])


def get_planner() -> MenuPlanner:
    """Planner dependency; overridden in tests."""
    return MenuPlanner()


class GeneratePlanRequest(BaseModel):
    """Request to generate a names-only menu plan."""
    profiles: List[Profile] = Field(min_length=1)
    recipes: List[Recipe] = []
    duration: Literal[7, 14] = 7
    start_date: date
    include_breakfasts: bool = False


class GenerateDetailsRequest(BaseModel):
    """Request to expand one planned dish into a full recipe."""
    meal_name: str = Field(min_length=1)
    family_size: int = Field(ge=1)


class GenerateShoppingListRequest(BaseModel):
    """Request to build a shopping list for a plan."""
    menu_plan: List[DayMenu] = Field(min_length=1)
    profiles: List[Profile] = Field(min_length=1)


async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    """Render a classified planner failure as a single message."""
    return JSONResponse(
        status_code=exc.http_status,
        content={"message": exc.user_message, "kind": exc.kind.value},
    )


@router.post("/plan", response_model=List[DayMenu])
async def generate_plan(
    request: GeneratePlanRequest,
    planner: MenuPlanner = Depends(get_planner),
):
    """
    Generate a menu plan for the family.

    Only dish names are returned; details are fetched per meal through
    ``/details``.
    """
    return await planner.generate_plan(
        request.profiles,
        request.recipes,
        request.duration,
        request.start_date,
        request.include_breakfasts,
    )


@router.post(
    "/details",
    response_model=MealDetails,
    response_model_exclude={"name"},
)
async def generate_details(
    request: GenerateDetailsRequest,
    planner: MenuPlanner = Depends(get_planner),
):
    """Ingredients, preparation, nutrition and a motivational note for one dish."""
    try:
        return await planner.generate_details(request.meal_name, request.family_size)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/shopping-list", response_model=ShoppingList)
async def generate_shopping_list(
    request: GenerateShoppingListRequest,
    planner: MenuPlanner = Depends(get_planner),
):
    """Consolidated shopping list; detailed meals contribute their real ingredients."""
    try:
        return await planner.generate_shopping_list(request.menu_plan, request.profiles)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
