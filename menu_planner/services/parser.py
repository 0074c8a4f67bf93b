"""Validation of raw model output before anything downstream trusts it."""

import json
import logging
from datetime import date, timedelta
from typing import Any, List, Optional, Set
from uuid import uuid4

from pydantic import BaseModel, TypeAdapter, ValidationError

from menu_planner.models import DayMenu, Meal, MealDetails, ShoppingList
from menu_planner.services.errors import (
    EmptyResponseError,
    MalformedResponseError,
    SchemaMismatchError,
    truncate,
)

logger = logging.getLogger(__name__)

class _PlanDay(BaseModel):
    """A day as the model returns it. Its date is only advisory."""

    day: str
    date: Optional[str] = None
    breakfast: Optional[Meal] = None
    lunch: Optional[Meal] = None
    dinner: Optional[Meal] = None


_day_list = TypeAdapter(List[_PlanDay])


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence such as ```json ... ```."""
    text = text.strip()
    if not text.startswith("```"):
        return text
    lines = text.split("\n")[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def load_json(text: Optional[str]) -> Any:
    """Parse raw model text as JSON, classifying empty and broken output."""
    if text is None or not text.strip():
        raise EmptyResponseError()

    try:
        return json.loads(strip_code_fence(text))
    except ValueError as e:
        prefix = truncate(text)
        logger.error("Model returned malformed JSON (%s): %r", e, prefix)
        raise MalformedResponseError(detail=prefix) from e


def _summarize(error: ValidationError) -> str:
    problems = [
        f"{'.'.join(str(p) for p in item['loc']) or '<root>'}: {item['msg']}"
        for item in error.errors()[:5]
    ]
    return truncate("; ".join(problems))


def _validate(model: Any, payload: Any, label: str) -> Any:
    try:
        if isinstance(model, TypeAdapter):
            return model.validate_python(payload)
        return model.model_validate(payload)
    except ValidationError as e:
        detail = _summarize(e)
        logger.error("Model %s response does not match the schema: %s", label, detail)
        raise SchemaMismatchError(detail=detail) from e


def parse_menu_plan(
    text: Optional[str],
    duration: int,
    start_date: date,
    include_breakfasts: bool,
) -> List[DayMenu]:
    """
    Validate a names-only plan.

    The day count must match the request and every requested slot must hold
    a meal. Dates are re-stamped consecutively from ``start_date`` so the
    plan is always chronological, and breakfasts are dropped when they were
    not requested.
    """
    payload = load_json(text)
    days = _validate(_day_list, payload, "plan")

    if len(days) != duration:
        raise SchemaMismatchError(
            detail=f"expected {duration} days, got {len(days)}"
        )

    required = ("breakfast", "lunch", "dinner") if include_breakfasts else ("lunch", "dinner")
    for offset, day in enumerate(days):
        missing = [slot for slot in required if getattr(day, slot) is None]
        if missing:
            detail = f"day {offset}: missing {', '.join(missing)}"
            logger.error("Model plan response does not match the schema: %s", detail)
            raise SchemaMismatchError(detail=detail)

    plan = []
    for offset, day in enumerate(days):
        expected = start_date + timedelta(days=offset)
        if day.date != expected.isoformat():
            logger.debug("Re-dating plan day %d from %s to %s", offset, day.date, expected)
        plan.append(DayMenu(
            day=day.day,
            date=expected,
            breakfast=day.breakfast if include_breakfasts else None,
            lunch=day.lunch,
            dinner=day.dinner,
        ))
    return plan


def parse_meal_details(text: Optional[str], meal_name: str) -> MealDetails:
    """Validate a detail expansion. The requested name always wins."""
    payload = load_json(text)
    details = _validate(MealDetails, payload, "details")

    if details.name.strip() != meal_name.strip():
        logger.info("Model renamed %r to %r, keeping the requested name", meal_name, details.name)
    return details.model_copy(update={"name": meal_name})


def parse_shopping_list(text: Optional[str]) -> ShoppingList:
    """Validate a shopping list, making sure every item id is unique."""
    payload = load_json(text)
    if isinstance(payload, dict):
        # Ids are regenerated below, so missing or blank ones are not a schema error
        for category in payload.get("categories") or []:
            if isinstance(category, dict):
                for item in category.get("items") or []:
                    if isinstance(item, dict) and not item.get("id"):
                        item.pop("id", None)

    shopping_list = _validate(ShoppingList, payload, "shopping list")

    seen: Set[str] = set()
    for category in shopping_list.categories:
        for item in category.items:
            if item.id in seen:
                item.id = str(uuid4())
            seen.add(item.id)
    return shopping_list

