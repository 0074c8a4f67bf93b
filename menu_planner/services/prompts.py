"""Prompt and response schema builders for the three planner requests.

Every builder is a pure function: equal inputs always produce the same
instruction text and schema.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Sequence

from menu_planner.models import DayMenu, Meal, Profile, Recipe


ALLOWED_DURATIONS = (7, 14)

NO_RECIPES_MARKER = "No family recipes were supplied. Do not assume any preferences from their absence."

EXCLUDE_BREAKFAST_DIRECTIVE = (
    "Do NOT generate breakfasts. Generate ONLY 'lunch' and 'dinner' for each day "
    "and leave breakfast out of the output entirely."
)
INCLUDE_BREAKFAST_DIRECTIVE = (
    "Include a breakfast suggestion for every day, in addition to 'lunch' and 'dinner'."
)

SHOPPING_CATEGORIES = (
    "Fruit and Vegetables",
    "Meat and Fish",
    "Dairy and Eggs",
    "Pantry",
    "Other",
)


@dataclass(frozen=True)
class PromptRequest:
    """Instruction text plus the response schema sent to the model."""

    name: str
    instruction: str
    schema: Dict[str, Any] = field(default_factory=dict)


# Response schemas (Gemini OpenAPI subset)

_MEAL_NAME_SCHEMA = {
    "type": "OBJECT",
    "properties": {"name": {"type": "STRING"}},
    "required": ["name"],
}


def menu_plan_schema(include_breakfasts: bool) -> Dict[str, Any]:
    """Names-only plan: day label, date and the dish name per slot."""
    properties: Dict[str, Any] = {
        "day": {"type": "STRING"},
        "date": {"type": "STRING", "description": "ISO date, YYYY-MM-DD."},
    }
    required = ["day", "date"]
    if include_breakfasts:
        properties["breakfast"] = dict(_MEAL_NAME_SCHEMA)
        required.append("breakfast")
    properties["lunch"] = dict(_MEAL_NAME_SCHEMA)
    properties["dinner"] = dict(_MEAL_NAME_SCHEMA)
    required += ["lunch", "dinner"]

    return {
        "type": "ARRAY",
        "items": {"type": "OBJECT", "properties": properties, "required": required},
    }


MEAL_DETAILS_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "ingredients": {"type": "ARRAY", "items": {"type": "STRING"}},
        "preparation": {
            "type": "STRING",
            "description": (
                "Step by step cooking instructions. Each numbered step must be "
                "separated from the next one by a single newline character ('\\n')."
            ),
        },
        "nutrition": {
            "type": "OBJECT",
            "properties": {
                "calories": {"type": "NUMBER"},
                "protein": {"type": "NUMBER"},
                "carbs": {"type": "NUMBER"},
                "fat": {"type": "NUMBER"},
            },
            "required": ["calories", "protein", "carbs", "fat"],
        },
        "motivational_note": {
            "type": "STRING",
            "description": "A short, motivating tip from a nutritionist about this specific dish.",
        },
    },
    "required": ["name", "ingredients", "preparation", "nutrition", "motivational_note"],
}

SHOPPING_LIST_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "categories": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "items": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "id": {
                                    "type": "STRING",
                                    "description": "A unique ID for the item, for example a UUID.",
                                },
                                "name": {"type": "STRING"},
                                "quantity": {"type": "STRING"},
                            },
                            "required": ["id", "name", "quantity"],
                        },
                    },
                },
                "required": ["name", "items"],
            },
        },
    },
    "required": ["categories"],
}


# Rendering helpers


def render_profile(profile: Profile) -> str:
    notes = profile.notes.strip() if profile.notes and profile.notes.strip() else "none"
    return (
        f"- {profile.name}: {profile.age} years old, {profile.gender}, "
        f"activity level: {profile.activity_level}. Notes: {notes}"
    )


def render_recipes(recipes: Sequence[Recipe]) -> str:
    if not recipes:
        return NO_RECIPES_MARKER
    lines = "\n".join(f"- {r.name}: {r.ingredients or 'ingredients not given'}" for r in recipes)
    return f"Consider including these family recipes if they fit the nutritional plan:\n{lines}"


def nutrition_guidelines(profiles: Sequence[Profile], include_breakfasts: bool) -> List[str]:
    """Guidelines that depend on who is in the household."""
    guidelines = []

    young = [p for p in profiles if p.age < 18]
    if any(p.activity_level in ("moderate", "high") for p in young):
        guidelines.append(
            "For active children and teenagers: a high protein intake is crucial for growth "
            "and muscle recovery. Make their meals energy dense with complex carbohydrates."
        )
    elif young:
        guidelines.append(
            "For children and teenagers: cover the extra energy, protein and calcium "
            "needed for growth."
        )

    if any(p.age >= 45 for p in profiles):
        guidelines.append(
            "For adults over 45: prevent sarcopenia (muscle loss) with enough high quality "
            "protein. Include sources of calcium and vitamin D for bone health."
        )

    guidelines.append(
        "For everyone: promote gut health with fibre, prebiotics (garlic, onion, whole "
        "grains) and probiotics (yoghurt, kefir). Diversify protein sources (fish, "
        "legumes, lean meat)."
    )
    guidelines.append(
        f"Every recipe must be sized for the number of people in the family ({len(profiles)})."
    )
    guidelines.append(
        INCLUDE_BREAKFAST_DIRECTIVE if include_breakfasts else EXCLUDE_BREAKFAST_DIRECTIVE
    )
    return guidelines


def _numbered(lines: Sequence[str]) -> str:
    return "\n".join(f"{i}. {line}" for i, line in enumerate(lines, 1))


def _meal_line(label: str, meal: Meal, family_size: int) -> str:
    if meal.is_detailed:
        ingredients = "; ".join(meal.ingredients)
        return f"- {label}: {meal.name}. Ingredients for {family_size} people: {ingredients}"
    return (
        f"- {label}: {meal.name}. Ingredients not known yet: work them out from the "
        f"dish name for {family_size} people."
    )


def render_plan_meals(plan: Sequence[DayMenu], family_size: int) -> str:
    lines = []
    for day in plan:
        for slot, meal in day.meals():
            lines.append(_meal_line(f"{day.day} ({day.date.isoformat()}) {slot}", meal, family_size))
    return "\n".join(lines)


# Builders


def build_plan_prompt(
    profiles: Sequence[Profile],
    recipes: Sequence[Recipe],
    duration: int,
    start_date: date,
    include_breakfasts: bool,
    *,
    region: str = "Madrid, Spain",
    cuisine: str = "Mediterranean",
    language: str = "Spanish (Spain)",
) -> PromptRequest:
    """Request for the initial, names-only menu plan."""
    if not profiles:
        raise ValueError("At least one family profile is required")
    if duration not in ALLOWED_DURATIONS:
        raise ValueError(f"duration must be one of {ALLOWED_DURATIONS}, got {duration}")

    profiles_text = "\n".join(render_profile(p) for p in profiles)
    guidelines_text = _numbered(nutrition_guidelines(profiles, include_breakfasts))
    slots = "'breakfast', 'lunch' and 'dinner'" if include_breakfasts else "'lunch' and 'dinner'"

    instruction = f"""You are an expert nutritionist designing a meal plan for a family in {region}.
Base your recommendations on the {cuisine} diet, prioritising local seasonal produce.
The plan must adapt to the specific needs of each family member.

FAMILY PROFILES:
{profiles_text}

NUTRITIONAL GUIDELINES:
{guidelines_text}

USER RECIPES:
{render_recipes(recipes)}

TASK:
Generate a meal plan for {duration} days starting on {start_date.isoformat()}, one entry per consecutive day.
The output must be a valid JSON array that strictly follows the provided schema.
For each day give ONLY the dish name for {slots}. Do NOT generate ingredients or preparation steps in this request.
Write the dish names and day labels in {language}."""

    return PromptRequest(
        name="plan",
        instruction=instruction,
        schema=menu_plan_schema(include_breakfasts),
    )


def build_details_prompt(
    meal_name: str,
    family_size: int,
    *,
    language: str = "Spanish (Spain)",
) -> PromptRequest:
    """Request for the full recipe of one planned meal."""
    if not meal_name or not meal_name.strip():
        raise ValueError("meal_name must not be empty")
    if family_size < 1:
        raise ValueError("family_size must be at least 1")

    instruction = f"""You are an expert nutritionist and chef.
Provide a detailed recipe for the dish: "{meal_name.strip()}".
The recipe must serve a family of {family_size} people.

The output must be a single valid JSON object that strictly follows the provided schema.
It must include:
1. 'name': the exact dish name given above.
2. 'ingredients': a list of ingredients with quantities.
3. 'preparation': step by step cooking instructions. VERY IMPORTANT: separate each numbered step with a single newline ('\\n') so every step is on its own line.
4. 'nutrition': estimated nutrition per serving (calories, protein, carbs and fat in grams).
5. 'motivational_note': a short, motivating tip from a nutritionist about this dish.

Write the response in {language}."""

    return PromptRequest(name="details", instruction=instruction, schema=MEAL_DETAILS_SCHEMA)


def build_shopping_list_prompt(
    plan: Sequence[DayMenu],
    profiles: Sequence[Profile],
    *,
    language: str = "Spanish (Spain)",
) -> PromptRequest:
    """Request for a consolidated shopping list covering the whole plan."""
    if not profiles:
        raise ValueError("At least one family profile is required")

    family_size = len(profiles)
    meals = [meal for day in plan for _, meal in day.meals()]
    if not meals:
        raise ValueError("The menu plan has no meals")

    steps = []
    if any(meal.is_detailed for meal in meals):
        steps.append(
            "Where a dish lists its ingredients, use exactly those ingredients and quantities. "
            "Do not re-derive them."
        )
    if not all(meal.is_detailed for meal in meals):
        steps.append(
            "Where a dish has no ingredients yet, work out the ingredients and exact quantities "
            f"needed for {family_size} people from the dish name."
        )
    steps += [
        "Consolidate the ingredients of all recipes. When an ingredient appears in several "
        "dishes, SUM the quantities into a single item (e.g. 2 onions for one recipe and "
        "1 onion for another make one item of 3 onions). Keep the unit; never list the same "
        "ingredient twice.",
        "Group the final list into logical supermarket categories (e.g. "
        + ", ".join(f"'{c}'" for c in SHOPPING_CATEGORIES)
        + ").",
        "Give clear, specific quantities (e.g. \"500g chicken breast\", \"3 large onions\", \"1L milk\").",
        "Give every item a unique ID using a UUID.",
    ]

    instruction = f"""You are an expert nutritionist and chef building an optimised shopping list for a family.

TASK:
Based on the following meal plan for {family_size} people, produce a complete, consolidated shopping list for the whole plan.

MEAL PLAN:
{render_plan_meals(plan, family_size)}

INSTRUCTIONS:
{_numbered(steps)}

The output must be a single valid JSON object that strictly follows the provided schema. Write the response in {language}."""

    return PromptRequest(name="shopping_list", instruction=instruction, schema=SHOPPING_LIST_SCHEMA)
