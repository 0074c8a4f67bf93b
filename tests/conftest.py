"""Shared fixtures: profiles, plans, a scripted model client and a fake clock."""

import json
from datetime import date, timedelta
from typing import List, Union

import pytest

from menu_planner.config import Settings
from menu_planner.models import DayMenu, Meal, Profile
from menu_planner.services.ai_planner import MenuPlanner
from menu_planner.services.retry import RetryPolicy
from menu_planner.services.session import default_profiles


START = date(2024, 7, 29)

LUNCHES = [
    "Lentejas estofadas",
    "Paella de verduras",
    "Merluza a la plancha",
    "Garbanzos con espinacas",
    "Pollo al ajillo",
    "Arroz al horno",
    "Cocido madrileño",
]
DINNERS = [
    "Tortilla de patatas",
    "Crema de calabacín",
    "Ensalada de quinoa",
    "Revuelto de setas",
    "Salmón al horno",
    "Pisto con huevo",
    "Sopa de pescado",
]
DAY_NAMES = ["Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo"]


def plan_payload(days: int = 7, start: date = START, breakfasts: bool = False) -> list:
    payload = []
    for i in range(days):
        entry = {
            "day": DAY_NAMES[i % 7],
            "date": (start + timedelta(days=i)).isoformat(),
            "lunch": {"name": LUNCHES[i % 7]},
            "dinner": {"name": DINNERS[i % 7]},
        }
        if breakfasts:
            entry["breakfast"] = {"name": "Tostada con tomate"}
        payload.append(entry)
    return payload


def details_payload(name: str = "Lentejas estofadas") -> dict:
    return {
        "name": name,
        "ingredients": ["400g lentejas", "1 cebolla", "2 zanahorias", "1 diente de ajo"],
        "preparation": "1. Pochar la cebolla.\n2. Añadir las lentejas y el agua.\n3. Cocer 40 minutos.",
        "nutrition": {"calories": 420, "protein": 24, "carbs": 60, "fat": 8},
        "motivational_note": "Las legumbres son una gran fuente de fibra y proteína.",
    }


class ScriptedClient:
    """Stands in for GeminiClient: replays responses or raises errors in order."""

    def __init__(self, *responses: Union[str, BaseException]):
        self.responses = list(responses)
        self.requests = []

    async def generate(self, request):
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("Unexpected call to the model")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def calls(self) -> int:
        return len(self.requests)


class FakeSleep:
    """Records requested delays instead of waiting."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="test-key", gemini_model="gemini-test")


@pytest.fixture
def profiles() -> List[Profile]:
    return default_profiles()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def make_planner(settings, fake_sleep):
    def _make(*responses):
        client = ScriptedClient(*responses)
        planner = MenuPlanner(
            client=client,
            settings=settings,
            retry_policy=RetryPolicy(max_attempts=3, base_delay=1.0, multiplier=2.0),
            sleep=fake_sleep,
        )
        return planner, client

    return _make


@pytest.fixture
def named_plan() -> List[DayMenu]:
    return [
        DayMenu(
            day=DAY_NAMES[i],
            date=START + timedelta(days=i),
            lunch=Meal(name=LUNCHES[i]),
            dinner=Meal(name=DINNERS[i]),
        )
        for i in range(7)
    ]


def as_json(payload) -> str:
    return json.dumps(payload, ensure_ascii=False)
