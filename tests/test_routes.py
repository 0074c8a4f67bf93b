"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from conftest import START, as_json, details_payload, plan_payload
from menu_planner.api.routes import get_planner
from menu_planner.main import create_app
from menu_planner.services.errors import ConfigurationMissingError, OverloadedError


PROFILES = [
    {"name": "Teenager 1", "age": 15, "gender": "male", "activity_level": "high", "notes": "Basketball player"},
    {"name": "Adult 1", "age": 50, "gender": "female", "activity_level": "moderate"},
]


@pytest.fixture
def api(make_planner):
    app = create_app()

    def _client(*responses):
        planner, model = make_planner(*responses)
        app.dependency_overrides[get_planner] = lambda: planner
        return TestClient(app), model

    return _client


def test_health(api):
    client, _ = api()
    assert client.get("/health").json() == {"status": "ok"}


def test_generate_plan(api):
    client, model = api(as_json(plan_payload(7)))

    response = client.post("/api/v1/plan", json={
        "profiles": PROFILES,
        "duration": 7,
        "start_date": START.isoformat(),
    })

    assert response.status_code == 200
    days = response.json()
    assert len(days) == 7
    assert days[0]["date"] == "2024-07-29"
    assert days[0]["lunch"]["name"] == "Lentejas estofadas"
    assert days[0]["breakfast"] is None
    assert model.calls == 1


def test_generate_plan_validates_input(api):
    client, model = api()

    no_profiles = client.post("/api/v1/plan", json={"profiles": [], "start_date": "2024-07-29"})
    bad_duration = client.post("/api/v1/plan", json={
        "profiles": PROFILES, "duration": 10, "start_date": "2024-07-29",
    })

    assert no_profiles.status_code == 422
    assert bad_duration.status_code == 422
    assert model.calls == 0


def test_generate_details_excludes_name(api):
    client, model = api(as_json(details_payload()))

    response = client.post("/api/v1/details", json={"meal_name": "Lentejas estofadas", "family_size": 4})

    assert response.status_code == 200
    body = response.json()
    assert "name" not in body
    assert set(body) == {"ingredients", "preparation", "nutrition", "motivational_note"}
    assert body["nutrition"]["protein"] == 24


def test_generate_shopping_list(api):
    reply = {"categories": [{"name": "Despensa", "items": [{"id": "x", "name": "Arroz", "quantity": "1kg"}]}]}
    client, _ = api(as_json(reply))

    response = client.post("/api/v1/shopping-list", json={
        "menu_plan": plan_payload(7),
        "profiles": PROFILES,
    })

    assert response.status_code == 200
    assert response.json()["categories"][0]["items"][0] == {"id": "x", "name": "Arroz", "quantity": "1kg"}


def test_shopping_list_for_plan_without_meals_is_bad_request(api):
    client, model = api()
    response = client.post("/api/v1/shopping-list", json={
        "menu_plan": [{"day": "Lunes", "date": "2024-07-29"}],
        "profiles": PROFILES,
    })
    assert response.status_code == 400
    assert model.calls == 0


def test_planner_errors_become_single_message(api):
    client, _ = api(OverloadedError(), OverloadedError(), OverloadedError())

    response = client.post("/api/v1/details", json={"meal_name": "Gazpacho", "family_size": 2})

    assert response.status_code == 503
    assert response.json() == {
        "message": OverloadedError.default_message,
        "kind": "overloaded",
    }


def test_missing_configuration_is_server_error(api):
    client, _ = api(ConfigurationMissingError())
    response = client.post("/api/v1/details", json={"meal_name": "Gazpacho", "family_size": 2})
    assert response.status_code == 500
    assert response.json()["kind"] == "configuration_missing"


def test_blank_meal_name_is_bad_request(api):
    client, model = api()
    response = client.post("/api/v1/details", json={"meal_name": "   ", "family_size": 4})
    assert response.status_code == 400
    assert model.calls == 0
