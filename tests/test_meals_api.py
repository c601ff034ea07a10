# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import random
import unittest

from fastapi.testclient import TestClient

from nutriplan.ai_client import SYSTEM_PROMPT, GroqChatClient, RemoteGenerationError
from nutriplan.api import app
from nutriplan.governor import CallState, RequestGovernor
from nutriplan.meals.api import get_meal_service
from nutriplan.meals.fallback import FALLBACK_ADVICE
from nutriplan.meals.service import MealSuggestionService

PROFILE = {
    "name": "Alex",
    "age": 41,
    "gender": "male",
    "weight": 82.5,
    "height": 180,
    "goal": "build muscle",
    "activity_level": "active",
    "allergies": "peanuts",
    "calorie_target": 2600,
}


class _UnavailableClient:
    async def complete(self, prompt: str, *, system: str = SYSTEM_PROMPT) -> str:
        raise RemoteGenerationError("Groq API error 500: upstream", status_code=500, body="upstream")


class _CannedClient:
    def __init__(self, reply: str) -> None:
        self.reply = reply

    async def complete(self, prompt: str, *, system: str = SYSTEM_PROMPT) -> str:
        return self.reply


def _governor() -> RequestGovernor:
    return RequestGovernor(
        CallState(),
        min_interval_s=0.0,
        failure_threshold=2,
        default_rate_limit_delay_s=0.0,
        max_retries=0,
        backoff_base_s=0.0,
    )


class TestMealsApi(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.client.close()

    def _use(self, client) -> None:
        service = MealSuggestionService(client=client, governor=_governor(), rng=random.Random(0))
        app.dependency_overrides[get_meal_service] = lambda: service

    def test_health(self) -> None:
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})

    def test_meal_types(self) -> None:
        resp = self.client.get("/api/meals/types")
        self.assertEqual(resp.json()["items"], ["breakfast", "lunch", "dinner", "snack"])

    def test_generate_meal_from_ai(self) -> None:
        reply = json.dumps(
            {
                "name": "Steak Power Bowl",
                "description": "Seared steak over rice and greens.",
                "calories": 900,
                "protein": 60,
                "carbs": 90,
                "fats": 30,
                "ingredients": ["steak", "rice", "greens"],
                "instructions": ["Sear", "Slice", "Serve"],
                "imageEmoji": "🥩",
            }
        )
        self._use(_CannedClient(reply))

        resp = self.client.post("/api/meals/generate", json={"profile": PROFILE, "meal_type": "dinner"})

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["name"], "Steak Power Bowl")
        self.assertEqual(data["meal_type"], "dinner")
        self.assertEqual(data["source"], "ai")
        self.assertEqual(data["image_emoji"], "🥩")

    def test_generate_meal_degrades_silently(self) -> None:
        self._use(_UnavailableClient())

        resp = self.client.post("/api/meals/generate", json={"profile": PROFILE, "meal_type": "breakfast"})

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["source"], "fallback")
        self.assertEqual(data["calories"], 650)

    def test_day_plan(self) -> None:
        self._use(_UnavailableClient())

        resp = self.client.post("/api/meals/day-plan", json={"profile": PROFILE, "date": "2026-10-20"})

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["date"], "2026-10-20")
        self.assertEqual(len(data["snacks"]), 1)
        self.assertEqual(data["totals"]["calories_kcal"], 2600.0)

    def test_day_plan_rejects_bad_date(self) -> None:
        self._use(_UnavailableClient())
        resp = self.client.post("/api/meals/day-plan", json={"profile": PROFILE, "date": "20/10/2026"})
        self.assertEqual(resp.status_code, 400)

    def test_week_plan(self) -> None:
        self._use(_UnavailableClient())

        resp = self.client.post("/api/meals/week-plan", json={"profile": PROFILE, "start": "2026-10-18"})

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["start"], "2026-10-12")
        self.assertEqual(len(data["days"]), 7)

    def test_recipes_for_all_meal_types(self) -> None:
        self._use(_UnavailableClient())

        resp = self.client.post("/api/meals/recipes", json={"profile": PROFILE, "count": 1})

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["count"], 4)
        self.assertEqual({item["meal_type"] for item in data["items"]}, {"breakfast", "lunch", "dinner", "snack"})

    def test_recipes_count_is_validated(self) -> None:
        self._use(_UnavailableClient())
        resp = self.client.post("/api/meals/recipes", json={"profile": PROFILE, "meal_type": "lunch", "count": 0})
        self.assertEqual(resp.status_code, 422)

    def test_advice_fallback(self) -> None:
        self._use(_UnavailableClient())
        resp = self.client.post("/api/meals/advice", json={"profile": PROFILE, "question": "Protein timing?"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"advice": FALLBACK_ADVICE})

    def test_ai_health_without_key(self) -> None:
        self._use(GroqChatClient(api_key=""))
        resp = self.client.get("/api/ai/health")
        self.assertEqual(resp.status_code, 503)
        self.assertIn("GROQ_API_KEY", resp.json()["detail"])

    def test_ai_health_reports_unavailable(self) -> None:
        self._use(_UnavailableClient())
        resp = self.client.get("/api/ai/health")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["groq"])


if __name__ == "__main__":
    unittest.main()
