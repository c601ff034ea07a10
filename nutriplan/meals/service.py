# -*- coding: utf-8 -*-
"""Meals — AI meal suggestions routed through the request governor.

Each public coroutine pairs a remote request (prompt -> Groq -> parsed domain
object) with a local fallback from the static recipe tables, and hands both to
``RequestGovernor.execute``. Callers always receive a usable object; a
degraded response is visible only in the logs and in ``Meal.source``.
"""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import date, timedelta
from typing import List, Optional

from ..ai_client import GroqChatClient, LLMConfigError
from ..governor import RequestGovernor, default_governor
from .fallback import FALLBACK_ADVICE, fallback_meal, fallback_recipes
from .models import MEAL_TYPES, AIHealth, DayPlan, Meal, MealType, NutritionTotals, UserProfile, WeekPlan
from .parsing import parse_meal_response, parse_recipes_response
from .prompts import (
    ADVICE_SYSTEM_PROMPT,
    HEALTH_CHECK_PROMPT,
    advice_prompt,
    personalized_meal_prompt,
    recipes_prompt,
)

log = logging.getLogger(__name__)


def compute_totals(meals: List[Meal]) -> NutritionTotals:
    calories = 0.0
    protein = 0.0
    carbs = 0.0
    fat = 0.0
    fiber = 0.0
    for meal in meals:
        calories += meal.calories
        protein += meal.protein
        carbs += meal.carbs
        fat += meal.fats
        fiber += meal.fiber
    return NutritionTotals(
        calories_kcal=round(calories, 1),
        protein_g=round(protein, 1),
        carbs_g=round(carbs, 1),
        fat_g=round(fat, 1),
        fiber_g=round(fiber, 1),
    )


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


class MealSuggestionService:
    def __init__(
        self,
        client: Optional[GroqChatClient] = None,
        governor: Optional[RequestGovernor] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.client = client or GroqChatClient()
        self.governor = governor or default_governor
        self.rng = rng or random.Random()

    async def generate_personalized_meal(
        self,
        meal_type: MealType | str,
        profile: UserProfile,
        preferences: Optional[str] = None,
    ) -> Meal:
        meal_type = MealType(meal_type)
        prompt = personalized_meal_prompt(meal_type, profile, preferences)

        async def request() -> Meal:
            text = await self.client.complete(prompt)
            meal = parse_meal_response(text, meal_type)
            log.info("AI generated %s: %s", meal_type.value, meal.name)
            return meal

        def fallback() -> Meal:
            meal = fallback_meal(meal_type, profile, rng=self.rng)
            log.info("Fallback %s: %s", meal_type.value, meal.name)
            return meal

        return await self.governor.execute(request, fallback)

    async def generate_day_plan(self, profile: UserProfile, day: Optional[date] = None) -> DayPlan:
        day = day or date.today()
        results = await asyncio.gather(
            *(self.generate_personalized_meal(meal_type, profile) for meal_type in MEAL_TYPES),
            return_exceptions=True,
        )
        meals: List[Meal] = []
        for meal_type, result in zip(MEAL_TYPES, results):
            if isinstance(result, BaseException):
                log.error("Failed to generate %s: %s", meal_type.value, result)
                result = fallback_meal(meal_type, profile, rng=self.rng)
            meals.append(result)

        breakfast, lunch, dinner, snack = meals
        return DayPlan(
            date=day.isoformat(),
            breakfast=breakfast,
            lunch=lunch,
            dinner=dinner,
            snacks=[snack],
            totals=compute_totals(meals),
        )

    async def generate_week_plan(self, profile: UserProfile, start: Optional[date] = None) -> WeekPlan:
        monday = week_start(start or date.today())
        days: List[DayPlan] = []
        for offset in range(7):
            days.append(await self.generate_day_plan(profile, monday + timedelta(days=offset)))
        return WeekPlan(
            start=monday.isoformat(),
            end=(monday + timedelta(days=6)).isoformat(),
            days=days,
        )

    async def generate_recipes_for_user(
        self,
        meal_type: MealType | str,
        profile: UserProfile,
        count: int = 3,
    ) -> List[Meal]:
        meal_type = MealType(meal_type)
        prompt = recipes_prompt(meal_type, profile, count)

        async def request() -> List[Meal]:
            text = await self.client.complete(prompt)
            return parse_recipes_response(text, meal_type)[:count]

        def fallback() -> List[Meal]:
            log.info("Using fallback %s recipes", meal_type.value)
            return fallback_recipes(meal_type, profile, count, rng=self.rng)

        return await self.governor.execute(request, fallback)

    async def generate_all_recipes_for_user(self, profile: UserProfile, per_type: int = 2) -> List[Meal]:
        recipes: List[Meal] = []
        for meal_type in MEAL_TYPES:
            recipes.extend(await self.generate_recipes_for_user(meal_type, profile, per_type))
        return recipes

    async def get_nutrition_advice(self, profile: UserProfile, question: str) -> str:
        prompt = advice_prompt(profile, question)

        async def request() -> str:
            text = await self.client.complete(prompt, system=ADVICE_SYSTEM_PROMPT)
            return text.strip()

        return await self.governor.execute(request, lambda: FALLBACK_ADVICE)

    async def check_api_health(self) -> AIHealth:
        """Probe the remote generator directly, bypassing the governor.

        A missing credential raises ``LLMConfigError``; any other failure is
        reported as ``groq=False``.
        """
        try:
            await self.client.complete(HEALTH_CHECK_PROMPT)
        except LLMConfigError:
            raise
        except Exception as exc:
            log.warning("Groq API health check failed: %s", exc)
            return AIHealth(groq=False, detail=str(exc))
        return AIHealth(groq=True)
