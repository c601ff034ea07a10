# -*- coding: utf-8 -*-
"""Meals — API endpoints."""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..ai_client import LLMConfigError
from .models import (
    MEAL_TYPES,
    AdviceRequest,
    AdviceResponse,
    AIHealth,
    DayPlan,
    DayPlanRequest,
    Meal,
    MealGenerateRequest,
    RecipesRequest,
    RecipesResponse,
    WeekPlan,
    WeekPlanRequest,
)
from .service import MealSuggestionService

router = APIRouter(prefix="/api", tags=["Meals"])


@lru_cache(maxsize=1)
def get_meal_service() -> MealSuggestionService:
    return MealSuggestionService()


def _parse_date_or_400(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid date (expected YYYY-MM-DD): {value}") from exc


@router.post("/meals/generate", response_model=Meal, summary="Generate one personalized meal")
async def generate_meal(
    request: MealGenerateRequest,
    service: MealSuggestionService = Depends(get_meal_service),
):
    return await service.generate_personalized_meal(request.meal_type, request.profile, request.preferences)


@router.post("/meals/day-plan", response_model=DayPlan, summary="Generate a day of meals")
async def day_plan(
    request: DayPlanRequest,
    service: MealSuggestionService = Depends(get_meal_service),
):
    return await service.generate_day_plan(request.profile, _parse_date_or_400(request.date))


@router.post("/meals/week-plan", response_model=WeekPlan, summary="Generate a Monday-Sunday meal plan")
async def week_plan(
    request: WeekPlanRequest,
    service: MealSuggestionService = Depends(get_meal_service),
):
    return await service.generate_week_plan(request.profile, _parse_date_or_400(request.start))


@router.post("/meals/recipes", response_model=RecipesResponse, summary="Generate recipe variations")
async def recipes(
    request: RecipesRequest,
    service: MealSuggestionService = Depends(get_meal_service),
):
    if request.meal_type is None:
        items = await service.generate_all_recipes_for_user(request.profile, per_type=request.count)
    else:
        items = await service.generate_recipes_for_user(request.meal_type, request.profile, request.count)
    return RecipesResponse(count=len(items), items=items)


@router.post("/meals/advice", response_model=AdviceResponse, summary="Short nutrition advice")
async def advice(
    request: AdviceRequest,
    service: MealSuggestionService = Depends(get_meal_service),
):
    text = await service.get_nutrition_advice(request.profile, request.question)
    return AdviceResponse(advice=text)


@router.get("/meals/types", summary="Supported meal types")
def meal_types() -> dict:
    return {"items": [t.value for t in MEAL_TYPES]}


@router.get("/ai/health", response_model=AIHealth, summary="Remote generator availability")
async def ai_health(service: MealSuggestionService = Depends(get_meal_service)):
    try:
        return await service.check_api_health()
    except LLMConfigError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
