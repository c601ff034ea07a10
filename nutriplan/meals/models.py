# -*- coding: utf-8 -*-
"""Meals — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _as_str_list(value: object) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        v = value.strip()
        return [v] if v else []
    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for item in value:
            if item is None:
                continue
            s = str(item).strip()
            if s:
                out.append(s)
        return out
    s = str(value).strip()
    return [s] if s else []


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


MEAL_TYPES: List[MealType] = [MealType.breakfast, MealType.lunch, MealType.dinner, MealType.snack]


class UserProfile(BaseModel):
    name: str = ""
    age: int = Field(30, ge=0, le=130)
    gender: str = "unspecified"
    weight: float = Field(70.0, gt=0, description="kg")
    height: float = Field(170.0, gt=0, description="cm")
    goal: str = "maintain weight"
    activity_level: str = "moderate"
    dietary_restrictions: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    health_conditions: List[str] = Field(default_factory=list)
    calorie_target: int = Field(2000, gt=0, description="kcal per day")

    @field_validator("dietary_restrictions", "allergies", "health_conditions", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> List[str]:
        return _as_str_list(value)


class Meal(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    description: str = ""
    calories: float = Field(0.0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fats: float = Field(0.0, ge=0)
    fiber: float = Field(0.0, ge=0)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    prep_time: int = Field(10, ge=0, description="minutes")
    cook_time: int = Field(15, ge=0, description="minutes")
    meal_type: MealType
    tags: List[str] = Field(default_factory=list)
    emoji: str = "🍽️"
    image_emoji: str = "🍽️"
    health_benefits: List[str] = Field(default_factory=list)
    source: str = "ai"

    @field_validator("ingredients", "instructions", "tags", "health_benefits", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> List[str]:
        """LLM outputs sometimes return a single string where a list is expected."""
        return _as_str_list(value)

    @field_validator("prep_time", "cook_time", mode="before")
    @classmethod
    def _coerce_minutes(cls, value: object) -> object:
        if isinstance(value, float):
            return int(round(value))
        return value


class NutritionTotals(BaseModel):
    calories_kcal: float = Field(0.0, ge=0)
    protein_g: float = Field(0.0, ge=0)
    carbs_g: float = Field(0.0, ge=0)
    fat_g: float = Field(0.0, ge=0)
    fiber_g: float = Field(0.0, ge=0)


class DayPlan(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    breakfast: Meal
    lunch: Meal
    dinner: Meal
    snacks: List[Meal] = Field(default_factory=list)
    totals: NutritionTotals = Field(default_factory=NutritionTotals)

    def meals(self) -> List[Meal]:
        return [self.breakfast, self.lunch, self.dinner, *self.snacks]


class WeekPlan(BaseModel):
    start: str = Field(..., description="YYYY-MM-DD (Monday)")
    end: str = Field(..., description="YYYY-MM-DD (Sunday)")
    days: List[DayPlan]


class AIHealth(BaseModel):
    groq: bool
    detail: Optional[str] = None


# ---- API payloads ----


class MealGenerateRequest(BaseModel):
    profile: UserProfile
    meal_type: MealType
    preferences: Optional[str] = Field(None, max_length=500)


class DayPlanRequest(BaseModel):
    profile: UserProfile
    date: Optional[str] = Field(None, description="YYYY-MM-DD, defaults to today")


class WeekPlanRequest(BaseModel):
    profile: UserProfile
    start: Optional[str] = Field(None, description="Any date in the target week (YYYY-MM-DD)")


class RecipesRequest(BaseModel):
    profile: UserProfile
    meal_type: Optional[MealType] = Field(None, description="Omit to generate for every meal type")
    count: int = Field(3, ge=1, le=6)


class RecipesResponse(BaseModel):
    count: int
    items: List[Meal]


class AdviceRequest(BaseModel):
    profile: UserProfile
    question: str = Field(..., min_length=1, max_length=1000)


class AdviceResponse(BaseModel):
    advice: str
