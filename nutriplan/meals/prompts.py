# -*- coding: utf-8 -*-
"""Meals — prompt templates."""

from __future__ import annotations

import json
from typing import List, Optional

from .models import MealType, UserProfile

_MEAL_SHARE = {
    MealType.breakfast: 0.25,
    MealType.lunch: 0.30,
    MealType.dinner: 0.35,
    MealType.snack: 0.10,
}


def target_calories(meal_type: MealType | str, profile: UserProfile) -> int:
    try:
        share = _MEAL_SHARE[MealType(meal_type)]
    except ValueError:
        return 400
    return round(profile.calorie_target * share)


def macro_targets(calories: float) -> dict:
    return {
        "protein": round(calories * 0.25 / 4),
        "carbs": round(calories * 0.45 / 4),
        "fats": round(calories * 0.30 / 9),
        "fiber": round(calories * 0.05 / 4),
    }


def _joined(values: List[str]) -> str:
    return ", ".join(values) if values else "None"


def personalized_meal_prompt(
    meal_type: MealType, profile: UserProfile, preferences: Optional[str] = None
) -> str:
    calories = target_calories(meal_type, profile)
    macros = macro_targets(calories)
    example = {
        "name": "Creative Recipe Name",
        "description": "Brief, appetizing description in 1-2 sentences",
        "calories": calories,
        **macros,
        "ingredients": ["1 cup ingredient with measurement", "2 tbsp ingredient", "etc"],
        "instructions": ["Step 1: Clear instruction", "Step 2: Clear instruction", "etc"],
        "prepTime": 15,
        "cookTime": 20,
        "tags": ["healthy", "high-protein", "quick"],
        "imageEmoji": "🥗",
    }
    lines = [
        f"You are an expert nutritionist and chef. Create a personalized {meal_type.value} recipe for this user:",
        "",
        "USER PROFILE:",
        f"- Name: {profile.name or 'User'}",
        f"- Age: {profile.age}, Gender: {profile.gender}",
        f"- Weight: {profile.weight}kg, Height: {profile.height}cm",
        f"- Goal: {profile.goal}",
        f"- Daily Calorie Target: {profile.calorie_target} kcal",
        f"- Activity Level: {profile.activity_level}",
        f"- Dietary Restrictions: {_joined(profile.dietary_restrictions)}",
        f"- Health Conditions: {_joined(profile.health_conditions)}",
        f"- Allergies: {_joined(profile.allergies)}",
    ]
    if preferences:
        lines.append(f"- Special Preferences: {preferences}")
    lines += [
        "",
        "NUTRITIONAL REQUIREMENTS:",
        f"- Target calories: {calories} kcal",
        f"- High protein ({round(profile.weight * 2)}g daily target)",
        "- Balanced macronutrients",
        "- Consider health conditions and restrictions",
        "- Focus on whole, unprocessed foods",
        "",
        "RECIPE REQUIREMENTS:",
        "- Creative and appealing name",
        "- Exact macro breakdown",
        "- Realistic prep and cook times",
        "- 5-8 ingredients, 3-5 instruction steps",
        "",
        "CRITICAL: Respond with ONLY the JSON object below. No text before or after.",
        "",
        json.dumps(example, ensure_ascii=False, indent=2),
    ]
    return "\n".join(lines)


def recipes_prompt(meal_type: MealType, profile: UserProfile, count: int) -> str:
    conditions = _joined(profile.health_conditions) if profile.health_conditions else "general health"
    first_tag = profile.health_conditions[0] if profile.health_conditions else "healthy"
    example = [
        {
            "name": "Recipe Name",
            "description": "Brief description with health benefits",
            "calories": 350,
            "protein": 15,
            "carbs": 40,
            "fats": 12,
            "fiber": 5,
            "ingredients": ["ingredient 1", "ingredient 2"],
            "instructions": ["Step 1", "Step 2"],
            "prepTime": 10,
            "cookTime": 15,
            "tags": [first_tag, "nutritious"],
            "imageEmoji": "🥗",
            "healthBenefits": ["Benefit 1 for condition", "Benefit 2"],
        }
    ]
    return "\n".join(
        [
            f"Generate {count} unique {meal_type.value} recipes suitable for someone managing {conditions}.",
            "",
            "USER PROFILE:",
            f"- Age: {profile.age}, Gender: {profile.gender}",
            f"- Weight: {profile.weight}kg, Height: {profile.height}cm",
            f"- Goal: {profile.goal}",
            f"- Allergies: {_joined(profile.allergies)}",
            f"- Dietary Restrictions: {_joined(profile.dietary_restrictions)}",
            "",
            f"For each recipe, provide therapeutic benefits for {conditions}.",
            "",
            "CRITICAL: Respond with ONLY a JSON array. No text before or after.",
            "",
            json.dumps(example, ensure_ascii=False, indent=2),
        ]
    )


def advice_prompt(profile: UserProfile, question: str) -> str:
    return "\n".join(
        [
            "As a professional nutritionist, provide personalized advice for this user:",
            "",
            "USER PROFILE:",
            f"- {profile.name or 'User'}, {profile.age} years old, {profile.gender}",
            f"- Goal: {profile.goal}",
            f"- Weight: {profile.weight}kg, Height: {profile.height}cm",
            f"- Activity Level: {profile.activity_level}",
            f"- Restrictions: {_joined(profile.dietary_restrictions)}",
            f"- Conditions: {_joined(profile.health_conditions)}",
            "",
            f"QUESTION: {question}",
            "",
            "Provide concise, actionable advice (2-3 sentences max). "
            "Focus on evidence-based nutrition recommendations.",
        ]
    )


ADVICE_SYSTEM_PROMPT = (
    "You are a professional nutritionist. Answer in plain text, 2-3 sentences, no markdown."
)

HEALTH_CHECK_PROMPT = 'Respond with "OK" only'
