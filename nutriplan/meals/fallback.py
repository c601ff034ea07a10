# -*- coding: utf-8 -*-
"""Meals — static fallback recipes used when the AI path is unavailable."""

from __future__ import annotations

import random
import time
from typing import Dict, List, Optional

from .models import Meal, MealType, UserProfile
from .prompts import macro_targets, target_calories

FALLBACK_ADVICE = (
    "Focus on balanced meals with lean proteins, vegetables, and whole grains for optimal health."
)

FALLBACK_MEALS: Dict[MealType, List[dict]] = {
    MealType.breakfast: [
        {
            "name": "Protein Oatmeal Bowl",
            "description": "Nutritious oatmeal with protein powder and fresh berries",
            "emoji": "🥣",
            "ingredients": ["1 cup rolled oats", "1 scoop protein powder", "1 cup almond milk", "1/2 cup berries", "1 tbsp honey"],
            "instructions": ["Cook oats with almond milk", "Stir in protein powder", "Top with berries and honey"],
        },
        {
            "name": "Veggie Egg Scramble",
            "description": "Fluffy eggs with colorful vegetables and herbs",
            "emoji": "🍳",
            "ingredients": ["3 eggs", "1/2 cup spinach", "1/4 cup tomatoes", "1/4 cup mushrooms", "1 tbsp olive oil"],
            "instructions": ["Sauté vegetables in olive oil", "Add beaten eggs", "Scramble until cooked", "Season with herbs"],
        },
        {
            "name": "Avocado Toast Deluxe",
            "description": "Whole grain toast with creamy avocado and toppings",
            "emoji": "🥑",
            "ingredients": ["2 slices whole grain bread", "1 ripe avocado", "2 eggs", "Cherry tomatoes", "Everything bagel seasoning"],
            "instructions": ["Toast bread until golden", "Mash avocado and spread", "Top with poached eggs", "Add tomatoes and seasoning"],
        },
    ],
    MealType.lunch: [
        {
            "name": "Grilled Chicken Salad",
            "description": "Fresh salad with grilled chicken and colorful vegetables",
            "emoji": "🥗",
            "ingredients": ["150g chicken breast", "2 cups mixed greens", "1 cup cherry tomatoes", "1/2 avocado", "2 tbsp olive oil"],
            "instructions": ["Grill chicken breast", "Mix salad greens", "Add tomatoes and avocado", "Top with grilled chicken"],
        },
        {
            "name": "Quinoa Buddha Bowl",
            "description": "Nutritious bowl with quinoa, chickpeas, and roasted veggies",
            "emoji": "🥙",
            "ingredients": ["1 cup quinoa", "1/2 cup chickpeas", "1 cup roasted vegetables", "2 tbsp tahini", "Lemon juice"],
            "instructions": ["Cook quinoa", "Roast vegetables", "Arrange in bowl", "Drizzle with tahini dressing"],
        },
        {
            "name": "Turkey Wrap",
            "description": "Lean turkey with fresh vegetables in a whole wheat wrap",
            "emoji": "🌯",
            "ingredients": ["100g turkey breast", "1 whole wheat wrap", "Lettuce", "Tomato", "Hummus"],
            "instructions": ["Spread hummus on wrap", "Layer turkey and vegetables", "Roll tightly", "Cut in half"],
        },
    ],
    MealType.dinner: [
        {
            "name": "Baked Salmon with Veggies",
            "description": "Healthy baked salmon with roasted vegetables",
            "emoji": "🐟",
            "ingredients": ["200g salmon fillet", "1 cup broccoli", "1 cup carrots", "2 tbsp olive oil", "1 lemon"],
            "instructions": ["Preheat oven to 190°C", "Season salmon and vegetables", "Bake for 20 minutes", "Serve with lemon"],
        },
        {
            "name": "Grilled Chicken & Sweet Potato",
            "description": "Herb-marinated chicken with roasted sweet potato",
            "emoji": "🍗",
            "ingredients": ["150g chicken breast", "1 medium sweet potato", "Green beans", "Olive oil", "Rosemary"],
            "instructions": ["Marinate chicken with herbs", "Cube and roast sweet potato", "Grill chicken", "Steam green beans"],
        },
        {
            "name": "Lean Beef Stir-Fry",
            "description": "Quick stir-fry with lean beef and colorful vegetables",
            "emoji": "🥘",
            "ingredients": ["150g lean beef", "Bell peppers", "Broccoli", "Soy sauce", "Ginger"],
            "instructions": ["Slice beef thinly", "Stir-fry vegetables", "Add beef and sauce", "Serve over brown rice"],
        },
    ],
    MealType.snack: [
        {
            "name": "Greek Yogurt Parfait",
            "description": "Creamy Greek yogurt with nuts and honey",
            "emoji": "🥛",
            "ingredients": ["1 cup Greek yogurt", "1/4 cup nuts", "1 tbsp honey", "1/2 banana"],
            "instructions": ["Layer yogurt in a bowl", "Add sliced banana", "Top with nuts and honey"],
        },
        {
            "name": "Apple with Almond Butter",
            "description": "Crisp apple slices with creamy almond butter",
            "emoji": "🍎",
            "ingredients": ["1 medium apple", "2 tbsp almond butter", "Cinnamon"],
            "instructions": ["Slice apple", "Serve with almond butter", "Sprinkle with cinnamon"],
        },
        {
            "name": "Veggie Sticks & Hummus",
            "description": "Fresh vegetable sticks with creamy hummus",
            "emoji": "🥕",
            "ingredients": ["Carrots", "Celery", "Cucumber", "1/4 cup hummus"],
            "instructions": ["Cut vegetables into sticks", "Serve with hummus for dipping"],
        },
    ],
}


def _build_meal(option: dict, meal_type: MealType, profile: UserProfile, meal_id: str) -> Meal:
    calories = target_calories(meal_type, profile)
    return Meal(
        id=meal_id,
        name=option["name"],
        description=option["description"],
        calories=calories,
        **macro_targets(calories),
        ingredients=list(option["ingredients"]),
        instructions=list(option["instructions"]),
        prep_time=15,
        cook_time=20,
        meal_type=meal_type,
        tags=["healthy", "balanced"],
        emoji=option["emoji"],
        image_emoji=option["emoji"],
        source="fallback",
    )


def fallback_meal(
    meal_type: MealType | str,
    profile: UserProfile,
    rng: Optional[random.Random] = None,
) -> Meal:
    """Pick one static meal for ``meal_type``, scaled to the profile's calorie target."""
    kind = MealType(meal_type)
    option = (rng or random).choice(FALLBACK_MEALS[kind])
    return _build_meal(option, kind, profile, f"fallback_{int(time.time() * 1000)}_{kind.value}")


def fallback_recipes(
    meal_type: MealType | str,
    profile: UserProfile,
    count: int,
    rng: Optional[random.Random] = None,
) -> List[Meal]:
    kind = MealType(meal_type)
    options = FALLBACK_MEALS[kind]
    picks = (rng or random).sample(options, k=max(1, min(count, len(options))))
    stamp = int(time.time() * 1000)
    return [
        _build_meal(option, kind, profile, f"fallback_{stamp}_{kind.value}_{index}")
        for index, option in enumerate(picks)
    ]
