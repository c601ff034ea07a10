# -*- coding: utf-8 -*-
"""Meals — parsing of model output into Meal objects."""

from __future__ import annotations

import json
import re
import time
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .models import Meal, MealType

DEFAULT_EMOJI = "🍽️"

REQUIRED_MEAL_FIELDS = (
    "name",
    "description",
    "calories",
    "protein",
    "carbs",
    "fats",
    "ingredients",
    "instructions",
)

_FIELD_ALIASES = {
    "prepTime": "prep_time",
    "prep_time_mins": "prep_time",
    "cookTime": "cook_time",
    "cook_time_mins": "cook_time",
    "imageEmoji": "image_emoji",
    "healthBenefits": "health_benefits",
    "fat": "fats",
    "carbohydrates": "carbs",
    "kcal": "calories",
    "mealType": "meal_type",
}

_CODE_FENCE = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)\s*```")

_decoder = json.JSONDecoder()


class JSONExtractionError(ValueError):
    pass


class MealValidationError(ValueError):
    pass


def _candidates(text: str) -> List[str]:
    fenced = [m.group(1) for m in _CODE_FENCE.finditer(text)]
    return fenced + [text]


def extract_json_fragment(text: str, kind: Optional[str] = None) -> Any:
    """Return the first well-formed JSON object or array found in ``text``.

    Leading/trailing prose and markdown code fences are tolerated. ``kind``
    restricts the match to ``"object"`` or ``"array"``.
    """
    openers = {"object": "{", "array": "[", None: "{["}[kind]
    for candidate in _candidates(text or ""):
        for idx, ch in enumerate(candidate):
            if ch not in openers:
                continue
            try:
                value, _ = _decoder.raw_decode(candidate, idx)
            except json.JSONDecodeError:
                continue
            return value
    what = f"JSON {kind}" if kind else "JSON object or array"
    raise JSONExtractionError(f"No valid {what} found in response")


def normalize_meal_payload(raw: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in raw.items():
        target = _FIELD_ALIASES.get(key, key)
        # Canonical key wins over an alias.
        if target in out and key != target:
            continue
        out[target] = value
    return out


def _number(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    match = re.search(r"\d+(?:\.\d+)?", str(value))
    return float(match.group(0)) if match else default


def _new_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def parse_meal_response(text: str, meal_type: MealType | str) -> Meal:
    data = extract_json_fragment(text, kind="object")
    payload = normalize_meal_payload(data)

    missing = [field for field in REQUIRED_MEAL_FIELDS if not payload.get(field)]
    if missing:
        raise MealValidationError(f"Missing required field(s): {', '.join(missing)}")

    emoji = payload.get("emoji") or payload.get("image_emoji") or DEFAULT_EMOJI
    image_emoji = payload.get("image_emoji") or payload.get("emoji") or DEFAULT_EMOJI
    known = {
        **payload,
        "id": _new_id("meal"),
        "meal_type": MealType(meal_type),
        "calories": _number(payload.get("calories"), 0.0),
        "protein": _number(payload.get("protein"), 0.0),
        "carbs": _number(payload.get("carbs"), 0.0),
        "fats": _number(payload.get("fats"), 0.0),
        "fiber": _number(payload.get("fiber"), 5.0) or 5.0,
        "prep_time": int(_number(payload.get("prep_time"), 10.0)) or 10,
        "cook_time": int(_number(payload.get("cook_time"), 15.0)) or 15,
        "tags": payload.get("tags") or ["healthy"],
        "emoji": emoji,
        "image_emoji": image_emoji,
        "source": "ai",
    }
    try:
        return Meal.model_validate(known)
    except ValidationError as exc:
        raise MealValidationError(f"Invalid meal payload: {exc}") from exc


def parse_recipes_response(text: str, meal_type: MealType | str) -> List[Meal]:
    data = extract_json_fragment(text)
    if isinstance(data, dict):
        data = data.get("recipes") or data.get("items")
    if not isinstance(data, list):
        raise JSONExtractionError("No JSON array of recipes found in response")

    kind = MealType(meal_type)
    stamp = int(time.time() * 1000)
    recipes: List[Meal] = []
    for index, raw in enumerate(data):
        if not isinstance(raw, dict):
            continue
        recipe = normalize_meal_payload(raw)
        emoji = recipe.get("image_emoji") or recipe.get("emoji") or DEFAULT_EMOJI
        known = {
            "id": f"recipe_{kind.value}_{stamp}_{index}",
            "name": recipe.get("name") or "Healthy Recipe",
            "description": recipe.get("description") or "",
            "calories": _number(recipe.get("calories"), 300.0) or 300.0,
            "protein": _number(recipe.get("protein"), 15.0) or 15.0,
            "carbs": _number(recipe.get("carbs"), 30.0) or 30.0,
            "fats": _number(recipe.get("fats"), 10.0) or 10.0,
            "fiber": _number(recipe.get("fiber"), 5.0) or 5.0,
            "ingredients": recipe.get("ingredients") or [],
            "instructions": recipe.get("instructions") or [],
            "prep_time": int(_number(recipe.get("prep_time"), 10.0)) or 10,
            "cook_time": int(_number(recipe.get("cook_time"), 15.0)) or 15,
            "meal_type": kind,
            "tags": recipe.get("tags") or ["healthy"],
            "emoji": emoji,
            "image_emoji": emoji,
            "health_benefits": recipe.get("health_benefits") or [],
            "source": "ai",
        }
        try:
            recipes.append(Meal.model_validate(known))
        except ValidationError as exc:
            raise MealValidationError(f"Invalid recipe at index {index}: {exc}") from exc

    if not recipes:
        raise MealValidationError("Recipe list is empty")
    return recipes
