# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest

from nutriplan.meals.models import MealType
from nutriplan.meals.parsing import (
    JSONExtractionError,
    MealValidationError,
    extract_json_fragment,
    normalize_meal_payload,
    parse_meal_response,
    parse_recipes_response,
)

_MEAL = {
    "name": "Spinach Feta Omelette",
    "description": "Fluffy eggs folded with spinach and feta.",
    "calories": 480,
    "protein": 32,
    "carbs": 12,
    "fats": 30,
    "ingredients": ["3 eggs", "1 cup spinach", "30g feta"],
    "instructions": ["Whisk eggs", "Wilt spinach", "Fold in feta and cook"],
    "prepTime": 5,
    "cookTime": 8,
    "imageEmoji": "🍳",
}


class TestExtractJsonFragment(unittest.TestCase):
    def test_object_wrapped_in_prose_and_code_fence(self) -> None:
        text = "Here is your recipe:\n```json\n" + json.dumps(_MEAL) + "\n```\nEnjoy!"
        self.assertEqual(extract_json_fragment(text)["name"], "Spinach Feta Omelette")

    def test_skips_malformed_braces_before_valid_object(self) -> None:
        text = 'Note {this is not json} and then {"a": 1} trailing'
        self.assertEqual(extract_json_fragment(text), {"a": 1})

    def test_array_kind(self) -> None:
        text = 'Sure, {"ignored": true} but the list is [{"name": "A"}] done'
        self.assertEqual(extract_json_fragment(text, kind="array"), [{"name": "A"}])

    def test_nothing_found(self) -> None:
        with self.assertRaises(JSONExtractionError):
            extract_json_fragment("I cannot help with that.")


class TestNormalizeMealPayload(unittest.TestCase):
    def test_camel_case_aliases(self) -> None:
        known = normalize_meal_payload({"prepTime": 5, "cookTime": 10, "imageEmoji": "🥗", "fat": 9})
        self.assertEqual(known, {"prep_time": 5, "cook_time": 10, "image_emoji": "🥗", "fats": 9})

    def test_canonical_key_wins(self) -> None:
        known = normalize_meal_payload({"fats": 12, "fat": 3})
        self.assertEqual(known["fats"], 12)


class TestParseMealResponse(unittest.TestCase):
    def test_full_payload(self) -> None:
        meal = parse_meal_response(json.dumps(_MEAL), MealType.breakfast)
        self.assertTrue(meal.id.startswith("meal_"))
        self.assertEqual(meal.meal_type, MealType.breakfast)
        self.assertEqual(meal.calories, 480.0)
        self.assertEqual(meal.prep_time, 5)
        self.assertEqual(meal.cook_time, 8)
        self.assertEqual(meal.emoji, "🍳")
        self.assertEqual(meal.image_emoji, "🍳")
        self.assertEqual(meal.source, "ai")

    def test_optional_defaults(self) -> None:
        payload = {k: v for k, v in _MEAL.items() if k not in {"prepTime", "cookTime", "imageEmoji"}}
        meal = parse_meal_response(json.dumps(payload), "dinner")
        self.assertEqual(meal.fiber, 5.0)
        self.assertEqual(meal.prep_time, 10)
        self.assertEqual(meal.cook_time, 15)
        self.assertEqual(meal.tags, ["healthy"])
        self.assertEqual(meal.emoji, "🍽️")

    def test_numbers_as_strings(self) -> None:
        payload = dict(_MEAL, calories="520 kcal", protein="35g", prepTime="10 minutes")
        meal = parse_meal_response(json.dumps(payload), MealType.lunch)
        self.assertEqual(meal.calories, 520.0)
        self.assertEqual(meal.protein, 35.0)
        self.assertEqual(meal.prep_time, 10)

    def test_missing_required_field(self) -> None:
        payload = dict(_MEAL)
        del payload["instructions"]
        with self.assertRaises(MealValidationError) as ctx:
            parse_meal_response(json.dumps(payload), MealType.lunch)
        self.assertIn("instructions", str(ctx.exception))

    def test_array_is_not_a_meal(self) -> None:
        with self.assertRaises(JSONExtractionError):
            parse_meal_response("[1, 2, 3]", MealType.snack)


class TestParseRecipesResponse(unittest.TestCase):
    def test_partial_entries_get_defaults(self) -> None:
        text = "Recipes:\n" + json.dumps(
            [
                {"name": "Lentil Soup", "calories": 320, "healthBenefits": ["High fiber"]},
                {"description": "No name given"},
            ]
        )
        recipes = parse_recipes_response(text, MealType.lunch)
        self.assertEqual(len(recipes), 2)
        self.assertEqual(recipes[0].name, "Lentil Soup")
        self.assertEqual(recipes[0].health_benefits, ["High fiber"])
        self.assertEqual(recipes[0].protein, 15.0)
        self.assertEqual(recipes[1].name, "Healthy Recipe")
        self.assertEqual(recipes[1].calories, 300.0)
        self.assertTrue(recipes[1].id.startswith("recipe_lunch_"))

    def test_object_wrapper(self) -> None:
        recipes = parse_recipes_response(json.dumps({"recipes": [_MEAL]}), MealType.breakfast)
        self.assertEqual([r.name for r in recipes], ["Spinach Feta Omelette"])

    def test_empty_list_is_a_failure(self) -> None:
        with self.assertRaises(MealValidationError):
            parse_recipes_response("[]", MealType.snack)


if __name__ == "__main__":
    unittest.main()
