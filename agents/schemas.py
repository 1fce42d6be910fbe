from typing import Any, Dict, List

from errors import GenerationError
from models import (
    MEAL_SLOTS,
    DailyMealPlan,
    EmotionSupport,
    ParentingPlan,
    Recipe,
    SuitableFor,
    WeeklyMealPlan,
)

DAYS_PER_WEEK = 7

# ---------------- Response schemas (Gemini OpenAPI subset) ----------------

_STRING = {"type": "STRING"}
_STRING_LIST = {"type": "ARRAY", "items": _STRING}

PARENTING_PLAN_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "FeedingRoutine": _STRING_LIST,
        "SleepingRoutine": _STRING_LIST,
        "PlaytimeRoutine": _STRING_LIST,
    },
    "required": ["FeedingRoutine", "SleepingRoutine", "PlaytimeRoutine"],
}

DAILY_MEAL_PLAN_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        slot: {
            "type": "ARRAY",
            "items": _STRING,
            "description": f"An array of 7 {slot} items, one for each day of the week.",
        }
        for slot in MEAL_SLOTS
    },
    "required": list(MEAL_SLOTS),
}

WEEKLY_MEAL_PLAN_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "mother": DAILY_MEAL_PLAN_SCHEMA,
        "child": DAILY_MEAL_PLAN_SCHEMA,
    },
    "required": ["mother", "child"],
}

RECIPE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "RecipeName": _STRING,
        "Ingredients": _STRING_LIST,
        "Instructions": _STRING_LIST,
        "SuitableFor": {"type": "STRING", "enum": [s.value for s in SuitableFor]},
        "LocalIngredientUsed": {"type": "BOOLEAN"},
    },
    "required": [
        "RecipeName", "Ingredients", "Instructions", "SuitableFor", "LocalIngredientUsed",
    ],
}

EMOTION_SUPPORT_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "Affirmation": _STRING,
        "StressReliefExercise": _STRING,
        "PepTalk": _STRING,
    },
    "required": ["Affirmation", "StressReliefExercise", "PepTalk"],
}


# ---------------- Field checks ----------------


def _require_object(data: Any, where: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise GenerationError(f"{where}: expected an object, got {type(data).__name__}")
    return data


def _string(data: Dict[str, Any], key: str, where: str) -> str:
    if key not in data:
        raise GenerationError(f"{where}: missing field '{key}'")
    value = data[key]
    if not isinstance(value, str):
        raise GenerationError(f"{where}: field '{key}' must be a string")
    return value


def _string_list(data: Dict[str, Any], key: str, where: str) -> List[str]:
    if key not in data:
        raise GenerationError(f"{where}: missing field '{key}'")
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise GenerationError(f"{where}: field '{key}' must be a list of strings")
    return list(value)


def _bool(data: Dict[str, Any], key: str, where: str) -> bool:
    if key not in data:
        raise GenerationError(f"{where}: missing field '{key}'")
    value = data[key]
    if not isinstance(value, bool):
        raise GenerationError(f"{where}: field '{key}' must be a boolean")
    return value


# ---------------- Parsers ----------------


def parse_parenting_plan(data: Any) -> ParentingPlan:
    obj = _require_object(data, "ParentingPlan")
    return ParentingPlan(
        FeedingRoutine=_string_list(obj, "FeedingRoutine", "ParentingPlan"),
        SleepingRoutine=_string_list(obj, "SleepingRoutine", "ParentingPlan"),
        PlaytimeRoutine=_string_list(obj, "PlaytimeRoutine", "ParentingPlan"),
    )


def _parse_daily_meal_plan(data: Any, where: str) -> DailyMealPlan:
    obj = _require_object(data, where)
    slots = {}
    for slot in MEAL_SLOTS:
        items = _string_list(obj, slot, where)
        if len(items) != DAYS_PER_WEEK:
            raise GenerationError(
                f"{where}: '{slot}' must have {DAYS_PER_WEEK} entries, got {len(items)}"
            )
        slots[slot] = items
    return DailyMealPlan(**slots)


def parse_weekly_meal_plan(data: Any) -> WeeklyMealPlan:
    obj = _require_object(data, "WeeklyMealPlan")
    for key in ("mother", "child"):
        if key not in obj:
            raise GenerationError(f"WeeklyMealPlan: missing field '{key}'")
    return WeeklyMealPlan(
        mother=_parse_daily_meal_plan(obj["mother"], "WeeklyMealPlan.mother"),
        child=_parse_daily_meal_plan(obj["child"], "WeeklyMealPlan.child"),
    )


def parse_recipe(data: Any) -> Recipe:
    obj = _require_object(data, "Recipe")
    suitable = _string(obj, "SuitableFor", "Recipe")
    try:
        suitable_for = SuitableFor(suitable)
    except ValueError:
        raise GenerationError(f"Recipe: unknown SuitableFor value '{suitable}'")
    return Recipe(
        RecipeName=_string(obj, "RecipeName", "Recipe"),
        Ingredients=_string_list(obj, "Ingredients", "Recipe"),
        Instructions=_string_list(obj, "Instructions", "Recipe"),
        SuitableFor=suitable_for,
        LocalIngredientUsed=_bool(obj, "LocalIngredientUsed", "Recipe"),
    )


def parse_emotion_support(data: Any) -> EmotionSupport:
    obj = _require_object(data, "EmotionSupport")
    return EmotionSupport(
        Affirmation=_string(obj, "Affirmation", "EmotionSupport"),
        StressReliefExercise=_string(obj, "StressReliefExercise", "EmotionSupport"),
        PepTalk=_string(obj, "PepTalk", "EmotionSupport"),
    )
