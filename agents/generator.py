import json
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union

from agents.base import GeminiClient
from agents.prompts import (
    EMOTION_SUPPORT_PROMPT,
    PARENTING_PLAN_PROMPT,
    RECIPE_PROMPT,
    WEEKLY_MEAL_PLAN_PROMPT,
)
from agents.schemas import (
    EMOTION_SUPPORT_SCHEMA,
    PARENTING_PLAN_SCHEMA,
    RECIPE_SCHEMA,
    WEEKLY_MEAL_PLAN_SCHEMA,
    parse_emotion_support,
    parse_parenting_plan,
    parse_recipe,
    parse_weekly_meal_plan,
)
from errors import GenerationError
from llm_config import GEMINI_API_KEY, GEMINI_BASE_URL, GENERATION_MODEL_NAME, UI_TEST_MODE
from models import EmotionSupport, Mood, ParentingPlan, Recipe, WeeklyMealPlan

logger = logging.getLogger(__name__)

GeneratedContent = Union[ParentingPlan, WeeklyMealPlan, Recipe, EmotionSupport]


class GenerationKind(str, Enum):
    PARENTING_PLAN = "ParentingPlan"
    WEEKLY_MEAL_PLAN = "WeeklyMealPlan"
    RECIPE = "Recipe"
    EMOTION_SUPPORT = "EmotionSupport"


# kind -> (prompt template, required params, response schema, parser)
_KINDS: Dict[GenerationKind, Tuple[str, Tuple[str, ...], Dict[str, Any], Callable[[Any], Any]]] = {
    GenerationKind.PARENTING_PLAN: (
        PARENTING_PLAN_PROMPT,
        ("age_in_weeks",),
        PARENTING_PLAN_SCHEMA,
        parse_parenting_plan,
    ),
    GenerationKind.WEEKLY_MEAL_PLAN: (
        WEEKLY_MEAL_PLAN_PROMPT,
        ("preferences", "pin_code", "parent_age", "baby_age_in_weeks"),
        WEEKLY_MEAL_PLAN_SCHEMA,
        parse_weekly_meal_plan,
    ),
    GenerationKind.RECIPE: (
        RECIPE_PROMPT,
        ("meal_name",),
        RECIPE_SCHEMA,
        parse_recipe,
    ),
    GenerationKind.EMOTION_SUPPORT: (
        EMOTION_SUPPORT_PROMPT,
        ("mood",),
        EMOTION_SUPPORT_SCHEMA,
        parse_emotion_support,
    ),
}


def _canned_response(kind: GenerationKind, params: Dict[str, Any]) -> str:
    """Schema-valid JSON used in UI_TEST_MODE."""
    if kind is GenerationKind.PARENTING_PLAN:
        data = {
            "FeedingRoutine": ["Feed on demand, roughly every 2-3 hours."],
            "SleepingRoutine": ["Keep a calm, dim room for naps."],
            "PlaytimeRoutine": ["A few minutes of tummy time after waking."],
        }
    elif kind is GenerationKind.WEEKLY_MEAL_PLAN:
        day = {
            "breakfast": ["Vegetable Poha"] * 7,
            "lunch": ["Dal Rice"] * 7,
            "dinner": ["Moong Dal Khichdi"] * 7,
            "snacks": ["Roasted Makhana"] * 7,
        }
        child = {slot: ["Breast milk or formula"] * 7 for slot in day}
        data = {"mother": day, "child": child}
    elif kind is GenerationKind.RECIPE:
        data = {
            "RecipeName": params["meal_name"],
            "Ingredients": ["1 cup rice", "1/2 cup moong dal (washed)"],
            "Instructions": ["Rinse everything.", "Pressure cook for 3 whistles."],
            "SuitableFor": "Both",
            "LocalIngredientUsed": True,
        }
    else:
        data = {
            "Affirmation": "I am doing enough, and I am enough.",
            "StressReliefExercise": "Breathe in for 4 counts, hold for 4, out for 6.",
            "PepTalk": f"Feeling {params['mood']} is part of the journey. You've got this!",
        }
    return json.dumps(data)


class ContentGenerator:
    """
    Structured content generation for the four feature workflows.

    Every public method returns the parsed value or None. Failures are
    logged here and never propagate; callers treat None as "show a generic
    failure message". One call is one HTTP request: no retry.
    """

    def __init__(self, client: Optional[GeminiClient] = None, test_mode: bool = UI_TEST_MODE):
        self.client = client or GeminiClient(GEMINI_BASE_URL, GENERATION_MODEL_NAME, GEMINI_API_KEY)
        self.test_mode = test_mode
        self._warned_missing_key = False

    @property
    def available(self) -> bool:
        return self.test_mode or bool(self.client.api_key)

    def generate(self, kind: GenerationKind, params: Dict[str, Any]) -> Optional[GeneratedContent]:
        try:
            kind = GenerationKind(kind)
        except ValueError:
            logger.error("Unknown generation kind: %r", kind)
            return None
        if not self.available:
            if not self._warned_missing_key:
                logger.warning("GEMINI_API_KEY is not set; AI features will not work.")
                self._warned_missing_key = True
            return None

        try:
            return self._generate(kind, params)
        except GenerationError as e:
            logger.error("Error generating %s: %s", kind.value, e.message)
        except Exception as e:
            # requests errors, bad JSON and anything else the payload throws at us
            logger.error("Error generating %s: %s", kind.value, e)
        return None

    def _generate(self, kind: GenerationKind, params: Dict[str, Any]) -> GeneratedContent:
        template, required, schema, parser = _KINDS[kind]
        missing = [name for name in required if params.get(name) in (None, "")]
        if missing:
            raise GenerationError(f"missing parameters: {', '.join(missing)}")

        prompt = template.format(**{name: params[name] for name in required})
        if self.test_mode:
            text = _canned_response(kind, params)
        else:
            text = self.client.generate_json(prompt, schema)

        try:
            data = json.loads(text)
        except ValueError as e:
            raise GenerationError(f"response is not valid JSON: {e}") from e
        return parser(data)

    # -------- convenience wrappers --------

    def generate_parenting_plan(self, age_in_weeks: int) -> Optional[ParentingPlan]:
        return self.generate(GenerationKind.PARENTING_PLAN, {"age_in_weeks": age_in_weeks})

    def generate_meal_plan(
        self,
        preferences: str,
        pin_code: str,
        parent_age: int,
        baby_age_in_weeks: int,
    ) -> Optional[WeeklyMealPlan]:
        return self.generate(
            GenerationKind.WEEKLY_MEAL_PLAN,
            {
                "preferences": preferences,
                "pin_code": pin_code,
                "parent_age": parent_age,
                "baby_age_in_weeks": baby_age_in_weeks,
            },
        )

    def generate_recipe(self, meal_name: str) -> Optional[Recipe]:
        return self.generate(GenerationKind.RECIPE, {"meal_name": meal_name})

    def generate_emotion_support(self, mood: Union[Mood, str]) -> Optional[EmotionSupport]:
        # free text is accepted as well as the six moods
        label = mood.value if isinstance(mood, Mood) else str(mood).strip()
        return self.generate(GenerationKind.EMOTION_SUPPORT, {"mood": label})


content_generator = ContentGenerator()
