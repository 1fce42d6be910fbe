import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

import gradio as gr

from agents.generator import ContentGenerator, content_generator
from errors import ProfileMissingError, WellnessHubError
from models import DAYS_OF_WEEK, MEAL_SLOTS, DailyMealPlan, Recipe, WeeklyMealPlan
from storage import RECENT_SEARCHES_KEY, KeyValueStorage
from .fanout import FanOutResult, run_sequentially
from .logic_parenting import baby_age_in_weeks
from .logic_user import Session, require_session

logger = logging.getLogger(__name__)

MAX_RECENT_SEARCHES = 5

UNAVAILABLE_MSG = "Failed to generate a meal plan. The AI service may be unavailable."
UNEXPECTED_MSG = "An unexpected error occurred."
PARTIAL_MSG = (
    "Could not fetch all recipes due to API limits. "
    "Some recipes may be missing from the printable plan."
)
RECIPE_UNAVAILABLE_MSG = "Could not fetch this recipe. The AI service may be unavailable."

GROCERY_SEARCH_URLS: Dict[str, str] = {
    "Blinkit": "https://blinkit.com/s?q={query}",
    "Zepto": "https://www.zeptonow.com/search?q={query}",
}


def has_recipe(meal_name: str) -> bool:
    """Milk feeds have no recipe to fetch."""
    return bool(meal_name) and "milk" not in meal_name.lower()


def collect_meal_names(plan: WeeklyMealPlan) -> List[str]:
    """
    Distinct meal names that have a recipe, in first-seen order.

    Walks the mother's week, then the child's, slot by slot.
    """
    seen: Dict[str, None] = {}
    for daily in (plan.mother, plan.child):
        for slot in MEAL_SLOTS:
            for meal in getattr(daily, slot):
                if isinstance(meal, str) and has_recipe(meal):
                    seen.setdefault(meal, None)
    return list(seen)


def fetch_recipes(
    meal_names: List[str],
    generator: ContentGenerator = content_generator,
    on_progress: Optional[Callable[[int, str], None]] = None,
) -> FanOutResult[str, Recipe]:
    """One recipe request per name, strictly one at a time."""
    return run_sequentially(meal_names, generator.generate_recipe, on_progress)


@dataclass
class MealPlanOutcome:
    plan: Optional[WeeklyMealPlan] = None
    recipes: List[Recipe] = field(default_factory=list)
    degraded: bool = False
    message: str = ""


def plan_week(
    session: Optional[Session],
    generator: ContentGenerator = content_generator,
    now: Optional[datetime] = None,
    on_progress: Optional[Callable[[int, str], None]] = None,
) -> MealPlanOutcome:
    """
    Weekly plan for parent and child, then every recipe in it.

    A failed plan yields an outcome with plan=None and the unavailable
    message. Failed recipes only mark the outcome as degraded.
    """
    session = require_session(session)
    profile = session.profile
    weeks = baby_age_in_weeks(session, now)
    if not profile.PINCode:
        raise ProfileMissingError("PIN code is not available from your profile.")

    plan = generator.generate_meal_plan(
        profile.FamilyPreferences or "No specific preferences",
        profile.PINCode,
        profile.ParentAge,
        weeks,
    )
    if plan is None:
        return MealPlanOutcome(message=UNAVAILABLE_MSG)

    fetched = fetch_recipes(collect_meal_names(plan), generator, on_progress)
    if fetched.degraded:
        logger.warning(
            "Fetched %d of %d recipes", len(fetched.results), fetched.attempted
        )
    return MealPlanOutcome(
        plan=plan,
        recipes=fetched.results,
        degraded=fetched.degraded,
        message=PARTIAL_MSG if fetched.degraded else "",
    )


# ================== Recent searches ==================


class RecentSearches:
    """Last few free-text recipe queries, most recent first, no duplicates."""

    def __init__(self, storage: KeyValueStorage, limit: int = MAX_RECENT_SEARCHES):
        self.storage = storage
        self.limit = limit

    def load(self) -> List[str]:
        raw = self.storage.get_item(RECENT_SEARCHES_KEY)
        if raw is None:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list) or not all(isinstance(s, str) for s in items):
                raise ValueError("recent searches must be a list of strings")
        except ValueError as e:
            logger.warning("Failed to parse recent searches from local storage: %s", e)
            self.storage.remove_item(RECENT_SEARCHES_KEY)
            return []
        return items[: self.limit]

    def push(self, query: str) -> List[str]:
        updated = [query] + [s for s in self.load() if s != query]
        updated = updated[: self.limit]
        self.storage.set_item(RECENT_SEARCHES_KEY, json.dumps(updated))
        return updated


def lookup_recipe(
    meal_name: str,
    generator: ContentGenerator = content_generator,
) -> Tuple[Optional[Recipe], str]:
    """Single recipe for a planned meal or a searched dish; (recipe, message)."""
    name = (meal_name or "").strip()
    if not name:
        return None, "Please enter a dish name."
    if not has_recipe(name):
        return None, "Milk feeds do not have a recipe."
    recipe = generator.generate_recipe(name)
    if recipe is None:
        return None, RECIPE_UNAVAILABLE_MSG
    return recipe, ""


# ================== Recipe helpers ==================


def instructions_text(recipe: Recipe) -> str:
    """Numbered steps, ready to copy."""
    return "\n".join(f"{i}. {step}" for i, step in enumerate(recipe.Instructions, start=1))


def grocery_order_links(recipe: Recipe) -> Dict[str, str]:
    """
    Store search URLs for the recipe's ingredients.

    Parenthesised notes such as quantities are dropped from each ingredient.
    """
    if not recipe.Ingredients:
        return {}
    cleaned = [ing.split("(")[0].strip() for ing in recipe.Ingredients]
    query = quote(", ".join(c for c in cleaned if c), safe="")
    return {store: url.format(query=query) for store, url in GROCERY_SEARCH_URLS.items()}


def render_recipe(recipe: Recipe, with_links: bool = True) -> str:
    parts = [
        f"### {recipe.RecipeName}",
        f"Suitable For: **{recipe.SuitableFor.value}** · "
        f"Uses Local Ingredients: **{'Yes' if recipe.LocalIngredientUsed else 'No'}**",
        "#### Ingredients",
        "\n".join(f"- {ing}" for ing in recipe.Ingredients),
        "#### Instructions",
        instructions_text(recipe),
    ]
    if with_links:
        links = grocery_order_links(recipe)
        if links:
            parts.append(
                "#### Order Ingredients\n"
                + " · ".join(f"[Order on {store}]({url})" for store, url in links.items())
            )
    return "\n\n".join(parts)


def _render_week(daily: DailyMealPlan, title: str) -> str:
    header = "| Day | Breakfast | Lunch | Dinner | Snacks |\n|---|---|---|---|---|"
    rows = []
    for index, day in enumerate(DAYS_OF_WEEK):
        meals = daily.meals_for_day(index)
        rows.append(f"| {day} | " + " | ".join(meals[slot] for slot in MEAL_SLOTS) + " |")
    return f"### {title}\n\n{header}\n" + "\n".join(rows)


def render_meal_plan(outcome: MealPlanOutcome) -> str:
    if outcome.plan is None:
        return ""
    parts = [
        _render_week(outcome.plan.mother, "Mother's Weekly Meal Plan"),
        _render_week(outcome.plan.child, "Child's Weekly Meal Plan"),
    ]
    if outcome.recipes:
        parts.append("## Full Recipes")
        parts.extend(render_recipe(r, with_links=False) for r in outcome.recipes)
    return "\n\n".join(parts)


# ================== Gradio callbacks ==================


def generate_meal_plan_action(
    session_state,
    generator: ContentGenerator = content_generator,
    progress=gr.Progress(),
):
    """Returns (plan markdown, meal dropdown update, status)."""
    def report(index: int, name: str) -> None:
        progress((index, None), desc=f"Fetching recipe: {name}")

    try:
        outcome = plan_week(session_state, generator, on_progress=report)
    except WellnessHubError as e:
        return "", gr.update(choices=[], value=None), e.message
    except Exception:
        logger.exception("Meal planner failed")
        return "", gr.update(choices=[], value=None), UNEXPECTED_MSG

    if outcome.plan is None:
        return "", gr.update(choices=[], value=None), outcome.message
    names = collect_meal_names(outcome.plan)
    return render_meal_plan(outcome), gr.update(choices=names, value=None), outcome.message


def view_recipe_action(meal_name, generator: ContentGenerator = content_generator):
    """Returns (recipe markdown, copyable instructions, status)."""
    recipe, msg = lookup_recipe(meal_name, generator)
    if recipe is None:
        return "", "", msg
    return render_recipe(recipe), instructions_text(recipe), ""


def load_recent_searches_action(saved):
    """`saved` is the browser's gr.BrowserState dict; returns (dropdown update, dict)."""
    storage = KeyValueStorage(saved)
    recent = RecentSearches(storage).load()
    return gr.update(choices=recent, value=None), storage.data


def search_recipe_action(
    query,
    saved,
    generator: ContentGenerator = content_generator,
):
    """
    Returns (recipe markdown, copyable instructions, status, recent dropdown
    update, updated browser dict).
    """
    text = (query or "").strip()
    if not text:
        return "", "", "Please enter a dish name.", gr.update(), saved
    storage = KeyValueStorage(saved)
    recent = RecentSearches(storage).push(text)
    recipe_md, instructions, msg = view_recipe_action(text, generator)
    return recipe_md, instructions, msg, gr.update(choices=recent, value=None), storage.data
