from datetime import datetime, timezone

import pytest

from logic.logic_user import AuthController, Session
from logic.mock_sheet import ProfileStore
from models import (
    DailyMealPlan,
    EmotionSupport,
    ParentingPlan,
    Recipe,
    SuitableFor,
    UserProfile,
    WeeklyMealPlan,
)
from storage import KeyValueStorage

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def store():
    return ProfileStore(clock=lambda: FIXED_NOW, latency_scale=0)


@pytest.fixture
def session_storage():
    return KeyValueStorage()


@pytest.fixture
def local_storage():
    return KeyValueStorage()


@pytest.fixture
def controller(store, session_storage):
    return AuthController(store, session_storage)


def make_profile(**overrides):
    values = dict(
        UserID="user-1",
        Email="user@example.com",
        Name="Test User",
        ParentAge=32,
        BabyBirthDate="2024-06-01",
        PINCode="110001",
        FamilyPreferences="Vegetarian",
        RegistrationDate="2024-01-01T10:00:00Z",
        RegistrationExpiry="2099-12-31T23:59:59Z",
        userType="user",
    )
    values.update(overrides)
    return UserProfile(**values)


@pytest.fixture
def user_session():
    return Session(profile=make_profile(), started_at="2024-06-15T12:00:00Z")


@pytest.fixture
def admin_session():
    profile = make_profile(UserID="user-2", Email="admin@example.com", userType="admin")
    return Session(profile=profile, started_at="2024-06-15T12:00:00Z")


def make_week(breakfast, lunch=None, dinner=None, snacks=None):
    """Each argument is a single meal repeated for all 7 days."""
    return DailyMealPlan(
        breakfast=[breakfast] * 7,
        lunch=[lunch or breakfast] * 7,
        dinner=[dinner or breakfast] * 7,
        snacks=[snacks or breakfast] * 7,
    )


def make_recipe(name):
    return Recipe(
        RecipeName=name,
        Ingredients=["1 cup rice (washed)", "Salt"],
        Instructions=["Cook the rice.", "Season to taste."],
        SuitableFor=SuitableFor.BOTH,
        LocalIngredientUsed=True,
    )


class FakeGenerator:
    """Records calls and answers from canned values; None means failure."""

    def __init__(self, plan=None, meal_plan=None, recipes=None, support=None, failing=()):
        self.plan = plan
        self.meal_plan = meal_plan
        self.recipes = recipes
        self.support = support
        self.failing = set(failing)
        self.calls = []

    def generate_parenting_plan(self, age_in_weeks):
        self.calls.append(("plan", age_in_weeks))
        return self.plan

    def generate_meal_plan(self, preferences, pin_code, parent_age, baby_age_in_weeks):
        self.calls.append(("meal_plan", preferences, pin_code, parent_age, baby_age_in_weeks))
        return self.meal_plan

    def generate_recipe(self, meal_name):
        self.calls.append(("recipe", meal_name))
        if meal_name in self.failing:
            return None
        if self.recipes is not None:
            return self.recipes.get(meal_name)
        return make_recipe(meal_name)

    def generate_emotion_support(self, mood):
        self.calls.append(("support", mood))
        return self.support

    def recipe_calls(self):
        return [c[1] for c in self.calls if c[0] == "recipe"]


@pytest.fixture
def sample_plan():
    return ParentingPlan(
        FeedingRoutine=["Feed every 3 hours"],
        SleepingRoutine=["Nap after feeds"],
        PlaytimeRoutine=["Tummy time"],
    )


@pytest.fixture
def sample_support():
    return EmotionSupport(
        Affirmation="You are enough.",
        StressReliefExercise="Box breathing.",
        PepTalk="One step at a time.",
    )


@pytest.fixture
def sample_week():
    return WeeklyMealPlan(
        mother=make_week("Oatmeal", lunch="Dal Rice", dinner="Dal Rice", snacks="Milk"),
        child=make_week("Breast milk"),
    )
