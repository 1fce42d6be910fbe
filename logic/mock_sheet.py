# mock_sheet.py
"""
In-memory stand-in for the spreadsheet backend.

The six tabs (Users, ParentingPlanner, MealPlans, Recipes, EmotionCheckins,
ProductAvailability) live in plain lists and are mutated in place. Every call
sleeps for a short, scaled delay to mimic a network round trip. Nothing here
is persisted and there is no locking: a single local user is assumed.
"""

import dataclasses
import logging
import time
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Sequence, Type

import pandas as pd

from errors import AuthError, NotFoundError, RegistrationError
from llm_config import MOCK_STORE_LATENCY
from models import (
    EmotionCheckinRecord,
    MealPlanRecord,
    ModuleInteractions,
    ParentingPlannerRecord,
    ProductAvailabilityRecord,
    RecipeRecord,
    RegisterData,
    SheetRow,
    SuitableFor,
    SummaryStats,
    UserProfile,
)
from storage import parse_iso, to_iso, utc_now

logger = logging.getLogger(__name__)

REGISTRATION_PERIOD = timedelta(days=90)

# Simulated round-trip delays in seconds, before scaling
AUTH_DELAY = 0.5
STATS_DELAY = 0.3
EXPORT_DELAY = 0.2

SHEET_NAMES = (
    "Users",
    "ParentingPlanner",
    "MealPlans",
    "Recipes",
    "EmotionCheckins",
    "ProductAvailability",
)


def _seed_users():
    users = [
        UserProfile(
            UserID="user-1", Name="Test User", Email="user@example.com",
            ParentAge=32, BabyBirthDate="2024-05-15", PINCode="110001",
            FamilyPreferences="Vegetarian",
            RegistrationDate="2024-01-01T10:00:00Z",
            RegistrationExpiry="2099-12-31T23:59:59Z", userType="user",
        ),
        UserProfile(
            UserID="user-2", Name="Admin User", Email="admin@example.com",
            ParentAge=35, BabyBirthDate="2024-03-10", PINCode="560001",
            FamilyPreferences="Non-vegetarian, likes spicy food",
            RegistrationDate="2024-01-01T10:00:00Z",
            RegistrationExpiry="2099-12-31T23:59:59Z", userType="admin",
        ),
        # placeholder row: email is provisioned, registration completes it
        UserProfile(UserID="user-3", Email="new-user@example.com"),
        UserProfile(
            UserID="user-4", Name="Expired User", Email="expired@example.com",
            ParentAge=40, BabyBirthDate="2023-01-01", PINCode="123456",
            FamilyPreferences="Anything",
            RegistrationDate="2023-01-01T10:00:00Z",
            RegistrationExpiry="2024-01-01T23:59:59Z", userType="user",
        ),
    ]
    credentials = {
        "user-1": "password123",
        "user-2": "admin123",
        "user-4": "password123",
    }
    return users, credentials


class ProfileStore:
    """Mock backend for profiles and activity rows."""

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        latency_scale: float = MOCK_STORE_LATENCY,
        sleep: Callable[[float], None] = time.sleep,
        seed: bool = True,
    ):
        self.clock = clock
        self.latency_scale = latency_scale
        self._sleep = sleep

        self._users: List[UserProfile] = []
        self._credentials: Dict[str, str] = {}
        self._planners: List[ParentingPlannerRecord] = []
        self._meal_plans: List[MealPlanRecord] = []
        self._recipes: List[RecipeRecord] = []
        self._checkins: List[EmotionCheckinRecord] = []
        self._products: List[ProductAvailabilityRecord] = []
        if seed:
            self._seed()

    def _seed(self) -> None:
        self._users, self._credentials = _seed_users()
        now = to_iso(self.clock())
        self._planners = [
            ParentingPlannerRecord(
                PlannerID="p1", UserID="user-1", BabyAgeMonths=2, GeneratedDate=now,
                FeedingRoutine=["Feed every 2-3 hours"],
                SleepingRoutine=["Swaddle for sleep"],
                PlaytimeRoutine=["Tummy time"],
            )
        ]
        self._meal_plans = [
            MealPlanRecord(
                MealPlanID="m1", UserID="user-1", WeekStartDate=now, BabyAgeMonths=2,
                FamilyPreferences="Vegetarian", LocalFoods="Paneer, Lentils",
                Breakfast='["Oatmeal"]', Lunch='["Dal Rice"]',
                Dinner='["Khichdi"]', Snacks='["Yogurt"]',
            )
        ]
        self._recipes = [
            RecipeRecord(
                RecipeID="r1", MealPlanID="m1", UserID="user-1", BabyAgeMonths=6,
                RecipeName="Oatmeal Porridge", Ingredients=["Oats", "Water"],
                Instructions=["Boil water, add oats"], SuitableFor=SuitableFor.BABY,
                LocalIngredientUsed=False,
            )
        ]
        self._checkins = [
            EmotionCheckinRecord(
                CheckinID="c1", UserID="user-1", CheckinDate=now, Mood="Happy",
                Affirmation="I am a great parent.", StressReliefExercise="Deep breathing.",
                PepTalk="You've got this!",
            ),
            EmotionCheckinRecord(
                CheckinID="c2", UserID="user-2", CheckinDate=now, Mood="Tired",
                Affirmation="It's okay to rest.", StressReliefExercise="Stretch your arms.",
                PepTalk="Take a break.",
            ),
        ]
        self._products = [
            ProductAvailabilityRecord(
                ProductID="prod-1", RecipeID="r1", ProductName="Organic Oats",
                PINCode="110001", AvailabilityStatus="Available",
            )
        ]

    # -------- helpers --------

    def _delay(self, seconds: float) -> None:
        if self.latency_scale > 0:
            self._sleep(seconds * self.latency_scale)

    def _find_user(self, email: str) -> Optional[UserProfile]:
        for user in self._users:
            if user.Email == email:
                return user
        return None

    def _sheet(self, name: str) -> tuple[Type[SheetRow], Sequence[SheetRow]]:
        sheets: Dict[str, tuple[Type[SheetRow], Sequence[SheetRow]]] = {
            "Users": (UserProfile, self._users),
            "ParentingPlanner": (ParentingPlannerRecord, self._planners),
            "MealPlans": (MealPlanRecord, self._meal_plans),
            "Recipes": (RecipeRecord, self._recipes),
            "EmotionCheckins": (EmotionCheckinRecord, self._checkins),
            "ProductAvailability": (ProductAvailabilityRecord, self._products),
        }
        if name not in sheets:
            raise NotFoundError("Sheet not found")
        return sheets[name]

    # -------- auth --------

    def login(self, email: str, password: str) -> UserProfile:
        self._delay(AUTH_DELAY)
        user = self._find_user(email)
        stored = self._credentials.get(user.UserID) if user else None
        if user is None or stored is None or stored != password:
            logger.info("Login rejected for %s: invalid credentials", email)
            raise AuthError("Invalid email or password.")

        try:
            expired = self.clock() > parse_iso(user.RegistrationExpiry)
        except ValueError:
            expired = True
        if expired:
            logger.info("Login rejected for %s: registration expired", email)
            raise AuthError("Your registration has expired. Please contact support.")

        return dataclasses.replace(user)

    def register(self, data: RegisterData, password: str) -> UserProfile:
        """Complete a pre-provisioned row in place and open a 90-day window."""
        self._delay(AUTH_DELAY)
        user = self._find_user(data.Email)
        if user is None or user.UserID in self._credentials or user.RegistrationDate:
            # only an untouched placeholder row can be completed
            logger.warning("Registration refused for %s: email not available", data.Email)
            raise RegistrationError(
                "Invalid E-Mail ID provided. This email is not available for registration."
            )

        registered_at = self.clock()
        user.Name = data.Name
        user.ParentAge = data.ParentAge
        user.BabyBirthDate = data.BabyBirthDate
        user.PINCode = data.PINCode
        user.FamilyPreferences = data.FamilyPreferences
        user.RegistrationDate = to_iso(registered_at)
        user.RegistrationExpiry = to_iso(registered_at + REGISTRATION_PERIOD)
        self._credentials[user.UserID] = password
        logger.info("Registered %s (%s)", user.Email, user.UserID)
        return dataclasses.replace(user)

    def reset_password(self, email: str, new_password: str) -> None:
        self._delay(AUTH_DELAY)
        user = self._find_user(email)
        if user is None:
            logger.info("Password reset refused for %s: unknown email", email)
            raise NotFoundError("No user found with this email address.")
        self._credentials[user.UserID] = new_password
        logger.info("Password reset for %s", email)

    # -------- admin --------

    def list_users(self) -> List[UserProfile]:
        self._delay(STATS_DELAY)
        return [dataclasses.replace(u) for u in self._users]

    def get_dashboard_stats(self) -> SummaryStats:
        self._delay(STATS_DELAY)
        return SummaryStats(
            activeUsers=len(self._users),
            newSignups=1,  # mock
            mealPlansGenerated=len(self._meal_plans),
            interactions=len(self._planners) + len(self._meal_plans) + len(self._checkins),
            interactionData=[
                ModuleInteractions("Planner", len(self._planners)),
                ModuleInteractions("Meals", len(self._meal_plans)),
                ModuleInteractions("Check-ins", len(self._checkins)),
            ],
        )

    def export_sheet(self, name: str) -> str:
        """
        Render one tab as CSV with its fixed column order.

        An empty tab yields the header line only. Missing values are empty
        cells. The Users tab never carries credentials.
        """
        self._delay(EXPORT_DELAY)
        row_type, rows = self._sheet(name)
        frame = pd.DataFrame([r.to_row() for r in rows], columns=list(row_type.COLUMNS))
        return frame.to_csv(index=False, lineterminator="\n")


profile_store = ProfileStore()
