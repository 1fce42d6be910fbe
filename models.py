# models.py
"""
Typed records for the wellness hub.

- UserProfile / RegisterData: the user row as seen by callers (no credential).
- *Record classes: the mock spreadsheet tabs; each knows its export COLUMNS
  and renders itself with to_row().
- ParentingPlan, WeeklyMealPlan, Recipe, EmotionSupport: values produced by
  the content generator after schema validation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple


MEAL_SLOTS: Tuple[str, ...] = ("breakfast", "lunch", "dinner", "snacks")
DAYS_OF_WEEK: Tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)


class Mood(str, Enum):
    HAPPY = "Happy"
    CALM = "Calm"
    TIRED = "Tired"
    STRESSED = "Stressed"
    OVERWHELMED = "Overwhelmed"
    GRATEFUL = "Grateful"


MOOD_EMOJI: Dict[Mood, str] = {
    Mood.HAPPY: "😊",
    Mood.CALM: "😌",
    Mood.TIRED: "😴",
    Mood.STRESSED: "😩",
    Mood.OVERWHELMED: "🤯",
    Mood.GRATEFUL: "🙏",
}


class SuitableFor(str, Enum):
    MOM = "Mom"
    BABY = "Baby"
    BOTH = "Both"


def _cell(value: Any) -> Any:
    """Render one value for a CSV row."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value), ensure_ascii=False)
    return value


class SheetRow:
    """Export-capable record: COLUMNS fixes the order, to_row() the values."""

    COLUMNS: ClassVar[Tuple[str, ...]] = ()

    def to_row(self) -> List[Any]:
        return [_cell(getattr(self, name, None)) for name in self.COLUMNS]


# ================== Users ==================


@dataclass
class UserProfile(SheetRow):
    UserID: str
    Email: str
    Name: str = ""
    ParentAge: int = 0
    BabyBirthDate: str = ""
    PINCode: str = ""
    FamilyPreferences: str = ""
    RegistrationDate: str = ""
    RegistrationExpiry: str = ""
    userType: str = "user"

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "UserID", "Name", "Email", "ParentAge", "PINCode", "BabyBirthDate",
        "FamilyPreferences", "RegistrationDate", "RegistrationExpiry",
    )

    @property
    def is_admin(self) -> bool:
        return self.userType == "admin"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        """
        Rebuild a profile from saved session data.

        Raises ValueError when a key is missing or has the wrong type, so a
        tampered or truncated session is treated as "not logged in".
        """
        if not isinstance(data, dict):
            raise ValueError("profile data must be an object")
        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                raise ValueError(f"profile data is missing {f.name}")
            value = data[f.name]
            expected = int if f.name == "ParentAge" else str
            if not isinstance(value, expected) or isinstance(value, bool):
                raise ValueError(f"profile field {f.name} has the wrong type")
            kwargs[f.name] = value
        if kwargs["userType"] not in ("user", "admin"):
            raise ValueError("unknown userType")
        return cls(**kwargs)


@dataclass
class RegisterData:
    """Fields a user fills in to complete a pre-provisioned row."""

    Email: str
    Name: str
    ParentAge: int
    BabyBirthDate: str
    PINCode: str
    FamilyPreferences: str


# ================== Activity sheets ==================


@dataclass
class ParentingPlannerRecord(SheetRow):
    PlannerID: str
    UserID: str
    BabyAgeMonths: int
    GeneratedDate: str
    FeedingRoutine: List[str] = field(default_factory=list)
    SleepingRoutine: List[str] = field(default_factory=list)
    PlaytimeRoutine: List[str] = field(default_factory=list)
    Notes: Optional[str] = None

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "PlannerID", "UserID", "BabyAgeMonths", "GeneratedDate",
        "FeedingRoutine", "SleepingRoutine", "PlaytimeRoutine", "Notes",
    )


@dataclass
class MealPlanRecord(SheetRow):
    MealPlanID: str
    UserID: str
    WeekStartDate: str
    BabyAgeMonths: int
    FamilyPreferences: str
    LocalFoods: str
    # JSON array strings, as stored in the sheet
    Breakfast: str = "[]"
    Lunch: str = "[]"
    Dinner: str = "[]"
    Snacks: str = "[]"
    Notes: Optional[str] = None

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "MealPlanID", "UserID", "WeekStartDate", "BabyAgeMonths",
        "FamilyPreferences", "LocalFoods", "Breakfast", "Lunch", "Dinner",
        "Snacks", "Notes",
    )


@dataclass
class RecipeRecord(SheetRow):
    RecipeID: str
    MealPlanID: str
    UserID: str
    BabyAgeMonths: int
    RecipeName: str
    Ingredients: List[str] = field(default_factory=list)
    Instructions: List[str] = field(default_factory=list)
    SuitableFor: SuitableFor = SuitableFor.BOTH
    LocalIngredientUsed: bool = False
    Notes: Optional[str] = None

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "RecipeID", "MealPlanID", "UserID", "BabyAgeMonths", "RecipeName",
        "Ingredients", "Instructions", "SuitableFor", "LocalIngredientUsed",
        "Notes",
    )


@dataclass
class EmotionCheckinRecord(SheetRow):
    CheckinID: str
    UserID: str
    CheckinDate: str
    Mood: str
    Affirmation: str
    StressReliefExercise: str
    PepTalk: str
    Notes: Optional[str] = None

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "CheckinID", "UserID", "CheckinDate", "Mood", "Affirmation",
        "StressReliefExercise", "PepTalk", "Notes",
    )


@dataclass
class ProductAvailabilityRecord(SheetRow):
    ProductID: str
    RecipeID: str
    ProductName: str
    PINCode: str
    AvailabilityStatus: str  # Available | Unavailable | Seasonal
    Notes: Optional[str] = None

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "ProductID", "RecipeID", "ProductName", "PINCode",
        "AvailabilityStatus", "Notes",
    )


# ================== Generated content ==================


@dataclass
class ParentingPlan:
    FeedingRoutine: List[str]
    SleepingRoutine: List[str]
    PlaytimeRoutine: List[str]


@dataclass
class DailyMealPlan:
    """One person's week: each slot holds 7 entries, Monday first."""

    breakfast: List[str]
    lunch: List[str]
    dinner: List[str]
    snacks: List[str]

    def meals_for_day(self, index: int) -> Dict[str, str]:
        return {slot: getattr(self, slot)[index] for slot in MEAL_SLOTS}


@dataclass
class WeeklyMealPlan:
    mother: DailyMealPlan
    child: DailyMealPlan


@dataclass
class Recipe:
    RecipeName: str
    Ingredients: List[str]
    Instructions: List[str]
    SuitableFor: SuitableFor
    LocalIngredientUsed: bool


@dataclass
class EmotionSupport:
    Affirmation: str
    StressReliefExercise: str
    PepTalk: str


# ================== Admin ==================


@dataclass
class ModuleInteractions:
    name: str
    interactions: int


@dataclass
class SummaryStats:
    activeUsers: int
    newSignups: int
    mealPlansGenerated: int
    interactions: int
    interactionData: List[ModuleInteractions] = field(default_factory=list)
