import logging
from datetime import datetime
from typing import List, Optional, Tuple

from agents.generator import ContentGenerator, content_generator
from errors import ProfileMissingError, WellnessHubError
from models import ParentingPlan
from storage import age_in_weeks
from .logic_user import Session, require_session

logger = logging.getLogger(__name__)

UNAVAILABLE_MSG = "Failed to generate a plan. The AI service may be unavailable."
UNEXPECTED_MSG = "An unexpected error occurred."


def baby_age_in_weeks(session: Session, now: Optional[datetime] = None) -> int:
    birth_date = session.profile.BabyBirthDate
    if not birth_date:
        raise ProfileMissingError("Birth date is not available from your profile.")
    try:
        return age_in_weeks(birth_date, now)
    except ValueError:
        raise ProfileMissingError("The birth date in your profile is not a valid date.")


def generate_parenting_plan(
    session: Optional[Session],
    generator: ContentGenerator = content_generator,
    now: Optional[datetime] = None,
) -> Optional[ParentingPlan]:
    """Daily routine for the baby's current age; None when generation failed."""
    session = require_session(session)
    weeks = baby_age_in_weeks(session, now)
    return generator.generate_parenting_plan(weeks)


def _section(title: str, icon: str, items: List[str]) -> str:
    lines = [f"### {icon} {title}"]
    lines.extend(f"- {item}" for item in items)
    return "\n".join(lines)


def render_parenting_plan(plan: ParentingPlan) -> str:
    return "\n\n".join(
        [
            "## Personalized Daily Routine",
            _section("Feeding Routine", "🍼", plan.FeedingRoutine),
            _section("Sleeping Routine", "😴", plan.SleepingRoutine),
            _section("Playtime Routine", "🧸", plan.PlaytimeRoutine),
        ]
    )


# ================== Gradio callbacks ==================


def load_birth_date_action(session_state) -> str:
    if session_state is None:
        return ""
    return session_state.profile.BabyBirthDate


def generate_plan_action(session_state, generator: ContentGenerator = content_generator) -> Tuple[str, str]:
    """Returns (plan markdown, status message)."""
    try:
        plan = generate_parenting_plan(session_state, generator)
    except WellnessHubError as e:
        return "", e.message
    except Exception:
        logger.exception("Parenting planner failed")
        return "", UNEXPECTED_MSG

    if plan is None:
        return "", UNAVAILABLE_MSG
    return render_parenting_plan(plan), ""
