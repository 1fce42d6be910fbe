from dataclasses import dataclass
from typing import List, Optional

import gradio as gr

from .logic_user import Session


@dataclass(frozen=True)
class Feature:
    page: str
    title: str
    description: str
    icon: str
    admin_only: bool = False


FEATURES = (
    Feature(
        "parenting",
        "AI Parenting Planner",
        "Get a dynamic daily routine for your baby based on their age.",
        "🍼",
    ),
    Feature(
        "meals",
        "AI Meal & Nutrition",
        "Generate weekly meal plans with local food suggestions.",
        "🥗",
    ),
    Feature(
        "checkin",
        "Emotion Check-in",
        "Track your mood and receive positive affirmations.",
        "💛",
    ),
    Feature(
        "admin",
        "Admin Panel",
        "View statistics and manage application data.",
        "📊",
        admin_only=True,
    ),
)


def features_for(session: Optional[Session]) -> List[Feature]:
    is_admin = session is not None and session.is_admin
    return [f for f in FEATURES if not f.admin_only or is_admin]


def render_features(session: Optional[Session]) -> str:
    if session is None:
        return ""
    lines = ["What would you like to do today?", ""]
    for f in features_for(session):
        lines.append(f"- {f.icon} **{f.title}**: {f.description}")
    return "\n".join(lines)


def clear_user_views():
    """
    Blank every per-user view on logout.

    Recent searches are kept: they belong to the browser, not the user.
    """
    return (
        [],                                     # check-in history state
        "",                                     # check-in history
        "",                                     # support card
        "",                                     # check-in status
        gr.update(value=None),                  # mood
        "",                                     # birth date
        "",                                     # parenting plan
        "",                                     # plan status
        "",                                     # meal plan
        "",                                     # meals status
        gr.update(choices=[], value=None),      # meal dropdown
        "",                                     # recipe
        "",                                     # recipe instructions
        "",                                     # recipe status
        "",                                     # recipe query
        "",                                     # admin stats
        "",                                     # admin status
        gr.update(value=None, visible=False),   # export file
    )

