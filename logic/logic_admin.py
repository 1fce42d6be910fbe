import logging
import os
from typing import Optional, Tuple

import gradio as gr
import pandas as pd

from errors import AuthError, WellnessHubError
from models import SummaryStats
from storage import EXPORTS_DIR
from .logic_user import Session, require_session
from .mock_sheet import SHEET_NAMES, ProfileStore, profile_store

logger = logging.getLogger(__name__)

ADMIN_ONLY_MSG = "Admin access required."


def require_admin(session: Optional[Session]) -> Session:
    session = require_session(session)
    if not session.is_admin:
        logger.warning("Admin action refused for %s", session.user_id)
        raise AuthError(ADMIN_ONLY_MSG)
    return session


def load_stats(session: Optional[Session], store: ProfileStore = profile_store) -> SummaryStats:
    require_admin(session)
    return store.get_dashboard_stats()


def interactions_frame(stats: SummaryStats) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "module": [m.name for m in stats.interactionData],
            "interactions": [m.interactions for m in stats.interactionData],
        }
    )


def render_stats(stats: SummaryStats) -> str:
    return (
        "| Active Users | New Sign-ups (7d) | Meal Plans Generated | Total Interactions |\n"
        "|---|---|---|---|\n"
        f"| {stats.activeUsers} | {stats.newSignups} | "
        f"{stats.mealPlansGenerated} | {stats.interactions} |"
    )


def export_sheet_to_file(
    session: Optional[Session],
    sheet_name: str,
    store: ProfileStore = profile_store,
    exports_dir: str = EXPORTS_DIR,
) -> str:
    """Write one sheet to {exports_dir}/{sheet}_Data.csv and return the path."""
    require_admin(session)
    csv_text = store.export_sheet(sheet_name)
    os.makedirs(exports_dir, exist_ok=True)
    path = os.path.join(exports_dir, f"{sheet_name}_Data.csv")
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(csv_text)
    logger.info("Exported %s to %s", sheet_name, path)
    return path


# ================== Gradio callbacks ==================


def load_stats_action(session_state, store: ProfileStore = profile_store) -> Tuple[str, pd.DataFrame, str]:
    """Returns (stats markdown, bar plot frame, status)."""
    try:
        stats = load_stats(session_state, store)
    except WellnessHubError as e:
        return "", pd.DataFrame({"module": [], "interactions": []}), e.message
    return render_stats(stats), interactions_frame(stats), ""


def export_action(session_state, sheet_name, store: ProfileStore = profile_store):
    """Returns (file update, status)."""
    if sheet_name not in SHEET_NAMES:
        return gr.update(value=None, visible=False), "Please choose a sheet to export."
    try:
        path = export_sheet_to_file(session_state, sheet_name, store)
    except WellnessHubError as e:
        return gr.update(value=None, visible=False), e.message
    except OSError as e:
        logger.error("Could not write export for %s: %s", sheet_name, e)
        return gr.update(value=None, visible=False), f"Failed to export {sheet_name} data."
    return gr.update(value=path, visible=True), f"{sheet_name} data exported."
