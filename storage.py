import os
import json
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from llm_config import DATA_DIR

BASE_DIR = DATA_DIR
EXPORTS_DIR = os.path.join(BASE_DIR, "exports")

# Fixed storage keys
SESSION_USER_KEY = "user"
RECENT_SEARCHES_KEY = "recipeSearches"


def ensure_base_dir() -> None:
    """Ensure that the base data directory exists."""
    os.makedirs(BASE_DIR, exist_ok=True)


class KeyValueStorage:
    """
    String-valued key/value view over one browser-held dict.

    Mirrors the browser storage API (getItem / setItem / removeItem): values
    are raw strings, so callers own the (de)serialisation and a corrupt value
    can be detected and removed by the caller. The dict comes from a
    gr.BrowserState and goes back to it through `data`, so each browser keeps
    its own copy.
    """

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data) if isinstance(data, dict) else {}

    def get_item(self, key: str) -> Optional[str]:
        value = self.data.get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else json.dumps(value)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


# ================== Dates ==================


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """UTC ISO-8601 timestamp with a trailing Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO timestamp or a plain YYYY-MM-DD date into an aware datetime.

    A bare date means midnight UTC. Naive timestamps are taken as UTC.
    Raises ValueError for empty or unparseable input.
    """
    if not value or not isinstance(value, str):
        raise ValueError(f"Not a date: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def age_in_weeks(birth_date: str, now: Optional[datetime] = None) -> int:
    """
    Whole weeks elapsed since birth_date.

    Example: born 2024-06-01, asked on 2024-06-15 -> 2.
    A birth date in the future counts as week 0.
    """
    born = parse_iso(birth_date)
    now = now or utc_now()
    delta = now - born
    if delta < timedelta(0):
        return 0
    return delta // timedelta(days=7)
