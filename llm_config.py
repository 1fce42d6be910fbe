# llm_config.py
"""
Central configuration for the parenting wellness hub.

- UI_TEST_MODE: if True, do not call the generation API, return canned JSON.
- GEMINI_API_KEY: credential for the generation API (falls back to API_KEY).
- GEMINI_BASE_URL: base URL of the Gemini REST endpoint.
- GENERATION_MODEL_NAME: model used for every structured generation call.
- MOCK_STORE_LATENCY: multiplier applied to the simulated profile store delays.
- DATA_DIR: folder for session / local storage files and CSV exports.
"""

import os


def _bool_env(name: str, default: str = "false") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value in {"1", "true", "yes", "y"}


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


# If True, do not call the real API and always return canned outputs.
UI_TEST_MODE: bool = _bool_env("UI_TEST_MODE", "false")

# Optional API key; without it every generation degrades to None
GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None

GEMINI_BASE_URL: str = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com"
).rstrip("/")

GENERATION_MODEL_NAME: str = os.getenv("GENERATION_MODEL_NAME", "gemini-2.5-flash")

# HTTP timeout
GENERATION_TIMEOUT: float = _float_env("GENERATION_TIMEOUT", 60.0)

# 0 disables the simulated network delay of the mock profile store
MOCK_STORE_LATENCY: float = _float_env("MOCK_STORE_LATENCY", 1.0)

DATA_DIR: str = os.getenv("DATA_DIR", "user_data")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
