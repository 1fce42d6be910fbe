from typing import Any, Dict, Optional

import requests

from errors import GenerationError
from llm_config import GENERATION_TIMEOUT


class GeminiClient:
    """Low-level HTTP client for the Gemini generateContent endpoint."""

    def __init__(
        self,
        base_url: str,
        model_name: str,
        api_key: Optional[str],
        timeout: float = GENERATION_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.model_name = model_name
        self.api_key = api_key
        self.timeout = timeout

    def generate_json(self, prompt: str, response_schema: Dict[str, Any], **kwargs: Any) -> str:
        """Ask for a JSON answer shaped by response_schema and return the raw text."""
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
                "temperature": kwargs.get("temperature", 0.7),
            },
        }

        url = f"{self.base_url}/v1beta/models/{self.model_name}:generateContent"
        resp = requests.post(url, headers=headers, json=payload, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()

        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates")
            raise GenerationError(f"Empty response from model: {reason}")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts)
        if not text.strip():
            raise GenerationError("Model returned no text")
        return text.strip()
