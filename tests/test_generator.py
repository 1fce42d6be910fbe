import json

import pytest
import requests

from agents import base
from agents.base import GeminiClient
from agents.generator import ContentGenerator, GenerationKind
from agents.schemas import RECIPE_SCHEMA
from errors import GenerationError
from models import Mood, SuitableFor


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def gemini_payload(obj):
    text = obj if isinstance(obj, str) else json.dumps(obj)
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


RECIPE = {
    "RecipeName": "Dal Rice",
    "Ingredients": ["1 cup rice", "1/2 cup dal"],
    "Instructions": ["Wash.", "Cook."],
    "SuitableFor": "Both",
    "LocalIngredientUsed": True,
}


@pytest.fixture
def posts(monkeypatch):
    """Captures requests.post calls; set .response to control the reply."""

    class Recorder:
        response = FakeResponse(gemini_payload(RECIPE))
        calls = []

        def __call__(self, url, headers=None, json=None, timeout=None):
            self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
            if isinstance(self.response, Exception):
                raise self.response
            return self.response

    recorder = Recorder()
    recorder.calls = []
    monkeypatch.setattr(base.requests, "post", recorder)
    return recorder


def _generator(api_key="test-key"):
    client = GeminiClient("https://example.test/", "gemini-test", api_key, timeout=5)
    return ContentGenerator(client=client, test_mode=False)


def test_request_shape(posts):
    recipe = _generator().generate_recipe("Dal Rice")
    assert recipe.RecipeName == "Dal Rice"
    assert recipe.SuitableFor is SuitableFor.BOTH

    call = posts.calls[0]
    assert call["url"] == "https://example.test/v1beta/models/gemini-test:generateContent"
    assert call["headers"]["x-goog-api-key"] == "test-key"
    assert call["timeout"] == 5
    config = call["json"]["generationConfig"]
    assert config["responseMimeType"] == "application/json"
    assert config["responseSchema"] == RECIPE_SCHEMA
    assert "'Dal Rice'" in call["json"]["contents"][0]["parts"][0]["text"]


def test_missing_api_key_returns_none_without_request(posts):
    gen = _generator(api_key=None)
    assert not gen.available
    assert gen.generate_recipe("Dal Rice") is None
    assert gen.generate_emotion_support(Mood.TIRED) is None
    assert posts.calls == []


def test_invalid_json_returns_none(posts):
    posts.response = FakeResponse(gemini_payload("not json {"))
    assert _generator().generate_recipe("Dal Rice") is None


def test_schema_mismatch_returns_none(posts):
    bad = dict(RECIPE, LocalIngredientUsed="yes")
    posts.response = FakeResponse(gemini_payload(bad))
    assert _generator().generate_recipe("Dal Rice") is None


def test_http_error_returns_none(posts):
    posts.response = FakeResponse({}, status=429)
    assert _generator().generate_recipe("Dal Rice") is None


def test_network_error_returns_none(posts):
    posts.response = requests.ConnectionError("offline")
    assert _generator().generate_recipe("Dal Rice") is None


def test_empty_candidates_raise_in_client(posts):
    posts.response = FakeResponse({"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}})
    client = GeminiClient("https://example.test", "gemini-test", "k")
    with pytest.raises(GenerationError) as exc:
        client.generate_json("hi", RECIPE_SCHEMA)
    assert "SAFETY" in exc.value.message


def test_missing_parameters_return_none(posts):
    assert _generator().generate(GenerationKind.RECIPE, {}) is None
    assert posts.calls == []


def test_emotion_support_accepts_free_text(posts):
    posts.response = FakeResponse(
        gemini_payload({"Affirmation": "a", "StressReliefExercise": "b", "PepTalk": "c"})
    )
    support = _generator().generate_emotion_support("  a bit lonely ")
    assert support.PepTalk == "c"
    assert "'a bit lonely'" in posts.calls[0]["json"]["contents"][0]["parts"][0]["text"]


def test_parenting_plan_prompt_carries_age(posts):
    posts.response = FakeResponse(
        gemini_payload({"FeedingRoutine": [], "SleepingRoutine": ["x"], "PlaytimeRoutine": []})
    )
    plan = _generator().generate_parenting_plan(0)
    assert plan.SleepingRoutine == ["x"]
    assert "0 weeks old" in posts.calls[0]["json"]["contents"][0]["parts"][0]["text"]


def test_ui_test_mode_uses_canned_output(posts):
    gen = ContentGenerator(client=GeminiClient("https://example.test", "m", None), test_mode=True)
    assert gen.available
    week = gen.generate_meal_plan("Veg", "110001", 30, 6)
    assert len(week.mother.breakfast) == 7
    assert gen.generate_recipe("Poha").RecipeName == "Poha"
    assert gen.generate_emotion_support(Mood.HAPPY) is not None
    assert gen.generate_parenting_plan(6) is not None
    assert posts.calls == []


def test_unknown_kind_returns_none(posts):
    assert _generator().generate("ShoppingList", {"meal_name": "Poha"}) is None
    assert posts.calls == []
