"""Gemini 추천 문구 생성 클라이언트 테스트."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime

import pytest
import requests

from moodbite.schemas.recommendation import CandidatePlace
from moodbite.services.gemini_service import (
    GeminiTextClient,
    build_enhancement_prompt,
    build_generation_prompt,
    merge_descriptions,
    parse_recommendations,
)
from moodbite.services.mock_recommendations import get_mock_recommendations


class _FakeResponse:
    def __init__(self, status_code: int = 200, payload: object = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> object:
        return self._payload


def _gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _patch_post(monkeypatch, response: _FakeResponse, captured: dict | None = None) -> None:
    def _fake_post(url, json=None, headers=None, timeout=None):
        if captured is not None:
            captured.update({"url": url, "json": json, "headers": headers})
        return response

    monkeypatch.setattr("moodbite.services.gemini_service.requests.post", _fake_post)


@pytest.fixture(autouse=True)
def fixed_clock(monkeypatch) -> None:
    monkeypatch.setattr(
        "moodbite.services.gemini_service.local_now",
        lambda _tz: datetime(2026, 10, 19, 19, 5),
    )


def _places() -> list[CandidatePlace]:
    return [
        CandidatePlace(name="Starbucks Reserve Roastery", category="Coffee Shop", distance=240, rating=9.1),
        CandidatePlace(name="Peet's Coffee", address="500 Pine St, Seattle, WA", hours="Open 06:00-20:00"),
        CandidatePlace(name="Blue Bottle", distance=1800),
    ]


def test_generation_prompt_carries_constraints_and_time() -> None:
    prompt = build_generation_prompt("Seattle, WA", "coffee", 30, 1000, "Monday 7:05 PM")

    assert "A user in Seattle, WA is looking for a great coffee shop or cafe" in prompt
    assert "They have 30 minutes and can travel up to 1000 meters" in prompt
    assert "Current time: Monday 7:05 PM" in prompt
    assert "DO NOT recommend small local cafes or independent restaurants" in prompt
    assert "Respond ONLY with the JSON array, no other text." in prompt


def test_enhancement_prompt_lists_places() -> None:
    prompt = build_enhancement_prompt(_places(), "coffee", "Seattle, WA")

    assert "- Starbucks Reserve Roastery (Coffee Shop)" in prompt
    assert "- Peet's Coffee\n" in prompt
    assert "one-to-two sentence description" in prompt


def test_parse_recommendations_returns_embedded_array() -> None:
    items = [
        {"name": "Starbucks", "description": "Reliable coffee.", "distance": "5 min walk"},
        {"name": "Peet's Coffee", "description": "Bold roasts.", "rating": 4.5},
    ]
    text = f"Sure! Here you go:\n```json\n{json.dumps(items)}\n```"

    parsed = parse_recommendations(text)

    assert [item.model_dump(exclude_none=True) for item in parsed] == items


@pytest.mark.parametrize(
    "text",
    [
        None,
        "",
        "I could not find anything.",
        '[{"name": "Starbucks", "description": "ok",]',
        "[]",
        '[{"name": "Starbucks"}]',
    ],
)
def test_parse_recommendations_rejects_unusable_text(text: str | None) -> None:
    assert parse_recommendations(text) is None


def test_generate_without_key_returns_mock_without_network(monkeypatch) -> None:
    def _fail_post(*args, **kwargs):
        raise AssertionError("network must not be called")

    monkeypatch.setattr("moodbite.services.gemini_service.requests.post", _fail_post)

    result = asyncio.run(GeminiTextClient(api_key=None).generate_from_scratch("Seattle, WA", "healthy", 30, 1000))

    assert result == get_mock_recommendations("healthy")


def test_generate_sends_generation_config(monkeypatch) -> None:
    captured: dict = {}
    items = [{"name": "Chipotle", "description": "Fast burrito bowls.", "hours": "Open until 10 PM"}]
    _patch_post(monkeypatch, _FakeResponse(payload=_gemini_payload(json.dumps(items))), captured)

    client = GeminiTextClient(api_key="gemini-key", temperature=0.7, max_output_tokens=1024)
    result = asyncio.run(client.generate_from_scratch("Seattle, WA", "quick-bite", 20, 800))

    assert [item.name for item in result] == ["Chipotle"]
    assert captured["url"].endswith("/models/gemini-2.0-flash:generateContent")
    assert captured["headers"]["x-goog-api-key"] == "gemini-key"
    assert captured["json"]["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 1024}
    assert "Current time: Monday 7:05 PM" in captured["json"]["contents"][0]["parts"][0]["text"]


@pytest.mark.parametrize(
    "response",
    [
        _FakeResponse(status_code=500, text="internal"),
        _FakeResponse(status_code=429, text="quota"),
        _FakeResponse(payload={"candidates": []}),
        _FakeResponse(payload=_gemini_payload("no brackets here")),
        _FakeResponse(payload=_gemini_payload("[not valid json]")),
    ],
)
def test_generate_falls_back_to_mock_on_failures(monkeypatch, response: _FakeResponse) -> None:
    _patch_post(monkeypatch, response)

    client = GeminiTextClient(api_key="gemini-key")
    result = asyncio.run(client.generate_from_scratch("Seattle, WA", "comfort", 30, 1000))

    assert result == get_mock_recommendations("comfort")


def test_generate_falls_back_to_mock_on_network_error(monkeypatch) -> None:
    def _fake_post(*args, **kwargs):
        raise requests.Timeout("read timed out")

    monkeypatch.setattr("moodbite.services.gemini_service.requests.post", _fake_post)

    client = GeminiTextClient(api_key="gemini-key")

    assert asyncio.run(client.try_generate("Seattle, WA", "date-night", 90, 5000)) is None
    assert asyncio.run(client.generate_from_scratch("Seattle, WA", "date-night", 90, 5000)) == (
        get_mock_recommendations("date-night")
    )


def test_merge_descriptions_matches_exact_and_substring_names() -> None:
    generated = [
        {"name": "peet's coffee", "description": "Dark roasts done right."},
        {"name": "Starbucks Reserve", "description": "A showpiece roastery worth the walk."},
        {"name": "Starbucks Reserve Roastery", "description": "Second match is ignored."},
    ]

    result = merge_descriptions(_places(), generated, "coffee")

    assert [item.name for item in result] == ["Starbucks Reserve Roastery", "Peet's Coffee", "Blue Bottle"]
    assert result[0].description == "A showpiece roastery worth the walk."
    assert result[0].distance == "240 m"
    assert result[0].rating == 9.1
    assert result[1].description == "Dark roasts done right."
    assert result[1].address == "500 Pine St, Seattle, WA"
    assert result[1].hours == "Open 06:00-20:00"
    assert result[2].description == "A nearby spot that matches your coffee mood."
    assert result[2].distance == "1.8 km"


def test_enhance_without_key_uses_generic_descriptions(monkeypatch) -> None:
    def _fail_post(*args, **kwargs):
        raise AssertionError("network must not be called")

    monkeypatch.setattr("moodbite.services.gemini_service.requests.post", _fail_post)

    result = asyncio.run(GeminiTextClient(api_key=None).enhance_existing(_places(), "date-night", "Seattle, WA"))

    assert result[0].description == "A nearby coffee shop that matches your date night mood."
    assert [item.name for item in result] == [place.name for place in _places()]


def test_enhance_with_unparseable_output_keeps_every_place(monkeypatch) -> None:
    _patch_post(monkeypatch, _FakeResponse(payload=_gemini_payload("Sorry, I can't help with that.")))

    result = asyncio.run(GeminiTextClient(api_key="gemini-key").enhance_existing(_places(), "coffee", "Seattle, WA"))

    assert len(result) == 3
    assert all(item.description.startswith("A nearby") for item in result)


def test_enhance_merges_generated_descriptions(monkeypatch) -> None:
    generated = [{"name": "Blue Bottle", "description": "Meticulous pour-overs in a calm space."}]
    _patch_post(monkeypatch, _FakeResponse(payload=_gemini_payload(json.dumps(generated))))

    result = asyncio.run(GeminiTextClient(api_key="gemini-key").enhance_existing(_places(), "coffee", "Seattle, WA"))

    assert result[2].description == "Meticulous pour-overs in a calm space."
    assert result[0].description == "A nearby coffee shop that matches your coffee mood."
