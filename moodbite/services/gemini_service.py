"""Gemini 기반 추천 문구 생성 클라이언트."""

from __future__ import annotations

import asyncio
from typing import Any

import requests
from pydantic import ValidationError

from moodbite.core.clock import describe_local_time, local_now
from moodbite.core.config import Settings, get_settings
from moodbite.core.logger import get_logger
from moodbite.core.moods import get_mood_profile
from moodbite.core.timeout_policy import get_timeout_policy, to_requests_timeout
from moodbite.schemas.recommendation import CandidatePlace, Recommendation
from moodbite.services.json_extraction import extract_json_array
from moodbite.services.mock_recommendations import get_mock_recommendations

logger = get_logger(__name__)


def build_generation_prompt(
    location: str,
    mood: str,
    time_available: float,
    max_distance: float,
    current_time: str,
) -> str:
    """실제 장소 없이 체인점 추천을 생성하도록 하는 프롬프트를 구성한다."""
    intent = get_mood_profile(mood).intent
    return f"""
You are a helpful restaurant recommendation assistant. A user in {location} is {intent}. They have {time_available:g} minutes and can travel up to {max_distance:g} meters.

Current time: {current_time}

IMPORTANT RULES:
1. ONLY recommend major chains or well-established franchises (like Starbucks, Peet's Coffee, Dutch Bros, Panera, Chipotle, etc.) that are guaranteed to still be in business
2. DO NOT recommend small local cafes or independent restaurants as they may have closed
3. Only recommend places likely to be OPEN at this time based on typical business hours
4. Focus on popular, nationwide or regional chains with multiple locations

Please provide 2-3 restaurant recommendations. For each recommendation, provide:
1. A major chain or well-established franchise name that has locations in {location}
2. A brief, engaging description of why it fits their mood
3. Estimated distance/time if applicable
4. Typical hours to confirm it's likely open now

Format your response as a JSON array with objects containing: name, description, address (optional), distance (optional), rating (optional), hours (optional).

Example format:
[
  {{"name": "Starbucks Reserve", "description": "Perfect cozy spot for your coffee craving with artisanal brews and fresh pastries.", "distance": "5 min walk", "hours": "Open until 9 PM"}},
  {{"name": "Sweetgreen", "description": "Fresh, healthy options with amazing grain bowls and smoothies.", "distance": "10 min walk", "hours": "Open until 10 PM"}}
]

Respond ONLY with the JSON array, no other text.
""".strip()


def build_enhancement_prompt(places: list[CandidatePlace], mood: str, location: str) -> str:
    """실제 장소마다 한두 문장 설명만 요청하는 짧은 프롬프트를 구성한다."""
    intent = get_mood_profile(mood).intent
    place_lines = "\n".join(
        f"- {place.name} ({place.category})" if place.category else f"- {place.name}" for place in places
    )
    return f"""
You are a helpful restaurant recommendation assistant. A user in {location} is {intent}.

Write a one-to-two sentence description for each of these real places explaining why it fits their mood:
{place_lines}

Respond ONLY with a JSON array of objects with "name" and "description" fields, using the place names exactly as given. No other text.
""".strip()


def parse_recommendations(text: str | None) -> list[Recommendation] | None:
    """모델 출력에서 추천 목록을 파싱한다. 비었거나 형식이 틀리면 None."""
    extraction = extract_json_array(text)
    if not extraction.ok:
        logger.warning("Gemini output could not be parsed: %s", extraction.error)
        return None

    try:
        recommendations = [Recommendation.model_validate(item) for item in extraction.value or []]
    except ValidationError as exc:
        logger.warning("Gemini output has invalid recommendation items: %s", exc.error_count())
        return None
    return recommendations or None


def _format_distance(meters: int | None) -> str | None:
    if meters is None:
        return None
    if meters < 1000:
        return f"{meters} m"
    return f"{meters / 1000:.1f} km"


def _generic_description(place: CandidatePlace, mood: str) -> str:
    kind = place.category.lower() if place.category else "spot"
    return f"A nearby {kind} that matches your {mood.replace('-', ' ')} mood."


def _match_description(place_name: str, generated: list[Any]) -> str | None:
    """대소문자 무시 완전일치 또는 부분일치로 첫 번째 생성 설명을 찾는다."""
    target = place_name.strip().lower()
    for item in generated:
        if not isinstance(item, dict):
            continue
        name = str(item.get("name") or "").strip().lower()
        description = item.get("description")
        if not name or not isinstance(description, str) or not description.strip():
            continue
        if name == target or name in target or target in name:
            return description.strip()
    return None


def merge_descriptions(places: list[CandidatePlace], generated: list[Any], mood: str) -> list[Recommendation]:
    """생성된 설명을 원래 장소 순서대로 붙이고, 못 찾은 장소에는 기본 문구를 쓴다."""
    recommendations: list[Recommendation] = []
    for place in places:
        description = _match_description(place.name, generated) or _generic_description(place, mood)
        recommendations.append(
            Recommendation(
                name=place.name,
                description=description,
                address=place.address,
                distance=_format_distance(place.distance),
                rating=place.rating,
                hours=place.hours,
            )
        )
    return recommendations


class GeminiTextClient:
    """Gemini generateContent REST API 클라이언트.

    키가 없거나 호출/파싱이 실패하면 네트워크 오류를 올리지 않고
    결정적인 대체 결과를 돌려준다.
    """

    _BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str | None,
        model_name: str = "gemini-2.0-flash",
        temperature: float = 0.7,
        max_output_tokens: int = 1024,
        timeout_seconds: int = 20,
        timezone_name: str = "America/Los_Angeles",
    ) -> None:
        self._api_key = api_key or None
        self._model_name = model_name.strip()
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._timeout_seconds = timeout_seconds
        self._timezone_name = timezone_name

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> GeminiTextClient:
        """애플리케이션 설정으로 클라이언트를 생성합니다."""
        resolved_settings = settings or get_settings()
        timeout_policy = get_timeout_policy(resolved_settings)
        if not resolved_settings.GEMINI_API_KEY:
            logger.info("GEMINI_API_KEY is not configured. Generated text disabled.")
        return cls(
            api_key=resolved_settings.GEMINI_API_KEY,
            model_name=resolved_settings.GEMINI_MODEL_NAME,
            temperature=resolved_settings.GEMINI_TEMPERATURE,
            max_output_tokens=resolved_settings.GEMINI_MAX_OUTPUT_TOKENS,
            timeout_seconds=timeout_policy.gemini_timeout_seconds,
            timezone_name=resolved_settings.LOCAL_TIMEZONE,
        )

    @property
    def is_configured(self) -> bool:
        return self._api_key is not None

    async def generate_from_scratch(
        self,
        location: str,
        mood: str,
        time_available: float,
        max_distance: float,
    ) -> list[Recommendation]:
        """체인점 추천을 생성한다. 실패하면 무드별 정적 추천을 반환한다."""
        generated = await self.try_generate(location, mood, time_available, max_distance)
        if generated is None:
            return get_mock_recommendations(mood)
        return generated

    async def try_generate(
        self,
        location: str,
        mood: str,
        time_available: float,
        max_distance: float,
    ) -> list[Recommendation] | None:
        """체인점 추천을 생성한다. 키가 없거나 실패하면 None."""
        if not self.is_configured:
            return None

        current_time = describe_local_time(local_now(self._timezone_name))
        prompt = build_generation_prompt(location, mood, time_available, max_distance, current_time)
        return parse_recommendations(await self._generate_text(prompt))

    async def enhance_existing(
        self,
        places: list[CandidatePlace],
        mood: str,
        location: str,
    ) -> list[Recommendation]:
        """실제 장소에 생성 설명을 붙인다. 장소마다 정확히 하나의 추천을 돌려준다."""
        if not places:
            return []
        if not self.is_configured:
            return merge_descriptions(places, [], mood)

        text = await self._generate_text(build_enhancement_prompt(places, mood, location))
        extraction = extract_json_array(text)
        if not extraction.ok:
            logger.warning("Gemini enhancement output could not be parsed: %s", extraction.error)
        return merge_descriptions(places, extraction.value or [], mood)

    async def _generate_text(self, prompt: str) -> str | None:
        url = f"{self._BASE_URL}/models/{self._model_name}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self._temperature,
                "maxOutputTokens": self._max_output_tokens,
            },
        }
        headers = {"Content-Type": "application/json", "x-goog-api-key": self._api_key or ""}
        request_timeout = to_requests_timeout(self._timeout_seconds)

        def _send() -> requests.Response:
            return requests.post(url, json=payload, headers=headers, timeout=request_timeout)

        try:
            response = await asyncio.to_thread(_send)
            if not response.ok:
                logger.error(
                    "Gemini API error: status=%s body=%s",
                    response.status_code,
                    (response.text or "")[:200],
                )
                return None
            data = response.json()
        except requests.RequestException as exc:
            logger.error("Gemini API request failed: %s", exc)
            return None
        except ValueError as exc:
            logger.error("Gemini API response parse failed: %s", exc)
            return None

        return _extract_candidate_text(data)


def _extract_candidate_text(data: Any) -> str | None:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        logger.warning("Gemini response has no candidate text")
        return None
    return text if isinstance(text, str) else None
