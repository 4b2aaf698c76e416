"""무드 태그별 검색 카테고리와 프롬프트 문구 테이블."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Mood(StrEnum):
    """지원하는 무드 태그."""

    COFFEE = "coffee"
    QUICK_BITE = "quick-bite"
    HEALTHY = "healthy"
    COMFORT = "comfort"
    DATE_NIGHT = "date-night"
    ADVENTURE = "adventure"


@dataclass(frozen=True, slots=True)
class MoodProfile:
    """무드 하나에 대응하는 Foursquare 카테고리/쿼리와 자연어 의도."""

    category_id: str
    query: str
    intent: str


MOOD_PROFILES: dict[str, MoodProfile] = {
    Mood.COFFEE: MoodProfile("13035", "coffee", "looking for a great coffee shop or cafe"),
    Mood.QUICK_BITE: MoodProfile("13145", "fast food", "need a quick and satisfying meal"),
    Mood.HEALTHY: MoodProfile("13377", "healthy food", "want healthy, nutritious food options"),
    Mood.COMFORT: MoodProfile("13065", "comfort food", "craving comfort food"),
    Mood.DATE_NIGHT: MoodProfile("13003", "romantic restaurant", "planning a romantic dinner"),
    Mood.ADVENTURE: MoodProfile("13000", "restaurant", "want to try something new and exciting"),
}

DEFAULT_MOOD_PROFILE = MoodProfile("13065", "restaurant", "looking for food")


def get_mood_profile(mood: str | None) -> MoodProfile:
    """무드 문자열에 맞는 프로필을 반환한다. 모르는 무드는 일반 레스토랑으로 처리한다."""
    normalized = (mood or "").strip().lower()
    return MOOD_PROFILES.get(normalized, DEFAULT_MOOD_PROFILE)
