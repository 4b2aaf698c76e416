"""외부 provider를 쓸 수 없을 때 반환하는 정적 추천 테이블."""

from __future__ import annotations

from moodbite.core.moods import Mood
from moodbite.schemas.recommendation import Recommendation

_MOCK_RECOMMENDATIONS: dict[str, tuple[dict[str, str], ...]] = {
    Mood.COFFEE: (
        {
            "name": "Brew & Bean Cafe",
            "description": "Cozy corner cafe with artisanal coffee and fresh pastries. Perfect for your caffeine fix!",
            "distance": "5 min walk",
        },
        {
            "name": "The Daily Grind",
            "description": "Hip coffee spot with excellent espresso drinks and comfortable seating.",
            "distance": "8 min walk",
        },
    ),
    Mood.QUICK_BITE: (
        {
            "name": "Urban Eats",
            "description": "Fast-casual spot with delicious wraps, bowls, and sandwiches ready in minutes.",
            "distance": "3 min walk",
        },
        {
            "name": "Grab & Go Grill",
            "description": "Quick service restaurant with tasty burgers and fresh-cut fries.",
            "distance": "5 min walk",
        },
    ),
    Mood.HEALTHY: (
        {
            "name": "Green Leaf Kitchen",
            "description": "Farm-to-table salads, grain bowls, and fresh smoothies for the health-conscious.",
            "distance": "7 min walk",
        },
        {
            "name": "Vitality Cafe",
            "description": "Nutrient-packed meals with vegan and gluten-free options available.",
            "distance": "10 min walk",
        },
    ),
    Mood.COMFORT: (
        {
            "name": "Mama's Kitchen",
            "description": "Hearty comfort food classics like mac & cheese, meatloaf, and pot pie.",
            "distance": "8 min walk",
        },
        {
            "name": "The Cozy Corner",
            "description": "Warm, inviting spot serving up comfort favorites with a modern twist.",
            "distance": "12 min walk",
        },
    ),
    Mood.DATE_NIGHT: (
        {
            "name": "Bella Notte",
            "description": "Romantic Italian restaurant with candlelit tables and an extensive wine list.",
            "distance": "10 min drive",
        },
        {
            "name": "The Secret Garden",
            "description": "Upscale dining with a beautiful patio setting, perfect for a special evening.",
            "distance": "15 min drive",
        },
    ),
    Mood.ADVENTURE: (
        {
            "name": "Spice Route",
            "description": "Explore bold flavors from around the world with rotating international menus.",
            "distance": "12 min drive",
        },
        {
            "name": "Fusion Alley",
            "description": "Creative fusion cuisine that combines unexpected ingredients in delightful ways.",
            "distance": "8 min walk",
        },
    ),
}


def get_mock_recommendations(mood: str | None) -> list[Recommendation]:
    """무드에 맞는 정적 추천 2건을 반환한다. 모르는 무드는 quick-bite 목록을 쓴다."""
    normalized = (mood or "").strip().lower()
    entries = _MOCK_RECOMMENDATIONS.get(normalized, _MOCK_RECOMMENDATIONS[Mood.QUICK_BITE])
    return [Recommendation(**entry) for entry in entries]
