"""API 의존성 모음."""

from moodbite.core.config import get_settings
from moodbite.services.recommendation_service import RecommendationAssembler


def get_recommendation_assembler() -> RecommendationAssembler:
    """현재 설정의 자격 증명을 주입한 추천 조립기를 제공합니다."""
    return RecommendationAssembler.from_settings(get_settings())
