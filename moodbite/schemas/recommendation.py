"""추천 API 요청/응답 및 Provider 중간 결과 스키마."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

RecommendationSource = Literal["foursquare", "ai"]

DEFAULT_TIME_AVAILABLE_MINUTES = 30
DEFAULT_MAX_DISTANCE_METERS = 1000


class RecommendationRequestBody(BaseModel):
    """HTTP 요청 본문. 필수값 검증은 라우터에서 400으로 처리하므로 모두 선택 필드다."""

    model_config = ConfigDict(populate_by_name=True)

    location: str | None = Field(default=None, description="사용자 위치 (예: Seattle, WA)")
    mood: str | None = Field(default=None, description="무드 태그")
    time_available: float | None = Field(default=None, alias="timeAvailable", description="가용 시간(분)")
    max_distance: float | None = Field(default=None, alias="maxDistance", description="최대 이동 거리(m)")

    def to_request(self) -> RecommendationRequest:
        return RecommendationRequest(
            location=(self.location or "").strip(),
            mood=(self.mood or "").strip(),
            time_available=(
                self.time_available if self.time_available is not None else DEFAULT_TIME_AVAILABLE_MINUTES
            ),
            max_distance=self.max_distance if self.max_distance is not None else DEFAULT_MAX_DISTANCE_METERS,
        )


class RecommendationRequest(BaseModel):
    """검증을 마친 추천 요청. 요청 하나 동안만 쓰이고 변경되지 않는다."""

    model_config = ConfigDict(frozen=True)

    location: str = Field(..., min_length=1, description="사용자 위치")
    mood: str = Field(..., min_length=1, description="무드 태그 (모르는 값은 기본 카테고리로 처리)")
    time_available: float = Field(default=DEFAULT_TIME_AVAILABLE_MINUTES, description="가용 시간(분)")
    max_distance: float = Field(default=DEFAULT_MAX_DISTANCE_METERS, description="최대 이동 거리(m)")


class CandidatePlace(BaseModel):
    """Places provider가 돌려준 후보 장소. 선택 필드는 provider가 준 경우에만 채워진다."""

    place_id: str | None = Field(default=None, description="Foursquare fsq_id")
    name: str = Field(..., description="장소 이름")
    address: str | None = Field(default=None, description="포맷된 주소")
    distance: int | None = Field(default=None, description="검색 기준점으로부터의 거리(m)")
    rating: float | None = Field(default=None, description="Foursquare 평점 (0~10)")
    price: int | None = Field(default=None, description="가격대 (1~4)")
    hours: str | None = Field(default=None, description="표시용 영업시간 문자열")
    category: str | None = Field(default=None, description="대표 카테고리 이름")


class Recommendation(BaseModel):
    """호출자에게 반환되는 추천 항목."""

    name: str = Field(..., min_length=1, description="장소 이름")
    description: str = Field(..., min_length=1, description="추천 설명")
    address: str | None = Field(default=None, description="주소")
    distance: str | int | float | None = Field(default=None, description="거리 또는 이동 시간 표기")
    rating: float | str | None = Field(default=None, description="평점")
    hours: str | None = Field(default=None, description="영업시간")


class ResponseEnvelope(BaseModel):
    """추천 API 응답 본문."""

    model_config = ConfigDict(frozen=True)

    recommendations: list[Recommendation] = Field(..., min_length=1, description="추천 목록")
    source: RecommendationSource = Field(..., description="최종적으로 사용된 데이터 출처")
    rate_limit_reached: bool = Field(
        default=False,
        serialization_alias="rateLimitReached",
        description="Places provider 쿼터 소진 여부",
    )
    message: str | None = Field(default=None, description="서비스 저하 안내 문구")

    def to_payload(self) -> dict[str, Any]:
        """추천 항목의 빈 선택 필드는 생략하고 message는 null이어도 유지한 응답 dict를 만든다."""
        return {
            "recommendations": [item.model_dump(mode="json", exclude_none=True) for item in self.recommendations],
            "source": self.source,
            "rateLimitReached": self.rate_limit_reached,
            "message": self.message,
        }
