"""추천 피드백 API 스키마."""

from pydantic import BaseModel, ConfigDict, Field


class FeedbackRequest(BaseModel):
    """추천 항목에 대한 사용자 피드백."""

    model_config = ConfigDict(populate_by_name=True)

    recommendation_id: str | int | None = Field(default=None, alias="recommendationId", description="추천 항목 식별자")
    rating: int | float | None = Field(default=None, description="사용자 평점")
    comment: str | None = Field(default=None, description="자유 코멘트")


class FeedbackAckResponse(BaseModel):
    """피드백 접수 응답."""

    success: bool = Field(default=True, description="접수 여부")
    message: str = Field(default="Thank you for your feedback!", description="안내 문구")
