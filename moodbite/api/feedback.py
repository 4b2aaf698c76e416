"""추천 피드백 수집 API. 저장하지 않고 로그만 남긴다."""

from fastapi import APIRouter, status
from fastapi.responses import Response

from moodbite.core.logger import get_logger
from moodbite.schemas.feedback import FeedbackAckResponse, FeedbackRequest

router = APIRouter(prefix="/api/v1", tags=["feedback"])
logger = get_logger(__name__)


@router.options("/feedback", include_in_schema=False)
async def feedback_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, media_type="application/json")


@router.post("/feedback", response_model=FeedbackAckResponse)
async def submit_feedback(feedback: FeedbackRequest) -> FeedbackAckResponse:
    """피드백을 로그로 남기고 접수 응답을 반환한다."""
    logger.info(
        "Feedback received: recommendation_id=%s rating=%s comment=%r",
        feedback.recommendation_id,
        feedback.rating,
        feedback.comment,
    )
    return FeedbackAckResponse()
