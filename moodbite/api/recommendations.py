"""무드 기반 음식점 추천 API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, Response

from moodbite.api.dependencies import get_recommendation_assembler
from moodbite.core.logger import get_logger
from moodbite.schemas.recommendation import RecommendationRequestBody
from moodbite.services.recommendation_service import RecommendationAssembler

router = APIRouter(prefix="/api/v1", tags=["recommendations"])
logger = get_logger(__name__)

MISSING_FIELDS_ERROR = "Location and mood are required"
ASSEMBLY_FAILED_ERROR = "Failed to get recommendations"
STRATEGY_HEADER = "X-Recommendation-Strategy"

RECOMMENDATION_EXAMPLES = {
    "foursquare": {
        "summary": "실제 장소 + 생성 설명",
        "value": {
            "recommendations": [
                {
                    "name": "Starbucks",
                    "description": "Reliable espresso and plenty of seating for a quick coffee break.",
                    "address": "1912 Pike Pl, Seattle, WA, 98101",
                    "distance": "240 m",
                    "rating": 8.4,
                    "hours": "Open 06:00-21:00",
                }
            ],
            "source": "foursquare",
            "rateLimitReached": False,
            "message": None,
        },
    }
}


@router.options("/recommendations", include_in_schema=False)
async def recommendations_preflight() -> Response:
    """CORS preflight 요청에 빈 본문으로 응답합니다."""
    return Response(status_code=status.HTTP_200_OK, media_type="application/json")


@router.post(
    "/recommendations",
    responses={
        200: {
            "description": "Recommendation list",
            "content": {"application/json": {"examples": RECOMMENDATION_EXAMPLES}},
        },
        400: {"description": "Missing location or mood"},
    },
)
async def recommend(
    body: RecommendationRequestBody,
    assembler: RecommendationAssembler = Depends(get_recommendation_assembler),
) -> JSONResponse:
    """위치와 무드로 추천 목록을 조립해 반환한다."""
    if not (body.location or "").strip() or not (body.mood or "").strip():
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": MISSING_FIELDS_ERROR})

    try:
        result = await assembler.assemble(body.to_request())
    except Exception:
        logger.exception("Recommendation assembly failed: mood=%s", body.mood)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": ASSEMBLY_FAILED_ERROR},
        )

    return JSONResponse(content=result.envelope.to_payload(), headers={STRATEGY_HEADER: result.strategy})
