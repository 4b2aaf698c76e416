"""추천 결과 조립 서비스.

실제 장소 + 생성 설명, 생성 전용, 정적 목록 순서의 전략을 차례로 시도하고
처음으로 비어 있지 않은 결과를 낸 전략을 응답에 사용한다.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from moodbite.core.config import Settings, get_settings
from moodbite.core.logger import get_logger
from moodbite.schemas.recommendation import (
    Recommendation,
    RecommendationRequest,
    RecommendationSource,
    ResponseEnvelope,
)
from moodbite.services.foursquare_places_service import FoursquarePlacesService
from moodbite.services.gemini_service import GeminiTextClient
from moodbite.services.mock_recommendations import get_mock_recommendations
from moodbite.services.places_service import PlacesServiceProtocol

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = (
    "We've hit our venue data limit for now, so these picks come from our AI assistant instead."
)


@dataclass(frozen=True, slots=True)
class StrategyOutcome:
    """전략 하나가 만든 추천 목록과 그 출처."""

    recommendations: list[Recommendation]
    source: RecommendationSource


@dataclass(slots=True)
class AssemblyContext:
    """요청 하나를 조립하는 동안 전략 사이에 공유되는 상태."""

    rate_limited: bool = False


@dataclass(frozen=True, slots=True)
class AssemblyResult:
    """최종 응답과 선택된 전략 이름."""

    envelope: ResponseEnvelope
    strategy: str


Strategy = Callable[[RecommendationRequest, AssemblyContext], Awaitable[StrategyOutcome | None]]


class RecommendationAssembler:
    """요청 단위 추천 조립기. 요청 간 상태를 갖지 않는다."""

    def __init__(
        self,
        places_service: PlacesServiceProtocol | None,
        text_client: GeminiTextClient,
    ) -> None:
        self._places_service = places_service
        self._text_client = text_client

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RecommendationAssembler:
        """설정에서 읽은 자격 증명으로 협력 객체를 만들어 주입합니다."""
        resolved_settings = settings or get_settings()
        return cls(
            places_service=FoursquarePlacesService.from_settings(resolved_settings),
            text_client=GeminiTextClient.from_settings(resolved_settings),
        )

    def strategies(self) -> list[tuple[str, Strategy]]:
        return [
            ("enhanced", self._enhanced_places),
            ("generated", self._generated_only),
            ("mock", self._static_mock),
        ]

    async def assemble(self, request: RecommendationRequest) -> AssemblyResult:
        """전략을 순서대로 시도해 응답 본문을 만든다. 재시도나 백오프는 없다."""
        context = AssemblyContext()
        for name, strategy in self.strategies():
            outcome = await strategy(request, context)
            if outcome is None or not outcome.recommendations:
                continue

            envelope = ResponseEnvelope(
                recommendations=outcome.recommendations,
                source=outcome.source,
                rate_limit_reached=context.rate_limited,
                message=RATE_LIMIT_MESSAGE if context.rate_limited else None,
            )
            logger.info(
                "Recommendations assembled: strategy=%s source=%s count=%d rate_limited=%s mood=%s",
                name,
                outcome.source,
                len(outcome.recommendations),
                context.rate_limited,
                request.mood,
            )
            return AssemblyResult(envelope=envelope, strategy=name)

        raise RuntimeError("No recommendation strategy produced a result")

    async def _enhanced_places(
        self,
        request: RecommendationRequest,
        context: AssemblyContext,
    ) -> StrategyOutcome | None:
        if self._places_service is None:
            return None

        result = await self._places_service.lookup(request.location, request.mood, request.max_distance)
        if result.rate_limited:
            context.rate_limited = True
            return None
        if not result.places:
            return None

        recommendations = await self._text_client.enhance_existing(result.places, request.mood, request.location)
        return StrategyOutcome(recommendations=recommendations, source="foursquare")

    async def _generated_only(
        self,
        request: RecommendationRequest,
        context: AssemblyContext,
    ) -> StrategyOutcome | None:
        recommendations = await self._text_client.try_generate(
            request.location,
            request.mood,
            request.time_available,
            request.max_distance,
        )
        if recommendations is None:
            return None
        return StrategyOutcome(recommendations=recommendations, source="ai")

    async def _static_mock(
        self,
        request: RecommendationRequest,
        context: AssemblyContext,
    ) -> StrategyOutcome | None:
        return StrategyOutcome(recommendations=get_mock_recommendations(request.mood), source="ai")
