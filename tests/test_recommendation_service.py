"""추천 조립 전략 순서 테스트."""

from __future__ import annotations

import asyncio

from moodbite.core.config import Settings
from moodbite.schemas.recommendation import CandidatePlace, Recommendation, RecommendationRequest
from moodbite.services.foursquare_places_service import FoursquarePlacesService
from moodbite.services.gemini_service import GeminiTextClient
from moodbite.services.mock_recommendations import get_mock_recommendations
from moodbite.services.places_service import PlacesLookupResult, PlacesServiceProtocol
from moodbite.services.recommendation_service import RATE_LIMIT_MESSAGE, RecommendationAssembler


class _FakePlacesService(PlacesServiceProtocol):
    def __init__(self, result: PlacesLookupResult) -> None:
        self.result = result
        self.calls: list[tuple[str, str, float]] = []

    async def lookup(self, location: str, mood: str, max_distance: float) -> PlacesLookupResult:
        self.calls.append((location, mood, max_distance))
        return self.result


class _FakeTextClient(GeminiTextClient):
    def __init__(self, generated: list[Recommendation] | None = None) -> None:
        super().__init__(api_key=None)
        self.generated = generated
        self.generate_calls = 0
        self.enhance_calls: list[list[CandidatePlace]] = []

    async def try_generate(self, location, mood, time_available, max_distance):
        self.generate_calls += 1
        return self.generated

    async def enhance_existing(self, places, mood, location):
        self.enhance_calls.append(places)
        return [Recommendation(name=place.name, description=f"Enhanced {place.name}") for place in places]


def _request(mood: str = "coffee") -> RecommendationRequest:
    return RecommendationRequest(location="Seattle, WA", mood=mood, time_available=30, max_distance=1000)


def _generated() -> list[Recommendation]:
    return [Recommendation(name="Dutch Bros", description="Drive-thru energy drinks and cold brew.")]


def test_without_places_service_uses_generated_recommendations() -> None:
    text_client = _FakeTextClient(generated=_generated())
    assembler = RecommendationAssembler(places_service=None, text_client=text_client)

    result = asyncio.run(assembler.assemble(_request()))

    assert result.strategy == "generated"
    assert result.envelope.source == "ai"
    assert result.envelope.rate_limit_reached is False
    assert result.envelope.message is None
    assert [item.name for item in result.envelope.recommendations] == ["Dutch Bros"]
    assert text_client.enhance_calls == []


def test_without_any_credentials_lands_on_mock_table() -> None:
    assembler = RecommendationAssembler(places_service=None, text_client=GeminiTextClient(api_key=None))

    result = asyncio.run(assembler.assemble(_request("adventure")))

    assert result.strategy == "mock"
    assert result.envelope.source == "ai"
    assert result.envelope.recommendations == get_mock_recommendations("adventure")


def test_rate_limited_lookup_routes_to_ai_with_message() -> None:
    places_service = _FakePlacesService(PlacesLookupResult(rate_limited=True))
    text_client = _FakeTextClient(generated=_generated())
    assembler = RecommendationAssembler(places_service=places_service, text_client=text_client)

    result = asyncio.run(assembler.assemble(_request()))

    assert places_service.calls == [("Seattle, WA", "coffee", 1000)]
    assert result.envelope.source == "ai"
    assert result.envelope.rate_limit_reached is True
    assert result.envelope.message == RATE_LIMIT_MESSAGE
    assert text_client.generate_calls == 1


def test_rate_limited_lookup_keeps_flag_when_generation_also_fails() -> None:
    places_service = _FakePlacesService(PlacesLookupResult(rate_limited=True))
    assembler = RecommendationAssembler(places_service=places_service, text_client=_FakeTextClient(generated=None))

    result = asyncio.run(assembler.assemble(_request("healthy")))

    assert result.strategy == "mock"
    assert result.envelope.rate_limit_reached is True
    assert result.envelope.message is not None
    assert result.envelope.recommendations == get_mock_recommendations("healthy")


def test_places_found_are_enhanced_and_tagged_foursquare() -> None:
    candidates = [CandidatePlace(name="Starbucks"), CandidatePlace(name="Peet's Coffee")]
    places_service = _FakePlacesService(PlacesLookupResult(places=candidates))
    text_client = _FakeTextClient(generated=_generated())
    assembler = RecommendationAssembler(places_service=places_service, text_client=text_client)

    result = asyncio.run(assembler.assemble(_request()))

    assert result.strategy == "enhanced"
    assert result.envelope.source == "foursquare"
    assert result.envelope.rate_limit_reached is False
    candidate_names = {place.name for place in candidates}
    assert all(item.name in candidate_names for item in result.envelope.recommendations)
    assert text_client.generate_calls == 0


def test_empty_lookup_falls_through_to_generation() -> None:
    places_service = _FakePlacesService(PlacesLookupResult())
    text_client = _FakeTextClient(generated=_generated())
    assembler = RecommendationAssembler(places_service=places_service, text_client=text_client)

    result = asyncio.run(assembler.assemble(_request()))

    assert result.strategy == "generated"
    assert result.envelope.source == "ai"
    assert result.envelope.rate_limit_reached is False
    assert text_client.enhance_calls == []


def test_envelope_payload_uses_camel_case_and_drops_unknown_fields() -> None:
    assembler = RecommendationAssembler(places_service=None, text_client=GeminiTextClient(api_key=None))

    payload = asyncio.run(assembler.assemble(_request())).envelope.to_payload()

    assert payload["source"] == "ai"
    assert payload["rateLimitReached"] is False
    assert payload["message"] is None
    assert payload["recommendations"][0] == {
        "name": "Brew & Bean Cafe",
        "description": "Cozy corner cafe with artisanal coffee and fresh pastries. Perfect for your caffeine fix!",
        "distance": "5 min walk",
    }


def test_from_settings_skips_places_without_key() -> None:
    assembler = RecommendationAssembler.from_settings(Settings(FOURSQUARE_API_KEY="", GEMINI_API_KEY=""))
    assert assembler._places_service is None

    assembler = RecommendationAssembler.from_settings(Settings(FOURSQUARE_API_KEY="fsq-key", GEMINI_API_KEY=""))
    assert isinstance(assembler._places_service, FoursquarePlacesService)
