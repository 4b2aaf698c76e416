"""Foursquare Places API 서비스 구현."""

from __future__ import annotations

import asyncio
from typing import Any

import requests

from moodbite.core.clock import local_now
from moodbite.core.config import Settings, get_settings
from moodbite.core.logger import get_logger
from moodbite.core.moods import get_mood_profile
from moodbite.core.timeout_policy import get_timeout_policy, to_requests_timeout
from moodbite.schemas.recommendation import CandidatePlace
from moodbite.services.places_service import PlacesLookupResult, PlacesServiceProtocol

logger = get_logger(__name__)

_ADDRESS_FIELDS = ("address", "locality", "region", "postcode")


class FoursquarePlacesError(RuntimeError):
    """Foursquare 호출 설정 실패 시 발생하는 예외."""


def format_address(location: dict[str, Any] | None) -> str | None:
    """주소 구성요소 중 비어 있지 않은 값만 `, `로 잇는다. 남는 값이 없으면 None."""
    if not location:
        return None
    parts = [str(location[key]).strip() for key in _ADDRESS_FIELDS if location.get(key)]
    parts = [part for part in parts if part]
    return ", ".join(parts) or None


def _format_clock(value: str) -> str:
    digits = value.lstrip("+")
    if len(digits) == 4 and digits.isdigit():
        return f"{digits[:2]}:{digits[2:]}"
    return value


def format_hours(hours: dict[str, Any] | None, weekday: int) -> str | None:
    """오늘 요일(ISO, 월=1)의 정규 영업시간을 `Open 07:00-22:00` 형태로 만든다.

    오늘 항목이 없으면 `open_now` 플래그로 `Open now` / `Check hours`를 고른다.
    provider가 영업시간 자체를 주지 않았으면 None.
    """
    if not hours:
        return None

    for entry in hours.get("regular") or []:
        if entry.get("day") == weekday and entry.get("open") and entry.get("close"):
            return f"Open {_format_clock(entry['open'])}-{_format_clock(entry['close'])}"

    return "Open now" if hours.get("open_now") else "Check hours"


class FoursquarePlacesService(PlacesServiceProtocol):
    """Foursquare Places v3 API 기반 장소 조회 서비스."""

    _BASE_URL = "https://api.foursquare.com/v3"
    _SEARCH_PATH = "/places/search"
    _DETAIL_FIELDS = "name,location,hours,rating,price,categories,distance"
    _RATE_LIMIT_STATUSES = frozenset({402, 429})
    _MAX_RADIUS_METERS = 100_000

    def __init__(
        self,
        api_key: str,
        timeout_seconds: int = 10,
        search_limit: int = 5,
        detail_limit: int = 3,
        timezone_name: str = "America/Los_Angeles",
    ) -> None:
        if not api_key:
            raise FoursquarePlacesError("FOURSQUARE_API_KEY is not configured.")
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._search_limit = search_limit
        self._detail_limit = detail_limit
        self._timezone_name = timezone_name

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> FoursquarePlacesService | None:
        """설정으로 서비스를 만든다. 키가 없으면 None을 돌려 조회 단계를 건너뛰게 한다."""
        resolved_settings = settings or get_settings()
        if not resolved_settings.FOURSQUARE_API_KEY:
            logger.info("FOURSQUARE_API_KEY is not configured. Places lookup disabled.")
            return None
        timeout_policy = get_timeout_policy(resolved_settings)
        return cls(
            api_key=resolved_settings.FOURSQUARE_API_KEY,
            timeout_seconds=timeout_policy.foursquare_timeout_seconds,
            search_limit=resolved_settings.FOURSQUARE_SEARCH_LIMIT,
            detail_limit=resolved_settings.FOURSQUARE_DETAIL_LIMIT,
            timezone_name=resolved_settings.LOCAL_TIMEZONE,
        )

    async def lookup(self, location: str, mood: str, max_distance: float) -> PlacesLookupResult:
        """무드 카테고리로 현재 영업 중인 장소를 검색하고 상위 후보의 상세 정보를 붙입니다."""
        try:
            return await self._lookup(location, mood, max_distance)
        except (requests.RequestException, ValueError, TypeError, AttributeError) as exc:
            logger.error("Foursquare lookup failed: %s", exc)
            return PlacesLookupResult()

    async def _lookup(self, location: str, mood: str, max_distance: float) -> PlacesLookupResult:
        profile = get_mood_profile(mood)
        params = {
            "query": profile.query,
            "near": location,
            "categories": profile.category_id,
            "radius": self._clamp_radius(max_distance),
            "open_now": "true",
            "sort": "RELEVANCE",
            "limit": self._search_limit,
        }

        response = await asyncio.to_thread(self._get, f"{self._BASE_URL}{self._SEARCH_PATH}", params)
        if response.status_code in self._RATE_LIMIT_STATUSES:
            logger.warning("Foursquare quota exhausted: status=%s", response.status_code)
            return PlacesLookupResult(rate_limited=True)
        if not response.ok:
            logger.error(
                "Foursquare search error: status=%s body=%s",
                response.status_code,
                (response.text or "")[:200],
            )
            return PlacesLookupResult()

        results = (response.json() or {}).get("results") or []
        head = [item for item in results if isinstance(item, dict)][: self._detail_limit]
        details = await asyncio.gather(*(self._fetch_details(item.get("fsq_id")) for item in head))

        weekday = local_now(self._timezone_name).isoweekday()
        places: list[CandidatePlace] = []
        for item, detail in zip(head, details):
            place = self._map_candidate(item, detail, weekday)
            if place is not None:
                places.append(place)

        logger.info(
            "Foursquare search completed: result_count=%d detailed_count=%d candidate_count=%d",
            len(results),
            sum(1 for detail in details if detail),
            len(places),
        )
        return PlacesLookupResult(places=places)

    async def _fetch_details(self, fsq_id: str | None) -> dict[str, Any] | None:
        if not fsq_id:
            return None
        try:
            response = await asyncio.to_thread(
                self._get,
                f"{self._BASE_URL}/places/{fsq_id}",
                {"fields": self._DETAIL_FIELDS},
            )
            if not response.ok:
                logger.warning("Foursquare detail error: fsq_id=%s status=%s", fsq_id, response.status_code)
                return None
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Foursquare detail request failed: fsq_id=%s error=%s", fsq_id, exc)
            return None
        return data if isinstance(data, dict) else None

    def _get(self, url: str, params: dict[str, Any]) -> requests.Response:
        return requests.get(
            url,
            params=params,
            headers={"Authorization": self._api_key, "Accept": "application/json"},
            timeout=to_requests_timeout(self._timeout_seconds),
        )

    def _clamp_radius(self, max_distance: float) -> int:
        return int(min(self._MAX_RADIUS_METERS, max(1, max_distance)))

    def _map_candidate(
        self,
        item: dict[str, Any],
        detail: dict[str, Any] | None,
        weekday: int,
    ) -> CandidatePlace | None:
        """상세 정보를 합쳐 매핑하고, 상세 형식이 깨졌으면 검색 결과 필드만으로 다시 매핑한다."""
        if detail:
            try:
                return self._map_place({**item, **detail}, weekday)
            except (ValueError, TypeError, AttributeError) as exc:
                logger.warning("Foursquare detail malformed: fsq_id=%s error=%s", item.get("fsq_id"), exc)
        try:
            return self._map_place(item, weekday)
        except (ValueError, TypeError, AttributeError) as exc:
            logger.warning("Foursquare search item malformed: fsq_id=%s error=%s", item.get("fsq_id"), exc)
            return None

    def _map_place(self, raw: dict[str, Any], weekday: int) -> CandidatePlace | None:
        name = raw.get("name")
        if not name:
            return None

        categories = raw.get("categories") or []
        category = categories[0].get("name") if categories and isinstance(categories[0], dict) else None

        return CandidatePlace(
            place_id=raw.get("fsq_id"),
            name=name,
            address=format_address(raw.get("location")),
            distance=raw.get("distance"),
            rating=raw.get("rating"),
            price=raw.get("price"),
            hours=format_hours(raw.get("hours"), weekday),
            category=category,
        )
