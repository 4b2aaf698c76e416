"""Places 조회 서비스 추상 프로토콜 정의."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from moodbite.schemas.recommendation import CandidatePlace


@dataclass(frozen=True, slots=True)
class PlacesLookupResult:
    """Places 조회 결과.

    `rate_limited`는 provider 쿼터 소진(429/402)을 뜻하며, 단순히 결과가 없는
    경우와 구분해야 한다.
    """

    places: list[CandidatePlace] = field(default_factory=list)
    rate_limited: bool = False


class PlacesServiceProtocol(ABC):
    """무드 기반 장소 조회를 위한 인터페이스를 정의합니다."""

    @abstractmethod
    async def lookup(self, location: str, mood: str, max_distance: float) -> PlacesLookupResult:
        """위치와 무드로 현재 영업 중인 후보 장소를 조회합니다.

        Args:
            location: 검색 기준 위치 문자열
            mood: 무드 태그
            max_distance: 최대 반경(m)

        Returns:
            후보 장소 목록과 쿼터 소진 여부. 구현체는 예외를 전파하지 않는다.
        """
        raise NotImplementedError
