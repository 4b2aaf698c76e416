"""애플리케이션 전역 설정을 관리하는 모듈."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """환경 변수 기반 설정 모델."""

    FOURSQUARE_API_KEY: str | None = None
    FOURSQUARE_SEARCH_LIMIT: int = 5
    FOURSQUARE_DETAIL_LIMIT: int = 3
    FOURSQUARE_TIMEOUT_SECONDS: int = 10
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL_NAME: str = "gemini-2.0-flash"
    GEMINI_TEMPERATURE: float = 0.7
    GEMINI_MAX_OUTPUT_TOKENS: int = 1024
    GEMINI_TIMEOUT_SECONDS: int = 20
    REQUEST_TIMEOUT_SECONDS: int = 30
    EXTERNAL_API_TIMEOUT_SECONDS: int = 20
    LOCAL_TIMEZONE: str = "America/Los_Angeles"
    CORS_ALLOW_ORIGIN: str = "*"
    CORS_ALLOW_HEADERS: str = "Content-Type"
    CORS_ALLOW_METHODS: str = "POST, OPTIONS"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("FOURSQUARE_API_KEY", "GEMINI_API_KEY", mode="before")
    @classmethod
    def _blank_key_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("FOURSQUARE_SEARCH_LIMIT", mode="before")
    @classmethod
    def _clamp_foursquare_search_limit(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 5
        except (TypeError, ValueError):
            numeric = 5
        return min(50, max(1, numeric))

    @field_validator("FOURSQUARE_DETAIL_LIMIT", mode="before")
    @classmethod
    def _clamp_foursquare_detail_limit(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 3
        except (TypeError, ValueError):
            numeric = 3
        return min(10, max(0, numeric))

    @field_validator("GEMINI_TEMPERATURE", mode="before")
    @classmethod
    def _clamp_gemini_temperature(cls, value: object) -> float:
        try:
            numeric = float(value) if value is not None else 0.7
        except (TypeError, ValueError):
            numeric = 0.7
        return min(2.0, max(0.0, numeric))


@lru_cache
def get_settings() -> Settings:
    """Settings 인스턴스를 반환한다. 최초 호출 시에만 생성되고 이후 캐싱된다."""
    return Settings()
