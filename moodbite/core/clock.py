"""설정된 로컬 타임존 기준 현재 시각 유틸."""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from moodbite.core.logger import get_logger

logger = get_logger(__name__)


def local_now(timezone_name: str) -> datetime:
    """타임존 이름 기준 현재 시각을 반환한다. 알 수 없는 타임존이면 UTC를 쓴다."""
    try:
        tz = ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown LOCAL_TIMEZONE %r, falling back to UTC", timezone_name)
        return datetime.now(timezone.utc)
    return datetime.now(tz)


def describe_local_time(moment: datetime) -> str:
    """프롬프트용 `Saturday 7:05 PM` 형태 문자열을 만든다."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{moment.strftime('%A')} {hour}:{moment.minute:02d} {meridiem}"
