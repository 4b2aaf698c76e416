"""LLM 자유 텍스트에서 JSON 배열을 뽑아내는 유틸."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

_JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


@dataclass(frozen=True, slots=True)
class JsonExtraction:
    """추출 결과. 실패 시 `value`는 None이고 `error`에 사유가 담긴다."""

    ok: bool
    value: list[Any] | None = None
    error: str | None = None


def _failure(reason: str) -> JsonExtraction:
    return JsonExtraction(ok=False, error=reason)


def extract_json_array(text: str | None) -> JsonExtraction:
    """텍스트에서 첫 `[`부터 마지막 `]`까지를 JSON 배열로 해석합니다.

    Args:
        text: 모델이 생성한 원문. 앞뒤 설명문이나 코드 펜스가 섞여 있어도 된다.

    Returns:
        성공 여부와 파싱된 리스트를 담은 `JsonExtraction`.
    """
    if not text or not text.strip():
        return _failure("empty text")

    match = _JSON_ARRAY_PATTERN.search(text)
    if match is None:
        return _failure("no JSON array found")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        return _failure(f"malformed JSON: {exc.msg}")
    return JsonExtraction(ok=True, value=parsed)
