"""LLM 출력 검증용 공통 필드 타입"""

import math
from typing import Annotated, Any

from pydantic import BeforeValidator

SCORE_MIN = 0
SCORE_MAX = 100


def clamp_score(value: Any, low: int = SCORE_MIN, high: int = SCORE_MAX) -> int:
    """
    숫자 점수를 [low, high] 범위로 보정

    범위를 약간 벗어난 값(101, -1 등)은 거부하지 않고 잘라낸다.
    숫자가 아닌 값(문자열, bool, None, NaN)은 ValueError.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"점수는 숫자여야 합니다: {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"유한한 숫자가 아닙니다: {value!r}")
    return int(min(high, max(low, round(value))))


def _string_list(value: Any) -> list[str]:
    if value is None:
        return []
    return _required_string_list(value)


def _required_string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise ValueError(f"문자열 배열이어야 합니다: {type(value).__name__}")
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


Score = Annotated[int, BeforeValidator(clamp_score)]
# null은 빈 배열로 보정
StringList = Annotated[list[str], BeforeValidator(_string_list)]
# 필수 배열: null이나 다른 타입은 검증 실패
RequiredStringList = Annotated[list[str], BeforeValidator(_required_string_list)]


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"문자열이어야 합니다: {type(value).__name__}")
    return str(value).strip()


# null은 빈 문자열로 보정
Text = Annotated[str, BeforeValidator(_text)]
