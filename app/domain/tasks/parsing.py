import json
import re

from app.core.exceptions import UpstreamInvalidResponse

FENCE_START_PATTERN = re.compile(r"^\s*```(?:json|JSON)?\s*\n?")
FENCE_END_PATTERN = re.compile(r"\n?\s*```\s*$")


def strip_code_fences(raw: str) -> str:
    """앞뒤의 ```json / ``` 마크다운 펜스 제거"""
    text = FENCE_START_PATTERN.sub("", raw, count=1)
    text = FENCE_END_PATTERN.sub("", text, count=1)
    return text.strip()


def parse_json_response(raw: str | None) -> dict:
    """모델 응답을 JSON 객체로 파싱, 실패 시 UpstreamInvalidResponse"""
    if not raw or not raw.strip():
        raise UpstreamInvalidResponse(detail="빈 응답")

    try:
        data = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError as e:
        raise UpstreamInvalidResponse(detail=f"JSON 파싱 실패: {e.msg} raw={raw[:200]!r}") from e

    if not isinstance(data, dict):
        raise UpstreamInvalidResponse(detail=f"JSON 객체가 아님: {type(data).__name__}")
    return data
