import base64
import binascii

from app.core.config import settings
from app.core.exceptions import InvalidInput

INVALID_FILE_MESSAGE = "파일 데이터가 올바르지 않습니다"


def decode_file_payload(file_data: str) -> bytes:
    """base64 파일 디코딩 (data URL 접두사 허용) 및 크기 검증"""
    if "," in file_data and file_data.lstrip().startswith("data:"):
        file_data = file_data.split(",", 1)[1]

    try:
        content = base64.b64decode(file_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidInput(detail=f"base64 디코딩 실패: {e}", message=INVALID_FILE_MESSAGE) from e

    if not content:
        raise InvalidInput(detail="빈 파일", message=INVALID_FILE_MESSAGE)
    if len(content) > settings.max_pdf_bytes:
        raise InvalidInput(detail=f"bytes={len(content)}", message="파일 크기는 10MB 이하여야 합니다")
    return content
