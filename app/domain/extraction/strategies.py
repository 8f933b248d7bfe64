"""
PDF 텍스트 추출 전략

- PdfParserStrategy: pypdf로 페이지 트리를 따라 텍스트 추출
- RawStreamStrategy: 원시 바이트에서 괄호 리터럴/16진 문자열을 정규식으로 수집
"""

import io
import re
from abc import ABC, abstractmethod

from pypdf import PdfReader

LITERAL_STRING_PATTERN = re.compile(rb"(?<!\\)\(((?:\\.|[^\\()]){2,})\)", re.DOTALL)
HEX_STRING_PATTERN = re.compile(rb"<([0-9A-Fa-f\s]+)>")
OCTAL_ESCAPE_PATTERN = re.compile(r"\\([0-7]{1,3})")
WHITESPACE_PATTERN = re.compile(r"\s+")

SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "(": "(",
    ")": ")",
    "\\": "\\",
}

MIN_LITERAL_LENGTH = 3
MIN_HEX_DIGITS = 6
MIN_HEX_DECODED_LENGTH = 3


def normalize_whitespace(text: str) -> str:
    """연속 공백을 한 칸으로 줄이고 양끝 공백 제거"""
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def _is_printable_ascii(text: str) -> bool:
    return all(32 <= ord(ch) <= 126 or ch in "\n\r\t" for ch in text)


def unescape_literal(raw: str) -> str:
    """PDF 리터럴 문자열의 이스케이프 해제 (8진수, \\n, \\( 등)"""
    text = OCTAL_ESCAPE_PATTERN.sub(lambda m: chr(int(m.group(1), 8) & 0xFF), raw)
    return re.sub(r"\\(.)", lambda m: SIMPLE_ESCAPES.get(m.group(1), m.group(1)), text, flags=re.DOTALL)


def decode_hex_string(digits: str) -> str:
    """16진 문자열을 디코딩하되 출력 가능한 ASCII(32~126)만 남김"""
    chars = []
    for i in range(0, len(digits), 2):
        code = int(digits[i : i + 2], 16)
        if 32 <= code <= 126:
            chars.append(chr(code))
    return "".join(chars)


class ExtractionStrategy(ABC):
    """PDF 바이트 -> 텍스트 변환 전략"""

    name: str = ""

    @abstractmethod
    def extract(self, content: bytes) -> str:
        pass


class PdfParserStrategy(ExtractionStrategy):
    """pypdf 기반 구조적 추출, 페이지 경계는 줄바꿈으로 연결"""

    name = "pypdf"

    def extract(self, content: bytes) -> str:
        reader = PdfReader(io.BytesIO(content))
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
        return "\n".join(p for p in pages if p).strip()


class RawStreamStrategy(ExtractionStrategy):
    """원시 바이트 스트림 정규식 스캔 (압축되지 않은 콘텐츠 스트림 전용)"""

    name = "raw_stream"

    def extract(self, content: bytes) -> str:
        parts: list[str] = []

        for match in LITERAL_STRING_PATTERN.finditer(content):
            text = unescape_literal(match.group(1).decode("latin-1"))
            if len(text) >= MIN_LITERAL_LENGTH and _is_printable_ascii(text):
                parts.append(text)

        for match in HEX_STRING_PATTERN.finditer(content):
            digits = WHITESPACE_PATTERN.sub("", match.group(1).decode("ascii"))
            if len(digits) % 2 != 0 or len(digits) < MIN_HEX_DIGITS:
                continue
            decoded = decode_hex_string(digits)
            if len(decoded) >= MIN_HEX_DECODED_LENGTH:
                parts.append(decoded)

        return normalize_whitespace(" ".join(parts))
