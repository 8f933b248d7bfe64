import asyncio

from app.core.config import settings
from app.core.exceptions import InvalidInput
from app.core.logging import get_logger
from app.domain.extraction.strategies import (
    ExtractionStrategy,
    PdfParserStrategy,
    RawStreamStrategy,
)

logger = get_logger(__name__)

SCANNED_PDF_HINT = (
    "PDF에서 텍스트를 추출할 수 없습니다. 스캔 이미지가 아닌 텍스트 기반 PDF로 다시 업로드해주세요"
)


class TextExtractor:
    """
    전략을 고정 순서로 시도하고 공통 최소 길이 기준으로 수용 여부를 판단

    앞선 전략이 예외를 내거나 기준 미달이면 다음 전략으로 넘어간다.
    기준 미달 결과는 "텍스트가 적은 문서"가 아니라 추출 실패로 취급한다.
    """

    def __init__(
        self,
        strategies: list[ExtractionStrategy] | None = None,
        min_chars: int | None = None,
    ):
        self.strategies = strategies or [PdfParserStrategy(), RawStreamStrategy()]
        self.min_chars = settings.min_extracted_chars if min_chars is None else min_chars

    def accepts(self, text: str | None) -> bool:
        return bool(text) and len(text.strip()) >= self.min_chars

    def extract(self, content: bytes) -> str:
        for strategy in self.strategies:
            try:
                text = strategy.extract(content)
            except Exception as e:
                logger.warning("텍스트 추출 실패 strategy=%s error=%s", strategy.name, type(e).__name__)
                continue

            if self.accepts(text):
                logger.info("텍스트 추출 완료 strategy=%s chars=%d", strategy.name, len(text))
                return text.strip()

            logger.info(
                "추출 결과 기준 미달 strategy=%s chars=%d min=%d",
                strategy.name,
                len(text.strip()) if text else 0,
                self.min_chars,
            )

        raise InvalidInput(detail="모든 추출 전략 실패", message=SCANNED_PDF_HINT)


_default_extractor = TextExtractor()


async def extract_text(content: bytes) -> str:
    """기본 추출기로 텍스트 추출 (CPU 작업이라 스레드에서 실행)"""
    return await asyncio.to_thread(_default_extractor.extract, content)
