"""Sequential per-page OCR of a rasterized document with one engine per run."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

from app.schemas.ocr import PageOcrData
from app.services.ocr.base import PageOcrEngine
from app.services.ocr.rasterize import RasterDocument

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], PageOcrEngine]


@dataclass(frozen=True)
class OcrProgress:
    current_page: int
    total_pages: int
    status: str

    @property
    def percent(self) -> int:
        if self.total_pages <= 0:
            return 100
        return round(self.current_page / self.total_pages * 100)


ProgressCallback = Callable[[OcrProgress], None]


@contextmanager
def ocr_engine_session(factory: EngineFactory) -> Iterator[PageOcrEngine]:
    """Build an engine for one document and release it exactly once afterwards."""

    engine = factory()
    try:
        yield engine
    finally:
        engine.close()


def _default_engine_factory() -> PageOcrEngine:
    from app.services.ocr.paddle_ocr import PaddleOcrEngine

    return PaddleOcrEngine()


class DocumentTranscriber:
    """
    OCR every page of a document, strictly one page at a time.

    A single engine is reused across pages to bound memory. The abort flag is
    only consulted between pages; a page already running always completes.
    """

    def __init__(self, engine_factory: EngineFactory | None = None) -> None:
        self._engine_factory = engine_factory or _default_engine_factory

    def transcribe(
        self,
        document: RasterDocument,
        *,
        on_progress: ProgressCallback | None = None,
        abort: threading.Event | None = None,
    ) -> list[PageOcrData]:
        total = len(document.pages)
        results: list[PageOcrData] = []
        if total == 0:
            return results

        with ocr_engine_session(self._engine_factory) as engine:
            for page in document.pages:
                if abort is not None and abort.is_set():
                    logger.warning("OCR aborted after %d of %d pages", len(results), total)
                    break

                t0 = time.perf_counter()
                words = engine.recognize(page.image)
                results.append(
                    PageOcrData(
                        page_index=page.page_index,
                        words=words,
                        width=page.width,
                        height=page.height,
                    )
                )
                logger.info(
                    "OCR page %d/%d: %d words in %.2fs",
                    page.page_index + 1,
                    total,
                    len(words),
                    time.perf_counter() - t0,
                )

                if on_progress is not None:
                    on_progress(
                        OcrProgress(
                            current_page=len(results),
                            total_pages=total,
                            status=f"Analyzed page {len(results)} of {total}",
                        )
                    )

        return results

    async def transcribe_async(
        self,
        document: RasterDocument,
        *,
        on_progress: ProgressCallback | None = None,
        abort: threading.Event | None = None,
    ) -> list[PageOcrData]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            lambda: self.transcribe(document, on_progress=on_progress, abort=abort),
        )
