"""Usage: bid verification pipeline (rasterize -> extraction + OCR -> highlights)."""

from __future__ import annotations

import asyncio
import logging
import threading
import time

from pydantic import BaseModel, Field

from app.core.config import settings
from app.schemas.bid import ExtractedBidData
from app.schemas.highlight import ContactFieldHighlight, LineHighlight
from app.schemas.ocr import PageOcrData
from app.services.extraction.chain import ExtractionChain, ExtractionResult
from app.services.highlight.maps import build_highlight_maps
from app.services.ocr.rasterize import RasterDocument, encode_png, rasterize
from app.services.ocr.transcriber import DocumentTranscriber, ProgressCallback

logger = logging.getLogger(__name__)


class BidVerificationResult(BaseModel):
    data: ExtractedBidData
    provider: str
    raster_scale: float = Field(..., gt=0, description="Scale the OCR boxes are expressed in")
    pages: list[PageOcrData] = Field(default_factory=list)
    line_highlights: dict[int, LineHighlight] = Field(default_factory=dict)
    contact_highlights: dict[str, ContactFieldHighlight] = Field(default_factory=dict)
    processing_time_ms: int


class BidVerificationPipeline:
    """Extract bid data and align every extracted value with its place on the page."""

    def __init__(
        self,
        extraction_chain: ExtractionChain,
        transcriber: DocumentTranscriber,
        *,
        raster_scale: float | None = None,
    ) -> None:
        self.extraction_chain = extraction_chain
        self.transcriber = transcriber
        self.raster_scale = raster_scale or settings.ocr_raster_scale

    async def run(
        self,
        source: bytes,
        *,
        filename: str | None = None,
        content_type: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> BidVerificationResult:
        start_time = time.perf_counter()
        logger.info("[TIMER] Pipeline started for file: %s", filename)

        loop = asyncio.get_running_loop()
        document = await loop.run_in_executor(
            None,
            lambda: rasterize(
                source,
                scale=self.raster_scale,
                filename=filename,
                content_type=content_type,
            ),
        )
        t_raster = time.perf_counter()
        logger.info("[TIMER] Step 1: rasterized %d pages in %.4fs", len(document), t_raster - start_time)

        abort = threading.Event()
        extract_task = asyncio.create_task(self._extract(document, abort))
        ocr_task = asyncio.create_task(
            self.transcriber.transcribe_async(document, on_progress=on_progress, abort=abort)
        )
        try:
            extraction, pages = await asyncio.gather(extract_task, ocr_task)
        except Exception:
            abort.set()
            extract_task.cancel()
            # OCR runs in a worker thread and stops at the next page boundary
            await asyncio.gather(extract_task, ocr_task, return_exceptions=True)
            raise
        t_parallel = time.perf_counter()
        logger.info(
            "[TIMER] Step 2: extraction (%s) + OCR (%d pages) finished in %.4fs",
            extraction.provider,
            len(pages),
            t_parallel - t_raster,
        )

        maps = build_highlight_maps(pages, extraction.data)
        located = sum(len(line.highlights) for line in maps.line_highlights.values())
        logger.info(
            "Step 3: located %d fields across %d line items, %d contact fields",
            located,
            len(maps.line_highlights),
            len(maps.contact_highlights),
        )

        total_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info("[TIMER] Pipeline completed. Total: %dms", total_ms)
        return BidVerificationResult(
            data=extraction.data,
            provider=extraction.provider,
            raster_scale=document.scale,
            pages=pages,
            line_highlights=maps.line_highlights,
            contact_highlights=maps.contact_highlights,
            processing_time_ms=total_ms,
        )

    async def _extract(self, document: RasterDocument, abort: threading.Event) -> ExtractionResult:
        loop = asyncio.get_running_loop()
        try:
            images = await loop.run_in_executor(None, lambda: [encode_png(page.image) for page in document.pages])
            return await self.extraction_chain.extract(images)
        except Exception:
            # Stop OCR at the next page boundary; the result is useless now.
            abort.set()
            raise
