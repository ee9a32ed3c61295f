import asyncio
import logging
import time

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from app.api.deps import ExtractionChainDep
from app.api.uploads import read_upload
from app.core.config import settings
from app.schemas.bid import ExtractedBidData
from app.services.extraction.errors import ExtractionFailedError, NoProvidersConfiguredError
from app.services.ocr.rasterize import RasterizeError, encode_png, rasterize

router = APIRouter(prefix="/extract", tags=["extract"])

logger = logging.getLogger(__name__)


class ExtractResponse(BaseModel):
    success: bool
    data: ExtractedBidData
    provider: str
    processing_time_ms: int


class ProvidersResponse(BaseModel):
    providers: list[str]
    count: int


@router.post("", summary="Extract bid data", response_model=ExtractResponse)
async def extract_bid(
    chain: ExtractionChainDep,
    file: UploadFile = File(..., description="Bid document (PDF or image)"),
) -> ExtractResponse:
    """Run the provider chain on an uploaded bid without OCR alignment."""

    start_time = time.perf_counter()
    payload = await read_upload(file)

    loop = asyncio.get_running_loop()
    try:
        images = await loop.run_in_executor(
            None,
            lambda: [
                encode_png(page.image)
                for page in rasterize(
                    payload,
                    scale=settings.ocr_raster_scale,
                    filename=file.filename,
                    content_type=file.content_type,
                ).pages
            ],
        )
    except RasterizeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    logger.info("Starting extraction: file=%s pages=%d providers=%s", file.filename, len(images), chain.provider_names())
    try:
        result = await chain.extract(images)
    except NoProvidersConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ExtractionFailedError as exc:
        logger.error("Extraction failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    processing_time_ms = int((time.perf_counter() - start_time) * 1000)
    logger.info(
        "Extraction completed: provider=%s line_items=%d time=%dms",
        result.provider,
        len(result.data.line_items),
        processing_time_ms,
    )
    return ExtractResponse(
        success=True,
        data=result.data,
        provider=result.provider,
        processing_time_ms=processing_time_ms,
    )


@router.get("/providers", summary="List configured extraction providers", response_model=ProvidersResponse)
async def list_providers(chain: ExtractionChainDep) -> ProvidersResponse:
    providers = chain.provider_names()
    return ProvidersResponse(providers=providers, count=len(providers))
