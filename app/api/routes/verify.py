import logging

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from app.api.deps import ExtractionChainDep, TranscriberDep
from app.api.uploads import read_upload
from app.services.extraction.errors import ExtractionFailedError, NoProvidersConfiguredError
from app.services.ocr.rasterize import RasterizeError
from app.services.pipelines.bid import BidVerificationPipeline, BidVerificationResult

router = APIRouter(prefix="/verify", tags=["verify"])

logger = logging.getLogger(__name__)


@router.post(
    "",
    summary="Extract bid data and locate every value on the page",
    response_model=BidVerificationResult,
)
async def verify_bid(
    chain: ExtractionChainDep,
    transcriber: TranscriberDep,
    file: UploadFile = File(..., description="Bid document (PDF or image)"),
) -> BidVerificationResult:
    payload = await read_upload(file)

    pipeline = BidVerificationPipeline(extraction_chain=chain, transcriber=transcriber)
    try:
        return await pipeline.run(
            payload,
            filename=file.filename,
            content_type=file.content_type,
        )
    except RasterizeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NoProvidersConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ExtractionFailedError as exc:
        logger.error("Verification failed during extraction: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
