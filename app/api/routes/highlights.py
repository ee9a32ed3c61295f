from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.schemas.bid import ExtractedBidData
from app.schemas.highlight import HighlightMaps
from app.schemas.ocr import PageOcrData
from app.services.highlight.maps import build_highlight_maps

router = APIRouter(prefix="/highlights", tags=["highlights"])


class HighlightRequest(BaseModel):
    pages: list[PageOcrData] = Field(default_factory=list)
    data: ExtractedBidData
    raster_scale: float | None = Field(
        default=None,
        gt=0,
        description="When set, boxes are returned in scale-1 page units instead of raster pixels.",
    )


@router.post("", summary="Recompute highlight maps", response_model=HighlightMaps)
async def compute_highlights(request: HighlightRequest) -> HighlightMaps:
    """Recompute both highlight maps from OCR pages and (possibly edited) bid data."""

    return build_highlight_maps(request.pages, request.data, raster_scale=request.raster_scale)
