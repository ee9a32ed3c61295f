"""Usage: recompute the full highlight maps from OCR pages and extracted data."""

from __future__ import annotations

from typing import Sequence

from app.schemas.bid import ExtractedBidData, LineItem
from app.schemas.highlight import ContactFieldHighlight, HighlightMaps, LineHighlight
from app.schemas.ocr import PageOcrData
from app.services.highlight.contact_locator import find_contact_fields
from app.services.highlight.field_locator import find_line_item_fields
from app.services.highlight.scale import (
    contact_highlights_to_page_units,
    line_highlights_to_page_units,
)


def build_line_highlights(
    items: Sequence[LineItem],
    pages: Sequence[PageOcrData],
) -> dict[int, LineHighlight]:
    return {
        item.line: LineHighlight(line_id=item.line, highlights=find_line_item_fields(item, pages))
        for item in items
    }


def build_contact_highlights(
    data: ExtractedBidData,
    pages: Sequence[PageOcrData],
) -> dict[str, ContactFieldHighlight]:
    return find_contact_fields([data.vendor_info, data.receiver_info], pages)


def build_highlight_maps(
    pages: Sequence[PageOcrData],
    data: ExtractedBidData,
    *,
    raster_scale: float | None = None,
) -> HighlightMaps:
    """Build both maps; boxes are converted to page units when ``raster_scale`` is given."""

    line_highlights = build_line_highlights(data.line_items, pages)
    contact_highlights = build_contact_highlights(data, pages)
    if raster_scale is not None:
        line_highlights = line_highlights_to_page_units(line_highlights, raster_scale)
        contact_highlights = contact_highlights_to_page_units(contact_highlights, raster_scale)
    return HighlightMaps(line_highlights=line_highlights, contact_highlights=contact_highlights)
