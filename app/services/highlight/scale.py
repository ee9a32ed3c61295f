"""Usage: convert highlight boxes between OCR raster pixels and display units."""

from __future__ import annotations

from typing import Mapping

from app.schemas.highlight import BoundingBox, ContactFieldHighlight, LineHighlight


def to_page_units(box: BoundingBox, raster_scale: float) -> BoundingBox:
    """Raster pixels -> scale-1 page units."""

    if raster_scale <= 0:
        raise ValueError(f"raster_scale must be positive, got {raster_scale}")
    return box.scaled(1 / raster_scale)


def to_display(box: BoundingBox, zoom: float) -> BoundingBox:
    """Scale-1 page units -> on-screen pixels at ``zoom``."""

    return box.scaled(zoom)


def raster_to_display(box: BoundingBox, raster_scale: float, zoom: float) -> BoundingBox:
    return to_display(to_page_units(box, raster_scale), zoom)


def line_highlights_to_page_units(
    line_highlights: Mapping[int, LineHighlight],
    raster_scale: float,
) -> dict[int, LineHighlight]:
    converted: dict[int, LineHighlight] = {}
    for line_id, line in line_highlights.items():
        converted[line_id] = LineHighlight(
            line_id=line.line_id,
            highlights=[
                highlight.model_copy(
                    update={"bounding_box": to_page_units(highlight.bounding_box, raster_scale)}
                )
                for highlight in line.highlights
            ],
        )
    return converted


def contact_highlights_to_page_units(
    contact_highlights: Mapping[str, ContactFieldHighlight],
    raster_scale: float,
) -> dict[str, ContactFieldHighlight]:
    return {
        name: highlight.model_copy(
            update={"bounding_box": to_page_units(highlight.bounding_box, raster_scale)}
        )
        for name, highlight in contact_highlights.items()
    }
