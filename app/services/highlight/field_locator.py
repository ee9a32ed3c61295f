"""Usage: locate a line item's tag and prices on the pages the extractor claims."""

from __future__ import annotations

import logging
from typing import Sequence

from app.schemas.bid import LineItem
from app.schemas.highlight import BoundingBox, FieldHighlight, FieldType
from app.schemas.ocr import PageOcrData
from app.services.highlight.identifiers import extract_identifiers
from app.services.highlight.matching import matches_identifier, matches_price

logger = logging.getLogger(__name__)

WORD_PAD_X = 4
WORD_PAD_Y = 2


def page_for_hint(pages: Sequence[PageOcrData], page_number: int | None) -> PageOcrData | None:
    """Resolve a 1-based page hint to its OCR page, or ``None`` when it is absent."""

    if page_number is None:
        return None
    page_index = page_number - 1
    for page in pages:
        if page.page_index == page_index:
            return page
    return None


def find_tag_on_page(tag: str, page: PageOcrData) -> BoundingBox | None:
    for identifier in extract_identifiers(tag):
        for word in page.words:
            if matches_identifier(word.text, identifier):
                return BoundingBox.around(word.bbox, pad_x=WORD_PAD_X, pad_y=WORD_PAD_Y)
    return None


def find_price_on_page(price: float, page: PageOcrData) -> BoundingBox | None:
    for word in page.words:
        if matches_price(word.text, price):
            return BoundingBox.around(word.bbox, pad_x=WORD_PAD_X, pad_y=WORD_PAD_Y)
    return None


def find_line_item_fields(item: LineItem, pages: Sequence[PageOcrData]) -> list[FieldHighlight]:
    """
    Locate tag, unit price and line total of ``item``, each on its own hinted page.

    A wrong or missing page hint leaves that field out; no other page is searched.
    """

    highlights: list[FieldHighlight] = []

    tag_page = page_for_hint(pages, item.tag_page)
    if tag_page is not None:
        _append(highlights, tag_page, find_tag_on_page(item.tag, tag_page), "tag")

    price_fields: tuple[tuple[FieldType, float, int | None], ...] = (
        ("unit_price", float(item.unit_price), item.unit_price_page),
        ("line_total", float(item.line_total), item.line_total_page),
    )
    for field_type, value, page_number in price_fields:
        page = page_for_hint(pages, page_number)
        if page is None:
            continue
        _append(highlights, page, find_price_on_page(value, page), field_type)

    if len(highlights) < 3:
        logger.debug(
            "Line %s: located %d of 3 fields (tag=%r pages=%s/%s/%s)",
            item.line,
            len(highlights),
            item.tag,
            item.tag_page,
            item.unit_price_page,
            item.line_total_page,
        )
    return highlights


def _append(
    highlights: list[FieldHighlight],
    page: PageOcrData,
    box: BoundingBox | None,
    field_type: FieldType,
) -> None:
    if box is None:
        return
    highlights.append(FieldHighlight(page_index=page.page_index, bounding_box=box, field_type=field_type))
