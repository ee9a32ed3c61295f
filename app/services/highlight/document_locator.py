"""Usage: search every page for a value when no trustworthy page hint exists."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from app.schemas.highlight import BoundingBox, DocumentMatch
from app.schemas.ocr import OcrWord, PageOcrData, WordBox
from app.services.highlight.identifiers import extract_identifiers
from app.services.highlight.matching import matches_identifier, matches_price
from app.services.highlight.rows import EXPANDED_ROW_HEIGHT_RATIO, same_line, words_within_band

logger = logging.getLogger(__name__)

REGION_PAD_X = 8
REGION_PAD_Y = 4


@dataclass(frozen=True)
class ExpectedPrices:
    unit_price: float | None = None
    line_total: float | None = None

    def values(self) -> list[float]:
        # Zero prices are too ambiguous to pull into the group.
        return [value for value in (self.unit_price, self.line_total) if value]


def find_anchor(identifiers: Sequence[str], page: PageOcrData) -> OcrWord | None:
    """First word matching the earliest identifier that matches anything on the page."""

    for identifier in identifiers:
        for word in page.words:
            if matches_identifier(word.text, identifier):
                return word
    return None


def group_row(
    anchor: OcrWord,
    page: PageOcrData,
    prices: ExpectedPrices | None = None,
) -> list[OcrWord]:
    group = same_line(anchor, page.words, page.height)
    if prices is None or not prices.values():
        return group

    # Prices sitting slightly off the tag's baseline
    expanded = words_within_band(anchor, page.words, band=page.height * EXPANDED_ROW_HEIGHT_RATIO)
    for word in expanded:
        if any(matches_price(word.text, price) for price in prices.values()):
            if not any(word is member for member in group):
                group.append(word)
    return group


def union_box(words: Sequence[OcrWord]) -> WordBox:
    return WordBox(
        x0=min(word.bbox.x0 for word in words),
        y0=min(word.bbox.y0 for word in words),
        x1=max(word.bbox.x1 for word in words),
        y1=max(word.bbox.y1 for word in words),
    )


def locate_in_document(
    identifiers: Sequence[str],
    pages: Sequence[PageOcrData],
    prices: ExpectedPrices | None = None,
) -> DocumentMatch | None:
    """
    Scan pages in ascending order; the first page with any match wins.

    The matched word and its row (plus nearby expected prices) are merged into
    one padded region. This is not a best-match search across pages.
    """

    if not identifiers:
        return None

    for page in sorted(pages, key=lambda p: p.page_index):
        anchor = find_anchor(identifiers, page)
        if anchor is None:
            continue

        group = group_row(anchor, page, prices)
        if not group:
            # A zero-height page has no row band, not even for the anchor
            continue

        region = BoundingBox.around(union_box(group), pad_x=REGION_PAD_X, pad_y=REGION_PAD_Y)
        logger.debug(
            "Matched %r on page %d with %d row words",
            anchor.text,
            page.page_index + 1,
            len(group),
        )
        return DocumentMatch(page_index=page.page_index, bounding_box=region)

    logger.debug("No OCR match for identifiers %s", list(identifiers))
    return None


def find_tag_in_document(
    tag: str,
    pages: Sequence[PageOcrData],
    prices: ExpectedPrices | None = None,
) -> DocumentMatch | None:
    return locate_in_document(extract_identifiers(tag), pages, prices)
