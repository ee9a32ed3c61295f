"""Usage: fixed-band grouping of OCR words that share a visual text line."""

from __future__ import annotations

from typing import Sequence

from app.schemas.ocr import OcrWord

ROW_HEIGHT_RATIO = 0.04
EXPANDED_ROW_HEIGHT_RATIO = 0.05


def words_within_band(
    anchor: OcrWord,
    words: Sequence[OcrWord],
    *,
    band: float,
) -> list[OcrWord]:
    anchor_center = anchor.bbox.y_center
    return [word for word in words if abs(word.bbox.y_center - anchor_center) < band]


def same_line(anchor: OcrWord, words: Sequence[OcrWord], page_height: float) -> list[OcrWord]:
    """Words whose vertical center lies within 4% of the page height of the anchor's.

    Crowded adjacent rows can leak into the band; this is not layout-aware
    row detection.
    """

    return words_within_band(anchor, words, band=page_height * ROW_HEIGHT_RATIO)
