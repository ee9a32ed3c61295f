"""Render uploaded documents to page images at a fixed raster scale."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import cv2
import fitz  # PyMuPDF
import numpy as np

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class RasterizeError(ValueError):
    """The uploaded document could not be turned into page images."""


@dataclass
class RasterPage:
    page_index: int
    image: np.ndarray
    width: int
    height: int


@dataclass
class RasterDocument:
    pages: list[RasterPage]
    # Magnification applied while rendering; images are used as-is (1.0).
    scale: float

    def __len__(self) -> int:
        return len(self.pages)


def is_pdf(*, filename: str | None, content_type: str | None) -> bool:
    if content_type == PDF_CONTENT_TYPE:
        return True
    return bool(filename) and Path(filename).suffix.lower() == ".pdf"


def rasterize(
    source: bytes,
    *,
    scale: float,
    filename: str | None = None,
    content_type: str | None = None,
) -> RasterDocument:
    if is_pdf(filename=filename, content_type=content_type):
        return rasterize_pdf(source, scale=scale)
    return RasterDocument(pages=[decode_image(source)], scale=1.0)


def rasterize_pdf(pdf_bytes: bytes, *, scale: float) -> RasterDocument:
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as exc:
        raise RasterizeError(f"Cannot open PDF: {exc}") from exc

    pages: list[RasterPage] = []
    matrix = fitz.Matrix(scale, scale)
    try:
        for index in range(len(doc)):
            pix = doc.load_page(index).get_pixmap(matrix=matrix, alpha=False)
            img = np.frombuffer(pix.samples, dtype=np.uint8).reshape(pix.height, pix.width, pix.n)
            # pixmap is RGB; OCR and cv2 work in BGR
            img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)
            pages.append(RasterPage(page_index=index, image=img, width=pix.width, height=pix.height))
    finally:
        doc.close()

    if not pages:
        raise RasterizeError("PDF has no pages")
    logger.info("Rasterized %d pages at scale %.2f", len(pages), scale)
    return RasterDocument(pages=pages, scale=scale)


def decode_image(data: bytes) -> RasterPage:
    buffer = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if img is None:
        raise RasterizeError("Cannot decode image upload")
    height, width = img.shape[:2]
    return RasterPage(page_index=0, image=img, width=width, height=height)


def encode_png(image: np.ndarray) -> bytes:
    ok, encoded = cv2.imencode(".png", image)
    if not ok:
        raise RasterizeError("Failed to encode page image as PNG")
    return encoded.tobytes()
