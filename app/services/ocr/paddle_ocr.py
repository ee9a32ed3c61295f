from __future__ import annotations

import logging
import re
from typing import Any, Sequence

from app.core.config import settings
from app.schemas.ocr import OcrWord, WordBox
from app.services.ocr.base import PageOcrEngine

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\S+")


class PaddleOcrEngine(PageOcrEngine):
    """PaddleOCR det+rec over in-memory page images, emitting word-level boxes."""

    def __init__(self, *, ocr: Any | None = None) -> None:
        self._ocr = ocr or self._build_ocr()

    def _build_ocr(self) -> Any:
        from paddleocr import PaddleOCR

        logger.info("--- INIT PaddleOCR(det+rec) device=%s ---", settings.paddle_ocr_device)
        return PaddleOCR(
            text_detection_model_name=settings.paddle_det_model_name,
            text_recognition_model_name=settings.paddle_rec_model_name,
            use_doc_orientation_classify=False,
            use_doc_unwarping=False,
            use_textline_orientation=settings.paddle_use_textline_orientation,
            device=settings.paddle_ocr_device,
        )

    def recognize(self, image: Any) -> list[OcrWord]:
        if self._ocr is None:
            raise RuntimeError("OCR engine has been closed")

        raw_results = self._ocr.predict(image)
        words: list[OcrWord] = []
        for result in raw_results or []:
            for box_points, text_val, score in self._iter_result_entries(result):
                bbox = self._to_word_box(box_points)
                if bbox is None:
                    continue
                words.extend(split_line_into_words(text_val, bbox, score or 0.0))
        return words

    def close(self) -> None:
        self._ocr = None

    def _iter_result_entries(self, result: Any) -> list[tuple[Sequence[Any], str, float | None]]:
        entries: list[tuple[Sequence[Any], str, float | None]] = []

        # PaddleOCR 2.x style: [[box, (text, score)], ...]
        if isinstance(result, (list, tuple)):
            return self._extract_from_ocr_res(result)

        json_data = self._get_json_data(result)
        if isinstance(json_data, dict):
            json_data = json_data.get("res", json_data)
        if isinstance(json_data, dict):
            boxes = self._first_seq(json_data, ["rec_polys", "dt_polys", "boxes", "polygons"])
            texts = self._first_seq(json_data, ["rec_texts", "rec_text", "texts"])
            scores = self._first_seq(json_data, ["rec_scores", "rec_score", "scores"])
            entries.extend(self._zip_entries(boxes, texts, scores))

        return entries

    def _get_json_data(self, result: Any) -> Any:
        if isinstance(result, dict):
            return result
        json_data = getattr(result, "json", None)
        if callable(json_data):
            try:
                return json_data()
            except TypeError:
                return None
        return json_data

    def _zip_entries(
        self,
        boxes: Any,
        texts: Any,
        scores: Any = None,
    ) -> list[tuple[Sequence[Any], str, float | None]]:
        if not isinstance(boxes, (list, tuple)) or not isinstance(texts, (list, tuple)):
            return []

        length = min(len(boxes), len(texts))
        entries: list[tuple[Sequence[Any], str, float | None]] = []

        for idx in range(length):
            text_val = self._text_from_entry(texts[idx])
            if text_val is None:
                continue

            score_val = None
            if isinstance(scores, (list, tuple)) and idx < len(scores):
                try:
                    score_val = float(scores[idx])
                except (TypeError, ValueError):
                    score_val = None

            entries.append((boxes[idx], text_val, score_val))

        return entries

    def _first_seq(self, data: dict[str, Any], keys: list[str]) -> Any:
        for key in keys:
            value = _as_list(data.get(key))
            if isinstance(value, (list, tuple)):
                return value
        return None

    def _extract_from_ocr_res(self, ocr_res: Sequence[Any]) -> list[tuple[Sequence[Any], str, float | None]]:
        entries: list[tuple[Sequence[Any], str, float | None]] = []
        for line in ocr_res:
            if not self._valid_line(line):
                continue
            text_info = line[1]
            text_val = self._text_from_entry(text_info)
            if text_val is None:
                continue
            score_val = None
            if len(text_info) > 1:
                try:
                    score_val = float(text_info[1])
                except (TypeError, ValueError):
                    score_val = None
            entries.append((line[0], text_val, score_val))
        return entries

    def _text_from_entry(self, value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, (list, tuple)) and value:
            value = value[0]
        value_str = str(value).strip()
        return value_str or None

    def _to_word_box(self, box_points: Any) -> WordBox | None:
        # Polygon [[x, y], ...] or flat [x0, y0, x1, y1]
        points = _as_list(box_points)
        if isinstance(points, (list, tuple)) and len(points) == 4 and all(
            isinstance(v, (int, float)) for v in points
        ):
            x0, y0, x1, y1 = (float(v) for v in points)
            return WordBox(x0=min(x0, x1), y0=min(y0, y1), x1=max(x0, x1), y1=max(y0, y1))

        if not self._valid_box(points):
            return None
        coords = [self._coerce_point(pt) for pt in points]
        if any(c is None for c in coords):
            return None
        xs = [c[0] for c in coords]
        ys = [c[1] for c in coords]
        return WordBox(x0=min(xs), y0=min(ys), x1=max(xs), y1=max(ys))

    def _valid_line(self, line: Any) -> bool:
        if not isinstance(line, (list, tuple)) or len(line) < 2:
            return False
        box, text_info = line[0], line[1]
        if not self._valid_box(_as_list(box)):
            return False
        if not isinstance(text_info, (list, tuple)) or len(text_info) < 1:
            return False
        if not text_info[0]:
            return False
        return True

    def _valid_box(self, box: Any) -> bool:
        if not isinstance(box, (list, tuple)) or len(box) < 3:
            return False
        return all(self._valid_point(pt) for pt in box)

    def _valid_point(self, pt: Any) -> bool:
        pt = _as_list(pt)
        return isinstance(pt, (list, tuple)) and len(pt) == 2

    def _coerce_point(self, pt: Any) -> tuple[float, float] | None:
        pt = _as_list(pt)
        if not self._valid_point(pt):
            return None
        try:
            return float(pt[0]), float(pt[1])
        except (TypeError, ValueError):
            return None


def split_line_into_words(text: str, box: WordBox, confidence: float) -> list[OcrWord]:
    """Split a recognized text line into words, spacing them by character offset."""

    matches = list(_WORD_RE.finditer(text))
    if len(matches) <= 1:
        return [OcrWord(text=text.strip(), bbox=box, confidence=confidence)] if matches else []

    char_width = box.width / len(text)
    return [
        OcrWord(
            text=match.group(0),
            bbox=WordBox(
                x0=box.x0 + match.start() * char_width,
                y0=box.y0,
                x1=box.x0 + match.end() * char_width,
                y1=box.y1,
            ),
            confidence=confidence,
        )
        for match in matches
    ]


def _as_list(value: Any) -> Any:
    # numpy arrays come back from PaddleOCR 3.x
    if hasattr(value, "tolist"):
        return value.tolist()
    return value
