from typing import Any, Protocol, runtime_checkable

from app.schemas.ocr import OcrWord


@runtime_checkable
class PageOcrEngine(Protocol):
    def recognize(self, image: Any) -> list[OcrWord]:
        """Run OCR on one rasterized page and return its words in raster pixels."""
        ...

    def close(self) -> None:
        """Release the engine's model resources."""
        ...
