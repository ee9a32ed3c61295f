from pydantic import BaseModel, ConfigDict, Field


class WordBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    x0: float = Field(..., description="Left x coordinate (raster pixels)")
    y0: float = Field(..., description="Top y coordinate (raster pixels)")
    x1: float = Field(..., description="Right x coordinate (raster pixels)")
    y1: float = Field(..., description="Bottom y coordinate (raster pixels)")

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def y_center(self) -> float:
        return (self.y0 + self.y1) / 2


class OcrWord(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    bbox: WordBox
    confidence: float = 0.0


class PageOcrData(BaseModel):
    """OCR transcript of one page; ``page_index`` is 0-based."""

    model_config = ConfigDict(frozen=True)

    page_index: int = Field(..., ge=0)
    words: list[OcrWord] = Field(default_factory=list)
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)
