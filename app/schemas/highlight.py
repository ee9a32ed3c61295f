from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.ocr import WordBox

FieldType = Literal["tag", "unit_price", "line_total"]


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def around(cls, box: WordBox, *, pad_x: float, pad_y: float) -> "BoundingBox":
        """Box covering ``box`` with ``pad_x``/``pad_y`` added on every side."""

        return cls(
            x=box.x0 - pad_x,
            y=box.y0 - pad_y,
            width=box.width + 2 * pad_x,
            height=box.height + 2 * pad_y,
        )

    def scaled(self, factor: float) -> "BoundingBox":
        return BoundingBox(
            x=self.x * factor,
            y=self.y * factor,
            width=self.width * factor,
            height=self.height * factor,
        )


class FieldHighlight(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_index: int = Field(..., ge=0)
    bounding_box: BoundingBox
    field_type: FieldType


class LineHighlight(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_id: int
    highlights: list[FieldHighlight] = Field(default_factory=list)


class ContactFieldHighlight(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_name: str
    page_index: int = Field(..., ge=0)
    bounding_box: BoundingBox


class DocumentMatch(BaseModel):
    """Region found by the whole-document search."""

    model_config = ConfigDict(frozen=True)

    page_index: int = Field(..., ge=0)
    bounding_box: BoundingBox


class HighlightMaps(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_highlights: dict[int, LineHighlight] = Field(default_factory=dict)
    contact_highlights: dict[str, ContactFieldHighlight] = Field(default_factory=dict)
