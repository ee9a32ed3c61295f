import pytest

from app.schemas.highlight import BoundingBox, ContactFieldHighlight, FieldHighlight, LineHighlight
from app.services.highlight.scale import (
    contact_highlights_to_page_units,
    line_highlights_to_page_units,
    raster_to_display,
    to_display,
    to_page_units,
)


def test_to_page_units_divides_by_raster_scale() -> None:
    box = BoundingBox(x=200, y=100, width=50, height=20)

    assert to_page_units(box, 2.0) == BoundingBox(x=100, y=50, width=25, height=10)


def test_to_display_multiplies_by_zoom() -> None:
    box = BoundingBox(x=100, y=50, width=25, height=10)

    assert to_display(box, 1.5) == BoundingBox(x=150, y=75, width=37.5, height=15)


def test_raster_to_display_composes_both_steps() -> None:
    box = BoundingBox(x=200, y=100, width=50, height=20)

    assert raster_to_display(box, 2.0, 1.5) == BoundingBox(x=150, y=75, width=37.5, height=15)


def test_to_page_units_rejects_non_positive_scale() -> None:
    with pytest.raises(ValueError):
        to_page_units(BoundingBox(x=0, y=0, width=1, height=1), 0)


def test_map_conversion_returns_new_maps() -> None:
    box = BoundingBox(x=20, y=40, width=60, height=80)
    lines = {
        3: LineHighlight(
            line_id=3,
            highlights=[FieldHighlight(page_index=1, bounding_box=box, field_type="tag")],
        )
    }
    contacts = {"supplier_phone": ContactFieldHighlight(field_name="supplier_phone", page_index=0, bounding_box=box)}

    converted_lines = line_highlights_to_page_units(lines, 2.0)
    converted_contacts = contact_highlights_to_page_units(contacts, 2.0)

    half = BoundingBox(x=10, y=20, width=30, height=40)
    assert converted_lines[3].highlights[0].bounding_box == half
    assert converted_lines[3].highlights[0].page_index == 1
    assert converted_contacts["supplier_phone"].bounding_box == half
    assert lines[3].highlights[0].bounding_box == box
