from __future__ import annotations

from app.schemas.bid import LineItem
from app.schemas.highlight import BoundingBox
from app.schemas.ocr import OcrWord, PageOcrData, WordBox
from app.services.highlight.field_locator import find_line_item_fields


def _word(text: str, x0: float, y0: float, x1: float, y1: float) -> OcrWord:
    return OcrWord(text=text, bbox=WordBox(x0=x0, y0=y0, x1=x1, y1=y1), confidence=95.0)


def _page(words: list[OcrWord], page_index: int = 0) -> PageOcrData:
    return PageOcrData(page_index=page_index, words=words, width=1200, height=1600)


def _item(**overrides) -> LineItem:
    values = {
        "line": 1,
        "tag": "TK-8424",
        "tag_page": 1,
        "description": "1100L Break Tank",
        "unit_price": 77000,
        "unit_price_page": 1,
        "qty": 1,
        "line_total": 77000,
        "line_total_page": 1,
    }
    values.update(overrides)
    return LineItem(**values)


def _row_page() -> PageOcrData:
    return _page(
        [
            _word("Tag", 100, 300, 150, 320),
            _word("TK-8424", 100, 400, 200, 420),
            _word("1100L", 250, 400, 320, 420),
            _word("77,000.00", 800, 400, 900, 420),
        ]
    )


def test_locates_tag_and_prices_on_hinted_page() -> None:
    highlights = find_line_item_fields(_item(), [_row_page()])

    assert 2 <= len(highlights) <= 3
    assert all(h.page_index == 0 for h in highlights)

    by_type = {h.field_type: h for h in highlights}
    assert by_type["tag"].bounding_box == BoundingBox(x=96, y=398, width=108, height=24)
    assert by_type["unit_price"].bounding_box == BoundingBox(x=796, y=398, width=108, height=24)
    assert [h.field_type for h in highlights] == ["tag", "unit_price", "line_total"]


def test_missing_tag_page_omits_tag_without_error() -> None:
    highlights = find_line_item_fields(_item(tag_page=5), [_row_page()])

    assert [h.field_type for h in highlights] == ["unit_price", "line_total"]


def test_fields_resolve_on_their_own_pages() -> None:
    first = _page([_word("TK-8424", 100, 400, 200, 420)], page_index=0)
    second = _page(
        [
            _word("12,500.00", 800, 100, 900, 120),
            _word("25,000.00", 950, 100, 1050, 120),
        ],
        page_index=1,
    )
    item = _item(unit_price=12500, unit_price_page=2, qty=2, line_total=25000, line_total_page=2)

    highlights = find_line_item_fields(item, [first, second])

    assert [(h.field_type, h.page_index) for h in highlights] == [
        ("tag", 0),
        ("unit_price", 1),
        ("line_total", 1),
    ]
    assert highlights[2].bounding_box.x == 946


def test_wrong_page_hint_does_not_search_other_pages() -> None:
    first = _page([_word("Cover", 100, 100, 200, 120)], page_index=0)
    second = _page([_word("TK-8424", 100, 400, 200, 420)], page_index=1)

    highlights = find_line_item_fields(_item(unit_price=1, line_total=1), [first, second])

    assert highlights == []


def test_numeric_word_matches_full_identifier_in_document_order() -> None:
    page = _page(
        [
            _word("8424", 100, 100, 150, 120),
            _word("TK-8424", 100, 400, 200, 420),
        ]
    )

    highlights = find_line_item_fields(_item(unit_price=1, line_total=1), [page])

    assert highlights[0].field_type == "tag"
    assert highlights[0].bounding_box.y == 98


def test_first_matching_price_word_in_document_order_wins() -> None:
    page = _page(
        [
            _word("TK-8424", 100, 400, 200, 420),
            _word("$77,000", 800, 200, 900, 220),
            _word("77,000.00", 800, 400, 900, 420),
        ]
    )

    highlights = find_line_item_fields(_item(), [page])

    assert highlights[1].bounding_box.y == 198


def test_missing_page_hint_is_skipped() -> None:
    highlights = find_line_item_fields(_item(tag_page=None, line_total_page=None), [_row_page()])

    assert [h.field_type for h in highlights] == ["unit_price"]
