import pytest

from app.schemas.bid import ExtractedBidData, LineItem, Summary


def test_line_item_parses_currency_strings() -> None:
    item = LineItem(
        line=1,
        tag="TK-8424",
        tag_page=1,
        unit_price="$77,000.00",
        unit_price_page="1",
        line_total="USD 154,000",
        line_total_page=2,
        qty=2,
    )

    assert item.unit_price == 77000.0
    assert item.line_total == 154000.0
    assert item.unit_price_page == 1


def test_line_item_rejects_invalid_amount_string() -> None:
    with pytest.raises(ValueError):
        LineItem(line=1, unit_price="n/a", line_total=10)


def test_extracted_bid_data_fills_missing_sections() -> None:
    payload = ExtractedBidData.model_validate(
        {
            "vendor_info": {"vendor_name": "Industrial Tank Supplier", "quote_id": "4444"},
            "line_items": [
                {"line": 1, "tag": "TK-8424", "unit_price": 77000, "line_total": 77000},
            ],
            "summary": {"total_items": 1, "grand_total": "$77,000.00", "currency": "USD"},
        }
    )

    assert payload.receiver_info.receiver_name == ""
    assert payload.vendor_info.supplier_phone == ""
    assert payload.line_items[0].qty == 1
    assert payload.line_items[0].tag_page is None
    assert payload.summary.grand_total == 77000.0


def test_summary_blank_grand_total_defaults_to_zero() -> None:
    assert Summary(grand_total="").grand_total == 0.0


def test_contact_fields_are_explicit_mappings() -> None:
    data = ExtractedBidData.model_validate(
        {"vendor_info": {"supplier_phone": "123-123-1234"}, "receiver_info": {"receiver_fax": "555"}}
    )

    assert data.vendor_info.contact_fields()["supplier_phone"] == "123-123-1234"
    assert data.receiver_info.contact_fields()["receiver_fax"] == "555"
    assert "quote_id" not in data.vendor_info.contact_fields()
