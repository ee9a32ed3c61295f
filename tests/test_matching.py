from app.services.highlight.matching import matches_identifier, matches_price, parse_price


def test_matches_identifier_exact_ignores_case_and_punctuation() -> None:
    assert matches_identifier("tk-8424.", "TK-8424") is True


def test_matches_identifier_suffix_needs_four_chars() -> None:
    assert matches_identifier("TK-8424", "8424") is True
    assert matches_identifier("8424", "TK-8424") is True
    assert matches_identifier("424", "8424") is False
    assert matches_identifier("TK-8424", "424") is False


def test_matches_identifier_rejects_unrelated_and_empty() -> None:
    assert matches_identifier("TK-8425", "TK-8424") is False
    assert matches_identifier("$", "TK-8424") is False
    assert matches_identifier("TK-8424", "") is False


def test_matches_price_strips_currency_formatting() -> None:
    assert matches_price("$1,234.50", 1234.50) is True
    assert matches_price("77,000.00", 77000) is True


def test_matches_price_respects_relative_tolerance() -> None:
    # tolerance for 1234.50 is ~1.23
    assert matches_price("1234.00", 1234.50) is True
    assert matches_price("1232.00", 1234.50) is False
    assert matches_price("1236.00", 1234.50) is False


def test_matches_price_minimum_tolerance_for_small_values() -> None:
    assert matches_price("0.50", 0.5) is True
    assert matches_price("0.52", 0.5) is False


def test_matches_price_unparsable_word() -> None:
    assert matches_price("TOTAL", 100.0) is False
    assert matches_price("", 100.0) is False


def test_parse_price_reads_leading_number() -> None:
    assert parse_price("1234.50USD") == 1234.5
    assert parse_price("USD1234") is None
