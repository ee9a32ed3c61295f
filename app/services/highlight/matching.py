"""Usage: tolerant comparison of single OCR words against identifiers and prices."""

from __future__ import annotations

import re

_IDENTIFIER_CLEAN_RE = re.compile(r"[^a-zA-Z0-9-]")
_PRICE_CLEAN_RE = re.compile(r"[$,]")
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Suffix matches shorter than this would let "424" hit "8424".
MIN_SUFFIX_LEN = 4


def normalize_token(text: str) -> str:
    return _IDENTIFIER_CLEAN_RE.sub("", text or "").lower()


def matches_identifier(word: str, identifier: str) -> bool:
    clean_word = normalize_token(word)
    clean_id = normalize_token(identifier)
    if not clean_word or not clean_id:
        return False

    if clean_word == clean_id:
        return True
    # "TK-8424" on the page, "8424" searched
    if clean_word.endswith(clean_id) and len(clean_id) >= MIN_SUFFIX_LEN:
        return True
    # "8424" on the page, "TK-8424" searched
    if clean_id.endswith(clean_word) and len(clean_word) >= MIN_SUFFIX_LEN:
        return True
    return False


def parse_price(word: str) -> float | None:
    """Read the leading number of an OCR word, ignoring '$' and thousands separators."""

    cleaned = _PRICE_CLEAN_RE.sub("", word or "").strip()
    match = _LEADING_NUMBER_RE.match(cleaned)
    if not match:
        return None
    try:
        return float(match.group(0))
    except ValueError:
        return None


def price_tolerance(price: float) -> float:
    return max(0.01, price * 0.001)


def matches_price(word: str, price: float) -> bool:
    value = parse_price(word)
    if value is None:
        return False
    return abs(value - price) < price_tolerance(price)
