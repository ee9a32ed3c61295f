"""Usage: derive searchable identifiers from tag strings and free-text values."""

from __future__ import annotations

import re

from app.services.highlight.matching import normalize_token

_SPLIT_RE = re.compile(r"[,\s]+")
_PREFIX_RE = re.compile(r"^([A-Z]{2,})-")
_DIGITS_RE = re.compile(r"\d{4,}")

MIN_CONTACT_TOKEN_LEN = 4


def extract_identifiers(tag: str) -> list[str]:
    """
    Expand a tag string into ordered match candidates.

    "TK-8424" -> ["TK-8424", "8424"]
    "TK-5031, -5032" -> ["TK-5031", "5031", "TK-5032", "5032"]

    Callers try candidates front to back, so the order is significant.
    """

    identifiers: list[str] = []
    last_prefix = ""

    for part in _SPLIT_RE.split(tag or ""):
        token = part.strip()
        if not token:
            continue

        # "-5032" continues the previous "TK-" series
        full_tag = token
        if token.startswith("-") and last_prefix:
            full_tag = last_prefix + token

        prefix_match = _PREFIX_RE.match(token)
        if prefix_match:
            last_prefix = prefix_match.group(1)

        identifiers.append(full_tag)

        digits = _DIGITS_RE.search(full_tag)
        if digits:
            identifiers.append(digits.group(0))

    return identifiers


def contact_identifiers(value: str) -> list[str]:
    """Meaningful tokens of a free-text field value, in reading order."""

    tokens = [part.strip() for part in _SPLIT_RE.split(value or "") if part.strip()]
    meaningful = [token for token in tokens if len(normalize_token(token)) >= MIN_CONTACT_TOKEN_LEN]
    return meaningful or [token for token in tokens if normalize_token(token)]
