"""Usage: locate vendor/receiver free-text fields without page hints."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence, runtime_checkable

from app.schemas.highlight import ContactFieldHighlight
from app.schemas.ocr import PageOcrData
from app.services.highlight.document_locator import locate_in_document
from app.services.highlight.identifiers import contact_identifiers


@runtime_checkable
class ContactFieldSource(Protocol):
    def contact_fields(self) -> dict[str, str]:
        """Return locatable free-text values keyed by field name."""
        ...


def find_contact_field(
    field_name: str,
    value: str,
    pages: Sequence[PageOcrData],
) -> ContactFieldHighlight | None:
    match = locate_in_document(contact_identifiers(value), pages)
    if match is None:
        return None
    return ContactFieldHighlight(
        field_name=field_name,
        page_index=match.page_index,
        bounding_box=match.bounding_box,
    )


def find_contact_fields(
    sources: Iterable[object],
    pages: Sequence[PageOcrData],
) -> dict[str, ContactFieldHighlight]:
    """Locate every non-empty contact field; unlocatable fields are left out."""

    highlights: dict[str, ContactFieldHighlight] = {}
    for source in sources:
        if not isinstance(source, ContactFieldSource):
            continue
        for field_name, value in source.contact_fields().items():
            if not value or not value.strip():
                continue
            highlight = find_contact_field(field_name, value, pages)
            if highlight is not None:
                highlights[field_name] = highlight
    return highlights
