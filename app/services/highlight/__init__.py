"""Usage: field localization and highlight alignment helpers."""

from app.services.highlight.contact_locator import ContactFieldSource, find_contact_field, find_contact_fields
from app.services.highlight.document_locator import ExpectedPrices, find_tag_in_document, locate_in_document
from app.services.highlight.field_locator import find_line_item_fields
from app.services.highlight.identifiers import contact_identifiers, extract_identifiers
from app.services.highlight.maps import build_contact_highlights, build_highlight_maps, build_line_highlights
from app.services.highlight.matching import matches_identifier, matches_price
from app.services.highlight.rows import same_line
from app.services.highlight.scale import raster_to_display, to_display, to_page_units

__all__ = [
    "ContactFieldSource",
    "ExpectedPrices",
    "build_contact_highlights",
    "build_highlight_maps",
    "build_line_highlights",
    "contact_identifiers",
    "extract_identifiers",
    "find_contact_field",
    "find_contact_fields",
    "find_line_item_fields",
    "find_tag_in_document",
    "locate_in_document",
    "matches_identifier",
    "matches_price",
    "raster_to_display",
    "same_line",
    "to_display",
    "to_page_units",
]
