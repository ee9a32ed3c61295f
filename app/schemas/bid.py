import re

from pydantic import BaseModel, Field, field_validator

_NUMERIC_CLEAN_RE = re.compile(r"[^\d\.-]")


def _parse_float_like(value: float | str | None, *, allow_none: bool) -> float | None:
    """Normalize currency/number strings like 'USD 1,000.00' into floats."""

    if value is None:
        if allow_none:
            return None
        raise ValueError("Value is required and cannot be null")

    if isinstance(value, (int, float)):
        return float(value)

    value_str = str(value).strip()
    if not value_str:
        if allow_none:
            return None
        raise ValueError("Value is required and cannot be empty")

    cleaned = _NUMERIC_CLEAN_RE.sub("", value_str)
    if cleaned in {"", ".", "-"}:
        if allow_none:
            return None
        raise ValueError(f"Cannot parse numeric value from: {value}")

    try:
        return float(cleaned)
    except ValueError as exc:
        raise ValueError(f"Invalid numeric format: {value}") from exc


class VendorInfo(BaseModel):
    """Supplier details from the bid header."""

    vendor_name: str = Field(default="", description="Vendor/supplier company name")
    quote_id: str = Field(default="", description="Quote or bid number")
    quote_date: str = Field(default="", description="Quote date, YYYY-MM-DD")
    terms: str = Field(default="", description="Payment terms")
    supplier_address: str = Field(default="", description="Full supplier address")
    supplier_phone: str = Field(default="", description="Supplier phone number")
    supplier_email: str = Field(default="", description="Supplier email address")
    supplier_fax: str = Field(default="", description="Supplier fax number")

    def contact_fields(self) -> dict[str, str]:
        """Free-text fields that can be located on the page, keyed by field name."""

        return {
            "vendor_name": self.vendor_name,
            "supplier_address": self.supplier_address,
            "supplier_phone": self.supplier_phone,
            "supplier_email": self.supplier_email,
            "supplier_fax": self.supplier_fax,
        }


class ReceiverInfo(BaseModel):
    """Ship-to / bill-to party of the bid."""

    receiver_name: str = Field(default="", description="Receiving company or person")
    receiver_address: str = Field(default="", description="Full receiver address")
    receiver_phone: str = Field(default="", description="Receiver phone number")
    receiver_email: str = Field(default="", description="Receiver email address")
    receiver_fax: str = Field(default="", description="Receiver fax number")

    def contact_fields(self) -> dict[str, str]:
        return {
            "receiver_name": self.receiver_name,
            "receiver_address": self.receiver_address,
            "receiver_phone": self.receiver_phone,
            "receiver_email": self.receiver_email,
            "receiver_fax": self.receiver_fax,
        }


class LineItem(BaseModel):
    """Priced line of the bid. Page numbers are 1-based as reported by the extractor."""

    line: int = Field(..., description="Sequential line number")
    tag: str = Field(default="", description="Equipment tag number(s), e.g. 'TK-5031, -5032'")
    tag_page: int | None = Field(default=None, description="1-based page of the tag")
    description: str = Field(default="", description="Short item description")
    unit_price: float | str = Field(..., description="Price per unit")
    unit_price_page: int | None = Field(default=None, description="1-based page of the unit price")
    qty: int = Field(default=1, ge=0, description="Quantity quoted")
    line_total: float | str = Field(..., description="Line total (unit price x qty)")
    line_total_page: int | None = Field(default=None, description="1-based page of the line total")

    @field_validator("unit_price", "line_total", mode="before")
    @classmethod
    def _parse_required_amount(cls, value: float | str | None) -> float:
        parsed = _parse_float_like(value, allow_none=False)
        assert parsed is not None
        return parsed


class Summary(BaseModel):
    total_items: int = Field(default=0, ge=0)
    grand_total: float | str = Field(default=0.0)
    currency: str = Field(default="USD")

    @field_validator("grand_total", mode="before")
    @classmethod
    def _parse_grand_total(cls, value: float | str | None) -> float:
        parsed = _parse_float_like(value, allow_none=True)
        return 0.0 if parsed is None else parsed


class ExtractedBidData(BaseModel):
    """Structured bid payload returned by the extraction service."""

    vendor_info: VendorInfo = Field(default_factory=VendorInfo)
    receiver_info: ReceiverInfo = Field(default_factory=ReceiverInfo)
    line_items: list[LineItem] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)
