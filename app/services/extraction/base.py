from typing import Protocol, Sequence, runtime_checkable

from app.schemas.bid import ExtractedBidData


@runtime_checkable
class ExtractionProvider(Protocol):
    name: str

    def is_configured(self) -> bool:
        """Whether credentials/endpoint are present for this provider."""
        ...

    async def extract(self, images: Sequence[bytes]) -> ExtractedBidData:
        """Extract structured bid data from PNG page images."""
        ...
