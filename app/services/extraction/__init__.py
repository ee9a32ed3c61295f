"""Usage: bid extraction through a chain of vision providers."""

from app.services.extraction.chain import ExtractionChain, ExtractionResult
from app.services.extraction.errors import (
    ExtractionError,
    ExtractionFailedError,
    NoProvidersConfiguredError,
    should_fallback,
)
from app.services.extraction.openai_provider import OpenAIExtractionProvider, build_providers

__all__ = [
    "ExtractionChain",
    "ExtractionError",
    "ExtractionFailedError",
    "ExtractionResult",
    "NoProvidersConfiguredError",
    "OpenAIExtractionProvider",
    "build_providers",
    "should_fallback",
]
