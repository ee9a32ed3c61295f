"""Usage: run extraction providers in priority order with fallback on retryable errors."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Sequence

from app.schemas.bid import ExtractedBidData
from app.services.extraction.base import ExtractionProvider
from app.services.extraction.errors import (
    ExtractionFailedError,
    NoProvidersConfiguredError,
    ProviderFailure,
    should_fallback,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    data: ExtractedBidData
    provider: str


class ExtractionChain:
    def __init__(self, providers: Sequence[ExtractionProvider]) -> None:
        self._providers = list(providers)

    def configured_providers(self) -> list[ExtractionProvider]:
        return [provider for provider in self._providers if provider.is_configured()]

    def provider_names(self) -> list[str]:
        return [provider.name for provider in self.configured_providers()]

    async def extract(self, images: Sequence[bytes]) -> ExtractionResult:
        providers = self.configured_providers()
        if not providers:
            raise NoProvidersConfiguredError()

        logger.info("Extraction fallback chain: %s", " -> ".join(p.name for p in providers))
        failures: list[ProviderFailure] = []

        for index, provider in enumerate(providers):
            t0 = time.perf_counter()
            try:
                data = await provider.extract(images)
            except Exception as exc:
                failures.append(ProviderFailure(provider=provider.name, error=str(exc)))
                logger.warning("%s failed: %s", provider.name, exc)
                if not should_fallback(exc):
                    logger.error("%s error is not retryable, stopping fallback chain", provider.name)
                    raise ExtractionFailedError(failures, exhausted=False) from exc
                if index + 1 < len(providers):
                    logger.info("Falling back to next provider...")
                continue

            logger.info("%s extraction succeeded in %.2fs", provider.name, time.perf_counter() - t0)
            return ExtractionResult(data=data, provider=provider.name)

        raise ExtractionFailedError(failures, exhausted=True)
