from __future__ import annotations

from dataclasses import dataclass

_RATE_LIMIT_MARKERS = ("429", "rate limit", "resource_exhausted")
_SERVER_ERROR_MARKERS = ("500", "502", "503", "504")
_TIMEOUT_MARKERS = ("timeout", "timed out")
_INVALID_JSON_MARKERS = ("invalid json", "not valid json", "json parse", "unexpected token")
_SCHEMA_MARKERS = ("validation", "schema")


class ExtractionError(Exception):
    def __init__(
        self,
        message: str,
        *,
        provider: str,
        retryable: bool,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.retryable = retryable
        self.status_code = status_code


class NoProvidersConfiguredError(RuntimeError):
    def __init__(self) -> None:
        super().__init__("No extraction providers configured. Set EXTRACTION_PROVIDERS in the environment.")


@dataclass(frozen=True)
class ProviderFailure:
    provider: str
    error: str


class ExtractionFailedError(RuntimeError):
    """Raised when the provider chain produced no result."""

    def __init__(self, failures: list[ProviderFailure], *, exhausted: bool) -> None:
        self.failures = failures
        self.exhausted = exhausted
        summary = "; ".join(f"{f.provider}: {f.error}" for f in failures)
        if exhausted:
            message = f"All providers failed. {summary}"
        else:
            message = f"Extraction stopped on non-retryable error. {summary}"
        super().__init__(message)


def is_retryable_message(message: str) -> bool:
    lowered = message.lower()
    markers = (
        _RATE_LIMIT_MARKERS
        + _SERVER_ERROR_MARKERS
        + _TIMEOUT_MARKERS
        + _INVALID_JSON_MARKERS
        + _SCHEMA_MARKERS
    )
    return any(marker in lowered for marker in markers)


def should_fallback(error: BaseException) -> bool:
    """Whether ``error`` should move the chain on to the next provider."""

    if isinstance(error, ExtractionError):
        return error.retryable
    return is_retryable_message(str(error))
