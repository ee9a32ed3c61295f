from __future__ import annotations

import base64
import json
import logging
import re
from typing import Any, Sequence

import json_repair
import openai
from openai import AsyncAzureOpenAI, AsyncOpenAI
from pydantic import ValidationError

from app.core.config import ProviderNode, settings
from app.prompts import load_prompt
from app.schemas.bid import ExtractedBidData
from app.services.extraction.base import ExtractionProvider
from app.services.extraction.errors import ExtractionError, is_retryable_message

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class OpenAIExtractionProvider(ExtractionProvider):
    """Vision extraction over an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        node: ProviderNode,
        *,
        client: Any | None = None,
        system_prompt: str | None = None,
    ) -> None:
        self.name = node.name
        self._node = node
        self._client = client
        self._system_prompt = system_prompt

    def is_configured(self) -> bool:
        if not self._node.api_key:
            return False
        if self._node.kind == "azure":
            return bool(self._node.base_url)
        return True

    async def extract(self, images: Sequence[bytes]) -> ExtractedBidData:
        logger.info("Attempting extraction with %s (%d pages)", self.name, len(images))
        try:
            content = await self._complete(images)
            payload = parse_json_content(content)
            data = ExtractedBidData.model_validate(payload)
        except ExtractionError:
            raise
        except Exception as exc:
            raise self._wrap_error(exc) from exc

        logger.info(
            "%s extraction succeeded: line_items=%d grand_total=%s",
            self.name,
            len(data.line_items),
            data.summary.grand_total,
        )
        return data

    async def _complete(self, images: Sequence[bytes]) -> str:
        client = self._get_client()
        messages = [
            {"role": "system", "content": self._get_system_prompt()},
            {"role": "user", "content": self._build_user_content(images)},
        ]
        logger.debug("Calling provider=%s model=%s with %d images", self.name, self._node.model, len(images))
        completion = await client.chat.completions.create(
            model=self._node.model,
            messages=messages,
            response_format={"type": "json_object"},
            max_tokens=settings.extraction_max_tokens,
            temperature=settings.extraction_temperature,
        )

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise ExtractionError(
                f"No response content from {self.name}",
                provider=self.name,
                retryable=True,
            )
        return content

    def _build_user_content(self, images: Sequence[bytes]) -> list[dict[str, Any]]:
        parts: list[dict[str, Any]] = []
        for image in images:
            encoded = base64.b64encode(image).decode("ascii")
            parts.append(
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:image/png;base64,{encoded}", "detail": "high"},
                }
            )
        parts.append({"type": "text", "text": "Extract the bid data from these pages as JSON."})
        return parts

    def _get_system_prompt(self) -> str:
        if self._system_prompt is None:
            self._system_prompt = load_prompt("bid_extraction_system")
        return self._system_prompt

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.is_configured():
                raise ExtractionError(f"{self.name} is not configured", provider=self.name, retryable=False)
            self._client = self._build_client()
        return self._client

    def _build_client(self) -> Any:
        if self._node.kind == "azure":
            return AsyncAzureOpenAI(
                azure_endpoint=self._node.base_url,
                api_key=self._node.api_key,
                api_version=self._node.api_version or "2024-10-21",
                timeout=settings.extraction_timeout,
            )
        return AsyncOpenAI(
            api_key=self._node.api_key,
            base_url=self._normalize_base_url(self._node.base_url) or None,
            timeout=settings.extraction_timeout,
        )

    def _wrap_error(self, exc: Exception) -> ExtractionError:
        status_code: int | None = None
        if isinstance(exc, openai.APITimeoutError):
            retryable = True
        elif isinstance(exc, openai.APIStatusError):
            status_code = exc.status_code
            retryable = status_code == 429 or status_code >= 500
        elif isinstance(exc, ValidationError):
            retryable = True
        else:
            retryable = is_retryable_message(str(exc))

        logger.warning("%s extraction failed (retryable=%s): %s", self.name, retryable, exc)
        return ExtractionError(str(exc), provider=self.name, retryable=retryable, status_code=status_code)

    def _normalize_base_url(self, base_url: str) -> str:
        """Avoid duplicate /chat/completions suffixes when users pass full endpoints."""

        normalized = base_url.rstrip("/")
        lowered = normalized.lower()
        for suffix in ("/chat/completions", "/v1/chat/completions"):
            if lowered.endswith(suffix):
                logger.warning("Stripped trailing %s from provider base_url", suffix)
                return normalized[: -len(suffix)]
        return normalized


def parse_json_content(content: str) -> Any:
    """
    Parse model output as JSON, tolerating a surrounding Markdown code block.

    Malformed output (trailing commas, unquoted keys, truncation) is repaired
    before giving up; only a repair that still yields no object is an error.
    """

    cleaned = content.strip()
    fenced = _FENCE_RE.search(cleaned)
    if fenced:
        cleaned = fenced.group(1).strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        repaired = json_repair.loads(cleaned)
        if not isinstance(repaired, dict):
            raise ValueError(f"Provider response is not valid JSON: {exc.msg}") from exc
        logger.warning("Repaired malformed JSON from provider (%d chars)", len(cleaned))
        return repaired


def build_providers(nodes: Sequence[ProviderNode] | None = None) -> list[OpenAIExtractionProvider]:
    return [OpenAIExtractionProvider(node) for node in (nodes if nodes is not None else settings.extraction_providers)]
