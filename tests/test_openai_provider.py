from __future__ import annotations

import json

import httpx
import openai
import pytest

from app.core.config import ProviderNode
from app.services.extraction.errors import ExtractionError
from app.services.extraction.openai_provider import OpenAIExtractionProvider, parse_json_content

VALID_PAYLOAD = {
    "vendor_info": {"vendor_name": "Industrial Tank Supplier", "quote_id": "4444"},
    "receiver_info": {"receiver_name": "ABC Corporation"},
    "line_items": [
        {
            "line": 1,
            "tag": "TK-8424",
            "tag_page": 1,
            "description": "1100L Break Tank",
            "unit_price": 77000,
            "unit_price_page": 1,
            "qty": 1,
            "line_total": 77000,
            "line_total_page": 1,
        }
    ],
    "summary": {"total_items": 1, "grand_total": 77000, "currency": "USD"},
}


class _Message:
    def __init__(self, content: str | None) -> None:
        self.content = content


class _Choice:
    def __init__(self, content: str | None) -> None:
        self.message = _Message(content)


class _Completion:
    def __init__(self, content: str | None) -> None:
        self.choices = [_Choice(content)]


class FakeCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return _Completion(self.content)


class FakeClient:
    def __init__(self, completions: FakeCompletions) -> None:
        self.chat = type("Chat", (), {"completions": completions})()


def _provider(completions: FakeCompletions) -> OpenAIExtractionProvider:
    node = ProviderNode(name="OpenAI", api_key="KEY", model="gpt-4o")
    return OpenAIExtractionProvider(node, client=FakeClient(completions), system_prompt="extract")


def _status_error(status_code: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "http://test/chat/completions")
    response = httpx.Response(status_code, request=request)
    return openai.APIStatusError(f"Error code: {status_code}", response=response, body=None)


@pytest.mark.asyncio
async def test_provider_sends_images_and_parses_fenced_json() -> None:
    completions = FakeCompletions(content=f"```json\n{json.dumps(VALID_PAYLOAD)}\n```")
    provider = _provider(completions)

    data = await provider.extract([b"page-1", b"page-2"])

    assert provider.name == "openai"
    assert data.line_items[0].tag == "TK-8424"
    call = completions.calls[0]
    assert call["model"] == "gpt-4o"
    assert call["response_format"] == {"type": "json_object"}
    user_parts = call["messages"][1]["content"]
    assert [part["type"] for part in user_parts] == ["image_url", "image_url", "text"]
    assert user_parts[0]["image_url"]["url"].startswith("data:image/png;base64,")


@pytest.mark.asyncio
async def test_invalid_json_is_retryable() -> None:
    provider = _provider(FakeCompletions(content="I could not read these pages."))

    with pytest.raises(ExtractionError) as exc_info:
        await provider.extract([b"page"])

    assert exc_info.value.retryable is True
    assert exc_info.value.provider == "openai"


@pytest.mark.asyncio
async def test_schema_mismatch_is_retryable() -> None:
    provider = _provider(FakeCompletions(content=json.dumps({"line_items": [{"tag": "x"}]})))

    with pytest.raises(ExtractionError) as exc_info:
        await provider.extract([b"page"])

    assert exc_info.value.retryable is True


@pytest.mark.asyncio
async def test_empty_content_is_retryable() -> None:
    provider = _provider(FakeCompletions(content=None))

    with pytest.raises(ExtractionError) as exc_info:
        await provider.extract([b"page"])

    assert exc_info.value.retryable is True


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code, retryable", [(429, True), (503, True), (401, False), (400, False)])
async def test_http_status_classification(status_code: int, retryable: bool) -> None:
    provider = _provider(FakeCompletions(error=_status_error(status_code)))

    with pytest.raises(ExtractionError) as exc_info:
        await provider.extract([b"page"])

    assert exc_info.value.retryable is retryable
    assert exc_info.value.status_code == status_code


def test_is_configured_requires_key_and_azure_endpoint() -> None:
    assert OpenAIExtractionProvider(ProviderNode(name="a", model="m")).is_configured() is False
    assert OpenAIExtractionProvider(ProviderNode(name="b", model="m", api_key="k")).is_configured() is True
    azure = ProviderNode(name="c", kind="azure", model="gpt-4o", api_key="k")
    assert OpenAIExtractionProvider(azure).is_configured() is False


def test_parse_json_content_plain_object() -> None:
    assert parse_json_content('  {"a": 1}  ') == {"a": 1}


def test_parse_json_content_repairs_trailing_commas() -> None:
    assert parse_json_content('```json\n{"a": 1, "b": [1, 2,],}\n```') == {"a": 1, "b": [1, 2]}


@pytest.mark.asyncio
async def test_provider_accepts_repairable_json() -> None:
    malformed = json.dumps(VALID_PAYLOAD)[:-1] + ",}"
    provider = _provider(FakeCompletions(content=malformed))

    data = await provider.extract([b"page"])

    assert data.line_items[0].tag == "TK-8424"


def test_parse_json_content_rejects_prose() -> None:
    with pytest.raises(ValueError, match="not valid JSON"):
        parse_json_content("Sorry, I cannot help with that.")
