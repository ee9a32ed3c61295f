import pytest
from pydantic import ValidationError

from app.core.config import ProviderNode, Settings


def test_provider_names_are_normalized() -> None:
    assert ProviderNode(name="  Gemini ", model="gemini-2.5-flash").name == "gemini"


def test_duplicate_provider_names_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(
            extraction_providers=[
                ProviderNode(name="openai", model="gpt-4o"),
                ProviderNode(name="OpenAI", model="gpt-4o-mini"),
            ]
        )


def test_raster_scale_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(ocr_raster_scale=0)


def test_provider_order_is_preserved() -> None:
    settings = Settings(
        extraction_providers=[
            {"name": "gemini", "model": "gemini-2.5-flash", "api_key": "a"},
            {"name": "azure", "kind": "azure", "model": "gpt-4o", "api_key": "b", "base_url": "https://x"},
        ]
    )

    assert [node.name for node in settings.extraction_providers] == ["gemini", "azure"]
