from typing import Literal

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderNode(BaseModel):
    name: str
    kind: Literal["openai", "azure"] = "openai"
    base_url: str = ""
    api_key: str = ""
    model: str
    api_version: str | None = None

    @field_validator("name")
    @classmethod
    def _lowercase_name(cls, value: str) -> str:
        """Normalize provider name for case-insensitive matching."""

        return value.strip().lower()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_env: str = "dev"
    log_level: str = "info"
    log_dir: str = "logs"
    max_upload_bytes: int = 50 * 1024 * 1024

    # Pages are rendered at this magnification before OCR.
    ocr_raster_scale: float = 2.0
    paddle_det_model_name: str = "PP-OCRv5_server_det"
    paddle_rec_model_name: str = "en_PP-OCRv5_mobile_rec"
    paddle_ocr_device: str = "cpu"
    paddle_use_textline_orientation: bool = False

    extraction_providers: list[ProviderNode] = []
    extraction_timeout: float = 120.0
    extraction_max_tokens: int = 16000
    extraction_temperature: float = 0.1

    @field_validator("ocr_raster_scale")
    @classmethod
    def _positive_scale(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("OCR_RASTER_SCALE must be greater than zero")
        return value

    @field_validator("extraction_providers")
    @classmethod
    def _unique_providers(cls, value: list[ProviderNode]) -> list[ProviderNode]:
        # Order is the fallback priority, keep it as given.
        seen = set()
        for node in value:
            if node.name in seen:
                raise ValueError(f"Duplicate extraction provider name: {node.name}")
            seen.add(node.name)
        return value


settings = Settings()
