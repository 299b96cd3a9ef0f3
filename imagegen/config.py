from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


ProviderName = Literal["google_imagen", "openai_images", "openrouter_chat"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Exactly one provider is active per deployment.
    IMAGE_PROVIDER: ProviderName = "google_imagen"

    # Only the key matching IMAGE_PROVIDER is read.
    GOOGLE_API_KEY: str = ""
    DEEPSEEK_API_KEY: str = ""
    OPENROUTER_API_KEY: str = ""

    # Optional endpoint override, e.g. a self-hosted OpenAI-compatible images server.
    IMAGES_HTTP_BASE_URL: str = ""
    IMAGES_OPENAI_MODEL: str = "janus-pro-7b"
    IMAGES_CHAT_MODEL: str = "google/gemini-2.5-flash-image-preview"

    # Unset means no client-side timeout; the hosting platform's request timeout applies.
    IMAGES_HTTP_TIMEOUT_SEC: Optional[float] = None


@dataclass(frozen=True)
class AdapterConfig:
    provider: ProviderName
    api_key: str = ""
    base_url: str = ""
    model: str = ""
    timeout: Optional[float] = None


_KEY_FIELDS = {
    "google_imagen": "GOOGLE_API_KEY",
    "openai_images": "DEEPSEEK_API_KEY",
    "openrouter_chat": "OPENROUTER_API_KEY",
}


def key_env_name(provider: str) -> str:
    return _KEY_FIELDS[provider]


def load_adapter_config(settings: Settings) -> AdapterConfig:
    """Resolve the read-only adapter configuration for the selected provider."""

    provider = settings.IMAGE_PROVIDER
    api_key = (getattr(settings, _KEY_FIELDS[provider], "") or "").strip()

    model = ""
    if provider == "openai_images":
        model = (settings.IMAGES_OPENAI_MODEL or "").strip()
    elif provider == "openrouter_chat":
        model = (settings.IMAGES_CHAT_MODEL or "").strip()

    timeout = settings.IMAGES_HTTP_TIMEOUT_SEC
    if timeout is not None and timeout <= 0:
        timeout = None

    return AdapterConfig(
        provider=provider,
        api_key=api_key,
        base_url=(settings.IMAGES_HTTP_BASE_URL or "").strip().rstrip("/"),
        model=model,
        timeout=timeout,
    )


S = Settings()

logger = logging.getLogger("uvicorn.error")
logger.setLevel(os.getenv("IMAGEGEN_LOG_LEVEL", "INFO").upper())
