"""Provider adapters.

Each provider knows how to turn a prompt into one outbound request and how to
find the image inside that provider's response. Only one provider is active
per deployment (`IMAGE_PROVIDER`); the rest of the request path never looks
at provider-specific shapes.
"""
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from imagegen.config import AdapterConfig
from imagegen.models import (
    ChatChoice,
    ChatCompletionResponse,
    ContentPart,
    ImageDatum,
    ImagesResponse,
    Prediction,
    PredictResponse,
)


_DATA_URI_PREFIX = re.compile(r"^data:image/[a-zA-Z0-9]+;base64,")

M = TypeVar("M", bound=BaseModel)


def strip_data_uri(value: str) -> str:
    return _DATA_URI_PREFIX.sub("", value, count=1)


def is_base64(value: str) -> bool:
    try:
        base64.b64decode(value, validate=True)
    except binascii.Error:
        return False
    return True


def _first(items: Optional[List[Any]], model: Type[M]) -> Optional[M]:
    """Validate only the first list entry; later entries may be anything."""

    if not items or items[0] is None:
        return None
    try:
        return model.model_validate(items[0])
    except ValidationError:
        return None


@dataclass(frozen=True)
class UpstreamRequest:
    url: str
    payload: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)


class ImageProvider:
    name: str = "abstract"
    label: str = "Provider"
    default_url: str = ""
    response_model: Type[BaseModel] = BaseModel

    def __init__(self, config: AdapterConfig):
        self.config = config

    @property
    def url(self) -> str:
        return self.config.base_url or self.default_url

    def build_request(self, prompt: str) -> UpstreamRequest:  # pragma: no cover - interface
        raise NotImplementedError

    def _find_image(self, resp: Any) -> Optional[str]:  # pragma: no cover - interface
        raise NotImplementedError

    def extract_image(self, payload: Any) -> Optional[str]:
        """Return the bare base64 image from a provider response, or None.

        None is the single absence marker: a missing list, an empty list, a
        wrong content tag, a null value, a node on the image path that doesn't
        match the provider schema, or a value that isn't base64 at all.
        Fields off the image path are never looked at.
        """

        if not isinstance(payload, dict):
            return None
        try:
            resp = self.response_model.model_validate(payload)
        except ValidationError:
            return None

        raw = self._find_image(resp)
        if not isinstance(raw, str):
            return None
        image = strip_data_uri(raw.strip())
        if not image or not is_base64(image):
            return None
        return image

    def _bearer(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.config.api_key}"}


class GoogleImagenProvider(ImageProvider):
    name = "google_imagen"
    label = "Google API"
    default_url = "https://generativelanguage.googleapis.com/v1beta/models/imagen-3.0-generate-002:predict"
    response_model = PredictResponse

    def build_request(self, prompt: str) -> UpstreamRequest:
        return UpstreamRequest(
            url=self.url,
            payload={
                "instances": [{"prompt": prompt}],
                "parameters": {"sampleCount": 1},
            },
            # The predict endpoint takes the key as a query parameter.
            params={"key": self.config.api_key},
        )

    def _find_image(self, resp: PredictResponse) -> Optional[str]:
        first = _first(resp.predictions, Prediction)
        return first.bytesBase64Encoded if first is not None else None


class OpenAIImagesProvider(ImageProvider):
    name = "openai_images"
    label = "DeepSeek API"
    default_url = "https://api.deepseek.com/v1/images/generations"
    response_model = ImagesResponse

    def build_request(self, prompt: str) -> UpstreamRequest:
        return UpstreamRequest(
            url=self.url,
            payload={
                "model": self.config.model,
                "prompt": prompt,
                "n": 1,
                "size": "1024x1024",
                "response_format": "b64_json",
            },
            headers=self._bearer(),
        )

    def _find_image(self, resp: ImagesResponse) -> Optional[str]:
        first = _first(resp.data, ImageDatum)
        return first.b64_json if first is not None else None


class OpenRouterChatProvider(ImageProvider):
    """Image output through a chat-completion model.

    The response shape for image output is not stable across models: some
    put a data URI straight into ``message.content``, others return a list of
    content parts with an ``image_url`` entry. Both are accepted here and
    nowhere else.
    """

    name = "openrouter_chat"
    label = "OpenRouter API"
    default_url = "https://openrouter.ai/api/v1/chat/completions"
    response_model = ChatCompletionResponse

    def build_request(self, prompt: str) -> UpstreamRequest:
        return UpstreamRequest(
            url=self.url,
            payload={
                "model": self.config.model,
                "messages": [{"role": "user", "content": prompt}],
                "modalities": ["image", "text"],
            },
            headers=self._bearer(),
        )

    def _find_image(self, resp: ChatCompletionResponse) -> Optional[str]:
        choice = _first(resp.choices, ChatChoice)
        if choice is None or choice.message is None:
            return None

        content = choice.message.content
        if isinstance(content, str):
            # Plain text refusals land here too; extract_image rejects non-base64.
            return content

        part = _first(content, ContentPart)
        if part is None or part.type != "image_url" or part.image_url is None:
            return None
        return part.image_url.url


PROVIDERS: Dict[str, Type[ImageProvider]] = {
    GoogleImagenProvider.name: GoogleImagenProvider,
    OpenAIImagesProvider.name: OpenAIImagesProvider,
    OpenRouterChatProvider.name: OpenRouterChatProvider,
}


def get_provider(config: AdapterConfig) -> ImageProvider:
    cls = PROVIDERS.get(config.provider)
    if cls is None:
        raise ValueError(f"Unknown image provider: {config.provider}")
    return cls(config)
