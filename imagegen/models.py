from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict


class _Upstream(BaseModel):
    # Provider schemas drift; declare only the fields on the image path.
    # List entries stay untyped and are validated one at a time when read.
    model_config = ConfigDict(extra="ignore")


class GenerationRequest(BaseModel):
    prompt: str


class GenerationResult(BaseModel):
    base64Image: str


class ErrorBody(BaseModel):
    error: str


# Google Imagen :predict


class Prediction(_Upstream):
    bytesBase64Encoded: Optional[str] = None


class PredictResponse(_Upstream):
    predictions: Optional[List[Any]] = None


# OpenAI-style /v1/images/generations


class ImageDatum(_Upstream):
    b64_json: Optional[str] = None


class ImagesResponse(_Upstream):
    data: Optional[List[Any]] = None


# Chat completions with image output


class ImageUrl(_Upstream):
    url: Optional[str] = None


class ContentPart(_Upstream):
    type: Optional[str] = None
    image_url: Optional[ImageUrl] = None


class ChatMessage(_Upstream):
    content: Optional[Union[str, List[Any]]] = None


class ChatChoice(_Upstream):
    message: Optional[ChatMessage] = None


class ChatCompletionResponse(_Upstream):
    choices: Optional[List[Any]] = None


# Provider error bodies: {"error": {"message": ...}}, {"error": "..."} or {"message": "..."}


class ProviderErrorDetail(_Upstream):
    message: Optional[Any] = None


class ProviderErrorResponse(_Upstream):
    error: Optional[Any] = None
    message: Optional[Any] = None
