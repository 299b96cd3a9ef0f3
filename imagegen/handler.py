"""The request/response envelope around a provider adapter.

Processing flow:
    1. Gate on the HTTP method.
    2. Require the provider API key from the adapter configuration.
    3. Parse the inbound JSON body into a GenerationRequest.
    4. Issue exactly one upstream call.
    5. Extract and normalize the image into ``{"base64Image": ...}``.

Every failure ends as one status code plus ``{"error": message}``; nothing
is retried.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from imagegen.config import AdapterConfig, key_env_name, logger
from imagegen.errors import BadRequest, ConfigMissing, ImageGenError, MethodNotAllowed, NoImageData
from imagegen.models import ErrorBody, GenerationRequest, GenerationResult
from imagegen.providers import ImageProvider, get_provider
from imagegen.upstream import call_provider


_LOG_BODY_MAX = 5000


@dataclass(frozen=True)
class HandlerResponse:
    status_code: int
    body: str = ""

    def json(self) -> Any:
        return json.loads(self.body) if self.body else None


def _parse_request(body: Optional[str]) -> GenerationRequest:
    if body is None or not body.strip():
        raise BadRequest("Request body is required.")
    try:
        data = json.loads(body)
    except ValueError:
        raise BadRequest("Request body must be valid JSON.")
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object.")

    prompt = data.get("prompt")
    if prompt is not None and not isinstance(prompt, str):
        raise BadRequest("Prompt must be a string.")
    if not prompt or not prompt.strip():
        raise BadRequest("Prompt is required.")
    return GenerationRequest(prompt=prompt)


async def _generate(provider: ImageProvider, req: GenerationRequest, config: AdapterConfig) -> GenerationResult:
    upstream_req = provider.build_request(req.prompt)
    payload = await call_provider(provider, upstream_req, timeout=config.timeout)

    image = provider.extract_image(payload)
    if image is None:
        raw = json.dumps(payload, ensure_ascii=False)
        logger.error("%s response had no image data: %s", provider.label, raw[:_LOG_BODY_MAX])
        raise NoImageData(f"No image data received in {provider.label} response.")
    return GenerationResult(base64Image=image)


def _error(status_code: int, message: str) -> HandlerResponse:
    return HandlerResponse(status_code=status_code, body=ErrorBody(error=message).model_dump_json())


async def handle(http_method: Optional[str], body: Optional[str], config: AdapterConfig) -> HandlerResponse:
    if (http_method or "").upper() != "POST":
        return HandlerResponse(status_code=MethodNotAllowed.status_code)

    try:
        provider = get_provider(config)
        if not config.api_key:
            logger.error("%s is not set; refusing request", key_env_name(config.provider))
            raise ConfigMissing(f"{provider.label} key not configured.")

        req = _parse_request(body)
        result = await _generate(provider, req, config)
    except ImageGenError as e:
        return _error(e.status_code, e.message)
    except Exception as e:
        logger.exception("Error in image handler: %s", e)
        return _error(500, str(e) or type(e).__name__)

    return HandlerResponse(status_code=200, body=result.model_dump_json())
