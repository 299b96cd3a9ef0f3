from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from imagegen.config import logger
from imagegen.errors import UpstreamError
from imagegen.models import ProviderErrorDetail, ProviderErrorResponse
from imagegen.providers import ImageProvider, UpstreamRequest


_LOG_BODY_MAX = 5000


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _provider_message(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    err = ProviderErrorResponse.model_validate(body)

    msg: Optional[str] = None
    if isinstance(err.error, dict):
        msg = _text(ProviderErrorDetail.model_validate(err.error).message)
    else:
        msg = _text(err.error)
    return msg or _text(err.message)


async def call_provider(provider: ImageProvider, req: UpstreamRequest, *, timeout: Optional[float] = None) -> Any:
    """POST one request to the provider and return its decoded JSON body.

    Raises UpstreamError for network failures, non-2xx statuses and empty or
    unparsable bodies.
    """

    async with httpx.AsyncClient(timeout=timeout) as client:
        try:
            r = await client.post(req.url, json=req.payload, headers=req.headers, params=req.params)
        except httpx.RequestError as e:
            logger.error("%s request failed: %s: %s", provider.label, type(e).__name__, e)
            raise UpstreamError(f"Failed to reach {provider.label}: {type(e).__name__}")

    text = r.text or ""
    body: Any = None
    parse_error: Optional[Exception] = None
    if text.strip():
        try:
            body = json.loads(text)
        except ValueError as e:
            parse_error = e

    if not r.is_success:
        logger.error("%s error (status=%s): %s", provider.label, r.status_code, text[:_LOG_BODY_MAX])
        msg = _provider_message(body) or f"{provider.label} returned status {r.status_code}"
        raise UpstreamError(msg)

    if not text.strip():
        logger.error("%s returned an empty body (status=%s)", provider.label, r.status_code)
        raise UpstreamError(f"{provider.label} returned an empty response.")

    if parse_error is not None:
        logger.error("%s returned invalid JSON: %s", provider.label, text[:_LOG_BODY_MAX])
        raise UpstreamError(f"{provider.label} returned an invalid JSON response.")

    return body
