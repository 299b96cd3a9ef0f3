"""Serverless entry point for API-Gateway / Netlify style events."""
from __future__ import annotations

import asyncio
import base64
from typing import Any, Dict, Optional

from imagegen.config import S, load_adapter_config
from imagegen.handler import handle


CONFIG = load_adapter_config(S)

_JSON_HEADERS = {"Content-Type": "application/json"}


def _event_method(event: Dict[str, Any]) -> Optional[str]:
    method = event.get("httpMethod")
    if method:
        return method
    # Payload format 2.0 (HTTP APIs / function URLs)
    http = (event.get("requestContext") or {}).get("http") or {}
    return http.get("method")


def _event_body(event: Dict[str, Any]) -> Optional[str]:
    body = event.get("body")
    if body is None:
        return None
    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body).decode("utf-8")
        except (ValueError, UnicodeDecodeError):
            # Undecodable; the handler rejects the raw text as a non-object body.
            return body
    return body


def handler(event, _ctx=None):
    event = event or {}
    out = asyncio.run(handle(_event_method(event), _event_body(event), CONFIG))

    resp: Dict[str, Any] = {"statusCode": out.status_code, "body": out.body}
    if out.body:
        resp["headers"] = dict(_JSON_HEADERS)
    return resp
