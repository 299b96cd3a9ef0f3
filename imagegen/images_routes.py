from __future__ import annotations

from fastapi import APIRouter, Request, Response

from imagegen.config import S, load_adapter_config
from imagegen.handler import handle


router = APIRouter()

# Built once; the request path never reads the environment.
CONFIG = load_adapter_config(S)

# Every method is routed here so the adapter decides on 405 itself.
_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]


@router.api_route("/api/generate-image", methods=_METHODS)
@router.api_route("/.netlify/functions/generate-image", methods=_METHODS, include_in_schema=False)
async def generate_image(req: Request):
    raw = await req.body()
    body = raw.decode("utf-8", errors="replace") if raw else None

    out = await handle(req.method, body, CONFIG)
    if not out.body:
        return Response(status_code=out.status_code)
    return Response(content=out.body, status_code=out.status_code, media_type="application/json")


@router.get("/health")
async def health():
    return {"ok": True, "provider": CONFIG.provider}
