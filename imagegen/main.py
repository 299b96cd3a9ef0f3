from __future__ import annotations

import time

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from imagegen.config import logger
from imagegen.images_routes import CONFIG, router as images_router


app = FastAPI(title="Image Generation Proxy", version="0.1")


@app.on_event("startup")
async def _startup_check_config() -> None:
    """Non-fatal check so a missing key shows up in logs before the first request."""

    if not CONFIG.api_key:
        logger.warning("startup: no API key configured for provider %s; requests will fail with 500", CONFIG.provider)
    else:
        logger.info("startup: image provider=%s", CONFIG.provider)


@app.middleware("http")
async def log_requests(req: Request, call_next):
    start = time.time()
    resp = None
    try:
        resp = await call_next(req)
        return resp
    finally:
        dur_ms = (time.time() - start) * 1000.0
        status = resp.status_code if resp is not None else 500
        logger.info("%s %s -> %d (%.1fms)", req.method, req.url.path, status, dur_ms)


@app.exception_handler(StarletteHTTPException)
async def _empty_405(req: Request, exc: StarletteHTTPException):
    # Verbs no route registers (custom methods) still get the adapter's empty 405.
    if exc.status_code == 405:
        return Response(status_code=405, headers=getattr(exc, "headers", None))
    return await http_exception_handler(req, exc)


app.include_router(images_router)
