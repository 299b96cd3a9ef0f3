import os
from typing import Any, Dict, List

import httpx
import pytest


# Settings are read at import time. Provide test-only defaults so local/CI
# runs don't need a real key.
os.environ.setdefault("IMAGE_PROVIDER", "google_imagen")
os.environ.setdefault("GOOGLE_API_KEY", "test-key")


class FakeUpstream:
    """Stands in for httpx.AsyncClient.post and counts outbound calls."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.status_code = 200
        self.json_body: Any = None
        self.raw_body: bytes | None = None
        self.exc: Exception | None = None

    def reply(self, status_code: int = 200, json_body: Any = None, raw_body: bytes | None = None) -> None:
        self.status_code = status_code
        self.json_body = json_body
        self.raw_body = raw_body

    def fail(self, exc: Exception) -> None:
        self.exc = exc

    async def post(self, client, url, *, json=None, headers=None, params=None, **_kw):
        self.calls.append({"url": url, "json": json, "headers": headers or {}, "params": params or {}})
        if self.exc is not None:
            raise self.exc
        if self.raw_body is not None:
            return httpx.Response(self.status_code, content=self.raw_body)
        return httpx.Response(self.status_code, json=self.json_body)


@pytest.fixture
def upstream(monkeypatch):
    fake = FakeUpstream()

    async def _post(self, url, **kw):
        return await fake.post(self, url, **kw)

    monkeypatch.setattr(httpx.AsyncClient, "post", _post, raising=True)
    return fake
