"""Error taxonomy for the image-request adapter.

Every error carries the HTTP status it maps to; `handle` converts them into
a single ``{"error": message}`` body.
"""
from __future__ import annotations


class ImageGenError(Exception):
    """Base exception for adapter failures"""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class MethodNotAllowed(ImageGenError):
    status_code = 405


class ConfigMissing(ImageGenError):
    """The provider API key is not configured"""

    status_code = 500


class BadRequest(ImageGenError):
    status_code = 400


class UpstreamError(ImageGenError):
    """Non-success status, network failure or unreadable body from the provider"""

    status_code = 500


class NoImageData(ImageGenError):
    """The provider answered but the expected image field is absent"""

    status_code = 500
