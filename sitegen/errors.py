from __future__ import annotations

from typing import Optional


class GenerationError(Exception):
    """Base class for failures surfaced to the caller of a generation."""


class UnsupportedProviderError(GenerationError):
    def __init__(self, provider_id: Optional[str]):
        self.provider_id = provider_id
        super().__init__(f"Unsupported AI provider: {provider_id!r}")


class UpstreamError(GenerationError):
    """The provider answered with a non-success status.

    The body is kept verbatim so the caller can tell a bad key from an
    exhausted quota or a rejected request.
    """

    def __init__(self, provider: str, body: str, status_code: Optional[int] = None):
        self.provider = provider
        self.body = body
        self.status_code = status_code
        super().__init__(f"{provider} API Error: {body}")
