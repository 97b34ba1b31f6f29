# core/errors.py
"""Typed failures raised by the provider adapter."""

from __future__ import annotations

BODY_SNIPPET_LIMIT = 220


class GenerationError(Exception):
    """Base class for every provider call failure."""

    message = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class InvalidEndpointError(GenerationError):
    message = "Invalid Base URL."


class BadStatusError(GenerationError):
    """Non-2xx reply from the provider."""

    def __init__(
        self,
        status_code: int,
        body: str | None = None,
        snippet_limit: int = BODY_SNIPPET_LIMIT,
    ) -> None:
        self.status_code = status_code
        self.body_snippet = (body or "").strip()[:snippet_limit]
        if self.body_snippet:
            text = f"HTTP {status_code}: {self.body_snippet}"
        else:
            text = f"HTTP {status_code}."
        super().__init__(text)


class EmptyReplyError(GenerationError):
    message = "Empty response."


class DecodeFailureError(GenerationError):
    message = "Failed to decode response."


class ProviderUnreachableError(GenerationError):
    """The request never produced an HTTP reply (DNS, connect, timeout)."""

    message = "Could not reach the provider."
