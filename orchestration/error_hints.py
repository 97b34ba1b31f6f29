# orchestration/error_hints.py
"""User-facing hints for generation failures."""

from __future__ import annotations

from core.errors import (
    BadStatusError,
    DecodeFailureError,
    EmptyReplyError,
    InvalidEndpointError,
    ProviderUnreachableError,
)

_STATUS_HINTS: dict[int, str] = {
    401: "API key may be invalid or missing permissions.",
    403: "API key may be invalid or missing permissions.",
    404: "Model may be wrong. Check the model name for the selected provider.",
    429: "Rate limited. Try again later or switch to a lighter model.",
    503: "Provider is busy/unavailable. Try again later or switch models.",
}


def suggestion_for(error: Exception) -> str | None:
    """Return a short remediation hint for ``error``, if one applies."""
    if isinstance(error, InvalidEndpointError):
        return "Check Base URL in Settings."
    if isinstance(error, BadStatusError):
        return _STATUS_HINTS.get(
            error.status_code, "Check your network, Base URL, and provider status."
        )
    if isinstance(error, EmptyReplyError):
        return "Try again. If it repeats, switch models."
    if isinstance(error, DecodeFailureError):
        return "Provider response format changed. Try again or switch models."
    if isinstance(error, ProviderUnreachableError):
        return "Check your network connection and the Base URL."
    return None
