"""Error kinds raised by the planner and normalization of upstream error bodies.

The model endpoint reports failures in several shapes. They are decoded
into one of four known body types and collapsed into a single
``PlannerError`` whose ``user_message`` is safe to show to the end user.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


DIAGNOSTIC_PREFIX_LENGTH = 200

# HTTP statuses that signal a transient overload or timeout upstream
RETRYABLE_STATUSES = frozenset({408, 429, 502, 503, 504})

# Provider status strings with the same meaning
OVERLOADED_PROVIDER_STATUSES = frozenset(
    {"UNAVAILABLE", "RESOURCE_EXHAUSTED", "DEADLINE_EXCEEDED"}
)

OVERLOADED_MESSAGE = (
    "The AI model is overloaded right now. Please wait a moment and try again."
)


def truncate(text: str, limit: int = DIAGNOSTIC_PREFIX_LENGTH) -> str:
    """Bounded prefix of ``text`` for logs and diagnostics."""
    text = text or ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class ErrorKind(str, Enum):
    CONFIGURATION_MISSING = "configuration_missing"
    OVERLOADED = "overloaded"
    REQUEST_REJECTED = "request_rejected"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_RESPONSE = "malformed_response"
    NETWORK_FAILURE = "network_failure"
    UPSTREAM_FAILURE = "upstream_failure"


class PlannerError(Exception):
    """Base class for every classified planner failure."""

    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE
    retryable: bool = False
    http_status: int = 502
    default_message: str = "The AI service failed to process the request."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.user_message = message or self.default_message
        self.detail = detail
        self.status_code = status_code
        super().__init__(self.user_message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.user_message!r})"


class ConfigurationMissingError(PlannerError):
    """Upstream credential is absent. Fatal, never retried."""

    kind = ErrorKind.CONFIGURATION_MISSING
    http_status = 500
    default_message = "The Gemini API key is not configured on the server."


class OverloadedError(PlannerError):
    kind = ErrorKind.OVERLOADED
    retryable = True
    http_status = 503
    default_message = OVERLOADED_MESSAGE


class RequestRejectedError(PlannerError):
    kind = ErrorKind.REQUEST_REJECTED
    http_status = 400
    default_message = "The AI service rejected the request."


class EmptyResponseError(PlannerError):
    kind = ErrorKind.EMPTY_RESPONSE
    default_message = "The AI model returned an empty response."


class MalformedResponseError(PlannerError):
    kind = ErrorKind.MALFORMED_RESPONSE
    default_message = "The AI model returned a response that could not be read."


class SchemaMismatchError(MalformedResponseError):
    """Well-formed JSON that does not have the requested shape."""

    default_message = "The AI model returned data in an unexpected format."


class NetworkFailureError(PlannerError):
    kind = ErrorKind.NETWORK_FAILURE
    retryable = True
    http_status = 503
    default_message = "Could not reach the AI service. Check the connection and try again."


class UpstreamError(PlannerError):
    """Permanent server-side failure reported by the provider."""

    kind = ErrorKind.UPSTREAM_FAILURE


# Known error body shapes


@dataclass(frozen=True)
class NestedProviderError:
    """``{"error": {"message": ..., "status": ..., "code": ...}}``"""

    message: str
    status: Optional[str] = None
    code: Optional[int] = None


@dataclass(frozen=True)
class FlatMessageError:
    """``{"message": ...}``"""

    message: str


@dataclass(frozen=True)
class UnknownJSON:
    payload: Any


@dataclass(frozen=True)
class NonJSONText:
    text: str


ErrorBody = Union[NestedProviderError, FlatMessageError, UnknownJSON, NonJSONText]


def _as_nested(payload: Any) -> Optional[NestedProviderError]:
    # Gemini occasionally wraps the error object in a one-element list
    if isinstance(payload, list) and len(payload) == 1:
        payload = payload[0]
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    message = error.get("message")
    if not isinstance(message, str) or not message.strip():
        return None
    status = error.get("status")
    code = error.get("code")
    return NestedProviderError(
        message=message.strip(),
        status=status if isinstance(status, str) else None,
        code=code if isinstance(code, int) else None,
    )


def _as_flat(payload: Any) -> Optional[FlatMessageError]:
    if not isinstance(payload, dict):
        return None
    message = payload.get("message")
    if not isinstance(message, str) or not message.strip():
        return None
    return FlatMessageError(message=message.strip())


def decode_error_body(raw: Optional[str]) -> ErrorBody:
    """Decode an error response body into one of the known shapes."""
    try:
        payload = json.loads(raw or "")
    except (TypeError, ValueError):
        return NonJSONText(text=(raw or "").strip())

    for decoder in (_as_nested, _as_flat):
        decoded = decoder(payload)
        if decoded is not None:
            return decoded
    return UnknownJSON(payload=payload)


def _looks_overloaded(status_code: int, body: ErrorBody) -> bool:
    if status_code in RETRYABLE_STATUSES:
        return True
    if isinstance(body, NestedProviderError):
        if body.status in OVERLOADED_PROVIDER_STATUSES or body.code in RETRYABLE_STATUSES:
            return True
    if isinstance(body, (NestedProviderError, FlatMessageError)):
        return "overloaded" in body.message.lower()
    return False


def describe_error_body(status_code: int, body: ErrorBody) -> str:
    """Human readable message carried by an error body."""
    if isinstance(body, (NestedProviderError, FlatMessageError)):
        return body.message
    if isinstance(body, UnknownJSON):
        return f"Unexpected error response from the AI service (HTTP {status_code})."
    if body.text:
        return f"AI service error (HTTP {status_code}): {truncate(body.text)}"
    return f"AI service error (HTTP {status_code})."


def normalize_error(status_code: int, raw_body: Optional[str]) -> PlannerError:
    """Collapse a failed upstream response into exactly one ``PlannerError``."""
    body = decode_error_body(raw_body)
    message = describe_error_body(status_code, body)
    diagnostic = truncate(raw_body or "")

    if _looks_overloaded(status_code, body):
        return OverloadedError(detail=message, status_code=status_code)
    if 400 <= status_code < 500:
        return RequestRejectedError(message, detail=diagnostic, status_code=status_code)
    return UpstreamError(message, detail=diagnostic, status_code=status_code)
