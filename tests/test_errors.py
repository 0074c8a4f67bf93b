"""Tests for error body decoding and normalization."""

import json

import pytest

from menu_planner.services.errors import (
    DIAGNOSTIC_PREFIX_LENGTH,
    OVERLOADED_MESSAGE,
    ErrorKind,
    FlatMessageError,
    NestedProviderError,
    NonJSONText,
    OverloadedError,
    RequestRejectedError,
    UnknownJSON,
    UpstreamError,
    decode_error_body,
    normalize_error,
)


NESTED = json.dumps({
    "error": {
        "code": 400,
        "message": "API key not valid. Please pass a valid API key.",
        "status": "INVALID_ARGUMENT",
    }
})


def test_decode_nested_provider_error():
    body = decode_error_body(NESTED)
    assert body == NestedProviderError(
        message="API key not valid. Please pass a valid API key.",
        status="INVALID_ARGUMENT",
        code=400,
    )


def test_decode_nested_error_inside_list():
    body = decode_error_body(json.dumps([{"error": {"message": "boom", "status": "INTERNAL"}}]))
    assert isinstance(body, NestedProviderError)
    assert body.message == "boom"


def test_decode_flat_message():
    assert decode_error_body('{"message": "Only POST requests allowed"}') == FlatMessageError(
        message="Only POST requests allowed"
    )


@pytest.mark.parametrize("raw", ['{"detail": "nope"}', "[1, 2, 3]", '{"error": "flat string"}', "42"])
def test_decode_unknown_json(raw):
    assert isinstance(decode_error_body(raw), UnknownJSON)


@pytest.mark.parametrize("raw", ["<html>Bad Gateway</html>", "", None])
def test_decode_non_json_text(raw):
    assert isinstance(decode_error_body(raw), NonJSONText)


def test_nested_body_yields_nested_message():
    error = normalize_error(400, NESTED)
    assert isinstance(error, RequestRejectedError)
    assert error.user_message == "API key not valid. Please pass a valid API key."
    assert error.status_code == 400


def test_flat_body_yields_flat_message():
    error = normalize_error(404, '{"message": "models/gemini-x is not found"}')
    assert error.kind is ErrorKind.REQUEST_REJECTED
    assert error.user_message == "models/gemini-x is not found"


def test_text_body_yields_truncated_fallback():
    raw = "upstream exploded " * 100
    error = normalize_error(500, raw)

    assert isinstance(error, UpstreamError)
    assert error.user_message.startswith("AI service error (HTTP 500): upstream exploded")
    assert len(error.user_message) < len(raw)
    assert len(error.detail) <= DIAGNOSTIC_PREFIX_LENGTH + 3


def test_unknown_json_yields_generic_message():
    error = normalize_error(500, '{"weird": true}')
    assert error.user_message == "Unexpected error response from the AI service (HTTP 500)."


@pytest.mark.parametrize("status", [429, 503, 504])
def test_overload_statuses_use_friendly_message(status):
    raw = json.dumps({"error": {"code": status, "message": "The model is overloaded.", "status": "UNAVAILABLE"}})
    error = normalize_error(status, raw)

    assert isinstance(error, OverloadedError)
    assert error.retryable
    assert error.user_message == OVERLOADED_MESSAGE
    assert error.detail == "The model is overloaded."


def test_overload_detected_from_provider_status():
    raw = json.dumps({"error": {"message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}})
    assert normalize_error(400, raw).kind is ErrorKind.OVERLOADED


def test_overload_detected_from_message():
    assert normalize_error(500, '{"message": "Model is overloaded, try later"}').kind is ErrorKind.OVERLOADED


def test_permanent_errors_are_not_retryable():
    assert not normalize_error(400, NESTED).retryable
    assert not normalize_error(500, "Internal error").retryable
