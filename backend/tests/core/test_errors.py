"""Error Hierarchy — status codes, categories and the REST envelope."""

from rentmap.core.errors import (
    AIServiceError,
    AuthenticationError,
    ErrorContext,
    ExternalServiceError,
    InvalidRequestError,
    PermissionDeniedError,
    RentMapError,
    ResourceNotFoundError,
    UnsupportedMediaError,
)


def test_status_codes():
    assert InvalidRequestError("bad").http_status == 400
    assert AuthenticationError().http_status == 401
    assert PermissionDeniedError().http_status == 403
    assert ResourceNotFoundError("Property", "x").http_status == 404
    assert UnsupportedMediaError("video/mp4").http_status == 415
    assert ExternalServiceError("ocr.space", "down").http_status == 502
    assert AIServiceError("down", "api_error").http_status == 503


def test_all_errors_share_the_base():
    assert isinstance(ExternalServiceError("x", "y"), RentMapError)


def test_not_found_records_resource_id():
    error = ResourceNotFoundError("Property", "abc")
    assert error.message == "Property 'abc' not found"
    assert error.context.resource_id == "abc"


def test_ai_error_defaults_service_and_keeps_retry_hint():
    error = AIServiceError("slow down", "rate_limit", retry_after_ms=2000)
    assert error.context.service == "anthropic"
    assert error.context.retry_after_ms == 2000
    assert error.api_error_type == "rate_limit"


def test_to_response_envelope():
    error = ExternalServiceError(
        "waitlist-webhook", "failed", "HTTP 500",
        context=ErrorContext(user_id="secret-user"),
    )
    body = error.to_response()["error"]
    assert body["code"] == "EXTERNAL_SERVICE_ERROR"
    assert body["category"] == "external_api"
    assert body["context"]["service"] == "waitlist-webhook"
    assert body["context"]["details"] == "HTTP 500"
    assert "user_id" not in body["context"]
