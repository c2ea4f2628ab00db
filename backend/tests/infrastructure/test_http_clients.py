"""HTTP Clients — OCR.space and the waitlist webhook against an httpx MockTransport.

Design Decisions:
    - httpx.AsyncClient is patched to a factory that injects the mock transport,
      so the clients keep building their own per-call AsyncClient
"""

import json

import httpx
import pytest

from rentmap.core.errors import ExternalServiceError
from rentmap.infrastructure.ocr_client import OCRSpaceClient
from rentmap.infrastructure.waitlist_client import WaitlistClient

_RealAsyncClient = httpx.AsyncClient


@pytest.fixture
def mock_http(monkeypatch):
    """Route every httpx.AsyncClient through a handler set by the test."""
    state = {"handler": None, "requests": []}

    def dispatch(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        return state["handler"](request)

    def factory(**kwargs):
        return _RealAsyncClient(transport=httpx.MockTransport(dispatch), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", factory)
    return state


# ─── OCR.space ──────────────────────────────────────────────────

async def test_ocr_returns_first_parsed_text(mock_http):
    mock_http["handler"] = lambda request: httpx.Response(200, json={
        "IsErroredOnProcessing": False,
        "ParsedResults": [{"ParsedText": "Rent: $1500", "HasErrored": False}],
    })
    client = OCRSpaceClient("key-123", "https://ocr.test/parse/image")

    text = await client.parse_image("aGVsbG8=")

    assert text == "Rent: $1500"
    request = mock_http["requests"][0]
    assert request.headers["apikey"] == "key-123"
    body = request.content.decode()
    assert "OCREngine=2" in body
    assert "base64Image=data%3Aimage%2Fjpeg%3Bbase64%2CaGVsbG8%3D" in body


async def test_ocr_without_results_is_empty(mock_http):
    mock_http["handler"] = lambda request: httpx.Response(200, json={"ParsedResults": []})
    client = OCRSpaceClient("key", "https://ocr.test/parse/image")
    assert await client.parse_image("aGVsbG8=") == ""


async def test_ocr_processing_error_joins_messages(mock_http):
    mock_http["handler"] = lambda request: httpx.Response(200, json={
        "IsErroredOnProcessing": True,
        "ErrorMessage": ["File too large", "Try again"],
    })
    client = OCRSpaceClient("key", "https://ocr.test/parse/image")

    with pytest.raises(ExternalServiceError) as exc:
        await client.parse_image("aGVsbG8=")

    assert exc.value.context.details == "File too large; Try again"
    assert exc.value.context.service == "ocr.space"


async def test_ocr_http_error_status(mock_http):
    mock_http["handler"] = lambda request: httpx.Response(500, text="oops")
    client = OCRSpaceClient("key", "https://ocr.test/parse/image")
    with pytest.raises(ExternalServiceError) as exc:
        await client.parse_image("aGVsbG8=")
    assert exc.value.context.details == "HTTP 500"


async def test_ocr_transport_failure(mock_http):
    def fail(request):
        raise httpx.ConnectError("refused", request=request)

    mock_http["handler"] = fail
    client = OCRSpaceClient("key", "https://ocr.test/parse/image")
    with pytest.raises(ExternalServiceError):
        await client.parse_image("aGVsbG8=")


# ─── Waitlist Webhook ───────────────────────────────────────────

async def test_waitlist_posts_json_and_returns_reply(mock_http):
    mock_http["handler"] = lambda request: httpx.Response(200, json={"result": "success"})
    client = WaitlistClient("https://hooks.test/waitlist")

    result = await client.submit({"email": "renter@example.com"})

    assert result == {"result": "success"}
    assert json.loads(mock_http["requests"][0].content) == {"email": "renter@example.com"}


async def test_waitlist_without_url_is_not_configured(mock_http):
    with pytest.raises(ExternalServiceError):
        await WaitlistClient("").submit({"email": "renter@example.com"})
    assert mock_http["requests"] == []


async def test_waitlist_error_status(mock_http):
    mock_http["handler"] = lambda request: httpx.Response(503)
    with pytest.raises(ExternalServiceError):
        await WaitlistClient("https://hooks.test/waitlist").submit({"email": "a@b.co"})


async def test_waitlist_non_json_reply(mock_http):
    mock_http["handler"] = lambda request: httpx.Response(200, text="<html>ok</html>")
    with pytest.raises(ExternalServiceError) as exc:
        await WaitlistClient("https://hooks.test/waitlist").submit({"email": "a@b.co"})
    assert "Invalid JSON reply" in exc.value.context.details
