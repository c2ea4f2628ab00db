"""OCR & Waitlist Routes — screenshot text extraction and landing-page sign-ups."""

from rentmap.core.errors import ExternalServiceError


# ─── OCR ────────────────────────────────────────────────────────

async def test_ocr_extract_strips_data_url_prefix(client, ocr_client):
    ocr_client.text = "Rent: $1,500\r\n\r\n\r\nCity: Austin  "

    res = await client.post("/api/v1/ocr/extract", json={
        "image": "data:image/png;base64,aGVsbG8=",
        "filename": "listing.png",
    })

    assert res.status_code == 200
    assert res.json() == {
        "text": "Rent: $1,500\nCity: Austin",
        "filename": "listing.png",
        "success": True,
    }
    assert ocr_client.calls == ["aGVsbG8="]


async def test_ocr_extract_accepts_bare_base64(client, ocr_client):
    ocr_client.text = "hello"
    res = await client.post("/api/v1/ocr/extract", json={"image": "aGVsbG8="})
    assert res.json()["filename"] == "unknown"
    assert ocr_client.calls == ["aGVsbG8="]


async def test_ocr_extract_data_url_without_payload_is_400(client, ocr_client):
    res = await client.post(
        "/api/v1/ocr/extract", json={"image": "data:image/png;base64,"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_REQUEST"
    assert ocr_client.calls == []


async def test_ocr_extract_missing_image_is_400(client):
    res = await client.post("/api/v1/ocr/extract", json={"filename": "x.png"})
    assert res.status_code == 400


async def test_ocr_service_failure_is_502(client, ocr_client):
    ocr_client.error = ExternalServiceError("ocr.space", "Could not parse image")
    res = await client.post("/api/v1/ocr/extract", json={"image": "aGVsbG8="})
    assert res.status_code == 502
    assert res.json()["error"]["context"]["service"] == "ocr.space"


# ─── Waitlist ───────────────────────────────────────────────────

async def test_waitlist_forwards_entry(client, waitlist_client):
    entry = {"email": "renter@example.com", "role": "renter"}
    res = await client.post("/api/v1/waitlist", json=entry)

    assert res.status_code == 200
    assert res.json() == {"success": True, "result": {"status": "ok"}}
    assert waitlist_client.entries == [entry]


async def test_waitlist_webhook_failure_is_502(client, waitlist_client):
    waitlist_client.error = ExternalServiceError("waitlist", "Webhook returned 500")
    res = await client.post("/api/v1/waitlist", json={"email": "renter@example.com"})
    assert res.status_code == 502
    assert res.json()["error"]["code"] == "EXTERNAL_SERVICE_ERROR"
