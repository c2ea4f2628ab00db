"""OCR.space Client — async HTTP wrapper around the hosted OCR API.

Invariants:
    - One POST per image; no retries (the caller surfaces the failure as 502)
    - HTTP errors, transport errors and OCR-reported errors all raise ExternalServiceError
    - Returned text is the raw ParsedText of the first result ("" when none)

Design Decisions:
    - Images are always re-wrapped as data:image/jpeg;base64 (OCR.space sniffs the bytes)
    - Engine 2 with table mode: listing screenshots are mostly label/value rows
"""

import logging

import httpx

from rentmap.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "ocr.space"


class OCRSpaceClient:
    """Extracts text from base64-encoded images via OCR.space."""

    def __init__(self, api_key: str, url: str, timeout_seconds: int = 60):
        self.api_key = api_key
        self.url = url
        self.timeout_seconds = timeout_seconds

    async def parse_image(self, base64_data: str) -> str:
        form = {
            "base64Image": f"data:image/jpeg;base64,{base64_data}",
            "language": "eng",
            "isOverlayRequired": "true",
            "OCREngine": "2",
            "isTable": "true",
            "scale": "true",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    self.url, data=form, headers={"apikey": self.api_key},
                )
        except httpx.HTTPError as e:
            logger.error(f"OCR request failed: {e}", extra={"service": SERVICE_NAME})
            raise ExternalServiceError(SERVICE_NAME, "OCR processing failed", str(e))

        if response.status_code >= 400:
            logger.error(
                f"OCR API response not ok: {response.status_code}",
                extra={"service": SERVICE_NAME},
            )
            raise ExternalServiceError(
                SERVICE_NAME, "OCR processing failed",
                f"HTTP {response.status_code}",
            )

        try:
            payload = response.json()
        except ValueError:
            raise ExternalServiceError(
                SERVICE_NAME, "OCR processing failed", "Response was not JSON",
            )

        if payload.get("IsErroredOnProcessing"):
            details = _error_text(payload.get("ErrorMessage"))
            logger.error(f"OCR processing error: {details}", extra={"service": SERVICE_NAME})
            raise ExternalServiceError(SERVICE_NAME, "OCR processing failed", details)

        results = payload.get("ParsedResults") or []
        if not results:
            return ""
        first = results[0]
        if first.get("HasErrored"):
            details = _error_text(first.get("ErrorMessage"))
            logger.error(f"OCR result error: {details}", extra={"service": SERVICE_NAME})
            raise ExternalServiceError(SERVICE_NAME, "OCR processing failed", details)
        return first.get("ParsedText") or ""


def _error_text(message) -> str | None:
    # OCR.space reports ErrorMessage as either a string or a list of strings
    if isinstance(message, list):
        return "; ".join(str(m) for m in message)
    return message
