"""OCR Extraction — data-URL screenshots to normalised text, and text to listing fields."""

import logging

from rentmap.core.errors import InvalidRequestError
from rentmap.core.listing_text_extraction import extract_property_data, normalize_ocr_text
from rentmap.infrastructure.ocr_client import OCRSpaceClient

logger = logging.getLogger(__name__)


def split_data_url(image: str) -> str:
    """Base64 payload of a data URL; a bare base64 string is returned as is."""
    if image.startswith("data:"):
        _, _, payload = image.partition(",")
    else:
        payload = image
    payload = payload.strip()
    if not payload:
        raise InvalidRequestError("Invalid image data", field="image")
    return payload


async def extract_text(client: OCRSpaceClient, image: str, filename: str | None) -> dict:
    text = normalize_ocr_text(await client.parse_image(split_data_url(image)))
    logger.info(f"OCR extracted {len(text)} characters from {filename or 'unknown'}")
    return {"text": text, "filename": filename or "unknown", "success": True}


def extract_listing_fields(texts: list[str]) -> dict:
    data = extract_property_data(texts)
    logger.info(
        f"Listing extraction over {len(texts)} texts, confidence {data['confidence']}",
    )
    return data
