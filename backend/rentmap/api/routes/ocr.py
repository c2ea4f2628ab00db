"""OCR Routes — screenshot text extraction through OCR.space."""

from fastapi import APIRouter, Depends

from rentmap.api.dependencies import get_ocr_client
from rentmap.infrastructure.ocr_client import OCRSpaceClient
from rentmap.schemas.ai import OCRExtractRequest
from rentmap.services.ocr_extraction import extract_text

router = APIRouter(prefix="/api/v1/ocr", tags=["ocr"])


@router.post("/extract")
async def extract(
    body: OCRExtractRequest,
    client: OCRSpaceClient = Depends(get_ocr_client),
):
    return await extract_text(client, body.image, body.filename)
