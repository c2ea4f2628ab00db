"""Waitlist Route — forwards landing-page sign-ups to the configured webhook."""

import logging

from fastapi import APIRouter, Body, Depends

from rentmap.api.dependencies import get_waitlist_client
from rentmap.infrastructure.waitlist_client import WaitlistClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/waitlist", tags=["waitlist"])


@router.post("")
async def join_waitlist(
    entry: dict = Body(...),
    client: WaitlistClient = Depends(get_waitlist_client),
):
    result = await client.submit(entry)
    logger.info("Waitlist entry forwarded")
    return {"success": True, "result": result}
