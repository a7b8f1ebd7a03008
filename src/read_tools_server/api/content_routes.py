"""
Content Routes: Read-Aloud Fetch Endpoint

The endpoint the playback client calls asynchronously to obtain the
transcript of an item.

Check Order
-----------
1. Rate limit (429), so even well-formed forged requests are throttled
2. Security token (403)
3. Item id shape (400)
4. Cache / existence / resolution, delegated to the transcript service

All checks before step 4 happen without touching the database.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, status
import logging

from .models import ContentRequest, ContentResponse, ContentData, ErrorResponse
from .dependencies import get_rate_limiter, get_transcript_service
from ..auth.client_ip import get_client_ip
from ..auth.nonce import verify_nonce
from ..content.service import TranscriptService, parse_item_id
from ..core.errors import RateLimited
from ..rate_limiter import RateLimiter

logger = logging.getLogger("readtools.api")

# ---------------------------------------------------------------------
# Router Configuration
# ---------------------------------------------------------------------

router = APIRouter(
    prefix="/read-aloud",
    tags=["read-aloud"],
)

# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------

@router.post(
    "/content",
    response_model=ContentResponse,
    status_code=status.HTTP_200_OK,
    summary="Fetch the speech transcript of an item",
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_content(
    req: ContentRequest,
    client_ip: Annotated[Optional[str], Depends(get_client_ip)],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    service: Annotated[TranscriptService, Depends(get_transcript_service)],
) -> ContentResponse:
    """
    Return the normalized transcript of a published item.

    Parameters
    ----------
    req : ContentRequest
        Contains:
        - nonce: one-time security token from the client settings
        - post_id: target item identifier (positive integer)

    Returns
    -------
    ContentResponse
        The transcript, possibly the frontend-extraction sentinel.
    """
    logger.debug("Content request received for post_id=%r", req.post_id)

    if not await limiter.allow(client_ip):
        raise RateLimited()

    verify_nonce(req.nonce)
    item_id = parse_item_id(req.post_id)

    transcript = await service.get_transcript(item_id)
    return ContentResponse(data=ContentData(content=transcript))
