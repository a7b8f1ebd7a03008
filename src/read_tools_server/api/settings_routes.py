"""
Settings Routes

Hands the page everything the playback client needs at load time: endpoint
URL, a fresh security token and the localized labels.
"""

from fastapi import APIRouter, status

from .models import ClientSettings
from ..auth.nonce import create_nonce
from ..config import settings

router = APIRouter(prefix="/read-aloud", tags=["read-aloud"])


@router.get(
    "/settings",
    response_model=ClientSettings,
    status_code=status.HTTP_200_OK,
    summary="Client configuration for read-aloud triggers",
)
def client_settings() -> ClientSettings:
    return ClientSettings(
        ajax_url=settings.endpoint_url,
        nonce=create_nonce(),
        ajax_action=settings.ajax_action,
        reading_text=settings.reading_text,
        pause_text=settings.pause_text,
        resume_text=settings.resume_text,
        error_text=settings.error_text,
        unsupported_text=settings.unsupported_text,
        content_selector=settings.content_selector,
    )
