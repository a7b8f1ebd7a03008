from fastapi import APIRouter
from ..config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {
        "status": "ok",
        "store_backend": settings.store_backend,
        "rate_limiting": settings.rate_limiting_enabled,
        "frontend_extraction": settings.frontend_extraction_enabled,
    }
