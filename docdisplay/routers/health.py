"""Health check router."""

import logging
from fastapi import APIRouter, Depends

from docdisplay.config import Settings, get_settings

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """
    Health check endpoint.

    Returns:
        Health status information
    """
    return {
        "status": "healthy",
        "service": settings.api_title,
        "version": settings.api_version,
        "base_path_configured": bool(settings.base_path),
        "base_path_readable": settings.has_base_dir(),
    }
