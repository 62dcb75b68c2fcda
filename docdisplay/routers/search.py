"""Search router."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from docdisplay.config import Settings, get_settings
from docdisplay.models.response import SearchResponse
from docdisplay.services.search_service import SearchService
from docdisplay.utils.validators import validate_page, validate_per_page

logger = logging.getLogger(__name__)
router = APIRouter()


def get_search_service(settings: Settings = Depends(get_settings)) -> SearchService:
    """Dependency to get search service."""
    return SearchService(settings)


@router.get("/", response_model=SearchResponse, response_model_by_alias=True)
def search_documents(
    search: str = Query("", description="Words that must all appear in the file name"),
    page: Optional[int] = Query(None, description="1-indexed result page"),
    per_page: Optional[int] = Query(None, description="Results per page"),
    settings: Settings = Depends(get_settings),
    service: SearchService = Depends(get_search_service),
):
    """
    Search documents by file name.

    Args:
        search: Search text; every word must occur in the file name
        page: Result page (values below 1 mean 1)
        per_page: Page size (values below 1 mean the default)

    Returns:
        Total match count and descriptors for the requested page
    """
    try:
        page = validate_page(page)
        per_page = validate_per_page(per_page, settings.max_search_per_page, settings.default_search_per_page)

        return service.search_documents(search, page, per_page)

    except HTTPException:
        raise
    except OSError as e:
        logger.error(f"Error in search endpoint: {e}")
        raise HTTPException(status_code=500, detail="Error executing search")
