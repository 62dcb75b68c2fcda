"""Hosting page router."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request
from fastapi.responses import HTMLResponse

from docdisplay.config import Settings, get_settings
from docdisplay.routers.display import get_display_service
from docdisplay.services.display_service import DisplayService, LinkBuilder
from docdisplay.utils.validators import parse_int, validate_page

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/pages/{slug}", response_class=HTMLResponse)
def render_page(
    request: Request,
    slug: str = Path(..., description="Page slug"),
    docdisplay_path: Optional[str] = Query(None, description="Navigation cursor below the directive path"),
    docdisplay_page: Optional[str] = Query(None, description="1-indexed page"),
    settings: Settings = Depends(get_settings),
    service: DisplayService = Depends(get_display_service),
):
    """
    Render a configured page with its directives expanded.

    Args:
        slug: Page slug

    Returns:
        Full HTML page
    """
    page_config = settings.find_page(slug)
    if page_config is None:
        raise HTTPException(status_code=404, detail=f"Page not found: {slug}")

    logger.info(f"Rendering page '{slug}' (cursor={docdisplay_path!r})")

    html = service.render_page(
        page_config,
        LinkBuilder.from_request(request),
        cursor=docdisplay_path,
        page=validate_page(parse_int(docdisplay_page, 1)),
    )
    return HTMLResponse(content=html)
