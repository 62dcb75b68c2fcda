"""Directive rendering router."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request
from fastapi.responses import HTMLResponse

from docdisplay.config import Settings, get_settings
from docdisplay.services.display_service import DisplayService, LinkBuilder
from docdisplay.utils.directives import find_directives
from docdisplay.utils.validators import parse_int, validate_page

logger = logging.getLogger(__name__)
router = APIRouter()


def get_display_service(settings: Settings = Depends(get_settings)) -> DisplayService:
    """Dependency to get display service."""
    return DisplayService(settings)


@router.get("/display/{slug}", response_class=HTMLResponse)
def render_display(
    request: Request,
    slug: str = Path(..., description="Slug of the page holding the directive"),
    directive: int = Query(0, description="0-indexed position of the directive on the page", ge=0),
    docdisplay_path: Optional[str] = Query(None, description="Navigation cursor below the directive path"),
    docdisplay_page: Optional[str] = Query(None, description="1-indexed page"),
    settings: Settings = Depends(get_settings),
    service: DisplayService = Depends(get_display_service),
):
    """
    Render one configured directive as an HTML fragment.

    Directive attributes come from the page configuration only; the request
    supplies the navigation cursor and page number. Errors render as an error
    fragment with a matching status code.

    Args:
        slug: Page slug
        directive: Directive position on the page

    Returns:
        HTML fragment
    """
    page_config = settings.find_page(slug)
    if page_config is None:
        raise HTTPException(status_code=404, detail=f"Page not found: {slug}")

    directives = find_directives(page_config.content)
    if directive >= len(directives):
        raise HTTPException(status_code=404, detail=f"Page {slug} has no directive {directive}")

    rendered = service.render_directive(
        directives[directive],
        LinkBuilder.from_request(request),
        cursor=docdisplay_path,
        page=validate_page(parse_int(docdisplay_page, 1)),
    )
    return HTMLResponse(content=rendered.html, status_code=rendered.status_code)
