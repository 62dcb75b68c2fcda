"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docdisplay.config import get_settings
from docdisplay.exceptions import DocDisplayError
from docdisplay.models.response import ErrorResponse
from docdisplay.routers import display, health, pages, search

# Configure logging
settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format=settings.log_format
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Document Display API")
    logger.info(f"Base path: {settings.base_path or '(not configured)'}")
    logger.info(f"Hosting pages: {len(settings.pages)}")

    if settings.base_path and not settings.has_base_dir():
        logger.warning(f"Base directory not found or not readable: {settings.base_path}")

    yield

    logger.info("Shutting down Document Display API")


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description=settings.api_description,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(display.router, tags=["Display"])
app.include_router(pages.router, tags=["Pages"])
app.include_router(search.router, prefix="/api/search", tags=["Search"])


@app.exception_handler(DocDisplayError)
async def docdisplay_exception_handler(request: Request, exc: DocDisplayError):
    """Errors raised outside directive rendering, e.g. from search."""
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    error = ErrorResponse(error=type(exc).__name__, detail=exc.message, path=request.url.path)
    return JSONResponse(status_code=exc.status_code, content=error.model_dump())


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    error = ErrorResponse(
        error="Internal server error",
        detail=str(exc) if settings.debug else "An unexpected error occurred",
        path=request.url.path,
    )
    return JSONResponse(status_code=500, content=error.model_dump())


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "description": settings.api_description,
        "docs": "/docs",
        "health": "/health",
        "search": "/api/search",
    }
