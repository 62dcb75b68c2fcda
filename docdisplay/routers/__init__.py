"""API routers for Document Display."""

from docdisplay.routers import health, display, pages, search

__all__ = ["health", "display", "pages", "search"]
