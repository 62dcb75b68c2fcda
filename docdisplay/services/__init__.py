"""Service layer for Document Display."""

from docdisplay.services.annex import AnnexResolver
from docdisplay.services.collector import RecursiveCollector
from docdisplay.services.display_service import DisplayService, LinkBuilder, Rendered
from docdisplay.services.scanner import FileScanner, TraversalContext
from docdisplay.services.search_service import SearchService

__all__ = [
    "AnnexResolver",
    "RecursiveCollector",
    "DisplayService",
    "LinkBuilder",
    "Rendered",
    "FileScanner",
    "TraversalContext",
    "SearchService",
]
