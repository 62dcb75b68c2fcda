"""Pydantic models for API request/response."""

from docdisplay.models.file_entry import DirectoryEntry, FileRecord
from docdisplay.models.request import DisplayOptions, FilterSpec, PageSpec, SortSpec
from docdisplay.models.response import (
    AnnexItem,
    Crumb,
    DocumentMeta,
    DocumentRow,
    ErrorResponse,
    FolderLink,
    SearchItem,
    SearchMatch,
    SearchResponse,
)
from docdisplay.models.view import CollisionView, CurrentView, FlattenedView, FolderView, View

__all__ = [
    "DirectoryEntry",
    "FileRecord",
    "DisplayOptions",
    "FilterSpec",
    "PageSpec",
    "SortSpec",
    "AnnexItem",
    "Crumb",
    "DocumentMeta",
    "DocumentRow",
    "ErrorResponse",
    "FolderLink",
    "SearchItem",
    "SearchMatch",
    "SearchResponse",
    "CollisionView",
    "CurrentView",
    "FlattenedView",
    "FolderView",
    "View",
]
