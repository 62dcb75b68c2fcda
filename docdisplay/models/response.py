"""API response models and rendering rows."""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error type")
    detail: str = Field(..., description="Error details")
    path: Optional[str] = Field(None, description="Request path")


class AnnexItem(BaseModel):
    """One file inside a document's annex folder."""

    file_name: str
    display_name: str
    file_url: str
    viewer_url: Optional[str] = Field(None, description="Set when the file opens in a viewer")


class DocumentRow(BaseModel):
    """One row of a file table plus its annex row."""

    anchor_id: str
    file_name: str
    display_name: str
    file_url: str
    viewer_url: Optional[str] = None
    date: str = ""
    description: Optional[str] = None
    annexes: list[AnnexItem] = Field(default_factory=list)


class Crumb(BaseModel):
    """Breadcrumb segment; the last one has no link."""

    label: str
    url: Optional[str] = None


class FolderLink(BaseModel):
    """Entry of the subfolder navigation list."""

    name: str
    url: str
    is_current: bool = False


class SearchMatch(BaseModel):
    """A file whose name matched a search query."""

    relative_id: str = Field(..., description="Path relative to the base directory")
    filename: str
    absolute_path: str


class DocumentMeta(BaseModel):
    """Extra descriptor data for link pickers."""

    annex_count: int = Field(0, ge=0)
    breadcrumb: str = ""
    anchor_id: str
    page_found: bool = False


class SearchItem(BaseModel):
    """Search result descriptor."""

    id: str = Field(..., description="Stable relative identifier")
    title: str = Field(..., description="Synthesized display title")
    url: str = Field("", description="Page URL with cursor and anchor, empty when no page hosts the file")
    type: str = "Document"
    subtype: str = "document"
    docdisplay: DocumentMeta = Field(..., serialization_alias="_docdisplay")


class SearchResponse(BaseModel):
    """Search results response."""

    total: int = Field(..., description="Total number of matches", ge=0)
    items: list[SearchItem] = Field(default_factory=list, description="Descriptors for the requested page")
    base_path: str = Field("", description="Configured base directory")
