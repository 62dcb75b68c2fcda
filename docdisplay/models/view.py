"""View modes selected once per display request."""

from typing import Union

from pydantic import BaseModel, ConfigDict


class FolderView(BaseModel):
    """Single-level table, subfolder list, breadcrumbs and commentary."""

    model_config = ConfigDict(frozen=True)

    directory: str
    directive_path: str = ""
    cursor: str = ""


class FlattenedView(BaseModel):
    """Every descendant document in one sorted, paginated table."""

    model_config = ConfigDict(frozen=True)

    directory: str
    directive_path: str = ""
    cursor: str = ""


class CurrentView(BaseModel):
    """Most recent documents from immediate subfolders."""

    model_config = ConfigDict(frozen=True)

    directory: str
    directive_path: str = ""


class CollisionView(BaseModel):
    """A real directory named "current" blocks the virtual view."""

    model_config = ConfigDict(frozen=True)

    directory: str


View = Union[FolderView, FlattenedView, CurrentView, CollisionView]
