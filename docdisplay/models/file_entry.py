"""File entry models."""

import os

from pydantic import BaseModel, ConfigDict, Field


class DirectoryEntry(BaseModel):
    """One item from a single-level directory listing."""

    name: str = Field(..., description="Entry name")
    is_directory: bool = Field(..., description="Whether this is a directory")


class FileRecord(BaseModel):
    """A document found while scanning, valid for one render pass."""

    model_config = ConfigDict(frozen=True)

    absolute_path: str = Field(..., description="Full absolute path")
    display_name: str = Field(..., description="File name as found on disk")
    modified_at: float = Field(0, description="Modification time (0 if unavailable)")

    @property
    def directory(self) -> str:
        """Directory holding the file."""
        return os.path.dirname(self.absolute_path)
