"""Configuration management for the Document Display service."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from docdisplay.exceptions import ConfigurationError


class PageConfig(BaseModel):
    """A hosting page whose content embeds one or more [docdisplay] directives."""

    slug: str = Field(..., description="URL slug, served under /pages/{slug}")
    title: str = Field("", description="Page title")
    content: str = Field("", description="Page body, may contain [docdisplay ...] directives")
    url: Optional[str] = Field(None, description="Explicit public URL overriding the slug URL")

    def permalink(self, site_url: str) -> str:
        """Public URL of the page."""
        if self.url:
            return self.url
        return f"{site_url.rstrip('/')}/pages/{self.slug}"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # API Settings
    api_title: str = "Document Display API"
    api_version: str = "1.17.0"
    api_description: str = "Directory tree browsing and document search"
    debug: bool = False

    # Server (python -m docdisplay)
    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = False

    # Document tree
    # Absolute server path to the base documents directory,
    # e.g. /var/www/html/documents. Override with BASE_PATH.
    base_path: Optional[str] = None

    # Public URL mapping
    site_url: str = "http://localhost:8000"
    document_root: Optional[str] = None
    uploads_dir: Optional[str] = None
    uploads_url: Optional[str] = None

    # Document viewers
    viewerjs_url: str = "/static/viewerjs/index.html"
    office_viewer_url: str = "https://view.officeapps.live.com/op/view.aspx"

    # Traversal and listing limits
    max_traversal_depth: int = 64
    default_current_limit: int = 10
    default_search_per_page: int = 10
    max_search_per_page: int = 100

    # Search titles
    generic_breadcrumb_roots: list[str] = ["Meeting Documents"]

    # Hosting pages (JSON list in PAGES)
    pages: list[PageConfig] = Field(default_factory=list)

    # CORS Settings
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def get_base_dir(self) -> Path:
        """
        Get the configured base documents directory.

        Returns:
            Path to the base directory, without a trailing slash

        Raises:
            ConfigurationError: If the base path is unset, missing or unreadable
        """
        if not self.base_path:
            raise ConfigurationError("Base path not configured.")

        path = Path(self.base_path.rstrip("/") or "/")
        if not path.is_dir() or not os.access(path, os.R_OK):
            raise ConfigurationError("Base directory not found or not readable.")

        return path

    def has_base_dir(self) -> bool:
        """Whether a usable base directory is configured."""
        try:
            self.get_base_dir()
        except ConfigurationError:
            return False
        return True

    def get_document_root(self) -> str:
        """Web document root, falling back to the DOCUMENT_ROOT environment variable."""
        return (self.document_root or os.environ.get("DOCUMENT_ROOT", "")).rstrip("/")

    def find_page(self, slug: str) -> Optional[PageConfig]:
        """Look up a hosting page by slug."""
        for page in self.pages:
            if page.slug == slug:
                return page
        return None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
