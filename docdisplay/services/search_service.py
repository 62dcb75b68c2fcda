"""Filename search across the document tree."""

import logging
import os
import re
import time
from typing import NamedTuple, Optional
from urllib.parse import urlencode

from docdisplay.config import PageConfig, Settings
from docdisplay.exceptions import ConfigurationError
from docdisplay.models.response import DocumentMeta, SearchItem, SearchMatch, SearchResponse
from docdisplay.services.annex import AnnexResolver
from docdisplay.services.ordering import natural_key
from docdisplay.services.scanner import (
    FileScanner,
    TraversalContext,
    annex_folder_names,
    is_special_file,
)
from docdisplay.services.display_service import PATH_PARAM
from docdisplay.utils.directives import find_directives
from docdisplay.utils.formatters import anchor_id, build_breadcrumb, clean_title, file_stem
from docdisplay.utils.validators import parse_bool

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize(text: str) -> str:
    """Lower-case and collapse every run of non-alphanumerics into one space."""
    return _NON_ALNUM.sub(" ", text.lower()).strip()


class DirectiveLocation(NamedTuple):
    """A directive on a hosting page that can display a document directory."""

    page: PageConfig
    path: str
    recursive: bool


class SearchService:
    """Service for document search operations."""

    def __init__(self, settings: Settings):
        """
        Initialize search service.

        Args:
            settings: Application settings
        """
        self.settings = settings
        self.scanner = FileScanner(settings)
        self.annexes = AnnexResolver(self.scanner)

    def find_matches(self, base_dir: str, query: str) -> list[SearchMatch]:
        """
        Walk the whole tree and collect files whose name contains every query word.

        Args:
            base_dir: Base documents directory
            query: Free-text query; an empty query matches every file

        Returns:
            Matches in natural, case-insensitive filename order
        """
        words = normalize(query).split()
        matches: list[SearchMatch] = []
        self._scan(base_dir, base_dir, words, self.scanner.new_context(), 0, matches)
        matches.sort(key=lambda match: natural_key(match.filename))
        return matches

    def _scan(
        self,
        dir_path: str,
        base_dir: str,
        words: list[str],
        context: TraversalContext,
        depth: int,
        matches: list[SearchMatch],
    ) -> None:
        if not context.enter(dir_path, depth):
            return

        entries = self.scanner.list_entries(dir_path)
        annexes = annex_folder_names(entries)

        for entry in entries:
            full_path = os.path.join(dir_path, entry.name)

            if entry.is_directory:
                if entry.name.lower() in annexes:
                    continue
                self._scan(full_path, base_dir, words, context, depth + 1, matches)
                continue

            if is_special_file(entry.name):
                continue

            name = normalize(file_stem(entry.name))
            if all(word in name for word in words):
                matches.append(SearchMatch(
                    relative_id=os.path.relpath(full_path, base_dir).replace(os.sep, "/"),
                    filename=entry.name,
                    absolute_path=full_path,
                ))

    def search(self, query: str, page: int = 1, per_page: int = 0) -> tuple[list[str], int]:
        """
        Search documents by filename.

        Args:
            query: Search text
            page: 1-indexed page; values below 1 mean 1
            per_page: Page size; values below 1 mean the configured default

        Returns:
            (relative ids on the requested page, total match count)
        """
        if page < 1:
            page = 1
        if per_page < 1:
            per_page = self.settings.default_search_per_page

        try:
            base_dir = str(self.settings.get_base_dir())
        except ConfigurationError as e:
            logger.warning(f"Search skipped: {e.message}")
            return [], 0

        matches = self.find_matches(base_dir, query)
        offset = (page - 1) * per_page
        ids = [match.relative_id for match in matches[offset:offset + per_page]]
        return ids, len(matches)

    def directive_locations(self) -> list[DirectiveLocation]:
        """Every directive on every configured page, in registration order."""
        locations = []
        for page in self.settings.pages:
            for attrs in find_directives(page.content):
                locations.append(DirectiveLocation(
                    page=page,
                    path=attrs.get("path", "").strip("/"),
                    recursive=parse_bool(attrs.get("recursive", "")),
                ))
        return locations

    @staticmethod
    def path_matches(doc_dir: str, directive_path: str, recursive: bool) -> bool:
        """Whether a directive would display documents from doc_dir."""
        doc_dir = doc_dir.strip("/")
        directive_path = directive_path.strip("/")

        if not directive_path:
            return recursive or not doc_dir

        if doc_dir == directive_path:
            return True

        return recursive and doc_dir.startswith(directive_path + "/")

    def locate_directive(self, relative_dir: str) -> Optional[DirectiveLocation]:
        """
        Find the most specific directive that displays a directory.

        Args:
            relative_dir: Document directory relative to the base

        Returns:
            The deepest matching directive (first registered on ties), or None
        """
        best = None
        best_depth = -1
        for location in self.directive_locations():
            if not self.path_matches(relative_dir, location.path, location.recursive):
                continue
            depth = location.path.count("/") + 1 if location.path else 0
            if depth > best_depth:
                best, best_depth = location, depth
        return best

    @staticmethod
    def subpath(doc_dir: str, directive_path: str) -> str:
        """Navigation cursor that takes a directive from its root to doc_dir."""
        doc_dir = doc_dir.strip("/")
        directive_path = directive_path.strip("/")

        if not doc_dir or doc_dir == directive_path:
            return ""
        if not directive_path:
            return doc_dir

        prefix = directive_path + "/"
        if doc_dir.startswith(prefix):
            return doc_dir[len(prefix):]
        return ""

    def short_breadcrumb(self, breadcrumb: str) -> str:
        """Breadcrumb without its last segment and without a generic root."""
        parts = [part for part in breadcrumb.split(" > ") if part]
        if parts:
            parts.pop()
            if parts and parts[0] in self.settings.generic_breadcrumb_roots:
                parts.pop(0)
        return " > ".join(parts)

    def prepare_item(self, relative_id: str) -> Optional[SearchItem]:
        """
        Build the descriptor for one match.

        Args:
            relative_id: Path of the document relative to the base

        Returns:
            SearchItem, or None when the document no longer exists
        """
        base_dir = str(self.settings.get_base_dir())
        full_path = os.path.join(base_dir, relative_id.lstrip("/"))
        if not os.path.exists(full_path):
            return None

        filename = os.path.basename(full_path)
        dir_path = os.path.dirname(full_path)
        relative_dir = os.path.relpath(dir_path, base_dir).replace(os.sep, "/")
        if relative_dir == ".":
            relative_dir = ""

        annex_count = self.annexes.count(dir_path, filename)
        breadcrumb = build_breadcrumb(relative_dir)
        folders = [part for part in relative_dir.split("/") if part]
        short = self.short_breadcrumb(breadcrumb)

        title = f"{folders[-1]}: " if folders else ""
        title += clean_title(filename)
        if annex_count > 0:
            title += f" ({annex_count} {'annex' if annex_count == 1 else 'annexes'})"
        if short:
            title += f" — {short}"

        anchor = anchor_id(filename)
        location = self.locate_directive(relative_dir)
        url = ""
        if location is not None:
            url = location.page.permalink(self.settings.site_url)
            cursor = self.subpath(relative_dir, location.path)
            if cursor:
                separator = "&" if "?" in url else "?"
                url += separator + urlencode({PATH_PARAM: cursor})
            url += f"#{anchor}"

        return SearchItem(
            id=relative_id,
            title=title,
            url=url,
            docdisplay=DocumentMeta(
                annex_count=annex_count,
                breadcrumb=breadcrumb,
                anchor_id=anchor,
                page_found=location is not None,
            ),
        )

    def search_documents(self, query: str, page: int = 1, per_page: int = 0) -> SearchResponse:
        """
        Search and describe one page of matching documents.

        Args:
            query: Search text
            page: 1-indexed page
            per_page: Page size

        Returns:
            SearchResponse with descriptors for the requested page
        """
        start_time = time.time()

        ids, total = self.search(query, page, per_page)
        items = []
        for relative_id in ids:
            item = self.prepare_item(relative_id)
            if item is not None:
                items.append(item)

        elapsed = time.time() - start_time
        logger.info(f"Search for '{query}' matched {total} documents in {elapsed:.3f}s")

        return SearchResponse(total=total, items=items, base_path=self.settings.base_path or "")
