"""Rendering of a [docdisplay] directive into an HTML fragment."""

import logging
import os
import re
from typing import Mapping, NamedTuple, Optional
from urllib.parse import urlencode

from fastapi import Request
from markupsafe import Markup

from docdisplay.config import PageConfig, Settings
from docdisplay.exceptions import (
    ConfigurationError,
    DirectoryNotFound,
    DocDisplayError,
    InvalidRequest,
    NamingCollision,
)
from docdisplay.models.file_entry import FileRecord
from docdisplay.models.request import DisplayOptions, PageSpec, SortSpec
from docdisplay.models.response import AnnexItem, Crumb, DocumentRow, FolderLink
from docdisplay.models.view import CollisionView, CurrentView, FlattenedView, FolderView, View
from docdisplay.services.annex import AnnexResolver
from docdisplay.services.collector import UNLIMITED, RecursiveCollector
from docdisplay.services.ordering import clamp_page, paginate, sort_records, total_pages
from docdisplay.services.scanner import META_PREFIX, FileScanner
from docdisplay.utils.directives import DIRECTIVE_PATTERN, parse_attributes
from docdisplay.utils.formatters import anchor_id, format_date, ucfirst
from docdisplay.utils.markdown import render_markdown
from docdisplay.utils.templates import render_template
from docdisplay.utils.urls import file_url, is_viewable, viewer_url
from docdisplay.utils.validators import (
    sanitize_path,
    validate_exclude_pattern,
    validate_extension_filters,
)

logger = logging.getLogger(__name__)

PATH_PARAM = "docdisplay_path"
PAGE_PARAM = "docdisplay_page"

CURRENT_SEGMENT = "current"
DIRECTIVE_CURRENT = re.compile(r"^(.*/)?current$", re.IGNORECASE)

COMMENTARY_FILES = ("Commentary.md", "commentary.md")
RECENT_FIRST = SortSpec(field="date", direction="desc")


class Rendered(NamedTuple):
    """A rendered fragment and the HTTP status it should be served with."""

    html: Markup
    status_code: int = 200


class LinkBuilder:
    """Builds navigation and pagination links relative to the current request."""

    def __init__(self, page_url: str, query: Optional[list[tuple[str, str]]] = None):
        """
        Initialize link builder.

        Args:
            page_url: URL of the hosting page without query string
            query: Query parameters of the current request
        """
        self.page_url = page_url
        self.query = list(query or [])

    @classmethod
    def from_request(cls, request: Request) -> "LinkBuilder":
        """Link builder for the page that served a request."""
        return cls(str(request.url.replace(query="", fragment="")), request.query_params.multi_items())

    def _build(self, params: list[tuple[str, str]]) -> str:
        if not params:
            return self.page_url
        return f"{self.page_url}?{urlencode(params)}"

    def folder(self, cursor: str = "") -> str:
        """Link to a navigation cursor; other docdisplay parameters are dropped."""
        params = [(k, v) for k, v in self.query if not k.startswith("docdisplay_")]
        if cursor:
            params.append((PATH_PARAM, cursor))
        return self._build(params)

    def page(self, number: int) -> str:
        """Link to another page of the same listing."""
        params = [(k, v) for k, v in self.query if k != PAGE_PARAM]
        params.append((PAGE_PARAM, str(number)))
        return self._build(params)


class DisplayService:
    """Selects the view for a directive and renders it."""

    def __init__(self, settings: Settings):
        """
        Initialize display service.

        Args:
            settings: Application settings
        """
        self.settings = settings
        self.scanner = FileScanner(settings)
        self.collector = RecursiveCollector(self.scanner)
        self.annexes = AnnexResolver(self.scanner)

    def render_directive(
        self,
        attrs: Mapping[str, str],
        links: LinkBuilder,
        cursor: Optional[str] = None,
        page: int = 1,
    ) -> Rendered:
        """
        Render one directive.

        Every error is turned into a single error fragment; nothing propagates.

        Args:
            attrs: Raw directive attributes
            links: Link builder for the current request
            cursor: Navigation cursor from the query string, None when absent
            page: Requested 1-indexed page

        Returns:
            Rendered fragment and status code
        """
        try:
            options = DisplayOptions.from_attributes(attrs, self.settings.default_current_limit)
            view = self.select_view(options, cursor)
            html = self.render_view(view, options, links, page)
        except DocDisplayError as e:
            logger.warning(f"Display request rejected: {e.message}")
            return Rendered(render_template("error.html", message=e.message), e.status_code)

        return Rendered(html)

    def render_page(
        self,
        page_config: PageConfig,
        links: LinkBuilder,
        cursor: Optional[str] = None,
        page: int = 1,
    ) -> Markup:
        """Render a hosting page, replacing each directive with its fragment."""
        parts = []
        position = 0
        for match in DIRECTIVE_PATTERN.finditer(page_config.content):
            parts.append(Markup(page_config.content[position:match.start()]))
            attrs = parse_attributes(match.group(1))
            parts.append(self.render_directive(attrs, links, cursor, page).html)
            position = match.end()
        parts.append(Markup(page_config.content[position:]))

        return render_template("page.html", title=page_config.title, body=Markup("").join(parts))

    # View selection

    def select_view(self, options: DisplayOptions, cursor: Optional[str] = None) -> View:
        """
        Choose the view for a request.

        All checks that need no filesystem access run first.

        Raises:
            ConfigurationError: Base directory unset, missing or unreadable
            InvalidRequest: Disallowed combination, bad filter, bad path
            DirectoryNotFound: Target directory missing
        """
        if not self.settings.base_path:
            raise ConfigurationError("Base path not configured.")

        if options.show_current and not options.recursive:
            raise InvalidRequest('show_current="true" requires recursive="true".')

        if options.flatten and not options.recursive:
            raise InvalidRequest('flatten="true" requires recursive="true".')

        file_filter = options.file_filter
        validate_extension_filters(file_filter.include_extension, file_filter.exclude_extensions)
        validate_exclude_pattern(file_filter.exclude_pattern)

        directive_path = sanitize_path(options.path)

        subpath = ""
        if cursor is not None:
            if not options.recursive:
                raise InvalidRequest('URL navigation requires recursive="true" in shortcode.')
            try:
                subpath = sanitize_path(cursor)
            except InvalidRequest:
                raise InvalidRequest("Invalid navigation path.")

        base_dir = str(self.settings.get_base_dir())

        match = DIRECTIVE_CURRENT.match(directive_path)
        if match:
            return self._select_current(base_dir, (match.group(1) or "").rstrip("/"), options)

        if options.recursive and subpath.lower() == CURRENT_SEGMENT:
            return self._select_current(base_dir, directive_path, options)

        relative = "/".join(part for part in (directive_path, subpath) if part)
        directory = os.path.join(base_dir, relative) if relative else base_dir

        if not _readable_dir(directory):
            raise DirectoryNotFound("Directory not found or not readable.")

        view_class = FlattenedView if options.flatten else FolderView
        return view_class(directory=directory, directive_path=directive_path, cursor=subpath)

    def _select_current(self, base_dir: str, relative: str, options: DisplayOptions) -> View:
        directory = os.path.join(base_dir, relative) if relative else base_dir

        if os.path.isdir(os.path.join(directory, CURRENT_SEGMENT)):
            return CollisionView(directory=directory)

        if not _readable_dir(directory):
            raise ConfigurationError("Base directory not found or not readable.")

        if options.flatten:
            return CurrentView(directory=directory, directive_path=relative)

        # Without flatten the "current" segment is ignored.
        return FolderView(directory=directory, directive_path=relative)

    # View rendering

    def render_view(self, view: View, options: DisplayOptions, links: LinkBuilder, page: int = 1) -> Markup:
        """Render the selected view."""
        renderers = {
            FolderView: self._render_folder,
            FlattenedView: self._render_flattened,
            CurrentView: self._render_current,
            CollisionView: self._render_collision,
        }
        base_path = str(self.settings.get_base_dir())
        html = renderers[type(view)](view, options, links, page, base_path)
        logger.info(f"Rendered {type(view).__name__} for {view.directory}")
        return html

    def _render_folder(
        self, view: FolderView, options: DisplayOptions, links: LinkBuilder, page: int, base_path: str
    ) -> Markup:
        parts = []
        if options.recursive and options.show_title:
            parts.append(self.render_breadcrumbs(view.directive_path, view.cursor, links))
        parts.append(self.render_commentary(view.directory))
        parts.append(self._render_file_table(view.directory, options, links, page, base_path))
        if options.recursive:
            parts.append(self.render_subfolders(view.directory, view.cursor, options, links))
        return Markup("").join(parts)

    def _render_flattened(
        self, view: FlattenedView, options: DisplayOptions, links: LinkBuilder, page: int, base_path: str
    ) -> Markup:
        parts = []
        if options.show_title:
            parts.append(self.render_breadcrumbs(view.directive_path, view.cursor, links))
        parts.append(self.render_commentary(view.directory))

        records = self.collector.collect(view.directory, options.file_filter, UNLIMITED)
        if not records:
            if options.show_empty:
                parts.append(render_template("empty.html", message="No documents found."))
            return Markup("").join(parts)

        records = sort_records(records, options.sort)
        number = clamp_page(page, len(records), options.per_page)
        page_records, total = paginate(records, PageSpec(page_size=options.per_page, page_number=number))

        rows = [self._document_row(record, options, base_path) for record in page_records]
        parts.append(render_template("file_table.html", rows=rows, show_description=False))
        parts.append(self.render_pagination(total, options.per_page, number, links))
        return Markup("").join(parts)

    def _render_current(
        self, view: CurrentView, options: DisplayOptions, links: LinkBuilder, page: int, base_path: str
    ) -> Markup:
        parts = []
        if options.show_title:
            parts.append(self.render_breadcrumbs(view.directive_path, CURRENT_SEGMENT, links))

        records = self.collector.collect(view.directory, options.file_filter, max_depth=1)
        if not records:
            if options.show_empty:
                parts.append(render_template("empty.html", message="No documents found."))
            return Markup("").join(parts)

        records = sort_records(records, RECENT_FIRST)[:options.limit]

        rows = [self._document_row(record, options, base_path) for record in records]
        parts.append(render_template("file_table.html", rows=rows, show_description=False))
        return Markup("").join(parts)

    def _render_collision(
        self, view: CollisionView, options: DisplayOptions, links: LinkBuilder, page: int, base_path: str
    ) -> Markup:
        raise NamingCollision(
            'Cannot use virtual "current" folder - a real directory named "current" exists at this location.'
        )

    def _render_file_table(
        self, directory: str, options: DisplayOptions, links: LinkBuilder, page: int, base_path: str
    ) -> Markup:
        entries = self.scanner.list_entries(directory)
        names = self.scanner.file_names(directory, options.file_filter, entries)

        if not names:
            if options.show_empty:
                return render_template("empty.html", message="No documents found in this directory.")
            return Markup("")

        records = sort_records([self.scanner.make_record(directory, name) for name in names], options.sort)
        number = clamp_page(page, len(records), options.per_page)
        page_records, total = paginate(records, PageSpec(page_size=options.per_page, page_number=number))

        present = {entry.name for entry in entries}
        show_description = any(_meta_name(name) in present for name in names)

        rows = []
        for record in page_records:
            description = self.read_description(directory, record.display_name) if show_description else None
            rows.append(self._document_row(record, options, base_path, description))

        table = render_template("file_table.html", rows=rows, show_description=show_description)
        return table + self.render_pagination(total, options.per_page, number, links)

    # Fragments

    def _document_row(
        self,
        record: FileRecord,
        options: DisplayOptions,
        base_path: str,
        description: Optional[str] = None,
    ) -> DocumentRow:
        name = record.display_name
        url = file_url(record.absolute_path, base_path, self.settings)

        annex_dir = self.annexes.annex_dir(record.directory, name)
        annexes = []
        for annex in self.annexes.resolve(record.directory, name, options.file_filter):
            annex_url = file_url(os.path.join(annex_dir, annex), base_path, self.settings)
            annexes.append(AnnexItem(
                file_name=annex,
                display_name=options.file_filter.display_name(annex),
                file_url=annex_url,
                viewer_url=viewer_url(annex_url, annex, self.settings) if is_viewable(annex) else None,
            ))

        return DocumentRow(
            anchor_id=anchor_id(name),
            file_name=name,
            display_name=options.file_filter.display_name(name),
            file_url=url,
            viewer_url=viewer_url(url, name, self.settings) if is_viewable(name) else None,
            date=format_date(record.modified_at),
            description=description,
            annexes=annexes,
        )

    def render_breadcrumbs(self, directive_path: str, cursor: str, links: LinkBuilder) -> Markup:
        """Breadcrumbs from the directive root down to the cursor."""
        root_name = ucfirst(os.path.basename(directive_path) if directive_path else "Documents")

        if not cursor:
            return render_template("breadcrumbs.html", crumbs=[Crumb(label=root_name)])

        crumbs = [Crumb(label=root_name, url=links.folder())]
        segments = cursor.split("/")
        so_far = ""
        for index, segment in enumerate(segments):
            so_far = f"{so_far}/{segment}" if so_far else segment
            if index == len(segments) - 1:
                crumbs.append(Crumb(label=ucfirst(segment)))
            else:
                crumbs.append(Crumb(label=ucfirst(segment), url=links.folder(so_far)))

        return render_template("breadcrumbs.html", crumbs=crumbs)

    def render_commentary(self, directory: str) -> Markup:
        """Commentary.md content above the table, if present."""
        for name in COMMENTARY_FILES:
            path = os.path.join(directory, name)
            if os.path.isfile(path):
                break
        else:
            return Markup("")

        content = _read_text(path)
        if not content:
            return Markup("")

        return render_template("commentary.html", html=render_markdown(content))

    def render_subfolders(
        self, directory: str, cursor: str, options: DisplayOptions, links: LinkBuilder
    ) -> Markup:
        """Subfolder navigation list, with the "Current" entry at the cursor root."""
        folders = self.scanner.list_subfolders(directory)

        if options.hide_empty_dirs:
            folders = [
                folder for folder in folders
                if self.scanner.directory_has_content(os.path.join(directory, folder), options.file_filter)
            ]

        show_current_link = options.show_current and not cursor

        if not folders and not show_current_link:
            return Markup("")

        if options.directory_sort == "desc":
            folders.reverse()

        items = []
        if show_current_link:
            items.append(FolderLink(name="Current", url=links.folder(CURRENT_SEGMENT), is_current=True))

        for folder in folders:
            folder_cursor = f"{cursor}/{folder}" if cursor else folder
            items.append(FolderLink(name=folder, url=links.folder(folder_cursor)))

        return render_template("subfolders.html", folders=items)

    def render_pagination(self, total: int, per_page: int, page: int, links: LinkBuilder) -> Markup:
        """Previous/next controls; empty when everything fits on one page."""
        if per_page <= 0 or total <= per_page:
            return Markup("")

        pages = total_pages(total, per_page)
        page = clamp_page(page, total, per_page)

        return render_template(
            "pagination.html",
            page=page,
            total_pages=pages,
            prev_url=links.page(page - 1) if page > 1 else None,
            next_url=links.page(page + 1) if page < pages else None,
        )

    def read_description(self, directory: str, filename: str) -> str:
        """Description from ``meta_<filename>.txt``, tags stripped."""
        content = _read_text(os.path.join(directory, _meta_name(filename)))
        return Markup(content).striptags() if content else ""


def _meta_name(filename: str) -> str:
    return f"{META_PREFIX}{filename}.txt"


def _readable_dir(path: str) -> bool:
    return os.path.isdir(path) and os.access(path, os.R_OK)


def _read_text(path: str) -> str:
    """Read a small text file; unreadable files count as empty."""
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        logger.debug(f"Cannot read {path}: {e}")
        return ""
