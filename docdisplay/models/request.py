"""Directive options and the value objects derived from them."""

import os
import re
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from docdisplay.utils.formatters import file_extension
from docdisplay.utils.validators import (
    parse_bool,
    parse_extension,
    parse_extension_list,
    parse_int,
    parse_sort_by,
)


class FilterSpec(BaseModel):
    """Which files a listing keeps."""

    model_config = ConfigDict(frozen=True)

    include_extension: str = ""
    exclude_extensions: frozenset[str] = frozenset()
    exclude_pattern: Optional[str] = None
    hide_extensions_for_display: frozenset[str] = frozenset()

    _regex: Optional[re.Pattern] = PrivateAttr(default=None)

    @property
    def exclude_regex(self) -> Optional[re.Pattern]:
        """Compiled case-insensitive exclude pattern, None when unset."""
        if self.exclude_pattern and self._regex is None:
            self._regex = re.compile(self.exclude_pattern, re.IGNORECASE)
        return self._regex

    def keeps(self, name: str) -> bool:
        """Whether a file name survives the extension and pattern filters."""
        ext = file_extension(name)
        if self.include_extension and ext != self.include_extension:
            return False
        if ext in self.exclude_extensions:
            return False
        regex = self.exclude_regex
        if regex is not None and regex.search(name):
            return False
        return True

    def display_name(self, name: str) -> str:
        """File name as shown in tables, minus a hidden extension."""
        if file_extension(name) in self.hide_extensions_for_display:
            return os.path.splitext(name)[0]
        return name


class SortSpec(BaseModel):
    """Ordering of a file table."""

    model_config = ConfigDict(frozen=True)

    field: Literal["name", "date"] = "name"
    direction: Literal["asc", "desc"] = "desc"


class PageSpec(BaseModel):
    """Pagination window; page_size 0 means unpaginated."""

    model_config = ConfigDict(frozen=True)

    page_size: int = Field(0, ge=0)
    page_number: int = Field(1, ge=1)


class DisplayOptions(BaseModel):
    """Parsed [docdisplay] directive attributes."""

    model_config = ConfigDict(frozen=True)

    path: str = ""
    recursive: bool = False
    file_filter: FilterSpec = FilterSpec()
    show_title: bool = False
    show_empty: bool = False
    directory_sort: Literal["asc", "desc"] = "desc"
    hide_empty_dirs: bool = True
    sort: SortSpec = SortSpec()
    limit: int = Field(10, ge=1)
    show_current: bool = False
    flatten: bool = False
    per_page: int = Field(0, ge=0)

    @classmethod
    def from_attributes(cls, attrs: Mapping[str, str], default_limit: int = 10) -> "DisplayOptions":
        """
        Build options from raw directive attributes.

        Parsing is lenient: unknown tokens fall back to defaults. Cross-field
        rules (include vs. exclude, regex syntax, mode combinations) are
        checked by the display service before any filesystem access.

        Args:
            attrs: Attribute name to raw string value
            default_limit: Limit used when ``limit`` is missing or below 1

        Returns:
            DisplayOptions instance
        """
        def get(name: str, default: str = "") -> str:
            value = attrs.get(name)
            return default if value is None else str(value)

        field, direction = parse_sort_by(get("sort_by", "name,desc"))

        limit = parse_int(get("limit"), default_limit)
        if limit < 1:
            limit = default_limit

        pattern = get("exclude_pattern").strip()

        return cls(
            path=get("path"),
            recursive=parse_bool(get("recursive")),
            file_filter=FilterSpec(
                include_extension=parse_extension(get("include")),
                exclude_extensions=frozenset(parse_extension_list(get("exclude"))),
                exclude_pattern=pattern or None,
                hide_extensions_for_display=frozenset(parse_extension_list(get("hide_extension"))),
            ),
            show_title=parse_bool(get("show_title")),
            show_empty=parse_bool(get("show_empty")),
            directory_sort="asc" if get("directory_sort").strip().lower() == "asc" else "desc",
            hide_empty_dirs=parse_bool(get("hide_empty_dirs", "true")),
            sort=SortSpec(field=field, direction=direction),
            limit=limit,
            show_current=parse_bool(get("show_current")),
            flatten=parse_bool(get("flatten")),
            per_page=max(0, parse_int(get("per_page"), 0)),
        )
