"""Validation and parsing utilities for directive attributes and query parameters."""

import re
from typing import Optional

from docdisplay.exceptions import InvalidRequest

SEGMENT_DISALLOWED = re.compile(r"[^a-zA-Z0-9\-_. ]")

TRUTHY = {"1", "true", "on", "yes"}


def sanitize_path(path: Optional[str]) -> str:
    """
    Sanitize a user-supplied relative path.

    Disallowed characters are stripped from each segment and empty segments
    dropped; only a literal ``..`` rejects the whole path.

    Args:
        path: Raw relative path

    Returns:
        Clean relative path ("" denotes the base directory)

    Raises:
        InvalidRequest: If the path contains '..'
    """
    if path is None:
        return ""

    path = path.strip()
    if not path:
        return ""

    path = path.strip("/")

    if ".." in path:
        raise InvalidRequest("Invalid path specified.")

    path = path.replace("\0", "")

    segments = []
    for segment in path.split("/"):
        segment = segment.strip()
        if not segment:
            continue
        segment = SEGMENT_DISALLOWED.sub("", segment)
        if segment:
            segments.append(segment)

    return "/".join(segments)


def parse_bool(value: Optional[str]) -> bool:
    """Interpret a directive flag; anything outside the truthy set is False."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


def parse_int(value: Optional[str], default: int) -> int:
    """Parse a leading integer, returning the default when there is none."""
    if value is None:
        return default
    match = re.match(r"\s*([+-]?\d+)", str(value))
    if not match:
        return default
    return int(match.group(1))


def parse_extension(value: Optional[str]) -> str:
    """Normalise one extension: trimmed, lower-case, no leading dots."""
    if not value:
        return ""
    return value.strip().lstrip(".").lower()


def parse_extension_list(value: Optional[str]) -> list[str]:
    """Normalise a comma-separated extension list, dropping empty items."""
    if not value:
        return []
    extensions = []
    for item in value.split(","):
        ext = parse_extension(item)
        if ext and ext not in extensions:
            extensions.append(ext)
    return extensions


def parse_sort_by(value: Optional[str]) -> tuple[str, str]:
    """
    Parse a ``field,direction`` sort attribute.

    Args:
        value: e.g. "date,asc"

    Returns:
        (field, direction), with invalid tokens replaced by "name" / "desc"
    """
    parts = [part.strip() for part in (value or "").lower().split(",")]
    field = parts[0] if parts and parts[0] in ("name", "date") else "name"
    direction = parts[1] if len(parts) > 1 and parts[1] in ("asc", "desc") else "desc"
    return field, direction


def validate_exclude_pattern(pattern: Optional[str]) -> Optional[str]:
    """
    Validate exclude pattern regex syntax.

    Args:
        pattern: Regular expression or None

    Returns:
        The pattern, or None when empty

    Raises:
        InvalidRequest: If the pattern does not compile
    """
    if not pattern:
        return None

    try:
        re.compile(pattern, re.IGNORECASE)
    except re.error:
        raise InvalidRequest("Invalid exclude_pattern regex.")

    return pattern


def validate_extension_filters(include_extension: str, exclude_extensions) -> None:
    """
    Reject an include extension that is also excluded.

    Raises:
        InvalidRequest: If include_extension is in exclude_extensions
    """
    if include_extension and include_extension in exclude_extensions:
        raise InvalidRequest(
            f'Cannot include and exclude the same extension ("{include_extension}").'
        )


def validate_page(page: Optional[int]) -> int:
    """Clamp a requested 1-indexed page number to at least 1."""
    if page is None or page < 1:
        return 1
    return page


def validate_per_page(per_page: Optional[int], max_per_page: int, default_per_page: int) -> int:
    """
    Validate and normalize a search page size.

    Args:
        per_page: Requested page size
        max_per_page: Maximum allowed page size
        default_per_page: Page size used when missing or below 1

    Returns:
        Validated page size
    """
    if per_page is None or per_page < 1:
        return default_per_page

    return min(per_page, max_per_page)
