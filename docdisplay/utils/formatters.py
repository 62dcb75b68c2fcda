"""Data formatting utilities."""

import os
import re
from datetime import datetime

ANCHOR_PREFIX = "doc-"


def file_extension(name: str) -> str:
    """Lower-cased text after the final dot of a file name, '' when there is none."""
    return os.path.splitext(name)[1][1:].lower()


def file_stem(name: str) -> str:
    """File name without its final extension."""
    return os.path.splitext(name)[0]


def ucfirst(text: str) -> str:
    """Upper-case the first character only."""
    return text[:1].upper() + text[1:]


def format_date(timestamp: float) -> str:
    """
    Format a modification time as a document date.

    Args:
        timestamp: POSIX timestamp

    Returns:
        Date such as "5 Mar 2024"
    """
    moment = datetime.fromtimestamp(timestamp)
    return f"{moment.day} {moment.strftime('%b %Y')}"


def anchor_id(filename: str) -> str:
    """
    Derive the deep-link anchor identifier for a document.

    Args:
        filename: Document file name

    Returns:
        Identifier such as "doc-Report-v2-1-final"
    """
    name = file_stem(filename)
    name = re.sub(r"[.\s]+", "-", name)
    name = re.sub(r"[^a-zA-Z0-9\-]", "", name)
    name = re.sub(r"-+", "-", name)
    name = name.strip("-")
    return ANCHOR_PREFIX + name


def clean_title(filename: str) -> str:
    """Search title for a document: extension dropped, dot and underscore runs as spaces."""
    return re.sub(r"[._]+", " ", file_stem(filename))


def breadcrumb_label(segment: str) -> str:
    """Readable label for one folder name in a search breadcrumb."""
    return ucfirst(segment.replace("-", " ").replace("_", " "))


def build_breadcrumb(relative_dir: str) -> str:
    """
    Build a breadcrumb string from a directory path relative to the base.

    Args:
        relative_dir: e.g. "meeting_documents/full-council/2024"

    Returns:
        e.g. "Meeting documents > Full council > 2024"
    """
    parts = [part for part in relative_dir.split("/") if part]
    return " > ".join(breadcrumb_label(part) for part in parts)
