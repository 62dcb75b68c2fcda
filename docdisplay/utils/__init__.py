"""Utility functions for Document Display."""

from docdisplay.utils.formatters import anchor_id, format_date, file_extension
from docdisplay.utils.validators import sanitize_path, validate_exclude_pattern

__all__ = [
    "anchor_id",
    "format_date",
    "file_extension",
    "sanitize_path",
    "validate_exclude_pattern",
]
