"""Ordering and pagination of file record collections."""

import math
import re
from typing import Sequence, TypeVar

from docdisplay.models.file_entry import FileRecord
from docdisplay.models.request import PageSpec, SortSpec

T = TypeVar("T")

_DIGITS = re.compile(r"(\d+)")


def natural_key(name: str) -> list:
    """
    Natural, case-insensitive sort key.

    "file2" sorts before "file10"; "F1" and "f1" compare equal.
    """
    parts = _DIGITS.split(name.lower())
    return [int(part) if i % 2 else part for i, part in enumerate(parts)]


def _name_key(record: FileRecord) -> list:
    return natural_key(record.display_name)


def _date_key(record: FileRecord) -> float:
    return record.modified_at


def sort_records(records: Sequence[FileRecord], sort: SortSpec) -> list[FileRecord]:
    """
    Order records by name or modification date.

    The sort is stable, so records with equal keys keep their scan order in
    both directions.

    Args:
        records: Records to order
        sort: Field and direction

    Returns:
        New ordered list
    """
    key = _date_key if sort.field == "date" else _name_key
    return sorted(records, key=key, reverse=sort.direction == "desc")


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed for total_count items (at least 1)."""
    if page_size <= 0:
        return 1
    return max(1, math.ceil(total_count / page_size))


def clamp_page(page_number: int, total_count: int, page_size: int) -> int:
    """Clamp a requested page to the valid range."""
    return min(max(1, page_number), total_pages(total_count, page_size))


def paginate(records: Sequence[T], page: PageSpec) -> tuple[list[T], int]:
    """
    Slice one page out of an ordered collection.

    Args:
        records: Ordered records
        page: Page size (0 = everything) and requested page number

    Returns:
        (page slice, total count); out-of-range pages clamp to the nearest valid page
    """
    total = len(records)
    if page.page_size == 0:
        return list(records), total

    number = clamp_page(page.page_number, total, page.page_size)
    offset = (number - 1) * page.page_size
    return list(records[offset:offset + page.page_size]), total
