"""Depth-bounded recursive collection of documents."""

import logging
import os
from typing import Optional

from docdisplay.models.file_entry import FileRecord
from docdisplay.models.request import FilterSpec
from docdisplay.services.scanner import FileScanner, TraversalContext

logger = logging.getLogger(__name__)

UNLIMITED = -1


class RecursiveCollector:
    """Walks a directory subtree collecting FileRecords, skipping annex folders."""

    def __init__(self, scanner: FileScanner):
        self.scanner = scanner

    def collect(
        self,
        dir_path: str,
        file_filter: FilterSpec,
        max_depth: int = UNLIMITED,
    ) -> list[FileRecord]:
        """
        Collect every document below a directory.

        Args:
            dir_path: Directory to walk
            file_filter: Extension and pattern filter
            max_depth: -1 for unlimited, 0 for this level only, N to descend N levels

        Returns:
            FileRecords in no particular order
        """
        records: list[FileRecord] = []
        self._walk(dir_path, file_filter, max_depth, 0, self.scanner.new_context(), records)
        logger.debug(f"Collected {len(records)} files under {dir_path} (max_depth={max_depth})")
        return records

    def _walk(
        self,
        dir_path: str,
        file_filter: FilterSpec,
        max_depth: int,
        depth: int,
        context: TraversalContext,
        records: list[FileRecord],
    ) -> None:
        if not context.enter(dir_path, depth):
            return

        entries = self.scanner.list_entries(dir_path)

        for name in self.scanner.file_names(dir_path, file_filter, entries):
            records.append(self.scanner.make_record(dir_path, name))

        if max_depth != UNLIMITED and depth >= max_depth:
            return

        for folder in self.scanner.list_subfolders(dir_path, entries):
            self._walk(os.path.join(dir_path, folder), file_filter, max_depth, depth + 1, context, records)
