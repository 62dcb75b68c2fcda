"""Annex folders: supplementary files attached to a single document."""

import logging
import os

from docdisplay.models.request import FilterSpec
from docdisplay.services.scanner import ANNEX_SUFFIX, FileScanner, META_PREFIX

logger = logging.getLogger(__name__)


class AnnexResolver:
    """Finds and lists the ``<filename>_annexes`` folder sibling to a document."""

    def __init__(self, scanner: FileScanner):
        self.scanner = scanner

    @staticmethod
    def annex_dir(file_dir: str, filename: str) -> str:
        return os.path.join(file_dir, filename + ANNEX_SUFFIX)

    def resolve(self, file_dir: str, filename: str, file_filter: FilterSpec) -> list[str]:
        """
        List the annexes of a document.

        Args:
            file_dir: Directory holding the document
            filename: Document file name
            file_filter: Same filter as the parent listing

        Returns:
            Annex file names in natural order; empty when there is no readable annex folder
        """
        annex_dir = self.annex_dir(file_dir, filename)
        if not os.path.isdir(annex_dir):
            return []

        return self.scanner.file_names(annex_dir, file_filter)

    def count(self, file_dir: str, filename: str) -> int:
        """Count unfiltered annex files (regular, non-meta, non-hidden)."""
        annex_dir = self.annex_dir(file_dir, filename)
        if not os.path.isdir(annex_dir):
            return 0

        count = 0
        for entry in self.scanner.list_entries(annex_dir):
            if entry.is_directory or entry.name.startswith(META_PREFIX):
                continue
            if os.path.isfile(os.path.join(annex_dir, entry.name)):
                count += 1
        return count
