"""Single-level directory scanning and annex-folder exclusion."""

import logging
import os
from typing import Optional

from docdisplay.config import Settings
from docdisplay.models.file_entry import DirectoryEntry, FileRecord
from docdisplay.models.request import FilterSpec
from docdisplay.services.ordering import natural_key

logger = logging.getLogger(__name__)

ANNEX_SUFFIX = "_annexes"
META_PREFIX = "meta_"
COMMENTARY_NAME = "commentary.md"


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def is_special_file(name: str) -> bool:
    """Meta description files and the folder commentary never list as documents."""
    return name.startswith(META_PREFIX) or name.lower() == COMMENTARY_NAME


def annex_folder_names(entries: list[DirectoryEntry]) -> set[str]:
    """Lower-cased ``<file>_annexes`` names for every file at one level."""
    return {
        (entry.name + ANNEX_SUFFIX).lower()
        for entry in entries
        if not entry.is_directory
    }


class TraversalContext:
    """Per-operation guard against symlink cycles and runaway depth."""

    def __init__(self, ceiling: int):
        """
        Initialize traversal context.

        Args:
            ceiling: Hard limit on directory levels below the starting directory
        """
        self.ceiling = ceiling
        self.visited: set[str] = set()

    def enter(self, dir_path: str, depth: int) -> bool:
        """
        Register a directory about to be scanned.

        Returns:
            False if the directory was already visited or lies beyond the ceiling
        """
        if depth > self.ceiling:
            logger.warning(f"Traversal depth ceiling ({self.ceiling}) reached at {dir_path}")
            return False

        real = os.path.realpath(dir_path)
        if real in self.visited:
            logger.debug(f"Skipping already visited directory: {dir_path}")
            return False

        self.visited.add(real)
        return True


class FileScanner:
    """Lists documents and navigable subfolders in one directory level."""

    def __init__(self, settings: Settings):
        """
        Initialize file scanner.

        Args:
            settings: Application settings
        """
        self.settings = settings

    def new_context(self) -> TraversalContext:
        return TraversalContext(self.settings.max_traversal_depth)

    def list_entries(self, dir_path: str) -> list[DirectoryEntry]:
        """
        List non-hidden entries of a directory.

        An unreadable directory yields an empty listing.
        """
        entries = []
        try:
            with os.scandir(dir_path) as it:
                for item in it:
                    if is_hidden(item.name):
                        continue
                    try:
                        is_directory = item.is_dir()
                    except OSError:
                        is_directory = False
                    entries.append(DirectoryEntry(name=item.name, is_directory=is_directory))
        except OSError as e:
            logger.debug(f"Cannot list directory {dir_path}: {e}")
            return []

        return entries

    def make_record(self, dir_path: str, name: str) -> FileRecord:
        """Build a FileRecord, substituting 0 for an unavailable modification time."""
        full_path = os.path.join(dir_path, name)
        try:
            mtime = os.stat(full_path).st_mtime
        except OSError:
            logger.debug(f"No modification time for {full_path}")
            mtime = 0
        return FileRecord(absolute_path=full_path, display_name=name, modified_at=mtime)

    def file_names(
        self,
        dir_path: str,
        file_filter: FilterSpec,
        entries: Optional[list[DirectoryEntry]] = None,
    ) -> list[str]:
        """Names of the documents at one level that survive the filter, naturally ordered."""
        if entries is None:
            entries = self.list_entries(dir_path)

        names = [
            entry.name
            for entry in entries
            if not entry.is_directory
            and not is_special_file(entry.name)
            and file_filter.keeps(entry.name)
        ]
        names.sort(key=natural_key)
        return names

    def list_files(self, dir_path: str, file_filter: FilterSpec) -> list[FileRecord]:
        """
        List the documents in one directory.

        Args:
            dir_path: Directory to scan
            file_filter: Extension and pattern filter

        Returns:
            FileRecords in natural, case-insensitive name order
        """
        return [self.make_record(dir_path, name) for name in self.file_names(dir_path, file_filter)]

    def list_subfolders(
        self,
        dir_path: str,
        entries: Optional[list[DirectoryEntry]] = None,
    ) -> list[str]:
        """
        List navigable subfolders, leaving out annex folders.

        Args:
            dir_path: Directory to scan
            entries: Pre-fetched listing of dir_path

        Returns:
            Folder names in natural, case-insensitive order
        """
        if entries is None:
            entries = self.list_entries(dir_path)

        annexes = annex_folder_names(entries)
        folders = [
            entry.name
            for entry in entries
            if entry.is_directory and entry.name.lower() not in annexes
        ]
        folders.sort(key=natural_key)
        return folders

    def directory_has_content(
        self,
        dir_path: str,
        file_filter: FilterSpec,
        context: Optional[TraversalContext] = None,
        depth: int = 0,
    ) -> bool:
        """
        Check whether a directory or any descendant holds a displayable document.

        Annex folders are not descended into.
        """
        if context is None:
            context = self.new_context()

        if not context.enter(dir_path, depth):
            return False

        entries = self.list_entries(dir_path)
        if self.file_names(dir_path, file_filter, entries):
            return True

        for folder in self.list_subfolders(dir_path, entries):
            if self.directory_has_content(os.path.join(dir_path, folder), file_filter, context, depth + 1):
                return True

        return False
