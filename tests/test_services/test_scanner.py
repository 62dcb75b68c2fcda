"""Tests for single-level scanning."""

import os

from docdisplay.models.request import FilterSpec
from docdisplay.services.scanner import FileScanner, TraversalContext


def test_list_files_skips_hidden_meta_and_commentary(settings, document_tree):
    """Test documents exclude hidden, meta and commentary files."""
    scanner = FileScanner(settings)

    names = [r.display_name for r in scanner.list_files(str(document_tree / "Minutes" / "2024"), FilterSpec())]
    assert names == ["Apr Minutes.docx", "Mar Minutes.pdf"]

    names = [r.display_name for r in scanner.list_files(str(document_tree / "Minutes"), FilterSpec())]
    assert names == ["notes.txt"]


def test_list_files_natural_order(settings, test_data_dir, make_document):
    """Test names sort naturally and case-insensitively."""
    for name in ("file10.pdf", "File2.pdf", "file1.pdf"):
        make_document(test_data_dir / "natural" / name)

    scanner = FileScanner(settings)
    names = scanner.file_names(str(test_data_dir / "natural"), FilterSpec())
    assert names == ["file1.pdf", "File2.pdf", "file10.pdf"]


def test_list_files_applies_filter(settings, document_tree):
    """Test include, exclude and pattern filters."""
    scanner = FileScanner(settings)
    directory = str(document_tree / "Minutes" / "2024")

    assert scanner.file_names(directory, FilterSpec(include_extension="pdf")) == ["Mar Minutes.pdf"]
    assert scanner.file_names(directory, FilterSpec(exclude_extensions=frozenset({"pdf"}))) == ["Apr Minutes.docx"]
    assert scanner.file_names(directory, FilterSpec(exclude_pattern="^mar")) == ["Apr Minutes.docx"]


def test_list_subfolders_excludes_annex_folders(settings, document_tree):
    """Test annex folders never appear as navigable subfolders."""
    scanner = FileScanner(settings)

    assert scanner.list_subfolders(str(document_tree / "Minutes" / "2024")) == []
    assert scanner.list_subfolders(str(document_tree / "Minutes")) == ["2023", "2024"]
    assert scanner.list_subfolders(str(document_tree)) == ["Agendas", "Minutes"]


def test_annex_folder_matching_is_case_insensitive(settings, test_data_dir, make_document):
    """Test an annex folder is recognised regardless of case."""
    make_document(test_data_dir / "docs" / "Report.pdf")
    make_document(test_data_dir / "docs" / "report.PDF_Annexes" / "extra.pdf")

    scanner = FileScanner(settings)
    assert scanner.list_subfolders(str(test_data_dir / "docs")) == []


def test_missing_directory_lists_nothing(settings, test_data_dir):
    """Test an unreadable directory yields an empty listing."""
    scanner = FileScanner(settings)
    assert scanner.list_entries(str(test_data_dir / "missing")) == []
    assert scanner.list_files(str(test_data_dir / "missing"), FilterSpec()) == []


def test_make_record_modification_time(settings, document_tree):
    """Test records carry the file modification time."""
    scanner = FileScanner(settings)
    directory = str(document_tree / "Minutes" / "2024")

    record = scanner.make_record(directory, "Mar Minutes.pdf")
    assert record.modified_at == os.stat(os.path.join(directory, "Mar Minutes.pdf")).st_mtime
    assert record.directory == directory

    assert scanner.make_record(directory, "vanished.pdf").modified_at == 0


def test_directory_has_content(settings, document_tree):
    """Test emptiness checks look through descendants but not annexes."""
    scanner = FileScanner(settings)

    assert scanner.directory_has_content(str(document_tree / "Minutes"), FilterSpec())
    assert not scanner.directory_has_content(str(document_tree / "Agendas"), FilterSpec())
    assert not scanner.directory_has_content(
        str(document_tree / "Minutes" / "2023"), FilterSpec(include_extension="docx")
    )


def test_directory_has_content_ignores_annex_only_folders(settings, test_data_dir, make_document):
    """Test a folder whose only files sit in an annex folder counts as empty."""
    make_document(test_data_dir / "outer" / "inner" / "gone.pdf_annexes" / "a.pdf")
    make_document(test_data_dir / "outer" / "inner" / "gone.pdf")

    scanner = FileScanner(settings)
    assert not scanner.directory_has_content(
        str(test_data_dir / "outer"), FilterSpec(exclude_extensions=frozenset({"pdf"}))
    )


def test_traversal_context_guards_cycles_and_depth(test_data_dir):
    """Test revisits and depth past the ceiling are refused."""
    target = test_data_dir / "loop"
    target.mkdir()
    os.symlink(target, target / "again")

    context = TraversalContext(ceiling=2)
    assert context.enter(str(target), 0)
    assert not context.enter(str(target / "again"), 1)
    assert not context.enter(str(test_data_dir), 3)


def test_annex_is_not_a_primary_entry(settings, test_data_dir, make_document):
    """Test a document with an annex yields exactly one record."""
    make_document(test_data_dir / "report" / "Report.pdf")
    make_document(test_data_dir / "report" / "Report.pdf_annexes" / "x.txt")

    scanner = FileScanner(settings)
    records = scanner.list_files(str(test_data_dir / "report"), FilterSpec())
    assert [r.display_name for r in records] == ["Report.pdf"]
    assert scanner.list_subfolders(str(test_data_dir / "report")) == []
