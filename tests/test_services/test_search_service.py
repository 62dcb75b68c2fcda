"""Tests for document search and descriptor synthesis."""

from docdisplay.config import PageConfig
from docdisplay.services.search_service import SearchService, normalize


def test_normalize():
    """Test punctuation runs collapse to single spaces."""
    assert normalize("12.24_APC--Agenda") == "12 24 apc agenda"
    assert normalize("  Hello, World!  ") == "hello world"


def test_search_matches_every_word(search_service):
    """Test matching is conjunctive substring matching on the file name."""
    ids, total = search_service.search("minutes")
    assert total == 4
    assert ids == [
        "Minutes/2024/Apr Minutes.docx",
        "Minutes/2023/Feb Minutes.pdf",
        "Minutes/2023/Jan Minutes.pdf",
        "Minutes/2024/Mar Minutes.pdf",
    ]

    assert search_service.search("min mar")[0] == ["Minutes/2024/Mar Minutes.pdf"]
    assert search_service.search("MAR -- min")[0] == ["Minutes/2024/Mar Minutes.pdf"]
    assert search_service.search("mar agenda") == ([], 0)


def test_search_ignores_extension_annexes_and_hidden(search_service):
    """Test extensions, annex folders, meta and hidden files never match."""
    assert search_service.search("pdf") == ([], 0)
    assert search_service.search("appendix") == ([], 0)
    assert search_service.search("secret") == ([], 0)
    assert search_service.search("meta") == ([], 0)


def test_empty_query_matches_everything(search_service):
    """Test an empty query returns every document."""
    ids, total = search_service.search("")
    assert total == 6
    assert "Policy.pdf" in ids
    assert "Minutes/notes.txt" in ids


def test_search_pagination_without_clamping(search_service):
    """Test pages slice the sorted matches and pages past the end are empty."""
    assert search_service.search("minutes", page=2, per_page=2) == (
        ["Minutes/2023/Jan Minutes.pdf", "Minutes/2024/Mar Minutes.pdf"],
        4,
    )
    assert search_service.search("minutes", page=3, per_page=2) == ([], 4)
    assert search_service.search("minutes", page=0, per_page=3)[0][0] == "Minutes/2024/Apr Minutes.docx"
    assert len(search_service.search("", page=1, per_page=0)[0]) == 6


def test_search_without_base_directory(settings):
    """Test an unusable base directory yields no results."""
    service = SearchService(settings.model_copy(update={"base_path": None}))
    assert service.search("minutes") == ([], 0)


def test_path_matches():
    """Test which directives can display a document directory."""
    assert SearchService.path_matches("Minutes/2024", "", True)
    assert not SearchService.path_matches("Minutes/2024", "", False)
    assert SearchService.path_matches("", "", False)
    assert SearchService.path_matches("Minutes", "Minutes", False)
    assert SearchService.path_matches("Minutes/2024", "Minutes", True)
    assert not SearchService.path_matches("Minutes/2024", "Minutes", False)
    assert not SearchService.path_matches("Minutes2/2024", "Minutes", True)


def test_subpath():
    """Test the cursor is the document directory minus the directive path."""
    assert SearchService.subpath("Minutes/2024", "Minutes") == "2024"
    assert SearchService.subpath("Minutes/2024", "") == "Minutes/2024"
    assert SearchService.subpath("Minutes", "Minutes") == ""
    assert SearchService.subpath("", "") == ""


def test_prepare_item(search_service):
    """Test the synthesized title, link and metadata."""
    item = search_service.prepare_item("Minutes/2024/Mar Minutes.pdf")

    assert item.title == "2024: Mar Minutes (2 annexes) — Minutes"
    assert item.url == "https://parish.example/pages/minutes?docdisplay_path=2024#doc-Mar-Minutes"
    assert item.type == "Document"
    assert item.subtype == "document"
    assert item.docdisplay.annex_count == 2
    assert item.docdisplay.breadcrumb == "Minutes > 2024"
    assert item.docdisplay.anchor_id == "doc-Mar-Minutes"
    assert item.docdisplay.page_found is True


def test_prepare_item_at_base(search_service):
    """Test a document in the base directory."""
    item = search_service.prepare_item("Policy.pdf")

    assert item.title == "Policy"
    assert item.url == "https://parish.example/pages/documents#doc-Policy"


def test_prepare_item_single_annex(search_service, document_tree, make_document):
    """Test the singular annex wording."""
    make_document(document_tree / "Minutes" / "2023" / "Jan Minutes.pdf_annexes" / "Map.pdf")

    item = search_service.prepare_item("Minutes/2023/Jan Minutes.pdf")
    assert item.title == "2023: Jan Minutes (1 annex) — Minutes"


def test_prepare_item_drops_generic_root(search_service, document_tree, make_document):
    """Test a generic root folder is left out of the short breadcrumb."""
    make_document(document_tree / "Meeting Documents" / "Full-Council" / "2024" / "12.24_APC Agenda.pdf")

    item = search_service.prepare_item("Meeting Documents/Full-Council/2024/12.24_APC Agenda.pdf")
    assert item.title == "2024: 12 24 APC Agenda — Full Council"
    assert item.docdisplay.breadcrumb == "Meeting Documents > Full Council > 2024"
    assert item.url == (
        "https://parish.example/pages/documents"
        "?docdisplay_path=Meeting+Documents%2FFull-Council%2F2024#doc-12-24APC-Agenda"
    )


def test_prepare_item_missing_document(search_service):
    """Test a vanished document has no descriptor."""
    assert search_service.prepare_item("Minutes/gone.pdf") is None


def test_prepare_item_without_hosting_page(settings):
    """Test documents no page displays get an empty URL."""
    service = SearchService(settings.model_copy(update={"pages": []}))
    item = service.prepare_item("Minutes/notes.txt")

    assert item.url == ""
    assert item.docdisplay.page_found is False


def test_locate_directive_prefers_specific_then_first(settings):
    """Test the deepest directive wins and ties go to the first registered."""
    pages = [
        PageConfig(slug="all", content='[docdisplay recursive="yes"]'),
        PageConfig(slug="first", content='[docdisplay path="Minutes" recursive="true"]'),
        PageConfig(slug="second", content='[docdisplay path="/Minutes/" recursive="true"]'),
        PageConfig(slug="flat", content='[docdisplay path="Minutes/2024/Extra"]'),
    ]
    service = SearchService(settings.model_copy(update={"pages": pages}))

    assert service.locate_directive("Minutes/2024").page.slug == "first"
    assert service.locate_directive("Policies").page.slug == "all"


def test_page_url_with_existing_query(settings):
    """Test the cursor parameter is appended to an existing query string."""
    pages = [PageConfig(slug="legacy", url="https://parish.example/?page_id=7", content='[docdisplay recursive="1"]')]
    service = SearchService(settings.model_copy(update={"pages": pages}))

    item = service.prepare_item("Minutes/notes.txt")
    assert item.url == "https://parish.example/?page_id=7&docdisplay_path=Minutes#doc-notes"


def test_search_documents(search_service):
    """Test the full response with aliased metadata."""
    response = search_service.search_documents("minutes", page=1, per_page=2)

    assert response.total == 4
    assert [item.id for item in response.items] == [
        "Minutes/2024/Apr Minutes.docx",
        "Minutes/2023/Feb Minutes.pdf",
    ]
    assert response.base_path == search_service.settings.base_path

    payload = response.model_dump(by_alias=True)
    assert "_docdisplay" in payload["items"][0]
    assert payload["items"][0]["_docdisplay"]["anchor_id"] == "doc-Apr-Minutes"


def test_search_words_in_any_order(search_service, document_tree, make_document):
    """Test every query word must occur, in any order."""
    make_document(document_tree / "Agendas" / "2024_12_AGENDA.pdf")
    make_document(document_tree / "Agendas" / "2023_AGENDA.pdf")

    assert search_service.search("agenda 2024") == (["Agendas/2024_12_AGENDA.pdf"], 1)
