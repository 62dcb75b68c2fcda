"""Pytest configuration and fixtures."""

import os
import tempfile
from datetime import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from docdisplay.config import PageConfig, Settings, get_settings
from docdisplay.main import app
from docdisplay.services.display_service import DisplayService, LinkBuilder
from docdisplay.services.search_service import SearchService


def make_file(path: Path, content: str = "x", modified: datetime = None) -> Path:
    """Create a file (and its parents) with an optional fixed modification time."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    if modified is not None:
        timestamp = modified.timestamp()
        os.utime(path, (timestamp, timestamp))
    return path


@pytest.fixture
def test_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def document_tree(test_data_dir):
    """
    Document tree used across tests.

    documents/
        Policy.pdf
        Minutes/
            Commentary.md
            notes.txt
            2023/
                Jan Minutes.pdf
                Feb Minutes.pdf
            2024/
                Mar Minutes.pdf
                Mar Minutes.pdf_annexes/
                    Appendix A.pdf
                    Appendix B.docx
                meta_Mar Minutes.pdf.txt
                Apr Minutes.docx
        Agendas/
            Empty/
        .hidden/
            secret.pdf
    """
    base = test_data_dir / "documents"
    base.mkdir()

    make_file(base / "Policy.pdf", modified=datetime(2022, 6, 1, 12, 0))

    minutes = base / "Minutes"
    make_file(minutes / "Commentary.md", "# Minutes\n\nApproved by **full council**.\n")
    make_file(minutes / "notes.txt", modified=datetime(2022, 1, 1, 12, 0))
    make_file(minutes / "2023" / "Jan Minutes.pdf", modified=datetime(2023, 1, 10, 12, 0))
    make_file(minutes / "2023" / "Feb Minutes.pdf", modified=datetime(2023, 2, 14, 12, 0))
    make_file(minutes / "2024" / "Mar Minutes.pdf", modified=datetime(2024, 3, 5, 12, 0))
    make_file(minutes / "2024" / "Apr Minutes.docx", modified=datetime(2024, 4, 2, 12, 0))
    make_file(minutes / "2024" / "meta_Mar Minutes.pdf.txt", "Approved <b>minutes</b>")
    make_file(minutes / "2024" / "Mar Minutes.pdf_annexes" / "Appendix A.pdf")
    make_file(minutes / "2024" / "Mar Minutes.pdf_annexes" / "Appendix B.docx")

    (base / "Agendas" / "Empty").mkdir(parents=True)
    make_file(base / ".hidden" / "secret.pdf")

    return base


@pytest.fixture
def settings(document_tree):
    """Settings pointing at the document tree, isolated from .env files."""
    return Settings(
        _env_file=None,
        base_path=str(document_tree),
        site_url="https://parish.example",
        pages=[
            PageConfig(slug="documents", title="Documents", content='[docdisplay recursive="true"]'),
            PageConfig(
                slug="minutes",
                title="Minutes",
                content='<p>Council minutes</p>[docdisplay path="Minutes" recursive="true" show_title="true"]',
            ),
        ],
    )


@pytest.fixture
def display_service(settings):
    """Display service over the document tree."""
    return DisplayService(settings)


@pytest.fixture
def search_service(settings):
    """Search service over the document tree."""
    return SearchService(settings)


@pytest.fixture
def links():
    """Link builder for a page with an unrelated query parameter."""
    return LinkBuilder("https://parish.example/pages/minutes", [("lang", "en")])


@pytest.fixture
def make_document():
    """Factory creating extra files in a test tree."""
    return make_file


@pytest.fixture
def client(settings):
    """API test client whose settings point at the document tree."""
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
