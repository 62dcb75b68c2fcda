"""Tests for public file and viewer URLs."""

from docdisplay.config import Settings
from docdisplay.utils.urls import file_url, is_viewable, viewer_url


def make_settings(**kwargs):
    return Settings(_env_file=None, site_url="https://parish.example", **kwargs)


def test_file_url_under_document_root():
    """Test a base directory inside the document root maps onto the site URL."""
    settings = make_settings(document_root="/var/www/html/")
    url = file_url("/var/www/html/documents/Minutes/Mar Minutes.pdf", "/var/www/html/documents", settings)
    assert url == "https://parish.example/documents/Minutes/Mar%20Minutes.pdf"


def test_file_url_under_uploads():
    """Test a base directory inside the uploads area maps onto the uploads URL."""
    settings = make_settings(
        document_root="/srv/other",
        uploads_dir="/srv/uploads",
        uploads_url="https://parish.example/uploads/",
    )
    url = file_url("/srv/uploads/docs/a b.pdf", "/srv/uploads/docs", settings)
    assert url == "https://parish.example/uploads/docs/a%20b.pdf"


def test_file_url_fallback():
    """Test the fallback appends the absolute path to the site URL."""
    settings = make_settings(document_root="")
    url = file_url("/data/docs/report.pdf", "/data/docs", settings)
    assert url == "https://parish.example/data/docs/report.pdf"


def test_viewer_url():
    """Test viewer mappings for PDF, ODF and Office files."""
    settings = make_settings()
    url = "https://parish.example/docs/file"

    assert viewer_url(url + ".pdf", "file.pdf", settings) == url + ".pdf"
    assert viewer_url(url + ".odt", "file.odt", settings) == f"/static/viewerjs/index.html#{url}.odt"
    assert viewer_url(url + ".docx", "file.docx", settings) == (
        "https://view.officeapps.live.com/op/view.aspx?src=https%3A%2F%2Fparish.example%2Fdocs%2Ffile.docx"
    )


def test_is_viewable():
    """Test only PDF, ODF and Office files have a viewer."""
    assert is_viewable("a.PDF")
    assert is_viewable("a.ods")
    assert is_viewable("a.pptx")
    assert not is_viewable("a.txt")
    assert not is_viewable("a.zip")
