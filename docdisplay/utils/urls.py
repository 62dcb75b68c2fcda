"""Mapping of document paths to public file and viewer URLs."""

from urllib.parse import quote, quote_plus

from docdisplay.config import Settings
from docdisplay.utils.formatters import file_extension

ODF_EXTENSIONS = ("odt", "ods", "odp")
OFFICE_EXTENSIONS = ("doc", "docx", "xls", "xlsx", "ppt", "pptx")


def _site_url(settings: Settings, path: str) -> str:
    return settings.site_url.rstrip("/") + "/" + quote(path.lstrip("/"))


def file_url(file_path: str, base_path: str, settings: Settings) -> str:
    """
    Map an absolute path beneath the base directory to a public URL.

    Tried in order: base directory under the web document root, base
    directory under the uploads area, then the document root stripped
    from the full path.

    Args:
        file_path: Absolute file path
        base_path: Configured base directory
        settings: Settings carrying site, document root and uploads mapping

    Returns:
        Public URL of the file
    """
    base_path = base_path.rstrip("/")
    relative = file_path[len(base_path):] if file_path.startswith(base_path) else file_path
    relative = relative.lstrip("/")

    doc_root = settings.get_document_root()

    if doc_root and base_path.startswith(doc_root):
        url_path = base_path[len(doc_root):]
        return _site_url(settings, f"{url_path}/{relative}")

    uploads_dir = (settings.uploads_dir or "").rstrip("/")
    if uploads_dir and settings.uploads_url and base_path.startswith(uploads_dir):
        url_path = settings.uploads_url.rstrip("/") + base_path[len(uploads_dir):]
        return f"{url_path}/{quote(relative)}"

    stripped = file_path[len(doc_root):] if doc_root and file_path.startswith(doc_root) else file_path
    return _site_url(settings, stripped)


def is_pdf(filename: str) -> bool:
    return file_extension(filename) == "pdf"


def is_odf(filename: str) -> bool:
    return file_extension(filename) in ODF_EXTENSIONS


def is_office(filename: str) -> bool:
    return file_extension(filename) in OFFICE_EXTENSIONS


def is_viewable(filename: str) -> bool:
    """Whether the file opens in a browser viewer rather than download only."""
    return is_pdf(filename) or is_odf(filename) or is_office(filename)


def viewer_url(url: str, filename: str, settings: Settings) -> str:
    """
    Get the viewer URL for a file.

    PDFs open directly, ODF files use the embedded ViewerJS page, Office files
    use the Office Online viewer; everything else is the file URL itself.
    """
    if is_odf(filename):
        return f"{settings.viewerjs_url}#{url}"

    if is_office(filename):
        return f"{settings.office_viewer_url}?src={quote_plus(url)}"

    return url
