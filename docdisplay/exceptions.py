"""Errors surfaced to the reader as a single error fragment."""


class DocDisplayError(Exception):
    """Base class for user-visible, request-fatal errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(DocDisplayError):
    """Base directory unset, missing or unreadable."""

    status_code = 500


class InvalidRequest(DocDisplayError):
    """Path traversal, conflicting filters, bad regex or a disallowed mode combination."""

    status_code = 400


class DirectoryNotFound(InvalidRequest):
    """The requested directory does not exist or cannot be read."""

    status_code = 404


class NamingCollision(DocDisplayError):
    """A real directory occupies the name reserved for the virtual "current" view."""

    status_code = 409
