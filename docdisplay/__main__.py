"""Run the API with uvicorn: ``python -m docdisplay`` or the ``docdisplay`` script."""

import uvicorn

from docdisplay.config import get_settings


def main():
    """Serve docdisplay.main:app on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "docdisplay.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
