"""Jinja2 environment for the HTML fragments."""

from functools import lru_cache

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup


@lru_cache()
def get_environment() -> Environment:
    """Get cached template environment."""
    return Environment(
        loader=PackageLoader("docdisplay", "templates"),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_template(name: str, **context) -> Markup:
    """Render a template to safe markup."""
    return Markup(get_environment().get_template(name).render(**context))
