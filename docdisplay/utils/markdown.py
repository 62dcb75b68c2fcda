"""Commentary markdown: headers, bullet lists, bold, italic and links; everything else escaped."""

import re

from markupsafe import Markup, escape

HEADER_PATTERNS = (
    (re.compile(r"^### (.+)$"), "h4"),
    (re.compile(r"^## (.+)$"), "h3"),
    (re.compile(r"^# (.+)$"), "h2"),
)
LIST_ITEM = re.compile(r"^[-*] (.+)$")

BOLD_STARS = re.compile(r"\*\*(.+?)\*\*")
BOLD_UNDERSCORES = re.compile(r"__(.+?)__")
ITALIC_STAR = re.compile(r"(?<!\*)\*([^*]+)\*(?!\*)")
ITALIC_UNDERSCORE = re.compile(r"(?<!_)_([^_]+)_(?!_)")
LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

SAFE_SCHEMES = ("http", "https", "mailto")
URL_SCHEME = re.compile(r"^([a-z][a-z0-9+.\-]*):")
IGNORED_IN_SCHEME = re.compile(r"[\x00-\x20]")


def is_safe_url(url: str) -> bool:
    """Allow http, https, mailto and relative URLs."""
    # Browsers drop control characters and whitespace before resolving the scheme
    match = URL_SCHEME.match(IGNORED_IN_SCHEME.sub("", url).lower())
    return match is None or match.group(1) in SAFE_SCHEMES


def render_link(match: re.Match) -> str:
    text, url = match.group(1), match.group(2)
    if not is_safe_url(url):
        return text
    return f'<a href="{url}" target="_blank" rel="noopener">{text}</a>'


def render_inline(text: str) -> str:
    """Escape a line, then apply bold, italic and link markup."""
    html = str(escape(text))
    html = BOLD_STARS.sub(r"<strong>\1</strong>", html)
    html = BOLD_UNDERSCORES.sub(r"<strong>\1</strong>", html)
    html = ITALIC_STAR.sub(r"<em>\1</em>", html)
    html = ITALIC_UNDERSCORE.sub(r"<em>\1</em>", html)
    html = LINK.sub(render_link, html)
    return html


def render_markdown(text: str) -> Markup:
    """
    Convert commentary text to HTML.

    Args:
        text: Raw commentary file content

    Returns:
        Safe HTML markup
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    lines = []
    in_list = False

    for line in text.split("\n"):
        trimmed = line.strip()

        if not trimmed:
            if in_list:
                lines.append("</ul>")
                in_list = False
            continue

        header = None
        for pattern, tag in HEADER_PATTERNS:
            match = pattern.match(trimmed)
            if match:
                header = f"<{tag}>{escape(match.group(1))}</{tag}>"
                break

        if header:
            if in_list:
                lines.append("</ul>")
                in_list = False
            lines.append(header)
            continue

        match = LIST_ITEM.match(trimmed)
        if match:
            if not in_list:
                lines.append("<ul>")
                in_list = True
            lines.append(f"<li>{render_inline(match.group(1))}</li>")
            continue

        if in_list:
            lines.append("</ul>")
            in_list = False

        lines.append(f"<p>{render_inline(trimmed)}</p>")

    if in_list:
        lines.append("</ul>")

    return Markup("\n".join(lines))
