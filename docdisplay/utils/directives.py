"""Parsing of [docdisplay ...] directives embedded in page content."""

import re

DIRECTIVE_PATTERN = re.compile(r"\[docdisplay([^\]]*)\]", re.IGNORECASE)

ATTRIBUTE_PATTERN = re.compile(
    r"""([\w-]+)\s*=\s*"([^"]*)"       # key="value"
      |([\w-]+)\s*=\s*'([^']*)'        # key='value'
      |([\w-]+)\s*=\s*([^\s"']+)       # key=value
    """,
    re.VERBOSE,
)


def parse_attributes(text: str) -> dict[str, str]:
    """
    Parse directive attributes.

    Keys are lower-cased; bare positional tokens are ignored.

    Args:
        text: Attribute text, e.g. ' path="Minutes" recursive=true'

    Returns:
        Attribute name to value
    """
    attrs = {}
    for match in ATTRIBUTE_PATTERN.finditer(text):
        if match.group(1):
            key, value = match.group(1), match.group(2)
        elif match.group(3):
            key, value = match.group(3), match.group(4)
        else:
            key, value = match.group(5), match.group(6)
        attrs[key.lower()] = value
    return attrs


def find_directives(content: str) -> list[dict[str, str]]:
    """Attributes of every directive in a page, in document order."""
    return [parse_attributes(match.group(1)) for match in DIRECTIVE_PATTERN.finditer(content)]
