"""Flat key: value front-matter parsing and removal"""

import re


# Opening and closing lines must be exactly '---' (trailing blanks allowed);
# blank lines after the closing delimiter belong to the block.
FRONTMATTER_RE = re.compile(
    r'\A---[ \t\r]*\n(?P<meta>.*?)^---[ \t\r]*(?:\n|\Z)(?:[ \t\r]*\n)*',
    re.DOTALL | re.MULTILINE,
)


def parse_frontmatter(text: str) -> dict[str, str]:
    """Return the leading front-matter block as a flat str -> str mapping.

    Each line splits on its first colon; lines without one (or with an empty
    key) are ignored. Returns {} when the text has no leading block.
    """
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}
    meta: dict[str, str] = {}
    for line in m.group('meta').splitlines():
        key, sep, value = line.partition(':')
        key = key.strip()
        if sep and key:
            meta[key] = value.strip()
    return meta


def strip_frontmatter(text: str) -> str:
    """Return text with the front-matter block removed, or unchanged if there is none."""
    m = FRONTMATTER_RE.match(text)
    return text[m.end():] if m else text
