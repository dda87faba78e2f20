"""Title, excerpt, slug, date, week, tag and label derivation"""

import re
from typing import Iterable, Optional

from drivepress.core.models import Label


ELLIPSIS = '…'
DEFAULT_EXTENSIONS = ('.md', '.markdown')

SLUG_SEP_RE = re.compile(r'[\s/\\]+')
H1_RE = re.compile(r'^#[ \t]+(.+)$', re.MULTILINE)

# Excerpt stripping; order matters: images before links, links before bare markers.
HEADING_MARK_RE = re.compile(r'^#{1,6}[ \t]+', re.MULTILINE)
IMAGE_RE = re.compile(r'!\[.*?\]\(.*?\)')
LINK_RE = re.compile(r'\[([^\]]+)\]\([^)]+\)')
INLINE_MARK_RE = re.compile(r'[*_`~]')
NEWLINES_RE = re.compile(r'(?:\r?\n)+')


def slug_from_filename(name: str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> str:
    """Strip a known extension and hyphenate whitespace runs and path separators."""
    lowered = name.lower()
    for ext in sorted(extensions, key=len, reverse=True):
        if ext and lowered.endswith(ext.lower()):
            name = name[:-len(ext)]
            break
    return SLUG_SEP_RE.sub('-', name)


def extract_title(body: str) -> Optional[str]:
    """Return the text of the first level-1 ATX heading, else None."""
    m = H1_RE.search(body)
    return m.group(1).strip() if m else None


def resolve_title(frontmatter: dict[str, str], body: str, slug: str) -> str:
    return frontmatter.get('title') or extract_title(body) or slug


def extract_excerpt(body: str, max_len: int = 150) -> str:
    """Plain-text approximation of body, truncated to max_len plus an ellipsis.

    The first H1 line is the article title and is dropped; other headings keep
    their text and lose only the marker. When nothing but the title remains,
    the title text itself is the excerpt.
    """
    text = _plain_text(H1_RE.sub('', body, count=1)) or _plain_text(body)
    return text[:max_len] + ELLIPSIS if len(text) > max_len else text


def _plain_text(md: str) -> str:
    text = HEADING_MARK_RE.sub('', md)
    text = IMAGE_RE.sub('', text)
    text = LINK_RE.sub(r'\1', text)
    text = INLINE_MARK_RE.sub('', text)
    return NEWLINES_RE.sub(' ', text).strip()


def resolve_date(frontmatter: dict[str, str], modified_time: Optional[str]) -> str:
    """Front-matter date, else the date part of the source timestamp, else ''."""
    if frontmatter.get('date'):
        return frontmatter['date']
    if modified_time:
        return modified_time.split('T', 1)[0]
    return ''


def resolve_week(frontmatter: dict[str, str], position: int) -> str:
    """Front-matter week, else the 1-based batch position zero-padded to two digits."""
    return frontmatter.get('week') or f'{position:02d}'


def parse_tags(value: Optional[str]) -> list[str]:
    """Split a comma-separated tag value, tolerating one enclosing [ ] pair."""
    if not value:
        return []
    value = value.strip()
    if value.startswith('[') and value.endswith(']'):
        value = value[1:-1]
    if not value.strip():
        return []
    return [t.strip() for t in value.split(',')]


def classify(title: str, tags: Iterable[str], keywords: Iterable[str]) -> Label:
    """Label.update if any keyword occurs in title or tags (case-insensitive), else Label.signal."""
    haystack = ' '.join([title, *tags]).casefold()
    if any(k and k.casefold() in haystack for k in keywords):
        return Label.update
    return Label.signal
