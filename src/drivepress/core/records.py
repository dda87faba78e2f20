"""Assemble one ArticleRecord per fetched document"""

from typing import Iterable

from drivepress.core.derive import (
    DEFAULT_EXTENSIONS,
    classify,
    extract_excerpt,
    parse_tags,
    resolve_date,
    resolve_title,
    resolve_week,
    slug_from_filename,
)
from drivepress.core.frontmatter import parse_frontmatter, strip_frontmatter
from drivepress.core.models import ArticleRecord, ParsedDoc, RawDocument


def parse_document(raw: RawDocument) -> ParsedDoc:
    """Split a RawDocument into front matter and body."""
    return ParsedDoc(
        frontmatter=parse_frontmatter(raw.content),
        body=strip_frontmatter(raw.content),
    )


def build_record(
    raw: RawDocument,
    parsed: ParsedDoc,
    position: int,
    *,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    excerpt_length: int = 150,
    keywords: Iterable[str] = (),
    ) -> ArticleRecord:
    """Derive the ArticleRecord for raw; position is its 1-based index in the filtered listing.

    Pure: no I/O. Any derivation error propagates so no partial record is built.
    """
    fm = parsed.frontmatter
    # slug first: it is the title fallback and the output filename stem
    slug = slug_from_filename(raw.name, extensions)
    if not slug:
        raise ValueError(f"Cannot derive a slug from filename {raw.name!r}")
    title = resolve_title(fm, parsed.body, slug)
    tags = parse_tags(fm.get('tags'))
    return ArticleRecord(
        slug=slug,
        title=title,
        excerpt=extract_excerpt(parsed.body, excerpt_length),
        date=resolve_date(fm, raw.modified_time),
        week=resolve_week(fm, position),
        tags=tuple(tags),
        label=classify(title, tags, keywords),
    )
