"""Build orchestration: list -> fetch -> parse -> derive -> render -> write"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from drivepress.config import Settings
from drivepress.core.markdown import render_markdown
from drivepress.core.models import ArticleRecord, DocumentRef, RawDocument
from drivepress.core.records import build_record, parse_document
from drivepress.core.render import render_article, render_index
from drivepress.errors import DocumentError, TemplateMissingError
from drivepress.source import DocumentSource


logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"
TEMPLATE_COPY = "article-template.html"


@dataclass
class BuildResult:
    """Outcome of one build: records in listing order, written article pages, and skipped failures."""
    articles: list[ArticleRecord] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    failures: list[DocumentError] = field(default_factory=list)
    index_path: Optional[Path] = None


def _read_template(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateMissingError(f"Cannot read template {path}: {e}") from e


def filter_refs(refs: Iterable[DocumentRef], extensions: Iterable[str]) -> list[DocumentRef]:
    """Keep refs whose name ends with one of extensions (case-insensitive), preserving order."""
    suffixes = tuple(e.lower() for e in extensions)
    return [r for r in refs if r.name.lower().endswith(suffixes)]


def build_article(
    raw: RawDocument,
    position: int,
    template: str,
    settings: Settings,
    ) -> tuple[ArticleRecord, str]:
    """Derive the record for raw and render its article page. Returns (record, html)."""
    parsed = parse_document(raw)
    record = build_record(
        raw, parsed, position,
        extensions=settings.extensions,
        excerpt_length=settings.excerpt_length,
        keywords=settings.label_keywords,
    )
    content_html = render_markdown(parsed.body, settings.parser_config)
    html = render_article(template, record, content_html, settings.label_text(record.label))
    return record, html


def run_build(settings: Settings, source: DocumentSource) -> BuildResult:
    """Run one full build.

    Documents are processed sequentially in listing order. A DocumentError is
    logged and skipped when settings.on_error is 'skip', and re-raised when it is
    'abort'. ListingError and TemplateMissingError always propagate.
    """
    logger.info("Build started")
    site_dir = Path(settings.site_dir)
    articles_dir = site_dir / settings.articles_dir
    article_template_path = Path(settings.article_template)

    # fail on missing templates before touching the source
    article_template = _read_template(article_template_path)
    index_template = _read_template(Path(settings.index_template))

    site_dir.mkdir(parents=True, exist_ok=True)
    articles_dir.mkdir(parents=True, exist_ok=True)

    refs = filter_refs(source.list_documents(), settings.extensions)
    logger.info("Found %d source document(s)", len(refs))
    if not refs:
        logger.warning("No documents matched extensions %s", ", ".join(settings.extensions))

    result = BuildResult()
    seen: dict[str, str] = {}
    for position, ref in enumerate(refs, start=1):
        try:
            record, out_path = _process(ref, position, source, article_template, articles_dir, settings, seen)
        except DocumentError as e:
            if settings.on_error == "abort":
                raise
            logger.error("%s", e)
            result.failures.append(e)
            continue
        logger.info("Generated %s", out_path)
        result.articles.append(record)
        result.written.append(out_path)

    result.index_path = site_dir / INDEX_FILE
    result.index_path.write_text(render_index(index_template, result.articles), encoding="utf-8")
    logger.info("Generated %s (%d articles)", result.index_path, len(result.articles))

    template_copy = site_dir / TEMPLATE_COPY
    if template_copy.resolve() != article_template_path.resolve():
        shutil.copyfile(article_template_path, template_copy)
    logger.info("Build complete")
    return result


def _process(
    ref: DocumentRef,
    position: int,
    source: DocumentSource,
    template: str,
    articles_dir: Path,
    settings: Settings,
    seen: dict[str, str],
    ) -> tuple[ArticleRecord, Path]:
    """Fetch, derive, render and write one document; every failure surfaces as DocumentError."""
    try:
        raw = RawDocument.from_ref(ref, source.fetch_text(ref))
        record, html = build_article(raw, position, template, settings)
    except DocumentError:
        raise
    except Exception as e:
        raise DocumentError(ref.name, ref.id, str(e)) from e

    if record.slug in seen:
        raise DocumentError(ref.name, ref.id, f"slug '{record.slug}' already produced by {seen[record.slug]}")
    seen[record.slug] = ref.name

    out_path = articles_dir / f"{record.slug}.html"
    try:
        out_path.write_text(html, encoding="utf-8")
    except OSError as e:
        raise DocumentError(ref.name, ref.id, str(e)) from e
    return record, out_path
