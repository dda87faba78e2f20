"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from drivepress.config import Settings, load_config
from drivepress.core.models import RawDocument
from drivepress.core.pipeline import run_build
from drivepress.core.records import build_record, parse_document
from drivepress.errors import BuildError
from drivepress.source import DirectorySource, DriveSource


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def build_cmd(
    site: Annotated[Optional[str], typer.Option("--site-dir", help="Output directory")] = None,
    source_dir: Annotated[Optional[str], typer.Option("--source-dir", help="Build from a local directory instead of Drive")] = None,
    folder: Annotated[Optional[str], typer.Option("--folder-id", help="Drive folder id")] = None,
    on_error: Annotated[Optional[str], typer.Option("--on-error", help="skip or abort on a failing document")] = None,
    excerpt: Annotated[Optional[int], typer.Option("--excerpt-length", help="Max excerpt characters")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress at INFO level")] = False,
    ):
    """Fetch sources, render article pages, and regenerate the index."""
    _configure_logging(verbose)
    settings = _settings(overrides={
        "site_dir": site, "source_dir": source_dir, "folder_id": folder,
        "on_error": on_error, "excerpt_length": excerpt,
    })
    if settings.source_dir:
        source = DirectorySource(Path(settings.source_dir))
    else:
        source = DriveSource(settings.folder_id, settings.api_key, timeout=settings.timeout)

    try:
        result = run_build(settings, source)
    except BuildError as e:
        _fail("Build failed", e)

    for record, path in zip(result.articles, result.written):
        typer.echo(f"  {record.slug} -> {path}")
    for failure in result.failures:
        typer.echo(f"  skipped: {failure.name}", err=True)
    typer.echo(
        f"Built {len(result.articles)} article(s) to {settings.site_dir}/"
        + (f" ({len(result.failures)} skipped)" if result.failures else "")
    )


def inspect_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Markdown file to inspect")],
    position: Annotated[int, typer.Option("--position", min=1, help="Batch position used as the week fallback")] = 1,
    ):
    """Print the article record derived from a local markdown file, without writing anything."""
    settings = _settings()
    try:
        raw = RawDocument(id=str(path), name=path.name, content=path.read_text(encoding="utf-8-sig"))
        record = build_record(
            raw, parse_document(raw), position,
            extensions=settings.extensions,
            excerpt_length=settings.excerpt_length,
            keywords=settings.label_keywords,
        )
    except (OSError, ValueError) as e:
        _fail(f"Cannot inspect {path}", e)
    typer.echo(record.model_dump_json(indent=2))
