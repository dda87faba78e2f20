"""Root test configuration: in-memory document source, templates and settings"""

from pathlib import Path

import pytest

from drivepress.config import Settings
from drivepress.core.models import DocumentRef
from drivepress.errors import DocumentError


ARTICLE_TEMPLATE = """\
<title>__ARTICLE_TITLE__</title>
<h1>__ARTICLE_TITLE__</h1>
<p>__ARTICLE_DATE__ / week __ARTICLE_WEEK__</p>
<span class="label-__ARTICLE_LABEL_CLASS__">__ARTICLE_LABEL__</span>
<div class="tags">__ARTICLE_TAGS__</div>
<main>__ARTICLE_CONTENT__</main>
"""

INDEX_TEMPLATE = "<script>const ARTICLES = __ARTICLES_DATA__;</script>\n"


class FakeSource:
    """DocumentSource over a dict of name -> content; names listed in the given order."""

    def __init__(self, docs: dict[str, str], modified_time: str = "2026-01-15T10:30:00.000Z", broken=()):
        self.docs = docs
        self.modified_time = modified_time
        self.broken = set(broken)
        self.fetched: list[str] = []

    def list_documents(self) -> list[DocumentRef]:
        return [
            DocumentRef(id=f"id-{name}", name=name, modified_time=self.modified_time)
            for name in self.docs
        ]

    def fetch_text(self, ref: DocumentRef) -> str:
        self.fetched.append(ref.name)
        if ref.name in self.broken:
            raise DocumentError(ref.name, ref.id, "HTTP 500")
        return self.docs[ref.name]


@pytest.fixture(name="fake_source")
def fake_source_fixture():
    return FakeSource


@pytest.fixture(name="templates")
def templates_fixture(tmp_path) -> tuple[Path, Path]:
    """Write article and index templates under tmp_path/site."""
    site = tmp_path / "site"
    site.mkdir()
    article = site / "article-template.html"
    index = site / "index.html"
    article.write_text(ARTICLE_TEMPLATE, encoding="utf-8")
    index.write_text(INDEX_TEMPLATE, encoding="utf-8")
    return article, index


@pytest.fixture(name="settings")
def settings_fixture(tmp_path, templates) -> Settings:
    article, index = templates
    return Settings(
        site_dir=str(tmp_path / "docs"),
        article_template=str(article),
        index_template=str(index),
    )
