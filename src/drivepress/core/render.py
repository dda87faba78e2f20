"""Placeholder substitution for article and index templates"""

import json
import re
from typing import Iterable

from drivepress.core.models import ArticleRecord


TITLE_TOKEN = '__ARTICLE_TITLE__'
DATE_TOKEN = '__ARTICLE_DATE__'
WEEK_TOKEN = '__ARTICLE_WEEK__'
LABEL_CLASS_TOKEN = '__ARTICLE_LABEL_CLASS__'
LABEL_TOKEN = '__ARTICLE_LABEL__'
TAGS_TOKEN = '__ARTICLE_TAGS__'
CONTENT_TOKEN = '__ARTICLE_CONTENT__'
ARTICLES_DATA_TOKEN = '__ARTICLES_DATA__'

ARTICLE_TOKEN_RE = re.compile('|'.join(re.escape(t) for t in (
    TITLE_TOKEN, DATE_TOKEN, WEEK_TOKEN, LABEL_CLASS_TOKEN, LABEL_TOKEN, TAGS_TOKEN, CONTENT_TOKEN,
)))

_ESCAPES = (('&', '&amp;'), ('<', '&lt;'), ('>', '&gt;'), ('"', '&quot;'))


def escape_html(text: str) -> str:
    """Escape & < > and double quotes; single quotes are left alone."""
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def render_tags(tags: Iterable[str]) -> str:
    return '\n'.join(f'<span class="tag">{escape_html(t)}</span>' for t in tags)


def render_article(template: str, record: ArticleRecord, content_html: str, label_text: str) -> str:
    """Fill an article template for record in a single pass over the template.

    Every token is replaced at each occurrence except the content token, which
    is replaced at its first occurrence only; later ones are left as-is.
    Substituted values are never rescanned for tokens.
    """
    values = {
        TITLE_TOKEN: escape_html(record.title),
        DATE_TOKEN: escape_html(record.date),
        WEEK_TOKEN: escape_html(record.week),
        LABEL_CLASS_TOKEN: record.label.value,
        LABEL_TOKEN: escape_html(label_text),
        TAGS_TOKEN: render_tags(record.tags),
    }
    content_done = False

    def _sub(m: re.Match) -> str:
        nonlocal content_done
        token = m.group(0)
        if token == CONTENT_TOKEN:
            if content_done:
                return token
            content_done = True
            return content_html
        return values[token]

    return ARTICLE_TOKEN_RE.sub(_sub, template)


def articles_json(records: Iterable[ArticleRecord]) -> str:
    """Compact JSON array of records, safe to embed in a <script> element."""
    data = [r.model_dump(mode='json') for r in records]
    return json.dumps(data, ensure_ascii=False, separators=(',', ':')).replace('</', '<\\/')


def render_index(template: str, records: Iterable[ArticleRecord]) -> str:
    return template.replace(ARTICLES_DATA_TOKEN, articles_json(records), 1)
