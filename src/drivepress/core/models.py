"""Data models for the fetch, derive and render pipeline"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Label(str, Enum):
    """Two-valued article classification; the value doubles as a CSS class."""
    update = "update"
    signal = "signal"


class DocumentRef(BaseModel):
    """One entry of a document source listing."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    modified_time: Optional[str] = None     # RFC 3339 timestamp, e.g. 2026-01-15T10:30:00.000Z


class RawDocument(BaseModel):
    """A fetched source document; immutable once built."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    modified_time: Optional[str] = None
    content: str

    @classmethod
    def from_ref(cls, ref: DocumentRef, content: str) -> "RawDocument":
        return cls(id=ref.id, name=ref.name, modified_time=ref.modified_time, content=content)


class ArticleRecord(BaseModel):
    """Normalized per-article record; the index page embeds the ordered list of these."""
    model_config = ConfigDict(frozen=True)

    slug: str
    title: str
    excerpt: str
    date: str = ""
    week: str
    tags: tuple[str, ...] = ()
    label: Label


@dataclass(frozen=True)
class ParsedDoc:
    """Internal parse result: flat front matter plus the body it was stripped from."""
    frontmatter: dict[str, str]
    body: str
