"""Unit tests for source.py"""

import os

import pytest
import requests

from drivepress.core.models import DocumentRef, RawDocument
from drivepress.core.records import build_record, parse_document
from drivepress.errors import DocumentError, ListingError
from drivepress.source import DRIVE_FILES_URL, DirectorySource, DriveSource


class StubResponse:
    def __init__(self, payload=None, content=b"", status=200, bad_json=False):
        self.payload = payload
        self.content = content
        self.status_code = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.payload


class StubSession:
    """Records calls and returns queued responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


# --- DriveSource.list_documents ---

def test_list_documents_query_and_refs():
    """Listing sends the folder query and maps files to DocumentRefs."""
    session = StubSession(StubResponse({"files": [
        {"id": "2", "name": "b.md", "modifiedTime": "2026-01-02T00:00:00.000Z"},
        {"id": "1", "name": "a.md"},
    ]}))
    refs = DriveSource("folder-x", "key-y", session=session, timeout=5).list_documents()

    assert refs == [
        DocumentRef(id="2", name="b.md", modified_time="2026-01-02T00:00:00.000Z"),
        DocumentRef(id="1", name="a.md"),
    ]
    url, params, timeout = session.calls[0]
    assert url == DRIVE_FILES_URL
    assert params["q"].startswith("'folder-x' in parents")
    assert "mimeType='text/markdown'" in params["q"]
    assert params["orderBy"] == "name desc"
    assert params["key"] == "key-y"
    assert timeout == 5


def test_list_documents_follows_pages():
    """nextPageToken is followed until exhausted."""
    session = StubSession(
        StubResponse({"files": [{"id": "1", "name": "c.md"}], "nextPageToken": "p2"}),
        StubResponse({"files": [{"id": "2", "name": "b.md"}]}),
    )
    refs = DriveSource("f", "k", session=session).list_documents()
    assert [r.name for r in refs] == ["c.md", "b.md"]
    assert session.calls[1][1]["pageToken"] == "p2"


def test_list_documents_missing_files_is_empty():
    """A payload without 'files' lists nothing."""
    assert DriveSource("f", "k", session=StubSession(StubResponse({}))).list_documents() == []


@pytest.mark.parametrize("response", [
    requests.ConnectionError("offline"),
    StubResponse({"error": {"code": 403}}, status=403),
    StubResponse(bad_json=True),
    StubResponse(["not", "a", "dict"]),
    StubResponse({"files": "nope"}),
    StubResponse({"files": [{"name": "no-id.md"}]}),
])
def test_list_documents_failures(response):
    """Transport errors, HTTP errors and malformed payloads raise ListingError."""
    with pytest.raises(ListingError):
        DriveSource("f", "k", session=StubSession(response)).list_documents()


# --- DriveSource.fetch_text ---

def test_fetch_text_decodes_utf8():
    """Downloads use alt=media and decode as UTF-8 regardless of headers."""
    session = StubSession(StubResponse(content="# 週報\n".encode("utf-8")))
    text = DriveSource("f", "k", session=session).fetch_text(DocumentRef(id="abc", name="w.md"))
    assert text == "# 週報\n"
    url, params, _ = session.calls[0]
    assert url == f"{DRIVE_FILES_URL}/abc"
    assert params == {"alt": "media", "key": "k"}


@pytest.mark.parametrize("response", [
    requests.Timeout("slow"),
    StubResponse(status=404),
    StubResponse(content=b"\xff\xfe\xfa"),
])
def test_fetch_text_failures(response):
    """Download problems raise DocumentError naming the document."""
    with pytest.raises(DocumentError, match="w.md") as exc_info:
        DriveSource("f", "k", session=StubSession(response)).fetch_text(DocumentRef(id="abc", name="w.md"))
    assert exc_info.value.doc_id == "abc"


def test_fetch_text_drops_byte_order_mark():
    """A leading UTF-8 BOM is removed so front matter stays anchored at the start."""
    session = StubSession(StubResponse(content="\ufeff---\ntitle: T\n---\nBody".encode("utf-8")))
    text = DriveSource("f", "k", session=session).fetch_text(DocumentRef(id="abc", name="w.md"))
    assert text == "---\ntitle: T\n---\nBody"


# --- DirectorySource ---

def test_directory_source_bom_file_keeps_frontmatter(tmp_path):
    """Front matter of a BOM-prefixed file is parsed, not leaked into the body."""
    (tmp_path / "bom.md").write_text("\ufeff---\ntitle: Real Title\ntags: x\n---\n# H\nBody", encoding="utf-8")
    source = DirectorySource(tmp_path)
    ref, = source.list_documents()
    raw = RawDocument.from_ref(ref, source.fetch_text(ref))
    record = build_record(raw, parse_document(raw), 1)
    assert record.title == "Real Title"
    assert record.tags == ("x",)
    assert record.excerpt == "Body"


def test_directory_source_lists_name_desc(tmp_path):
    """Files are listed by name descending; subdirectories are ignored."""
    for name in ["a.md", "c.md", "b.txt"]:
        (tmp_path / name).write_text(name, encoding="utf-8")
    (tmp_path / "sub").mkdir()
    refs = DirectorySource(tmp_path).list_documents()
    assert [r.name for r in refs] == ["c.md", "b.txt", "a.md"]


def test_directory_source_mtime_and_fetch(tmp_path):
    """modified_time is the file mtime in UTC ISO form; fetch reads UTF-8."""
    p = tmp_path / "note.md"
    p.write_text("本文", encoding="utf-8")
    os.utime(p, (1768473000, 1768473000))  # 2026-01-15T10:30:00Z
    ref, = DirectorySource(tmp_path).list_documents()
    assert ref.modified_time.split("T")[0] == "2026-01-15"
    assert DirectorySource(tmp_path).fetch_text(ref) == "本文"


def test_directory_source_missing_dir(tmp_path):
    """A missing directory is a listing failure."""
    with pytest.raises(ListingError):
        DirectorySource(tmp_path / "missing").list_documents()
