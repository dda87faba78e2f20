"""Document sources: Google Drive folder listing/download and local directories"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

import requests
from pydantic import ValidationError

from drivepress.core.models import DocumentRef
from drivepress.errors import DocumentError, ListingError


logger = logging.getLogger(__name__)

DRIVE_FILES_URL = "https://www.googleapis.com/drive/v3/files"
SOURCE_MIME_TYPES = ("text/plain", "text/markdown")


class DocumentSource(Protocol):
    def list_documents(self) -> list[DocumentRef]:
        """Return document refs ordered by name, descending."""
        ...

    def fetch_text(self, ref: DocumentRef) -> str:
        ...


class DriveSource:
    """Public Drive folder accessed through the v3 REST API with an API key."""

    def __init__(
        self,
        folder_id: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        ):
        self.folder_id = folder_id
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def _query(self) -> str:
        mimes = " or ".join(f"mimeType='{m}'" for m in SOURCE_MIME_TYPES)
        return f"'{self.folder_id}' in parents and ({mimes}) and trashed=false"

    def list_documents(self) -> list[DocumentRef]:
        """List every page of the folder; any transport or payload problem is a ListingError."""
        refs: list[DocumentRef] = []
        page_token = None
        while True:
            params = {
                "q": self._query(),
                "orderBy": "name desc",
                "fields": "nextPageToken,files(id,name,modifiedTime)",
                "key": self.api_key,
            }
            if page_token:
                params["pageToken"] = page_token
            try:
                response = self.session.get(DRIVE_FILES_URL, params=params, timeout=self.timeout)
                response.raise_for_status()
                data = response.json()
            except (requests.RequestException, ValueError) as e:
                raise ListingError(f"Failed to list folder {self.folder_id}: {e}") from e

            if not isinstance(data, dict) or not isinstance(data.get("files", []), list):
                raise ListingError(f"Malformed listing for folder {self.folder_id}: {str(data)[:200]}")
            try:
                refs.extend(
                    DocumentRef(id=f["id"], name=f["name"], modified_time=f.get("modifiedTime"))
                    for f in data.get("files", [])
                )
            except (KeyError, TypeError, ValidationError) as e:
                raise ListingError(f"Malformed file entry in folder {self.folder_id}: {e}") from e

            page_token = data.get("nextPageToken")
            if not page_token:
                break
        logger.debug("Listed %d file(s) in folder %s", len(refs), self.folder_id)
        return refs

    def fetch_text(self, ref: DocumentRef) -> str:
        """Download a file's content as UTF-8 text, dropping a leading byte-order mark."""
        try:
            response = self.session.get(
                f"{DRIVE_FILES_URL}/{ref.id}",
                params={"alt": "media", "key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.content.decode("utf-8-sig")
        except (requests.RequestException, UnicodeDecodeError) as e:
            raise DocumentError(ref.name, ref.id, str(e)) from e


class DirectorySource:
    """Local directory of source files; ids are the file paths."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def list_documents(self) -> list[DocumentRef]:
        if not self.root.is_dir():
            raise ListingError(f"Source directory not found: {self.root}")
        refs = []
        for p in sorted((p for p in self.root.iterdir() if p.is_file()), key=lambda p: p.name, reverse=True):
            mtime = datetime.fromtimestamp(p.stat().st_mtime, tz=timezone.utc)
            refs.append(DocumentRef(id=str(p), name=p.name, modified_time=mtime.isoformat()))
        return refs

    def fetch_text(self, ref: DocumentRef) -> str:
        try:
            return Path(ref.id).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentError(ref.name, ref.id, str(e)) from e
