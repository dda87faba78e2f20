"""Build error hierarchy"""

from typing import Optional


class BuildError(RuntimeError):
    """Base class for failures that stop or degrade a build."""


class ListingError(BuildError):
    """The document source listing failed or returned malformed data."""


class TemplateMissingError(BuildError):
    """A required template file could not be read."""


class DocumentError(BuildError):
    """Fetching or processing a single document failed."""

    def __init__(self, name: str, doc_id: Optional[str], reason: str):
        self.name = name
        self.doc_id = doc_id
        self.reason = reason
        super().__init__(f"Failed to process {name} (id={doc_id}): {reason}")
