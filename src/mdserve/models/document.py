from __future__ import annotations

from pydantic import BaseModel

from mdserve.models.heading import Heading, TocNode


class DocumentEntry(BaseModel):
    """A file or directory below the document root."""

    name: str
    path: str  # POSIX path relative to the root
    is_directory: bool = False


class DocumentIndex(BaseModel):
    """Listing of the document root, each list sorted by name."""

    directories: list[DocumentEntry] = []
    files: list[DocumentEntry] = []


class RenderedDocument(BaseModel):
    """Everything the view page needs for one Markdown document."""

    source: str  # Markdown after the indent fix
    html: str
    headings: list[Heading]
    toc: list[TocNode]
