from __future__ import annotations

from mdserve.models.document import DocumentEntry, DocumentIndex, RenderedDocument
from mdserve.models.heading import Heading, TocNode

__all__ = [
    # headings
    "Heading",
    "TocNode",
    # documents
    "DocumentEntry",
    "DocumentIndex",
    "RenderedDocument",
]
