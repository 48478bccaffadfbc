"""Document store: listing and reading Markdown files below a root directory.

All request paths are resolved against the root and rejected if they escape
it, symlinks included.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from mdserve.errors import ErrorCode, MdServeError
from mdserve.models.document import DocumentEntry, DocumentIndex

if TYPE_CHECKING:
    from collections.abc import Iterable


def list_documents(root: Path, extensions: Iterable[str] = (".md",)) -> DocumentIndex:
    """List directories and Markdown files below *root*.

    Hidden files are skipped, and hidden directories are skipped together
    with everything inside them.
    """
    root = root.resolve()
    suffixes = {ext.lower() for ext in extensions}
    directories: list[DocumentEntry] = []
    files: list[DocumentEntry] = []

    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place so os.walk never descends into hidden directories
        dirnames[:] = [name for name in dirnames if not name.startswith(".")]
        current = Path(dirpath)

        for name in dirnames:
            rel_path = (current / name).relative_to(root).as_posix()
            directories.append(DocumentEntry(name=rel_path, path=rel_path, is_directory=True))

        for name in filenames:
            if name.startswith("."):
                continue
            if Path(name).suffix.lower() not in suffixes:
                continue
            rel_path = (current / name).relative_to(root).as_posix()
            files.append(DocumentEntry(name=rel_path, path=rel_path))

    directories.sort(key=lambda entry: entry.name)
    files.sort(key=lambda entry: entry.name)
    return DocumentIndex(directories=directories, files=files)


def resolve_document(root: Path, relative_path: str) -> Path:
    """Resolve *relative_path* below *root*, refusing paths that escape it."""
    if not relative_path:
        raise MdServeError(ErrorCode.FILE_NOT_SPECIFIED, "File not specified")

    root = root.resolve()
    candidate = (root / relative_path).resolve()
    if not candidate.is_relative_to(root):
        raise MdServeError(ErrorCode.ACCESS_DENIED, "Access denied")
    return candidate


def read_document(root: Path, relative_path: str) -> bytes:
    """Read the raw bytes of a document below *root*."""
    path = resolve_document(root, relative_path)
    try:
        return path.read_bytes()
    except OSError as exc:
        # Missing files, directories and unreadable files all look the same
        raise MdServeError(ErrorCode.FILE_NOT_FOUND, "File not found") from exc
