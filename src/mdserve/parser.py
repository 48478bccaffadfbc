"""Heading parser for Markdown documents.

Single-pass algorithm that extracts H1-H6 headings from Markdown content,
suppressing headings inside fenced code blocks. Each heading gets display text
with inline markup stripped and a unique anchor id matching the id the
renderer puts on the heading element.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from mdserve.anchors import AnchorRegistry, generate_heading_id, normalize_anchor
from mdserve.fences import toggle_fence
from mdserve.models.heading import Heading

if TYPE_CHECKING:
    from collections.abc import Iterator

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_EXPLICIT_ID_RE = re.compile(r"\s+\{#([^}\s]+)\}\s*$")

# Applied in order by clean_markdown.
_INLINE_CODE_RE = re.compile(r"`([^`]+)`")
_EMPHASIS_RES = (
    re.compile(r"\*\*([^*]+)\*\*"),
    re.compile(r"\*([^*]+)\*"),
    re.compile(r"__([^_]+)__"),
    re.compile(r"_([^_]+)_"),
)
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\([^)]+\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_STRIKETHROUGH_RE = re.compile(r"~~([^~]+)~~")
_HTML_TAG_RE = re.compile(r"<[^>]+>")


def clean_markdown(text: str) -> str:
    """Strip inline Markdown formatting from heading text.

    Code spans, emphasis, images, links and strikethrough are unwrapped to
    their visible text; any remaining HTML tags are dropped.
    """
    text = _INLINE_CODE_RE.sub(r"\1", text)
    for pattern in _EMPHASIS_RES:
        text = pattern.sub(r"\1", text)
    # Images before links, or "![alt](src)" would leave a stray "!"
    text = _IMAGE_RE.sub(r"\1", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _STRIKETHROUGH_RE.sub(r"\1", text)
    text = _HTML_TAG_RE.sub("", text)
    return text.strip()


def split_explicit_id(raw_text: str) -> tuple[str, str | None]:
    """Split a trailing ``{#id}`` marker off heading text.

    Returns ``(text, id)``; ``id`` is None when there is no marker.
    """
    match = _EXPLICIT_ID_RE.search(raw_text)
    if match is None:
        return raw_text, None
    return raw_text[: match.start()].strip(), match.group(1)


def iter_heading_lines(content: str) -> Iterator[tuple[int, str, str]]:
    """Yield ``(level, text, anchor)`` for every heading line outside fences.

    ``anchor`` is the normalized explicit or derived id before duplicate
    resolution.
    """
    in_code_block = False

    for line in content.split("\n"):
        # Rule 1: code block tracking
        next_state = toggle_fence(in_code_block, line)
        if next_state != in_code_block:
            in_code_block = next_state
            continue

        if in_code_block:
            continue

        # Rule 2: heading detection (H1-H6)
        match = _HEADING_RE.match(line.strip())
        if not match:
            continue

        raw_text, explicit_id = split_explicit_id(match.group(2).strip())
        text = clean_markdown(raw_text)
        anchor = explicit_id if explicit_id is not None else generate_heading_id(text)
        yield len(match.group(1)), text, normalize_anchor(anchor)


def extract_headings(content: str | bytes) -> list[Heading]:
    """Extract headings from Markdown content in document order.

    Never fails: lines that do not look like ATX headings are skipped and
    undecodable bytes are replaced. Anchor ids are unique within the result.
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")

    anchors = AnchorRegistry()
    return [
        Heading(level=level, text=text, id=anchors.claim(anchor))
        for level, text, anchor in iter_heading_lines(content)
    ]
