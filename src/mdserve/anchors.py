"""Heading anchor identifiers.

The heading parser and the HTML renderer both derive anchors through this
module, so the ids in the table of contents always match the ids on the
rendered headings. The regression cases for the slug rule live in
tests/unit/test_anchors.py.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

_NON_SLUG_CHARS = re.compile(r"[^\w-]+", re.ASCII)
_HYPHEN_RUN = re.compile(r"-+")

# HTML ids may not start with a digit in the selectors the page script uses.
NUMERIC_ID_PREFIX = "heading-"
FALLBACK_ID = "heading"


def generate_heading_id(text: str) -> str:
    """Derive an anchor slug from cleaned heading text.

    Lower-cases, replaces every run of characters other than ASCII letters,
    digits, underscore and hyphen with one hyphen, collapses hyphen runs and
    trims hyphens from both ends.

    >>> generate_heading_id("Getting Started: Install & Run")
    'getting-started-install-run'
    """
    slug = _NON_SLUG_CHARS.sub("-", text.lower())
    slug = _HYPHEN_RUN.sub("-", slug)
    return slug.strip("-")


def normalize_anchor(anchor: str) -> str:
    """Make *anchor* a usable HTML id: never empty, never digit-leading."""
    if not anchor:
        anchor = FALLBACK_ID
    if anchor[0].isascii() and anchor[0].isdigit():
        anchor = NUMERIC_ID_PREFIX + anchor
    return anchor


class AnchorRegistry:
    """Per-document duplicate resolution for anchor ids.

    The first occurrence of an id is kept as is. The Nth repeat gets ``-N``
    appended to the original id, so ``setup`` repeated three times yields
    ``setup``, ``setup-1``, ``setup-2``. A suffixed candidate that an earlier
    heading already owns is skipped, which keeps every claimed id unique.

    Create one registry per document; never share one across documents.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._claimed: set[str] = set()

    def claim(self, anchor: str) -> str:
        """Return the unique id to use for the next heading with *anchor*."""
        if anchor not in self._counts and anchor not in self._claimed:
            self._counts[anchor] = 1
            self._claimed.add(anchor)
            return anchor

        count = self._counts.get(anchor, 1)
        candidate = f"{anchor}-{count}"
        while candidate in self._claimed:
            count += 1
            candidate = f"{anchor}-{count}"

        self._counts[anchor] = count + 1
        self._claimed.add(candidate)
        return candidate

    def reserve(self, anchors: Iterable[str]) -> None:
        """Mark *anchors* as taken without claiming them."""
        self._claimed.update(anchors)

    def __contains__(self, anchor: object) -> bool:
        return anchor in self._claimed

    def __len__(self) -> int:
        return len(self._claimed)
