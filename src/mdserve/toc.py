"""Table-of-contents tree construction.

Nests the flat heading list the way Markdown heading levels nest: a node's
descendants are exactly the headings between it and the next heading of the
same or a shallower level. Skipped levels are tolerated, so an H4 directly
after an H1 becomes the H1's child with no filler nodes in between.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdserve.models.heading import TocNode

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mdserve.models.heading import Heading


def build_toc(headings: Iterable[Heading]) -> list[TocNode]:
    """Build the TOC forest from headings in document order."""
    roots: list[TocNode] = []
    # (level, children list) pairs; the level-0 sentinel owns the roots
    stack: list[tuple[int, list[TocNode]]] = [(0, roots)]

    for heading in headings:
        while len(stack) > 1 and stack[-1][0] >= heading.level:
            stack.pop()

        node = TocNode(heading=heading)
        stack[-1][1].append(node)
        stack.append((heading.level, node.children))

    return roots

