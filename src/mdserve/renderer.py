"""Markdown to HTML rendering.

Python-Markdown does the rendering. ``HeadingAnchorExtension`` replaces its
own heading id scheme with the one in mdserve.anchors. Each heading
extract_headings() reports carries exactly the id it reports, so TOC links
land on it. Headings the extractor never sees (setext, inside blockquotes)
get ids that cannot collide with those.
"""

from __future__ import annotations

import html as html_module
import re
from typing import TYPE_CHECKING, Any

import markdown
from markdown import util
from markdown.blockprocessors import HashHeaderProcessor
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from mdserve.anchors import AnchorRegistry, generate_heading_id, normalize_anchor
from mdserve.fixer import fix_indented_code_blocks
from mdserve.models.document import RenderedDocument
from mdserve.parser import extract_headings, iter_heading_lines
from mdserve.toc import build_toc

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from xml.etree.ElementTree import Element

    from markdown.blockparser import BlockParser

_HEADING_TAGS = frozenset(f"h{level}" for level in range(1, 7))
# Backslash escapes stay as STX<ord>ETX until the unescape tree processor
_ESCAPED_CHAR_RE = re.compile(f"{util.STX}(\\d+){util.ETX}")

MARKDOWN_EXTENSIONS = [
    "tables",
    "attr_list",
    "sane_lists",
    "pymdownx.superfences",
    "pymdownx.tilde",
]


def _element_text(el: Element) -> str:
    """Visible text of an element; images contribute their alt text."""
    parts: list[str] = []
    if el.tag == "img":
        parts.append(el.get("alt", ""))
    if el.text:
        parts.append(el.text)
    for child in el:
        parts.append(_element_text(child))
        if child.tail:
            parts.append(child.tail)
    return "".join(parts)


def heading_element_text(el: Element) -> str:
    """Heading text as the parser sees it, read back from the element tree."""
    text = _element_text(el)
    # Stashed raw HTML only reaches the output in the postprocessors
    text = util.HTML_PLACEHOLDER_RE.sub("", text)
    text = text.replace(util.AMP_SUBSTITUTE, "&")
    text = _ESCAPED_CHAR_RE.sub(lambda m: chr(int(m.group(1))), text)
    return html_module.unescape(text).strip()


class AtxHeadingProcessor(HashHeaderProcessor):
    """``#`` heading block processor that remembers the elements it creates."""

    def __init__(self, parser: BlockParser, created: set[Element]) -> None:
        super().__init__(parser)
        self.created = created

    def run(self, parent: Element, blocks: list[str]) -> None:
        super().run(parent, blocks)
        if len(parent) and parent[-1].tag in _HEADING_TAGS:
            self.created.add(parent[-1])


def _iter_headings(el: Element, quoted: bool = False) -> Iterator[tuple[Element, Element | None, bool]]:
    """Yield ``(heading, parent, inside_blockquote)`` in document order."""
    for child in el:
        if child.tag in _HEADING_TAGS:
            yield child, el, quoted
        else:
            yield from _iter_headings(child, quoted or child.tag == "blockquote")


def _on_list_marker_line(heading: Element, parent: Element | None) -> bool:
    # "- ## Title" puts the heading first in its item with no item text
    return (
        parent is not None
        and parent.tag == "li"
        and parent[0] is heading
        and not (parent.text or "").strip()
    )


class HeadingAnchorTreeprocessor(Treeprocessor):
    """Assign anchor ids to every heading, in document order.

    Headings that ``extract_headings`` reports get exactly the id it gave
    them. They are matched by level and anchor against *targets*, the
    extracted ``(level, anchor, id)`` triples. Every other heading (setext,
    quoted, or on a list marker line) draws from a registry in which all
    target ids are reserved.
    """

    def __init__(
        self,
        md: markdown.Markdown,
        targets: Sequence[tuple[int, str, str]],
        atx_headings: set[Element],
    ) -> None:
        super().__init__(md)
        self.targets = targets
        self.atx_headings = atx_headings

    def run(self, root: Element) -> None:
        others = AnchorRegistry()
        others.reserve(target_id for _, _, target_id in self.targets)
        position = 0

        for el, parent, quoted in _iter_headings(root):
            # An id set by attr_list ({#id}) wins over the derived slug
            anchor = normalize_anchor(el.get("id") or generate_heading_id(heading_element_text(el)))
            level = int(el.tag[1])

            match = None
            if el in self.atx_headings and not quoted and not _on_list_marker_line(el, parent):
                # Extracted headings may have no element (e.g. "#" lines in indented code)
                match = next(
                    (
                        index
                        for index in range(position, len(self.targets))
                        if self.targets[index][:2] == (level, anchor)
                    ),
                    None,
                )

            if match is None:
                el.set("id", others.claim(anchor))
            else:
                el.set("id", self.targets[match][2])
                position = match + 1


class HeadingAnchorExtension(Extension):
    def __init__(self, targets: Sequence[tuple[int, str, str]] = (), **kwargs: Any) -> None:
        self.targets = targets
        super().__init__(**kwargs)

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        atx_headings: set[Element] = set()
        md.parser.blockprocessors.register(
            AtxHeadingProcessor(md.parser, atx_headings), "hashheader", 70
        )
        # Priority below the inline processor (20) so heading text is final
        md.treeprocessors.register(
            HeadingAnchorTreeprocessor(md, self.targets, atx_headings), "mdserve_anchors", 4
        )


def heading_targets(text: str) -> list[tuple[int, str, str]]:
    """``(level, anchor, id)`` for each heading ``extract_headings`` reports."""
    anchors = AnchorRegistry()
    return [(level, anchor, anchors.claim(anchor)) for level, _, anchor in iter_heading_lines(text)]


def render_markdown(text: str) -> str:
    """Render Markdown text to an HTML fragment."""
    extension = HeadingAnchorExtension(targets=heading_targets(text))
    md = markdown.Markdown(extensions=[*MARKDOWN_EXTENSIONS, extension])
    return md.convert(text)


def render_document(content: str | bytes) -> RenderedDocument:
    """Run the full pipeline for one document.

    Fixes list-nested code fences, extracts headings from the fixed text,
    nests them into the TOC and renders the same fixed text to HTML.
    """
    fixed = fix_indented_code_blocks(content)
    if isinstance(fixed, bytes):
        fixed = fixed.decode("utf-8", errors="replace")

    headings = extract_headings(fixed)
    return RenderedDocument(
        source=fixed,
        html=render_markdown(fixed),
        headings=headings,
        toc=build_toc(headings),
    )
