"""Indentation fix for fenced code blocks nested in list items.

A fence indented by 2-4 spaces under a list item is ambiguous: renderers that
expect stricter list continuation indentation drop it out of the list as soon
as the block body contains a blank line. Shifting the whole block two spaces
to the right makes it unambiguous list content. Wider or zero indentation is
left alone.
"""

from __future__ import annotations

from typing import overload

from mdserve.fences import closing_fence_indent, opening_fence_indent

_MIN_LIST_INDENT = 2
_MAX_LIST_INDENT = 4
_SHIFT = "  "


@overload
def fix_indented_code_blocks(content: bytes) -> bytes: ...


@overload
def fix_indented_code_blocks(content: str) -> str: ...


def fix_indented_code_blocks(content: str | bytes) -> str | bytes:
    """Shift 2-4-space indented fenced code blocks right by two spaces.

    Returns the same type it was given. Bytes are decoded with
    ``surrogateescape`` so documents that need no fixing come back
    byte-identical, invalid UTF-8 included.

    A fence that is never closed keeps shifting every line up to the end of
    the document.
    """
    if isinstance(content, bytes):
        text = content.decode("utf-8", errors="surrogateescape")
        return _fix_lines(text).encode("utf-8", errors="surrogateescape")
    return _fix_lines(content)


def _fix_lines(text: str) -> str:
    result: list[str] = []
    in_code_block = False
    code_block_indent = 0

    for line in text.split("\n"):
        if not in_code_block:
            indent = opening_fence_indent(line)
            if indent is not None and _MIN_LIST_INDENT <= indent <= _MAX_LIST_INDENT:
                in_code_block = True
                code_block_indent = indent
                result.append(_SHIFT + line)
            else:
                result.append(line)
            continue

        # Only a closing fence at the opening width ends the block
        if closing_fence_indent(line) == code_block_indent:
            in_code_block = False
            code_block_indent = 0
        result.append(_SHIFT + line)

    return "\n".join(result)
