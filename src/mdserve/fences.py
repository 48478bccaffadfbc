"""Fenced code block detection.

Both the indent fixer and the heading parser walk documents line by line and
need to know when they are inside a backtick fence, where heading syntax is
inert. The patterns live here so the two scanners agree on what a fence is.
"""

from __future__ import annotations

import re

# Any line whose trimmed form starts with three or more backticks.
FENCE_RE = re.compile(r"^\s*`{3,}", re.ASCII)

# Indentation-aware forms used by the indent fixer. An opening fence may carry
# a language tag; a closing fence is backticks only.
OPENING_FENCE_RE = re.compile(r"^(\s+)`{3,}(\w*)", re.ASCII)
CLOSING_FENCE_RE = re.compile(r"^(\s+)`{3,}$", re.ASCII)


def is_fence_line(line: str) -> bool:
    """Return True if *line* opens or closes a backtick fence."""
    return FENCE_RE.match(line) is not None


def toggle_fence(in_fence: bool, line: str) -> bool:
    """Return the fence state after reading *line*."""
    if is_fence_line(line):
        return not in_fence
    return in_fence


def opening_fence_indent(line: str) -> int | None:
    """Width of the leading whitespace of an indented opening fence, else None."""
    match = OPENING_FENCE_RE.match(line)
    if match is None:
        return None
    return len(match.group(1))


def closing_fence_indent(line: str) -> int | None:
    """Width of the leading whitespace of an indented closing fence, else None."""
    match = CLOSING_FENCE_RE.match(line)
    if match is None:
        return None
    return len(match.group(1))
