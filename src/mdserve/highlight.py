"""Syntax highlighting for the "Show Source" view.

Wraps Markdown constructs in ``<span class="md-...">`` elements over the
HTML-escaped source. Fenced code blocks are set aside first so nothing
inside them is highlighted as Markdown.
"""

from __future__ import annotations

import re

from markupsafe import Markup, escape

# Placeholders use control characters that escaped text cannot contain.
_PLACEHOLDER = "\x02{}\x03"
_PLACEHOLDER_RE = re.compile("\x02(\\d+)\x03")

_CODE_BLOCK_RE = re.compile(r"^(`{3}[^\n]*\n)([\s\S]*?)^(`{3})$", re.MULTILINE)

# Applied in order to the escaped text.
_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"`[^`\n]+`"), r'<span class="md-code">\g<0></span>'),
    (re.compile(r"^(#{1,6}\s+.+)$", re.MULTILINE), r'<span class="md-heading">\1</span>'),
    (re.compile(r"(\*\*|__)([^*_\n]+)(\*\*|__)"), r'<span class="md-bold">\1\2\3</span>'),
    (re.compile(r"(?<![\w*])([*_])([^*_\n]+)\1(?![\w*])"), r'<span class="md-italic">\1\2\1</span>'),
    (re.compile(r"\[[^\]\n]+\]\([^)\n]+\)"), r'<span class="md-link">\g<0></span>'),
    (re.compile(r"^([ \t]*[-*+][ \t]+)", re.MULTILINE), r'<span class="md-list">\1</span>'),
    (re.compile(r"^(&gt;.*)$", re.MULTILINE), r'<span class="md-quote">\1</span>'),
    (re.compile(r"^([-*_]{3,})[ \t]*$", re.MULTILINE), r'<span class="md-hr">\1</span>'),
)


def highlight_markdown(source: str) -> Markup:
    """Return *source* escaped and wrapped in highlighting spans.

    Registered as the ``highlight_markdown`` Jinja filter.
    """
    text = str(escape(source))
    code_blocks: list[str] = []

    def _stash(match: re.Match[str]) -> str:
        code_blocks.append(f'<span class="md-code-block">{match.group(0)}</span>')
        return _PLACEHOLDER.format(len(code_blocks) - 1)

    text = _CODE_BLOCK_RE.sub(_stash, text)
    for pattern, replacement in _RULES:
        text = pattern.sub(replacement, text)
    text = _PLACEHOLDER_RE.sub(lambda m: code_blocks[int(m.group(1))], text)
    return Markup(text)
