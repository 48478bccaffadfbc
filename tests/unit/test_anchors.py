"""Unit tests for anchor slugs and duplicate resolution.

The slug cases pin the anchor scheme shared by the parser and the renderer;
TestRendererParity checks the renderer still agrees with the parser.
"""

from __future__ import annotations

import re

import pytest

from mdserve.anchors import AnchorRegistry, generate_heading_id, normalize_anchor
from mdserve.renderer import render_document


class TestGenerateHeadingId:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Introduction", "introduction"),
            ("Getting Started", "getting-started"),
            ("Getting Started: Install & Run", "getting-started-install-run"),
            ("snake_case_name", "snake_case_name"),
            ("already-hyphenated", "already-hyphenated"),
            ("a -- b", "a-b"),
            ("  --Trim me--  ", "trim-me"),
            ("What's new?", "what-s-new"),
            ("2.0 Release", "2-0-release"),
            ("Café au lait", "caf-au-lait"),
            ("UPPER lower", "upper-lower"),
            ("", ""),
            ("!!!", ""),
        ],
    )
    def test_slug(self, text: str, expected: str) -> None:
        assert generate_heading_id(text) == expected

    @pytest.mark.parametrize("text", ["Hello World", "A/B testing", "x\ty\nz", "(nested) [brackets]"])
    def test_slug_has_no_whitespace_or_edge_hyphens(self, text: str) -> None:
        slug = generate_heading_id(text)
        assert not re.search(r"\s", slug)
        assert "--" not in slug
        assert not slug.startswith("-") and not slug.endswith("-")


class TestNormalizeAnchor:
    def test_digit_leading_gets_prefix(self) -> None:
        assert normalize_anchor("2-0-release") == "heading-2-0-release"

    def test_letter_leading_unchanged(self) -> None:
        assert normalize_anchor("release-2-0") == "release-2-0"

    def test_empty_falls_back(self) -> None:
        assert normalize_anchor("") == "heading"


class TestAnchorRegistry:
    def test_first_occurrence_unchanged(self) -> None:
        registry = AnchorRegistry()
        assert registry.claim("setup") == "setup"

    def test_repeats_are_numbered_from_one(self) -> None:
        registry = AnchorRegistry()
        assert [registry.claim("foo") for _ in range(4)] == ["foo", "foo-1", "foo-2", "foo-3"]

    def test_independent_bases(self) -> None:
        registry = AnchorRegistry()
        claimed = [registry.claim(anchor) for anchor in ["a", "b", "a", "b", "a"]]
        assert claimed == ["a", "b", "a-1", "b-1", "a-2"]

    def test_literal_suffix_seen_first(self) -> None:
        registry = AnchorRegistry()
        assert registry.claim("foo-1") == "foo-1"
        assert registry.claim("foo") == "foo"
        assert registry.claim("foo") == "foo-2"

    def test_generated_suffix_seen_later(self) -> None:
        registry = AnchorRegistry()
        assert registry.claim("foo") == "foo"
        assert registry.claim("foo") == "foo-1"
        assert registry.claim("foo-1") == "foo-1-1"
        assert registry.claim("foo") == "foo-2"

    def test_membership_and_len(self) -> None:
        registry = AnchorRegistry()
        registry.claim("x")
        registry.claim("x")
        assert "x" in registry and "x-1" in registry
        assert "x-2" not in registry
        assert len(registry) == 2


_PARITY_DOCUMENT = """\
# Project Title

## Installation

## Usage `cli` **flags**

### Options {#opts}

## Usage `cli` **flags**

## 2.0 Release

## Links to [docs](https://example.com) and ~~old~~ pages

## Snake_case and a <em>tag</em>

- list item

  ```bash
  # not a heading
  ```

## Installation
"""


class TestRendererParity:
    """Rendered heading ids must equal the ids the parser reports."""

    def test_rendered_ids_match_extracted_ids(self) -> None:
        document = render_document(_PARITY_DOCUMENT)
        extracted = [heading.id for heading in document.headings]
        rendered = re.findall(r'<h[1-6] id="([^"]+)"', document.html)
        assert rendered == extracted
        assert extracted == [
            "project-title",
            "installation",
            "usage-cli-flags",
            "opts",
            "usage-cli-flags-1",
            "heading-2-0-release",
            "links-to-docs-and-old-pages",
            "snake_case-and-a-tag",
            "installation-1",
        ]


class TestReservedAnchors:
    def test_reserved_ids_are_never_claimed(self) -> None:
        registry = AnchorRegistry()
        registry.reserve(["setup", "setup-1"])
        assert registry.claim("setup") == "setup-2"
        assert registry.claim("other") == "other"
        assert "setup-1" in registry
