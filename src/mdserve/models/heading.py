from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Iterator


class Heading(BaseModel):
    """One Markdown heading, as listed in the table of contents."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1, le=6)
    text: str  # Display form, inline markup stripped
    id: str  # Anchor id, unique within its document


class TocNode(BaseModel):
    """A heading and the headings nested under it."""

    model_config = ConfigDict(frozen=True)

    heading: Heading
    children: list[TocNode] = Field(default_factory=list)

    @property
    def level(self) -> int:
        return self.heading.level

    def walk(self) -> Iterator[TocNode]:
        """Yield this node and all of its descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()
