"""The interface locators read pages through.

A PageElement is a static snapshot: the page accessor serializes the
rendered DOM once per navigation, so locators never hold a live browser
reference and can be tested against plain HTML strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Link:
    """An anchor found in a snapshot.

    Attributes:
        url: Absolute URL, resolved against the snapshot URL.
        text: Visible text, stripped. Image-only profile links give "".
    """

    url: str
    text: str


class PageElement(Protocol):
    """A node of a page snapshot with count-checked queries.

    Every query takes a ``description`` of what it looks for and the range
    of matches it accepts (``min_count`` to ``max_count``, None meaning no
    upper bound). Out-of-range results raise SelectorCountError; pass
    ``min_count=0`` where absence is normal.
    """

    @property
    def url(self) -> str:
        """URL of the page the snapshot was taken from."""
        ...

    def query_xpath(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[PageElement]: ...

    def query_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[PageElement]: ...

    def text_content(self) -> str:
        """Text of the node and its descendants, unstripped."""
        ...

    def get_attribute(self, name: str) -> str | None: ...

    def find_links(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[Link]: ...

    def links(self) -> list[Link]:
        """All anchors with an href under this node, in document order."""
        ...
