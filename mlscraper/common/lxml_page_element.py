"""Static DOM snapshots.

The page accessor serializes the rendered page and calls
``LxmlPageElement.from_html``; everything downstream queries the result
without touching the browser.
"""

from __future__ import annotations

from urllib.parse import urljoin

from lxml import html

from mlscraper.common.checked_html import CheckedElement
from mlscraper.common.page_element import Link


def _is_xpath(selector: str) -> bool:
    return selector.startswith(("/", ".", "("))


class LxmlPageElement:
    """PageElement over a parsed HTML tree.

    Elements returned by queries keep the snapshot URL, so a link found
    anywhere in the tree resolves against the page it came from.
    """

    def __init__(self, element: CheckedElement, url: str = "") -> None:
        self._node = element
        self._url = url

    @classmethod
    def from_html(cls, content: str, url: str = "") -> LxmlPageElement:
        """Parse a serialized document; an empty string gives an empty page."""
        root = html.fromstring(content or "<html></html>")
        return cls(CheckedElement(root, url), url)

    @property
    def url(self) -> str:
        return self._url

    def _wrap(self, nodes: list[CheckedElement]) -> list[LxmlPageElement]:
        return [LxmlPageElement(node, self._url) for node in nodes]

    def query_xpath(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[LxmlPageElement]:
        return self._wrap(
            self._node.xpath(selector, description, min_count, max_count)
        )

    def query_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[LxmlPageElement]:
        return self._wrap(
            self._node.css(selector, description, min_count, max_count)
        )

    def text_content(self) -> str:
        return self._node.text()

    def get_attribute(self, name: str) -> str | None:
        return self._node.attribute(name)

    def find_links(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[Link]:
        """Resolve the anchors matched by ``selector`` into Links.

        Selectors starting with ``/``, ``.`` or ``(`` are XPath and anything
        else is CSS. The count check applies to the matched anchors; those
        without an href are then dropped.
        """
        query = self.query_xpath if _is_xpath(selector) else self.query_css
        anchors = query(selector, description, min_count, max_count)

        links: list[Link] = []
        for anchor in anchors:
            href = (anchor.get_attribute("href") or "").strip()
            if not href:
                continue
            links.append(
                Link(
                    url=urljoin(self._url, href),
                    text=anchor.text_content().strip(),
                )
            )
        return links

    def links(self) -> list[Link]:
        """Every anchor with an href, in document order."""
        return self.find_links(".//a[@href]", "anchors", min_count=0)
