"""Count-checked queries over an lxml tree.

Every query states how many matches it expects and raises SelectorCountError
outside that range, or when the selector itself cannot be parsed. The Music
League locators pass ``min_count=0`` throughout, because the app renders the
same card more than once and drops sub-elements freely: a page whose shape
changed yields empty fields and missing records, not an error. In practice
the error surfaces for a malformed selector constant or for a caller that
declares a firmer expectation.
"""

from __future__ import annotations

from cssselect import SelectorError
from lxml import etree
from lxml.html import HtmlElement

from mlscraper.common.exceptions import SelectorCountError


class CheckedElement:
    """An lxml element whose queries validate their match counts.

    Args:
        element: Parsed element to query.
        url: Snapshot URL, carried into errors and child elements.

    Example::

        root = CheckedElement(lxml.html.fromstring(content), url)
        for card in root.css(".card-body", "submission cards", min_count=0):
            titles = card.css("h6.card-title", "song title", max_count=1)
    """

    __slots__ = ("element", "url")

    def __init__(self, element: HtmlElement, url: str = "") -> None:
        self.element = element
        self.url = url

    def _expect(
        self,
        found: list[CheckedElement],
        selector: str,
        selector_type: str,
        description: str,
        min_count: int,
        max_count: int | None,
    ) -> list[CheckedElement]:
        too_many = max_count is not None and len(found) > max_count
        if len(found) < min_count or too_many:
            raise SelectorCountError(
                selector,
                selector_type,
                description,
                min_count,
                max_count,
                len(found),
                self.url,
            )
        return found

    def xpath(
        self,
        expression: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedElement]:
        """Elements selected by ``expression``; text and attribute hits are ignored."""
        try:
            result = self.element.xpath(expression)
        except etree.XPathError as e:
            raise SelectorCountError(
                expression, "xpath", description, min_count, max_count, 0,
                self.url,
            ) from e
        # count(), boolean() and friends return scalars
        if not isinstance(result, list):
            result = [result]
        nodes = [
            CheckedElement(node, self.url)
            for node in result
            if isinstance(node, HtmlElement)
        ]
        return self._expect(
            nodes, expression, "xpath", description, min_count, max_count
        )

    def css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedElement]:
        """Elements matching a CSS selector, the element itself included.

        Raises:
            SelectorCountError: On a count mismatch or a selector cssselect
                cannot translate.
        """
        try:
            matches = self.element.cssselect(selector)
        except SelectorError as e:
            raise SelectorCountError(
                selector, "css", description, min_count, max_count, 0, self.url
            ) from e
        nodes = [CheckedElement(match, self.url) for match in matches]
        return self._expect(
            nodes, selector, "css", description, min_count, max_count
        )

    def text(self) -> str:
        return self.element.text_content()

    def attribute(self, name: str) -> str | None:
        return self.element.get(name)
