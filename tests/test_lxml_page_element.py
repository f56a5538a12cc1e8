"""Tests for LxmlPageElement and CheckedElement.

Covers query delegation, count validation and link resolution.
"""

import pytest
from lxml import html

from mlscraper.common.checked_html import CheckedElement
from mlscraper.common.exceptions import (
    SelectorCountError,
)
from mlscraper.common.lxml_page_element import (
    LxmlPageElement,
)


@pytest.fixture
def simple_page():
    """Simple HTML page for testing."""
    html_content = """
    <html>
    <body>
        <div id="main">
            <h1>Test Page</h1>
            <table>
                <tr class="row"><td>Cell 1</td><td>Cell 2</td></tr>
                <tr class="row"><td>Cell 3</td><td>Cell 4</td></tr>
            </table>
        </div>
    </body>
    </html>
    """
    doc = html.fromstring(html_content)
    checked = CheckedElement(doc, "https://example.com/page")
    return LxmlPageElement(checked, "https://example.com/page")


@pytest.fixture
def links_page():
    """HTML page with links for testing."""
    return LxmlPageElement.from_html(
        """
        <html>
        <body>
            <nav>
                <a href="/page1" class="nav-link">Page 1</a>
                <a href="/page2" class="nav-link">  Page 2
                </a>
                <a href="https://external.com/page3">External</a>
            </nav>
            <div>
                <a>No href</a>
            </div>
        </body>
        </html>
        """,
        "https://example.com/",
    )


def test_query_xpath_delegation(simple_page):
    """query_xpath should wrap results as LxmlPageElements."""
    rows = simple_page.query_xpath("//tr[@class='row']", "rows")

    assert len(rows) == 2
    assert all(isinstance(row, LxmlPageElement) for row in rows)


def test_nested_queries(simple_page):
    """Child elements should support their own relative queries."""
    rows = simple_page.query_xpath("//tr", "rows", min_count=2)

    for row in rows:
        cells = row.query_css("td", "cells")
        assert len(cells) == 2


def test_query_xpath_ignores_text_results(simple_page):
    """Text nodes and scalars selected by XPath should not become elements."""
    assert simple_page.query_xpath("//td/text()", "cell texts", min_count=0) == []
    assert simple_page.query_xpath("count(//td)", "cell count", min_count=0) == []


def test_query_css_delegation(simple_page):
    """query_css should wrap results as LxmlPageElements."""
    rows = simple_page.query_css("tr.row", "rows")

    assert len(rows) == 2
    assert all(isinstance(row, LxmlPageElement) for row in rows)


def test_text_content(simple_page):
    """text_content should return element text."""
    h1 = simple_page.query_xpath("//h1", "heading", min_count=1, max_count=1)[
        0
    ]

    assert h1.text_content() == "Test Page"


def test_get_attribute(links_page):
    """get_attribute should return attribute value."""
    link = links_page.query_xpath("//a[@class='nav-link']", "nav links")[0]

    assert link.get_attribute("href") == "/page1"
    assert link.get_attribute("class") == "nav-link"
    assert link.get_attribute("nonexistent") is None


def test_min_count_violation_raises(simple_page):
    """A query matching fewer elements than min_count should raise."""
    with pytest.raises(SelectorCountError) as exc_info:
        simple_page.query_css("h2", "subheading")

    assert exc_info.value.actual_count == 0
    assert exc_info.value.selector_type == "css"
    assert exc_info.value.url == "https://example.com/page"


def test_max_count_violation_raises(simple_page):
    """A query matching more elements than max_count should raise."""
    with pytest.raises(SelectorCountError) as exc_info:
        simple_page.query_xpath("//td", "cells", max_count=2)

    assert exc_info.value.actual_count == 4
    assert "between 1 and 2" in str(exc_info.value)


def test_min_count_zero_allows_no_matches(simple_page):
    """min_count=0 should turn a missing element into an empty list."""
    assert simple_page.query_css("h2", "subheading", min_count=0) == []


def test_invalid_css_raises_structural_exception(simple_page):
    """An unparseable CSS selector should raise with selector context."""
    with pytest.raises(SelectorCountError) as exc_info:
        simple_page.query_css("tr[", "broken selector", min_count=0)

    assert exc_info.value.selector == "tr["


def test_find_links_by_xpath(links_page):
    """find_links should find links by XPath selector."""
    links = links_page.find_links("//a[@class='nav-link']", "nav links")

    assert len(links) == 2
    assert links[0].url == "https://example.com/page1"
    assert links[0].text == "Page 1"
    assert links[1].text == "Page 2"


def test_find_links_by_css(links_page):
    """find_links should find links by CSS selector."""
    links = links_page.find_links("a.nav-link", "nav links")

    assert [link.url for link in links] == [
        "https://example.com/page1",
        "https://example.com/page2",
    ]


def test_links_skips_anchors_without_href(links_page):
    """links() should return every <a href> in document order."""
    links = links_page.links()

    assert [link.text for link in links] == ["Page 1", "Page 2", "External"]
    assert links[2].url == "https://external.com/page3"


def test_from_html_keeps_url():
    """from_html should record the page URL for link resolution."""
    page = LxmlPageElement.from_html(
        '<html><body><a href="x/">x</a></body></html>',
        "https://example.com/a/",
    )

    assert page.url == "https://example.com/a/"
    assert page.links()[0].url == "https://example.com/a/x/"


def test_from_html_empty_document():
    """An empty serialization should still produce a queryable page."""
    page = LxmlPageElement.from_html("", "about:blank")

    assert page.links() == []


def test_invalid_xpath_raises_structural_exception(simple_page):
    """An unparseable XPath should raise with the parser error chained."""
    with pytest.raises(SelectorCountError) as exc_info:
        simple_page.query_xpath("//tr[", "broken xpath", min_count=0)

    assert exc_info.value.selector_type == "xpath"
    assert exc_info.value.__cause__ is not None


def test_error_message_names_selector_and_url(simple_page):
    with pytest.raises(SelectorCountError) as exc_info:
        simple_page.query_css("h1", "heading", min_count=2, max_count=2)

    message = str(exc_info.value)
    assert "Expected exactly 2 elements for 'heading', found 1" in message
    assert "URL: https://example.com/page" in message
    assert "selector: h1" in message
