"""Errors raised while reading Music League pages.

Two kinds of failure reach callers:

- MarkupAssumptionError (and SelectorCountError below it): a checked query
  found a number of nodes outside its declared range, or its selector could
  not be parsed. The locators accept zero matches everywhere, so markup
  drift shows up as empty fields rather than as this error. Any exception
  other than NavigationFailure raised while a round is read makes the
  engine record nothing for that round.
- NavigationFailure: the browser could not load or read a URL. It ends the
  run; rows already appended to the output are kept.

Empty selector matches, rounds without submissions and leagues without
rounds are normal outcomes and have no exception type.
"""

from typing import Any


def expected_range(minimum: int, maximum: int | None) -> str:
    """Phrase a count expectation, e.g. ``"between 1 and 2"``."""
    if maximum is None:
        return f"at least {minimum}"
    if minimum == maximum:
        return f"exactly {minimum}"
    return f"between {minimum} and {maximum}"


class MarkupAssumptionError(Exception):
    """The rendered markup broke an assumption a locator relies on.

    Attributes:
        message: One-line summary of what was expected and found.
        url: URL of the snapshot the query ran against.
        details: Selector, counts and other diagnostics, printed one per line.
    """

    def __init__(
        self,
        message: str,
        url: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.url = url
        self.details = dict(details or {})
        super().__init__(message)

    def __str__(self) -> str:
        lines = [self.message, f"URL: {self.url}"]
        lines.extend(f"  {key}: {value}" for key, value in self.details.items())
        return "\n".join(lines)


class SelectorCountError(MarkupAssumptionError):
    """A selector matched too few or too many nodes, or could not be parsed.

    An unparseable selector
    is reported the same way with ``actual_count`` 0 and the parser error
    chained as ``__cause__``.

    Attributes:
        selector: The XPath expression or CSS selector.
        selector_type: ``"xpath"`` or ``"css"``.
        description: What the locator was looking for.
        expected_min: Fewest matches accepted.
        expected_max: Most matches accepted; None for no limit.
        actual_count: Matches found.
    """

    def __init__(
        self,
        selector: str,
        selector_type: str,
        description: str,
        expected_min: int,
        expected_max: int | None,
        actual_count: int,
        url: str,
    ) -> None:
        self.selector = selector
        self.selector_type = selector_type
        self.description = description
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual_count = actual_count

        super().__init__(
            f"Expected {expected_range(expected_min, expected_max)} elements "
            f"for '{description}', found {actual_count}",
            url,
            {"selector": selector, "selector_type": selector_type},
        )


class NavigationFailure(Exception):
    """The browser surface could not load a requested location.

    Raised for timeouts, network errors and a closed browser alike. Never
    retried automatically.

    Attributes:
        url: The URL that could not be loaded.
        reason: Short description of the underlying failure.
        message: ``"Navigation to {url} failed: {reason}"``.
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        self.message = f"Navigation to {url} failed: {reason}"
        super().__init__(self.message)
