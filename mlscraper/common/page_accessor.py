"""PageAccessor protocol: the browser surface the traversal engine drives.

The engine owns exactly one accessor for a run and performs one navigation at
a time. Implementations must only return from ``goto`` once the page reached
network quiescence and the post-navigation settle delay elapsed, so that a
following ``snapshot`` sees the rendered DOM.
"""

from __future__ import annotations

from typing import Protocol

from mlscraper.common.page_element import PageElement


class PageAccessor(Protocol):
    """Protocol for the navigation surface used by TraversalEngine."""

    async def goto(self, url: str, settle_ms: int = 0) -> None:
        """Navigate to a URL and wait for network quiescence.

        Args:
            url: Absolute URL to load.
            settle_ms: Extra delay after quiescence before returning.

        Raises:
            NavigationFailure: If the location cannot be loaded.
        """
        ...

    def current_url(self) -> str:
        """Return the URL the surface currently shows (after redirects)."""
        ...

    async def snapshot(self) -> PageElement:
        """Serialize the current DOM into a static PageElement."""
        ...

    async def wait_for_operator(self, message: str) -> None:
        """Suspend until the operator signals readiness. No timeout."""
        ...
