"""Playwright page accessor for the Music League web app.

Music League has no public API and renders everything client-side, so the
harvester drives a real browser. Every page is read the same way:

1. Navigate and wait for network idle
2. Sleep a short settle delay for late rendering
3. Serialize the rendered DOM to HTML
4. Parse it with LXML and hand a static PageElement to the locators

The browser runs on a persistent profile directory so a login survives
between runs. Logging in is left to the operator: ``wait_for_operator``
prints a prompt and blocks until Enter is pressed in the terminal.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import threading
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import click
from playwright.async_api import (
    BrowserContext,
    Page,
    async_playwright,
)
from playwright.async_api import (
    Error as PlaywrightError,
)
from pyrate_limiter import Duration, InMemoryBucket, Limiter, Rate

from mlscraper.common.exceptions import NavigationFailure
from mlscraper.common.lxml_page_element import LxmlPageElement

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from mlscraper.config import RunConfig

logger = logging.getLogger(__name__)

OperatorSignal = Callable[[str], Awaitable[None]]

CLOSE_PROMPT = "Press Enter to close the browser..."


async def wait_for_enter(message: str) -> None:
    """Print ``message`` and block until a line arrives on stdin.

    The read happens in a daemon thread on the raw descriptor. The event
    loop keeps serving the browser meanwhile, and Ctrl-C during the wait
    ends the process without joining the blocked reader.
    """
    click.echo(f"\n{message}\n", err=True)

    loop = asyncio.get_running_loop()
    entered: asyncio.Future[bytes] = loop.create_future()

    def resolve(data: bytes) -> None:
        if not entered.done():
            entered.set_result(data)

    def read() -> None:
        data = os.read(sys.stdin.fileno(), 4096)
        try:
            loop.call_soon_threadsafe(resolve, data)
        except RuntimeError:
            # The loop closed while we were blocked; nobody is waiting.
            return

    threading.Thread(target=read, name="operator-input", daemon=True).start()
    await entered


class PlaywrightPageAccessor:
    """PageAccessor backed by a single Playwright page.

    Args:
        page: The page every navigation happens in.
        navigation_timeout_ms: Timeout for one navigation to reach network idle.
        rate_limiter: Optional limiter acquired before each navigation.
        operator_signal: Coroutine used by wait_for_operator.

    Example:
        async with PlaywrightPageAccessor.open(config) as accessor:
            await accessor.goto(config.entry_url, settle_ms=2000)
            page = await accessor.snapshot()
    """

    def __init__(
        self,
        page: Page,
        navigation_timeout_ms: int = 30000,
        rate_limiter: Limiter | None = None,
        operator_signal: OperatorSignal | None = None,
    ) -> None:
        self._page = page
        self.navigation_timeout_ms = navigation_timeout_ms
        self.rate_limiter = rate_limiter
        self.operator_signal = operator_signal or wait_for_enter

    @classmethod
    @asynccontextmanager
    async def open(
        cls,
        config: RunConfig,
        browser_type: str = "chromium",
        viewport: dict[str, int] | None = None,
        locale: str = "en-US",
        operator_signal: OperatorSignal | None = None,
        **launch_kwargs: Any,
    ) -> AsyncIterator[PlaywrightPageAccessor]:
        """Open a persistent browser context as an async context manager.

        The browser is closed on exit whether the body finished, failed or
        was cancelled.

        Args:
            config: Run configuration (profile dir, headless, pacing).
            browser_type: "chromium", "firefox", or "webkit" (default: "chromium").
            viewport: Window size (default: 1280x800).
            locale: Browser locale (default: "en-US").
            operator_signal: Override for the terminal Enter prompt.
            **launch_kwargs: Passed to ``launch_persistent_context``.

        Yields:
            Initialized PlaywrightPageAccessor.
        """
        if viewport is None:
            viewport = {"width": 1280, "height": 800}

        rate_limiter = None
        if config.navigations_per_minute:
            bucket = InMemoryBucket(
                [Rate(config.navigations_per_minute, Duration.MINUTE)]
            )
            # Wait for a free slot instead of raising when the bucket is full
            rate_limiter = Limiter(bucket, max_delay=Duration.MINUTE * 2)

        config.user_data_dir.mkdir(parents=True, exist_ok=True)

        playwright = await async_playwright().start()
        try:
            browser_launcher = getattr(playwright, browser_type)
            context: BrowserContext = (
                await browser_launcher.launch_persistent_context(
                    str(config.user_data_dir),
                    headless=config.headless,
                    viewport=viewport,
                    locale=locale,
                    **launch_kwargs,
                )
            )
            try:
                page = (
                    context.pages[0]
                    if context.pages
                    else await context.new_page()
                )
                accessor = cls(
                    page,
                    navigation_timeout_ms=config.navigation_timeout_ms,
                    rate_limiter=rate_limiter,
                    operator_signal=operator_signal,
                )

                yield accessor

                if config.hold_browser:
                    await accessor.wait_for_operator(CLOSE_PROMPT)

            finally:
                await context.close()

        finally:
            await playwright.stop()

    async def goto(self, url: str, settle_ms: int = 0) -> None:
        """Navigate to ``url``, wait for network idle, then settle.

        Raises:
            NavigationFailure: If Playwright cannot load the page, including
                timeouts and a closed browser.
        """
        if self.rate_limiter:
            await self.rate_limiter.try_acquire_async(
                name="navigation", weight=1
            )

        logger.debug(f"Navigating to {url}")
        try:
            await self._page.goto(
                url,
                wait_until="networkidle",
                timeout=self.navigation_timeout_ms,
            )
        except PlaywrightError as e:
            raise NavigationFailure(url, e.message) from e

        if settle_ms:
            await asyncio.sleep(settle_ms / 1000.0)

    def current_url(self) -> str:
        return self._page.url

    async def snapshot(self) -> LxmlPageElement:
        """Serialize the current DOM into an LxmlPageElement.

        Raises:
            NavigationFailure: If the page can no longer be read.
        """
        url = self._page.url
        try:
            html_content = await self._page.content()
        except PlaywrightError as e:
            raise NavigationFailure(url, e.message) from e
        return LxmlPageElement.from_html(html_content, url)

    async def wait_for_operator(self, message: str) -> None:
        logger.info("Waiting for operator signal")
        await self.operator_signal(message)
