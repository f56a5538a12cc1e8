"""Playwright-backed page accessor for the Music League web app.

This module provides the browser surface the traversal engine drives: it
navigates, waits for network idle, and snapshots the rendered DOM into
static LxmlPageElements.
"""

from mlscraper.driver.playwright_driver.playwright_driver import (
    PlaywrightPageAccessor,
    wait_for_enter,
)

__all__ = ["PlaywrightPageAccessor", "wait_for_enter"]
