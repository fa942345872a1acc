"""
Rendered-page driver built on Playwright.

Opens a student's page in headless Chromium and exposes the read-only
queries the page checks rely on.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from playwright.async_api import Page, async_playwright

from .config import NAVIGATION_TIMEOUT_MS, VIEWPORT

logger = logging.getLogger(__name__)

_COMPUTED_STYLE_JS = """
(element, properties) => {
    const style = window.getComputedStyle(element);
    return properties.map((property) => style.getPropertyValue(property));
}
"""


@asynccontextmanager
async def open_page(
    html_path: Path,
    viewport: dict[str, int] | None = None,
    timeout_ms: int = NAVIGATION_TIMEOUT_MS,
) -> AsyncIterator[Page]:
    """
    Open a local HTML file in a headless browser.

    The browser is closed when the block exits, whether it exits normally
    or by an exception.

    Args:
        html_path: Path to the HTML file.
        viewport: Browser viewport size.
        timeout_ms: Navigation timeout in milliseconds.

    Yields:
        The loaded Playwright page.
    """
    url = Path(html_path).resolve().as_uri()
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        try:
            page = await browser.new_page(viewport=viewport or VIEWPORT)
            logger.debug("Opening %s", url)
            await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
            yield page
        finally:
            await browser.close()
            logger.debug("Browser closed")


async def has_element(page: Page, selector: str) -> bool:
    """Whether at least one element matches the CSS selector."""
    return await page.query_selector(selector) is not None


async def get_style(page: Page, selector: str, properties: list[str]) -> list[str]:
    """
    Read computed style values of the first element matching a selector.

    Args:
        page: Loaded page.
        selector: CSS selector of the element.
        properties: CSS property names.

    Returns:
        Computed values in the order of `properties`.
    """
    return await page.eval_on_selector(selector, _COMPUTED_STYLE_JS, properties)


async def evaluate(page: Page, expression: str) -> Any:
    """Evaluate a read-only JavaScript expression in the page."""
    return await page.evaluate(expression)


async def take_screenshot(page: Page, path: Path) -> Path:
    """Save a full-page JPEG screenshot and return its path."""
    await page.screenshot(path=str(path), full_page=True, type="jpeg")
    return Path(path)
