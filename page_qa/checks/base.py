"""Check strategy base class and the helpers checks share."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Sequence
from typing import Any, ClassVar

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from page_qa.models.result import CheckResult
from page_qa.sessions import SessionBundle

log = logging.getLogger(__name__)


class Check(ABC):
    """A single page check.

    Implementations signal Pass when the condition holds, Fail when it was
    checked and does not hold (or a bounded wait expired), and NA when the
    element a flow starts from is absent. Faults are left to the caller.
    """

    # Upper bound for the whole check, enforced by the URL runner.
    timeout: ClassVar[float] = 15.0

    @abstractmethod
    async def run(self, session: SessionBundle) -> CheckResult:
        """Evaluate the check against the URL's sessions."""


async def wait_within(awaitable: Awaitable[Any], timeout: float) -> bool:
    """Await ``awaitable`` for at most ``timeout`` seconds.

    Returns:
        True when it completed, False when it timed out (asyncio or Playwright)

    """
    try:
        async with asyncio.timeout(timeout):
            await awaitable
    except (TimeoutError, PlaywrightTimeoutError):
        return False
    return True


async def first_present(page: Page, selectors: Sequence[str]) -> str | None:
    """Return the first selector that matches an element, if any."""
    for selector in selectors:
        if await page.query_selector(selector):
            return selector
    return None


async def first_visible(page: Page, selectors: Sequence[str]) -> str | None:
    """Return the first selector whose element is visible, if any."""
    for selector in selectors:
        element = await page.query_selector(selector)
        if element and await element.is_visible():
            return selector
    return None


async def scroll_and_find(
    page: Page,
    selectors: Sequence[str],
    max_screens: int = 5,
    pause: float = 0.5,
) -> str | None:
    """Scroll one viewport at a time until any selector matches.

    Lazy-loaded teasers only enter the DOM once scrolled near.
    """
    view_height = await page.evaluate("() => window.innerHeight")
    for _ in range(max_screens):
        if (selector := await first_present(page, selectors)) is not None:
            return selector
        await page.evaluate("(vh) => window.scrollBy(0, vh)", view_height)
        await asyncio.sleep(pause)
    log.debug(
        "None of %d selectors found after %d screens", len(selectors), max_screens
    )
    return None


async def settle_network(page: Page, timeout: float = 10.0) -> None:
    """Give the page a bounded chance to reach network idle."""
    if not await wait_within(
        page.wait_for_load_state("networkidle", timeout=timeout * 1000), timeout
    ):
        log.debug("Network did not go idle within %.0fs on %s", timeout, page.url)
