"""Browser engine and per-URL desktop/mobile sessions."""

import asyncio
import logging
import re
from collections.abc import AsyncGenerator, Mapping
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from page_qa import interstitials
from page_qa.artifacts import ArtifactStore
from page_qa.config import RunConfig
from page_qa.models.result import (
    INVALID_URL,
    NAVIGATION_ERROR,
    NO_RESPONSE,
    HttpStatus,
)

log = logging.getLogger(__name__)

DESKTOP_VIEWPORT = {"width": 1920, "height": 1080}
MOBILE_DEVICE = "Pixel 5"
ELEMENT_TIMEOUT_MS = 10_000
MOBILE_NAVIGATION_TIMEOUT = 30.0

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(kw_only=True)
class SessionBundle:
    """The two live sessions of one URL and what primary navigation produced."""

    url: str
    desktop: Page
    mobile: Page
    http_status: HttpStatus = NO_RESPONSE
    navigation_error: str | None = None
    gatekeeper_detected: bool = False

    @property
    def navigated(self) -> bool:
        return self.navigation_error is None

    @property
    def status_code(self) -> int | None:
        """Numeric HTTP status, None for sentinel values."""
        return self.http_status if isinstance(self.http_status, int) else None


@dataclass(frozen=True, kw_only=True)
class BrowserEngine:
    """One shared Chromium process that hands out per-URL sessions."""

    config: RunConfig
    artifacts: ArtifactStore
    browser: Browser = field(repr=False)
    mobile_profile: Mapping[str, Any] = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: RunConfig, artifacts: ArtifactStore
    ) -> AsyncGenerator["BrowserEngine", None]:
        """Launch the browser for the duration of a run."""
        async with async_playwright() as playwright:
            log.info("Launching Chromium (headless=%s)", config.headless)
            browser = await playwright.chromium.launch(headless=config.headless)
            try:
                yield cls(
                    config=config,
                    artifacts=artifacts,
                    browser=browser,
                    mobile_profile=mobile_context_options(playwright.devices),
                )
            finally:
                await browser.close()

    @asynccontextmanager
    async def open_session(self, url: str) -> AsyncGenerator[SessionBundle, None]:
        """Provision desktop and mobile sessions for ``url`` and navigate.

        Navigation faults are recorded on the bundle, not raised. Both
        contexts are closed on every exit path.
        """
        async with AsyncExitStack() as stack:
            desktop_context = await self._new_context(
                stack,
                viewport=DESKTOP_VIEWPORT,
                **self._video_options(),
            )
            mobile_context = await self._new_context(stack, **self.mobile_profile)

            bundle = SessionBundle(
                url=url,
                desktop=await desktop_context.new_page(),
                mobile=await mobile_context.new_page(),
            )
            await self.navigate(bundle)
            yield bundle

    async def navigate(self, bundle: SessionBundle) -> None:
        """Primary (desktop) navigation, interstitials, then mobile navigation."""
        url = bundle.url
        if not _HTTP_URL.match(url):
            log.warning("Invalid URL: %r", url)
            bundle.http_status = INVALID_URL
            bundle.navigation_error = f"Invalid URL: {url!r}"
            return

        timeout = self.config.navigation_timeout
        try:
            async with asyncio.timeout(timeout):
                response = await bundle.desktop.goto(
                    url, timeout=timeout * 1000, wait_until="domcontentloaded"
                )
            bundle.http_status = response.status if response else NO_RESPONSE
            bundle.gatekeeper_detected = await interstitials.clear_interstitials(
                bundle.desktop
            )
        except (PlaywrightError, TimeoutError) as e:
            message = str(e) or type(e).__name__
            log.warning("Navigation error for %s: %s", url, message)
            bundle.http_status = NAVIGATION_ERROR
            bundle.navigation_error = f"Navigation failed: {message}"
            return

        log.info("Navigated to %s (status=%s)", url, bundle.http_status)
        await self._navigate_mobile(bundle)

    async def _navigate_mobile(self, bundle: SessionBundle) -> None:
        try:
            await bundle.mobile.goto(
                bundle.url,
                timeout=MOBILE_NAVIGATION_TIMEOUT * 1000,
                wait_until="domcontentloaded",
            )
        except PlaywrightError as e:
            log.warning("Mobile navigation error for %s: %s", bundle.url, e)

    async def _new_context(
        self, stack: AsyncExitStack, **options: Any
    ) -> BrowserContext:
        context = await self.browser.new_context(**options)
        stack.push_async_callback(_close_context, context)
        context.set_default_timeout(ELEMENT_TIMEOUT_MS)
        context.set_default_navigation_timeout(self.config.navigation_timeout * 1000)
        await interstitials.install(context)
        return context

    def _video_options(self) -> dict[str, Any]:
        if not self.config.capture_video:
            return {}
        return {
            "record_video_dir": str(self.config.video_dir),
            "record_video_size": DESKTOP_VIEWPORT,
        }


async def _close_context(context: BrowserContext) -> None:
    try:
        await context.close()
    except PlaywrightError as e:
        log.warning("Failed to close browser context: %s", e)


def mobile_context_options(devices: Mapping[str, Any]) -> dict[str, Any]:
    """Context options for the mobile device, minus the engine hint."""
    return {
        key: value
        for key, value in devices[MOBILE_DEVICE].items()
        if key != "default_browser_type"
    }
