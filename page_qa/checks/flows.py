"""Interactive checks that click through the page.

Each flow starts from an entry element (play trigger, contact button,
insights link, products menu). When that entry element is absent the check
is NA; once the flow has started every missing element or expired wait is a
failure.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar
from urllib.parse import urljoin

from playwright.async_api import Locator, Page

from page_qa.checks import selectors
from page_qa.checks.base import (
    Check,
    scroll_and_find,
    settle_network,
    wait_within,
)
from page_qa.models.result import CheckResult
from page_qa.sessions import SessionBundle

log = logging.getLogger(__name__)


async def _visible_within(locator: Locator, timeout: float) -> bool:
    return await wait_within(
        locator.wait_for(state="visible", timeout=timeout * 1000), timeout
    )


@dataclass(frozen=True, kw_only=True)
class VideoCheck(Check):
    """A video player is present, or a play trigger opens one in a modal."""

    timeout: ClassVar[float] = 60.0

    modal_timeout: float = 10.0
    player_timeout: float = 10.0
    scroll_pause: float = 0.5

    async def run(self, session: SessionBundle) -> CheckResult:
        page = session.desktop
        await settle_network(page)

        if await page.query_selector(selectors.VIDEO_PLAYER):
            log.debug("Video player present on %s", page.url)
            return CheckResult.passed()

        trigger = await scroll_and_find(
            page, selectors.PLAY_TRIGGERS, pause=self.scroll_pause
        )
        if trigger is None:
            return CheckResult.not_applicable("No video player or play trigger found")

        play = page.locator(trigger).first
        await play.scroll_into_view_if_needed()
        await play.hover()
        await play.click()

        if not await wait_within(
            page.wait_for_selector(
                selectors.VIDEO_MODAL, timeout=self.modal_timeout * 1000
            ),
            self.modal_timeout,
        ):
            return CheckResult.failed("Video modal did not open")

        opened = await wait_within(
            page.wait_for_selector(
                selectors.MODAL_PLAYER, timeout=self.player_timeout * 1000
            ),
            self.player_timeout,
        )
        return CheckResult.from_bool(
            opened, "Video player not found after modal opened"
        )


@dataclass(frozen=True, kw_only=True)
class ContactFormCheck(Check):
    """Clicking the contact trigger adds a form to the page."""

    timeout: ClassVar[float] = 60.0

    visible_timeout: float = 20.0
    form_timeout: float = 10.0

    async def run(self, session: SessionBundle) -> CheckResult:
        page = session.desktop
        await settle_network(page)

        initial_forms = len(await page.query_selector_all("form"))
        contact = await self.find_trigger(page)
        if contact is None:
            return CheckResult.not_applicable("No contact button or link found")

        if not await _visible_within(contact, self.visible_timeout):
            return CheckResult.failed("Contact element not visible")

        await contact.scroll_into_view_if_needed()
        await contact.click(force=True)

        grew = await wait_within(
            page.wait_for_function(
                "(previous) => document.querySelectorAll('form').length > previous",
                arg=initial_forms,
                timeout=self.form_timeout * 1000,
            ),
            self.form_timeout,
        )
        return CheckResult.from_bool(
            grew, f"Form count did not increase (initial: {initial_forms})"
        )

    async def find_trigger(self, page: Page) -> Locator | None:
        """Most specific contact trigger first, generic buttons and links last."""
        candidates = [page.locator(selectors.CONTACT_EXACT).first]
        candidates += [
            page.locator(scope).filter(has_text=selectors.CONTACT_TEXT).first
            for scope in selectors.CONTACT_SCOPES
        ]
        for candidate in candidates:
            if await candidate.count():
                return candidate
        return None


@dataclass(frozen=True, kw_only=True)
class InsightsLinkCheck(Check):
    """The first insights/newsroom link resolves with HTTP 200."""

    timeout: ClassVar[float] = 60.0

    link_selectors: Sequence[str] = selectors.INSIGHTS_LINKS
    lazy_load_delay: float = 3.0
    navigation_timeout: float = 30.0

    async def run(self, session: SessionBundle) -> CheckResult:
        page = session.desktop
        await page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
        await asyncio.sleep(self.lazy_load_delay)

        href = await self.find_href(page)
        if href is None:
            return CheckResult.not_applicable("No insights or newsroom link found")

        target = urljoin(page.url, href)
        log.debug("Following insights link %s", target)
        link_page = await page.context.new_page()
        try:
            response = await link_page.goto(
                target,
                timeout=self.navigation_timeout * 1000,
                wait_until="domcontentloaded",
            )
        finally:
            await link_page.close()

        status = response.status if response else None
        return CheckResult.from_bool(
            status == 200, f"Navigating to {target} resulted in status {status}"
        )

    async def find_href(self, page: Page) -> str | None:
        for selector in self.link_selectors:
            link = await page.query_selector(selector)
            if link and (href := await link.get_attribute("href")):
                return href
        return None


@dataclass(frozen=True, kw_only=True)
class UltrasoundMenuCheck(Check):
    """Produkte > Ultraschall > "Mehr erfahren" lands on the ultrasound site."""

    timeout: ClassVar[float] = 150.0

    menu_timeout: float = 30.0
    item_timeout: float = 10.0
    fallback_timeout: float = 5.0
    link_timeout: float = 30.0
    navigation_timeout: float = 30.0

    async def run(self, session: SessionBundle) -> CheckResult:
        page = session.desktop
        await settle_network(page)

        menu = page.get_by_role("button", name=selectors.PRODUCTS_MENU).first
        if not await _visible_within(menu, self.menu_timeout):
            return CheckResult.not_applicable(
                f"{selectors.PRODUCTS_MENU} menu not found"
            )
        await menu.click()

        item = await self._submenu_item(page)
        if item is None:
            return CheckResult.failed(
                f"{selectors.ULTRASOUND_ITEM} submenu item not found or not visible"
            )
        await item.click()

        link = await self._learn_more_link(page)
        if link is None:
            return CheckResult.failed('"Mehr erfahren" link not found or not visible')
        await link.scroll_into_view_if_needed()
        await link.click()

        await wait_within(
            page.wait_for_url(
                lambda url: url.startswith(selectors.ULTRASOUND_SITES),
                timeout=self.navigation_timeout * 1000,
            ),
            self.navigation_timeout,
        )
        destination = page.url
        return CheckResult.from_bool(
            destination.startswith(selectors.ULTRASOUND_SITES),
            f"Navigation did not go to expected ultrasound site: {destination}",
        )

    async def _submenu_item(self, page: Page) -> Locator | None:
        item = page.get_by_role("button", name=selectors.ULTRASOUND_ITEM).first
        if await _visible_within(item, self.item_timeout):
            return item
        fallback = page.locator(
            selectors.ULTRASOUND_ITEM_FALLBACK, has_text=selectors.ULTRASOUND_ITEM
        ).first
        if await _visible_within(fallback, self.fallback_timeout):
            return fallback
        return None

    async def _learn_more_link(self, page: Page) -> Locator | None:
        link = page.locator(selectors.ULTRASOUND_LINK).first
        if await _visible_within(link, self.link_timeout):
            return link
        fallback = page.locator("a", has_text=selectors.LEARN_MORE_TEXT).first
        if await _visible_within(fallback, self.fallback_timeout):
            return fallback
        return None
