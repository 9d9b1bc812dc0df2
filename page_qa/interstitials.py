"""Handling of consent banners, surveys and gatekeeper interstitials.

Regional sites put a cookie banner, a feedback survey or a "are you a
healthcare professional" gatekeeper in front of the content. These helpers
clear them so the checks see the page itself.
"""

import logging

from playwright.async_api import BrowserContext, Page, Route
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

log = logging.getLogger(__name__)

BLOCKED_URL_PARTS = (
    "gtm.js",
    "analytics.js",
    ".woff",
    ".woff2",
    "qualtrics.com",
    "qualified.com",
    "survey",
    "feedback",
    "msecnd.net/survey",
    "siteintercept",
)

OVERLAY_HIDER_SCRIPT = """
(() => {
  const keywords = ['cookie', 'consent', 'gdpr', 'evidon', 'overlay', 'popup', 'survey'];
  const hide = (el) => el && el.style && (el.style.display = 'none');
  new MutationObserver((mutations) => {
    for (const mutation of mutations) {
      for (const node of mutation.addedNodes) {
        if (node.nodeType !== 1) continue;
        const text = (node.innerText || '').toLowerCase();
        const id = (node.id || '').toLowerCase();
        const isSurveyFrame = node.tagName === 'IFRAME'
          && (node.getAttribute('name') || '').includes('survey');
        if (keywords.some((k) => text.includes(k) || id.includes(k)) || isSurveyFrame) {
          hide(node);
        }
      }
    }
  }).observe(document.documentElement, { childList: true, subtree: true });
})();
"""

GATEKEEPER = 'section.ge-gatekeeper, [class*="gatekeeper"]'
GATEKEEPER_CONFIRM = "button.ge-gatekeeper-button.ge-button--solid-primary"
GATEKEEPER_TIMEOUT = 10.0

OVERLAY = (
    'div#_evidon_banner, div[id*="cookie"], div[class*="cookie"], '
    '[role="dialog"], [aria-label*="cookie"]'
)
OVERLAY_BUTTONS = 'button, [role="button"], a'
DISMISS_KEYWORDS = (
    "accept",
    "agree",
    "ok",
    "allow",
    "confirm",
    "dismiss",
    "got it",
    "understand",
    "close",
    "confirmer",
)
OVERLAY_TIMEOUT = 2.0

SURVEY = (
    'iframe[name*="survey"], iframe[id="cs-native-frame"], .survey, '
    '.modal-survey, [id*="survey"], button[aria-label="Close"], '
    'button[class*="dismiss"]'
)
SURVEY_TIMEOUT = 2.0


def is_blocked(url: str) -> bool:
    """Whether a request is for tracking, fonts or survey vendors."""
    return any(part in url for part in BLOCKED_URL_PARTS)


async def _route_filter(route: Route) -> None:
    if is_blocked(route.request.url):
        log.debug("Blocked: %s", route.request.url)
        await route.abort()
        return
    await route.continue_()


async def install(context: BrowserContext) -> None:
    """Block non-essential requests and auto-hide overlays in ``context``."""
    await context.route("**/*", _route_filter)
    await context.add_init_script(script=OVERLAY_HIDER_SCRIPT)


async def pass_gatekeeper(page: Page) -> bool:
    """Confirm the gatekeeper interstitial when one is shown.

    Returns:
        True when a gatekeeper was detected, whether or not it was confirmed

    """
    try:
        await page.wait_for_selector(GATEKEEPER, timeout=GATEKEEPER_TIMEOUT * 1000)
    except PlaywrightTimeoutError:
        log.debug("No gatekeeper on %s", page.url)
        return False

    log.info("Gatekeeper detected on %s", page.url)
    try:
        confirm = await page.wait_for_selector(GATEKEEPER_CONFIRM, timeout=3000)
        if confirm:
            await confirm.click(timeout=5000)
            await page.wait_for_load_state("domcontentloaded", timeout=30000)
            log.info("Gatekeeper confirmed, now on %s", page.url)
    except PlaywrightError as e:
        log.info("Could not confirm gatekeeper on %s: %s", page.url, e)
    return True


async def dismiss_overlay(page: Page) -> bool:
    """Click the accept/close button of a cookie or consent overlay."""
    try:
        overlay = await page.wait_for_selector(OVERLAY, timeout=OVERLAY_TIMEOUT * 1000)
        if overlay is None:
            return False
        for button in await overlay.query_selector_all(OVERLAY_BUTTONS):
            text = (await button.text_content() or "").strip().lower()
            if any(keyword in text for keyword in DISMISS_KEYWORDS):
                log.debug("Dismissing overlay via %r", text)
                await button.click(timeout=2000)
                await page.wait_for_timeout(1000)
                return True
    except PlaywrightError as e:
        log.debug("No overlay dismissed on %s: %s", page.url, e)
        return False

    # No matching button: the init script hides it instead.
    return True


async def dismiss_survey(page: Page) -> bool:
    try:
        survey = await page.wait_for_selector(SURVEY, timeout=SURVEY_TIMEOUT * 1000)
        if survey is None:
            return False
        await survey.click(timeout=2000)
    except PlaywrightError as e:
        log.debug("No survey dismissed on %s: %s", page.url, e)
        return False
    log.debug("Survey dismissed on %s", page.url)
    return True


async def clear_interstitials(page: Page) -> bool:
    """Run gatekeeper, overlay and survey handling in order.

    Returns:
        Whether a gatekeeper was detected

    """
    gatekeeper_detected = await pass_gatekeeper(page)
    await dismiss_overlay(page)
    await dismiss_survey(page)
    return gatekeeper_detected
