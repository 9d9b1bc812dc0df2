"""Tests for interstitial handling."""

from unittest.mock import AsyncMock, Mock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from page_qa import interstitials
from page_qa.testing.factories import mock_page


@pytest.mark.parametrize(
    ("url", "blocked"),
    [
        ("https://www.googletagmanager.com/gtm.js?id=GTM-1", True),
        ("https://cdn.example.com/fonts/inter.woff2", True),
        ("https://siteintercept.qualtrics.com/x.js", True),
        ("https://example.com/de/products", False),
        ("https://example.com/static/app.js", False),
    ],
)
def test_is_blocked(url: str, blocked: bool) -> None:
    """Tracking, font and survey requests are blocked."""
    assert interstitials.is_blocked(url) is blocked


async def test_route_filter_aborts_blocked_requests() -> None:
    """Blocked requests are aborted, others continue."""
    blocked = AsyncMock()
    blocked.request = Mock(url="https://example.com/analytics.js")
    allowed = AsyncMock()
    allowed.request = Mock(url="https://example.com/")

    await interstitials._route_filter(blocked)
    await interstitials._route_filter(allowed)

    blocked.abort.assert_awaited_once()
    blocked.continue_.assert_not_called()
    allowed.continue_.assert_awaited_once()


async def test_install_registers_route_and_script() -> None:
    """Installs the request filter and the overlay hider on a context."""
    context = AsyncMock()

    await interstitials.install(context)

    context.route.assert_awaited_once_with("**/*", interstitials._route_filter)
    context.add_init_script.assert_awaited_once_with(
        script=interstitials.OVERLAY_HIDER_SCRIPT
    )


async def test_no_gatekeeper() -> None:
    """Reports no gatekeeper when the selector never appears."""
    page = mock_page()
    page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout")

    assert not await interstitials.pass_gatekeeper(page)


async def test_gatekeeper_confirmed() -> None:
    """Clicks the confirm button of a detected gatekeeper."""
    page = mock_page()
    confirm = AsyncMock()
    page.wait_for_selector.side_effect = [AsyncMock(), confirm]

    assert await interstitials.pass_gatekeeper(page)
    confirm.click.assert_awaited_once()
    page.wait_for_load_state.assert_awaited_once()


async def test_gatekeeper_detected_without_confirm() -> None:
    """A gatekeeper without a confirm button still counts as detected."""
    page = mock_page()
    page.wait_for_selector.side_effect = [
        AsyncMock(),
        PlaywrightTimeoutError("Timeout"),
    ]

    assert await interstitials.pass_gatekeeper(page)


async def test_dismiss_overlay_clicks_accept_button() -> None:
    """Clicks the first button whose text matches a dismiss keyword."""
    page = mock_page()
    settings, accept = AsyncMock(), AsyncMock()
    settings.text_content.return_value = "Settings"
    accept.text_content.return_value = " Accept all "
    overlay = AsyncMock()
    overlay.query_selector_all.return_value = [settings, accept]
    page.wait_for_selector.return_value = overlay

    assert await interstitials.dismiss_overlay(page)
    accept.click.assert_awaited_once()
    settings.click.assert_not_called()


async def test_dismiss_overlay_absent() -> None:
    """No overlay means nothing dismissed."""
    page = mock_page()
    page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout")

    assert not await interstitials.dismiss_overlay(page)


async def test_clear_interstitials_reports_gatekeeper() -> None:
    """Runs every handler and returns gatekeeper detection."""
    page = mock_page()
    page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout")

    assert not await interstitials.clear_interstitials(page)
    assert page.wait_for_selector.await_count == 3
