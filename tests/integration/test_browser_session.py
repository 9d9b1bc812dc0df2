"""Integration tests running checks in a real browser."""

from aiohttp import test_utils

from page_qa.checks import default_registry
from page_qa.models.result import NAVIGATION_ERROR, TestOutcome
from page_qa.models.task import URLTask
from page_qa.runner import UrlRunner
from page_qa.sessions import BrowserEngine


def make_runner(engine: BrowserEngine, url: str, test_ids: str) -> UrlRunner:
    """Create a runner over real browser sessions."""
    return UrlRunner(
        task=URLTask.from_row(url=url, test_ids=test_ids),
        registry=default_registry(),
        open_session=engine.open_session,
        artifacts=engine.artifacts,
        settle_delay=0,
    )


async def test_structure_checks_on_served_page(
    engine: BrowserEngine, site: test_utils.TestServer
) -> None:
    """Header passes, missing nav fails, status passes, screenshot saved."""
    url = str(site.make_url("/"))
    runner = make_runner(engine, url, "TC-01,TC-03,TC-04,TC-09,TC-14")

    result = await runner.run()

    assert result.http_status == 200
    assert result.outcome("TC-01") is TestOutcome.PASS
    assert result.outcome("TC-03") is TestOutcome.PASS
    assert result.outcome("TC-04") is TestOutcome.FAIL
    assert result.outcome("TC-09") is TestOutcome.PASS
    assert result.outcome("TC-14") is TestOutcome.PASS
    assert result.failed_test_ids == ["TC-04"]
    assert result.artifacts.screenshot is not None
    assert result.artifacts.screenshot.exists()


async def test_http_error_status(
    engine: BrowserEngine, site: test_utils.TestServer
) -> None:
    """A 404 response fails the status check without a navigation fault."""
    runner = make_runner(engine, str(site.make_url("/missing")), "TC-14")

    result = await runner.run()

    assert result.http_status == 404
    assert result.outcomes["TC-14"].message == (
        "HTTP Status was 404, expected 2xx or 3xx"
    )


async def test_unreachable_host(engine: BrowserEngine) -> None:
    """Connection failures fail every requested check."""
    runner = make_runner(engine, "http://127.0.0.1:9/", "TC-03,TC-14,TC-99")

    result = await runner.run()

    assert result.http_status == NAVIGATION_ERROR
    assert result.failed_test_ids == ["TC-03", "TC-14"]
    assert result.outcome("TC-99") is TestOutcome.NA
    assert result.artifacts.screenshot is not None
    assert result.artifacts.screenshot.name.endswith("-failed-TC-03,TC-14.png")
    assert result.artifacts.navigation_screenshot is not None


async def test_gatekeeper_confirmed(
    engine: BrowserEngine, site: test_utils.TestServer
) -> None:
    """The gatekeeper is detected and confirmed before checks run."""
    runner = make_runner(engine, str(site.make_url("/gatekeeper")), "TC-05,TC-10")

    result = await runner.run()

    assert result.outcome("TC-10") is TestOutcome.PASS
    assert result.outcome("TC-05") is TestOutcome.PASS
