"""Tests for the summary publisher."""

import aiohttp
from aioresponses import aioresponses

from page_qa.publisher import publish_summary

ENDPOINT = "https://qa.example/api/store-run"


async def test_publish_success() -> None:
    """Posts the payload as JSON and reports success."""
    with aioresponses() as mocked:
        mocked.post(ENDPOINT, status=200, payload={"ok": True})

        assert await publish_summary(ENDPOINT, {"runId": "run-1", "total": 2})

        [call] = [c for calls in mocked.requests.values() for c in calls]
        assert call.kwargs["json"] == {"runId": "run-1", "total": 2}


async def test_publish_http_error() -> None:
    """Non-success responses are reported, not raised."""
    with aioresponses() as mocked:
        mocked.post(ENDPOINT, status=500, body="database unavailable")

        assert not await publish_summary(ENDPOINT, {"runId": "run-1"})


async def test_publish_connection_error() -> None:
    """Connection failures are reported, not raised."""
    with aioresponses() as mocked:
        mocked.post(ENDPOINT, exception=aiohttp.ClientConnectionError("refused"))

        assert not await publish_summary(ENDPOINT, {"runId": "run-1"})


async def test_publish_timeout() -> None:
    """Timeouts are reported, not raised."""
    with aioresponses() as mocked:
        mocked.post(ENDPOINT, exception=TimeoutError())

        assert not await publish_summary(ENDPOINT, {"runId": "run-1"})
