"""Hand-off of the run summary to an HTTP endpoint."""

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

log = logging.getLogger(__name__)


async def publish_summary(
    endpoint: str, payload: Mapping[str, Any], timeout: float = 30.0
) -> bool:
    """POST the summary as JSON.

    A failed hand-off is logged and reported, never raised: the run itself
    has already completed.

    Returns:
        True when the endpoint accepted the summary

    """
    log.info("Sending run summary to %s", endpoint)
    try:
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=timeout)
        ) as session:
            async with session.post(endpoint, json=payload) as response:
                if response.status >= 400:
                    text = await response.text()
                    log.error(
                        "Failed to store run summary: %s %s", response.status, text
                    )
                    return False
    except (aiohttp.ClientError, TimeoutError) as e:
        log.error("Error sending run summary to %s: %s", endpoint, e)
        return False

    log.info("Run summary stored via %s", endpoint)
    return True
