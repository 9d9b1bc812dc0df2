"""Fixtures for integration tests against a real Chromium."""

from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack
from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from playwright.async_api import Error as PlaywrightError

from page_qa.artifacts import ArtifactStore
from page_qa.config import RunConfig
from page_qa.sessions import BrowserEngine

HOME_PAGE = """<!doctype html>
<html>
  <body>
    <header>Site header</header>
    <section class="ge-homepage-hero-v2-component">
      <div class="ge-homepage-hero-v2__text-content">Welcome</div>
    </section>
    <p>Content without navigation</p>
  </body>
</html>
"""

GATEKEEPER_PAGE = """<!doctype html>
<html>
  <body>
    <section class="ge-gatekeeper">
      <p>Are you a healthcare professional?</p>
      <button class="ge-gatekeeper-button ge-button--solid-primary"
              onclick="this.closest('section').remove()">Yes</button>
    </section>
    <main>Professional content</main>
  </body>
</html>
"""


async def _page(html: str, status: int = 200) -> web.Response:
    return web.Response(text=html, status=status, content_type="text/html")


async def home(request: web.Request) -> web.Response:
    return await _page(HOME_PAGE)


async def missing(request: web.Request) -> web.Response:
    return await _page("<html><body><header>Not found</header></body></html>", 404)


async def gatekeeper(request: web.Request) -> web.Response:
    return await _page(GATEKEEPER_PAGE)


@pytest.fixture
async def site() -> AsyncGenerator[TestServer, None]:
    """Serve fixture pages on a local port."""
    app = web.Application()
    app.router.add_get("/", home)
    app.router.add_get("/missing", missing)
    app.router.add_get("/gatekeeper", gatekeeper)
    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


@pytest.fixture
def run_config(tmp_path: Path) -> RunConfig:
    """Create a run configuration writing under a temporary directory."""
    return RunConfig(output_dir=tmp_path, navigation_timeout=15, settle_delay=0)


@pytest.fixture
async def engine(run_config: RunConfig) -> AsyncGenerator[BrowserEngine, None]:
    """Launch Chromium, skipping when no browser is installed."""
    artifacts = ArtifactStore.from_config(run_config)
    artifacts.prepare()
    async with AsyncExitStack() as stack:
        try:
            engine = await stack.enter_async_context(
                BrowserEngine.from_config(run_config, artifacts)
            )
        except PlaywrightError as e:
            pytest.skip(f"Chromium cannot be launched: {e}")
        yield engine
