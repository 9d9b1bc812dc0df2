"""Screenshot, video and DOM dump handling.

Every write here is best effort: a failed artifact is logged and reported as
None, it never changes a page verdict.
"""

import asyncio
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Video

from page_qa.config import RunConfig

log = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def sanitize_url(url: str) -> str:
    """Turn a URL into a string usable as a file name."""
    return _UNSAFE_CHARS.sub("_", url)


def failure_tag(failed_test_ids: Sequence[str]) -> str:
    """Join failing ids the way artifact names carry them."""
    return ",".join(failed_test_ids)


@dataclass(frozen=True, kw_only=True)
class ArtifactStore:
    """Names and writes the diagnostic files of a run."""

    screenshot_dir: Path
    video_dir: Path
    debug_dir: Path

    @classmethod
    def from_config(cls, config: RunConfig) -> "ArtifactStore":
        return cls(
            screenshot_dir=config.screenshot_dir,
            video_dir=config.video_dir,
            debug_dir=config.debug_dir,
        )

    def prepare(self) -> None:
        """Create the artifact directories."""
        for directory in (self.screenshot_dir, self.video_dir, self.debug_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def failure_screenshot_path(self, url: str, failed_test_ids: Sequence[str]) -> Path:
        name = f"{sanitize_url(url)}-failed-{failure_tag(failed_test_ids)}.png"
        return self.screenshot_dir / name

    def video_path(self, url: str, failed_test_ids: Sequence[str]) -> Path:
        tag = failure_tag(failed_test_ids) if failed_test_ids else "passed"
        return self.video_dir / f"{sanitize_url(url)}-{tag}.webm"

    async def save_failure_screenshot(
        self, page: Page, url: str, failed_test_ids: Sequence[str]
    ) -> Path | None:
        """Full-page screenshot named after the URL and its failing checks."""
        return await self._screenshot(
            page, self.failure_screenshot_path(url, failed_test_ids)
        )

    async def save_navigation_screenshot(self, page: Page, url: str) -> Path | None:
        path = self.screenshot_dir / f"{sanitize_url(url)}-navigation-error.png"
        return await self._screenshot(page, path)

    async def save_exception_screenshot(
        self, page: Page, url: str, test_id: str
    ) -> Path | None:
        path = self.screenshot_dir / f"{sanitize_url(url)}-{test_id}-exception.png"
        return await self._screenshot(page, path)

    async def dump_dom(self, page: Page, url: str, test_id: str) -> Path | None:
        """Write the page's current DOM for offline debugging."""
        path = self.debug_dir / f"{sanitize_url(url)}-{test_id}-dom.html"
        try:
            html = await page.content()
            await asyncio.to_thread(_write_text, path, html)
        except (PlaywrightError, OSError) as e:
            log.warning("Failed to save DOM for %s on %s: %s", test_id, url, e)
            return None
        log.debug("DOM saved to %s", path)
        return path

    async def keep_video(
        self, video: Video, url: str, failed_test_ids: Sequence[str]
    ) -> Path | None:
        """Move a finished recording to its final name.

        The page that owns ``video`` must already be closed.
        """
        path = self.video_path(url, failed_test_ids)
        try:
            await video.save_as(path)
            await video.delete()
        except (PlaywrightError, OSError) as e:
            log.warning("Failed to keep video for %s: %s", url, e)
            return None
        log.info("Video saved: %s", path)
        return path

    async def discard_video(self, video: Video, url: str) -> None:
        try:
            await video.delete()
        except (PlaywrightError, OSError) as e:
            log.warning("Failed to discard video for %s: %s", url, e)

    async def _screenshot(self, page: Page, path: Path) -> Path | None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=path, full_page=True)
        except (PlaywrightError, OSError) as e:
            log.warning("Screenshot %s failed: %s", path.name, e)
            return None
        log.info("Screenshot captured: %s", path)
        return path


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8", errors="replace")
