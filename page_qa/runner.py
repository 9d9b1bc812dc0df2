"""Runs the requested checks for a single URL."""

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from page_qa.artifacts import ArtifactStore
from page_qa.checks import CheckRegistry
from page_qa.models.result import (
    NAVIGATION_ERROR,
    Artifacts,
    CheckResult,
    PageResult,
    TestOutcome,
    sort_test_ids,
)
from page_qa.models.task import URLTask
from page_qa.sessions import SessionBundle

log = logging.getLogger(__name__)

type SessionFactory = Callable[[str], AbstractAsyncContextManager[SessionBundle]]

URL_DEADLINE_EXCEEDED = "URL deadline exceeded"


class RunnerState(StrEnum):
    """Lifecycle of a URL runner."""

    CREATED = "created"
    NAVIGATING = "navigating"
    NAV_FAILED = "nav_failed"
    ALL_TESTS_FAILED = "all_tests_failed"
    NAVIGATED = "navigated"
    RUNNING_TESTS = "running_tests"
    MEDIA_DECISION = "media_decision"
    DONE = "done"


@dataclass(kw_only=True)
class UrlRunner:
    """Drives one URL from session creation to its final ``PageResult``.

    Checks run one at a time in id order because several of them change the
    page (open menus, follow links) for the checks after them.

    ``url_deadline`` bounds navigation plus checks. Once it is spent the
    remaining checks fail without running, and the media decision still
    happens so the screenshot and video follow the outcomes.
    """

    task: URLTask
    registry: CheckRegistry
    open_session: SessionFactory
    artifacts: ArtifactStore
    capture_video: bool = False
    settle_delay: float = 2.0
    url_deadline: float | None = None
    state: RunnerState = field(default=RunnerState.CREATED, init=False)
    _deadline_at: float | None = field(default=None, init=False, repr=False)

    async def run(self) -> PageResult:
        """Run the task and return exactly one result."""
        started = time.monotonic()
        if self.url_deadline is not None:
            self._deadline_at = started + self.url_deadline
        task = self.task
        requested = ", ".join(sort_test_ids(task.requested_test_ids))
        log.info("Checking %s (%s)", task.url, requested or "no tests")

        self._transition(RunnerState.NAVIGATING)
        navigation_screenshot: Path | None = None
        async with self.open_session(task.url) as session:
            if not session.navigated:
                self._transition(RunnerState.NAV_FAILED)
                outcomes = self._fail_all(
                    session.navigation_error or "Navigation failed"
                )
                if session.http_status == NAVIGATION_ERROR and any(
                    self.registry.ordered(task.requested_test_ids)
                ):
                    navigation_screenshot = (
                        await self.artifacts.save_navigation_screenshot(
                            session.desktop, task.url
                        )
                    )
                self._transition(RunnerState.ALL_TESTS_FAILED)
            else:
                self._transition(RunnerState.NAVIGATED)
                self._transition(RunnerState.RUNNING_TESTS)
                outcomes = await self._run_checks(session)

            self._transition(RunnerState.MEDIA_DECISION)
            artifacts = await self._decide_media(
                session, outcomes, navigation_screenshot
            )

        self._transition(RunnerState.DONE)
        result = PageResult(
            url=task.url,
            region=task.region,
            requested_test_ids=task.requested_test_ids,
            http_status=session.http_status,
            outcomes=outcomes,
            artifacts=artifacts,
            duration=time.monotonic() - started,
        )
        log.info(
            "%s %s in %.1fs",
            "Passed" if result.page_pass else "Failed",
            task.url,
            result.duration,
        )
        return result

    async def _run_checks(self, session: SessionBundle) -> dict[str, CheckResult]:
        outcomes = self._unknown_ids()
        for test_id in self.registry.ordered(self.task.requested_test_ids):
            remaining = self._remaining()
            if remaining is not None and remaining <= 0:
                log.warning(
                    "Deadline spent before %s on %s", test_id.value, self.task.url
                )
                outcomes[test_id.value] = CheckResult.failed(URL_DEADLINE_EXCEEDED)
                continue
            outcomes[test_id.value] = await self._run_isolated(
                test_id.value, session, remaining
            )
        return outcomes

    async def _run_isolated(
        self, test_id: str, session: SessionBundle, remaining: float | None = None
    ) -> CheckResult:
        """Run one check so that a fault only fails that check.

        The check is bounded by its own timeout or by what is left of the URL
        deadline, whichever is shorter.
        """
        check = self.registry.get(test_id)
        budget = check.timeout if remaining is None else min(check.timeout, remaining)
        try:
            async with asyncio.timeout(budget):
                result = await check.run(session)
        except TimeoutError:
            if budget < check.timeout:
                result = CheckResult.failed(URL_DEADLINE_EXCEEDED)
            else:
                result = CheckResult.failed(
                    f"{test_id} did not finish within {check.timeout:g}s"
                )
            await self._record_fault(test_id, session)
        except Exception as e:
            log.exception("Exception during %s on %s", test_id, self.task.url)
            result = CheckResult.failed(f"Exception during {test_id}: {e}")
            await self._record_fault(test_id, session)
        else:
            if result.outcome is TestOutcome.FAIL:
                await self.artifacts.dump_dom(session.desktop, self.task.url, test_id)

        log.info(
            "  %s: %s%s",
            test_id,
            result.outcome,
            f" ({result.message})" if result.message else "",
        )
        return result

    async def _record_fault(self, test_id: str, session: SessionBundle) -> None:
        await self.artifacts.dump_dom(session.desktop, self.task.url, test_id)
        await self.artifacts.save_exception_screenshot(
            session.desktop, self.task.url, test_id
        )

    async def _decide_media(
        self,
        session: SessionBundle,
        outcomes: Mapping[str, CheckResult],
        navigation_screenshot: Path | None = None,
    ) -> Artifacts:
        failed = sort_test_ids(
            test_id
            for test_id, result in outcomes.items()
            if result.outcome is TestOutcome.FAIL
        )

        screenshot: Path | None = None
        if failed:
            if session.navigated:
                await asyncio.sleep(self.settle_delay)
            screenshot = await self.artifacts.save_failure_screenshot(
                session.desktop, self.task.url, failed
            )

        video = session.desktop.video
        await session.desktop.close()
        kept_video: Path | None = None
        if video is not None:
            if self.capture_video:
                kept_video = await self.artifacts.keep_video(
                    video, self.task.url, failed
                )
            else:
                await self.artifacts.discard_video(video, self.task.url)

        return Artifacts(
            screenshot=screenshot,
            video=kept_video,
            navigation_screenshot=navigation_screenshot,
        )

    def _remaining(self) -> float | None:
        if self._deadline_at is None:
            return None
        return self._deadline_at - time.monotonic()

    def _fail_all(self, reason: str) -> dict[str, CheckResult]:
        outcomes = self._unknown_ids()
        for test_id in self.registry.ordered(self.task.requested_test_ids):
            outcomes[test_id.value] = CheckResult.failed(reason)
        return outcomes

    def _unknown_ids(self) -> dict[str, CheckResult]:
        unknown = sorted(
            test_id
            for test_id in self.task.requested_test_ids
            if not self.registry.is_valid(test_id)
        )
        if unknown:
            log.warning(
                "Ignoring unknown test ids for %s: %s",
                self.task.url,
                ", ".join(unknown),
            )
        return {
            test_id: CheckResult.not_applicable(f"Unknown test id {test_id}")
            for test_id in unknown
        }

    def _transition(self, state: RunnerState) -> None:
        log.debug("%s: %s -> %s", self.task.url, self.state, state)
        self.state = state
