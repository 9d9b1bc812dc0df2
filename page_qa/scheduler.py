"""Bounded-concurrency batch execution of URL runners."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from itertools import batched

from page_qa.checks import CheckRegistry
from page_qa.models.result import RUNNER_ERROR, CheckResult, PageResult
from page_qa.models.task import URLTask

log = logging.getLogger(__name__)

type RunTask = Callable[[URLTask], Awaitable[PageResult]]
type ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True, kw_only=True)
class BatchScheduler:
    """Runs URL tasks in fixed-size groups.

    Every task in a group runs concurrently and the next group starts once the
    whole group is done. Runners enforce ``url_deadline`` themselves; the
    scheduler only cuts one off after ``url_deadline + deadline_grace``, which
    leaves room for its screenshot and video handling. The cut-off and a
    catch-all for escaping faults mean one hung or broken URL costs only its
    own result.
    """

    run_task: RunTask
    registry: CheckRegistry
    concurrency: int = 3
    url_deadline: float = 180.0
    deadline_grace: float = 60.0
    batch_pause: float = 0.0
    on_result: ProgressCallback | None = None

    async def run(self, tasks: Sequence[URLTask]) -> list[PageResult]:
        """Run all tasks and return one result per task, in input order.

        Args:
            tasks: Tasks in input order

        Returns:
            Page results aligned with ``tasks``

        """
        if not tasks:
            log.info("No URL tasks provided")
            return []

        groups = list(batched(tasks, self.concurrency))
        log.info(
            "Running %d URL(s) in %d batch(es) of up to %d",
            len(tasks),
            len(groups),
            self.concurrency,
        )

        results: list[PageResult] = []
        for index, group in enumerate(groups, start=1):
            log.info("Batch %d/%d", index, len(groups))
            batch_results = await asyncio.gather(
                *(self._run_guarded(task) for task in group)
            )
            results.extend(batch_results)
            if self.on_result is not None:
                self.on_result(len(results), len(tasks))

            if index < len(groups) and self.batch_pause:
                await asyncio.sleep(self.batch_pause)

        return results

    async def _run_guarded(self, task: URLTask) -> PageResult:
        deadline = self.url_deadline + self.deadline_grace
        try:
            async with asyncio.timeout(deadline):
                return await self.run_task(task)
        except TimeoutError:
            log.error("URL %s exceeded its %gs deadline", task.url, deadline)
            return self.error_result(task, f"URL processing exceeded {deadline:g}s")
        except Exception as e:
            log.error("URL runner for %s failed: %s", task.url, e, exc_info=e)
            return self.error_result(task, f"URL processing failed: {e}")

    def error_result(self, task: URLTask, reason: str) -> PageResult:
        """Result for a task whose runner never produced one."""
        outcomes = {
            test_id: CheckResult.not_applicable(f"Unknown test id {test_id}")
            for test_id in task.requested_test_ids
            if not self.registry.is_valid(test_id)
        }
        outcomes.update(
            {
                test_id.value: CheckResult.failed(reason)
                for test_id in self.registry.ordered(task.requested_test_ids)
            }
        )
        return PageResult(
            url=task.url,
            region=task.region,
            requested_test_ids=task.requested_test_ids,
            http_status=RUNNER_ERROR,
            outcomes=outcomes,
        )
