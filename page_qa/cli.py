"""CLI entry point for the page QA runner."""

import argparse
import asyncio
import functools
import json
import logging
import sys
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from page_qa.aggregator import summarize
from page_qa.artifacts import ArtifactStore
from page_qa.checks import CheckRegistry, default_registry
from page_qa.config import RunConfig
from page_qa.config_loader import load_run_config
from page_qa.errors import SetupError
from page_qa.models.result import PageResult, TestOutcome
from page_qa.models.summary import RunSummary
from page_qa.models.task import URLTask
from page_qa.publisher import publish_summary
from page_qa.report import RunInfo, summary_payload, write_outputs
from page_qa.runner import UrlRunner
from page_qa.scheduler import BatchScheduler
from page_qa.sessions import BrowserEngine
from page_qa.task_loader import load_url_tasks

SUMMARY_FILE = "summary.json"
SETUP_ERROR_EXIT_CODE = 2

STATUS_SYMBOLS = {
    TestOutcome.PASS: "✅",
    TestOutcome.FAIL: "❌",
    TestOutcome.NA: "➖",
}


@dataclass(kw_only=True)
class ProgressLog:
    """Logs batch progress with an ETA extrapolated from elapsed time."""

    log: logging.Logger
    started: float = field(default_factory=time.monotonic)

    def __call__(self, completed: int, total: int) -> None:
        elapsed = time.monotonic() - self.started
        remaining = elapsed / completed * (total - completed) if completed else 0.0
        self.log.info(
            "Progress: %d/%d URLs (%.0f%%), elapsed %s, ETA %s",
            completed,
            total,
            completed / total * 100,
            format_duration(elapsed),
            format_duration(remaining),
        )


def format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs:02d}s" if minutes else f"{secs}s"


def log_results_summary(log: logging.Logger, results: Sequence[PageResult]) -> None:
    """Log a formatted summary of page results with artifact paths."""
    log.info("=" * 80)
    log.info("Page QA Results Summary:")
    log.info("=" * 80)

    for result in results:
        outcome = TestOutcome.PASS if result.page_pass else TestOutcome.FAIL
        symbol = STATUS_SYMBOLS[outcome]
        log.info(
            "%s %s (status=%s, %.2fs)",
            symbol,
            result.url,
            result.http_status,
            result.duration,
        )
        for test_id in result.failed_test_ids:
            check = result.outcomes[test_id]
            log.info(
                "  %s %s: %s", STATUS_SYMBOLS[check.outcome], test_id, check.message
            )
        if result.artifacts.screenshot:
            log.info("  Screenshot: %s", result.artifacts.screenshot)
        if result.artifacts.video:
            log.info("  Video: %s", result.artifacts.video)


async def run(
    input_path: Path,
    output_path: Path,
    initiator: str,
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> int:
    """Run page checks for every URL in the input workbook and return exit code."""
    log = logging.getLogger("page_qa")

    try:
        config = await load_run_config(config_path, overrides)
        tasks = await load_url_tasks(input_path)
    except SetupError as e:
        log.error("Setup failed: %s", e)
        return SETUP_ERROR_EXIT_CODE

    run_info = RunInfo.start(initiator)
    log.info("Run %s initiated by %s", run_info.run_id, run_info.initiated_by)

    registry = default_registry()
    artifacts = ArtifactStore.from_config(config)
    artifacts.prepare()

    async with BrowserEngine.from_config(config, artifacts) as engine:
        scheduler = BatchScheduler(
            run_task=functools.partial(
                run_url, registry=registry, engine=engine, config=config
            ),
            registry=registry,
            concurrency=config.concurrency,
            url_deadline=config.url_deadline,
            batch_pause=config.batch_pause,
            on_result=ProgressLog(log=log),
        )
        results = await scheduler.run(tasks)

    summary = summarize(results, registry.known_ids)
    await write_outputs(
        output_path,
        config.output_dir / SUMMARY_FILE,
        results,
        summary,
        run_info,
    )

    if config.summary_endpoint:
        await publish_summary(
            config.summary_endpoint, summary_payload(summary, run_info)
        )

    log_results_summary(log, results)
    print(json.dumps(format_output(summary), indent=2))

    return 1 if summary.failed else 0


async def run_url(
    task: URLTask, *, registry: CheckRegistry, engine: BrowserEngine, config: RunConfig
) -> PageResult:
    """Run one URL task on its own sessions."""
    runner = UrlRunner(
        task=task,
        registry=registry,
        open_session=engine.open_session,
        artifacts=engine.artifacts,
        capture_video=config.capture_video,
        settle_delay=config.settle_delay,
        url_deadline=config.url_deadline,
    )
    return await runner.run()


def format_output(summary: RunSummary) -> dict[str, Any]:
    """Format the run summary for JSON output."""
    return {
        "total": summary.total,
        "passed": summary.passed,
        "failed": summary.failed,
        "na": summary.na,
        "perTestFailureCounts": dict(summary.per_test_failure_counts),
        "failedUrls": [
            {"url": failed.url, "failedTestIds": list(failed.failed_test_ids)}
            for failed in summary.failed_urls
        ],
    }


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run page quality checks against a list of URLs"
    )
    parser.add_argument("input", type=Path, help="Input .xlsx with a URLs sheet")
    parser.add_argument("output", type=Path, help="Results .xlsx to write")
    parser.add_argument("initiator", help="Name recorded as the run initiator")
    parser.add_argument(
        "--capture-video",
        action="store_true",
        default=None,
        help="Keep a video recording of every URL",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Number of URLs processed per batch (1-10)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML run configuration",
    )
    parser.add_argument(
        "--summary-endpoint",
        default=None,
        help="URL the run summary JSON is POSTed to",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            input_path=args.input,
            output_path=args.output,
            initiator=args.initiator,
            config_path=args.config,
            overrides={
                "capture_video": args.capture_video,
                "concurrency": args.concurrency,
                "summary_endpoint": args.summary_endpoint,
            },
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
