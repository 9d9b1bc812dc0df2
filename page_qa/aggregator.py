"""Reduction of page results into a run summary."""

from collections import Counter
from collections.abc import Iterable, Sequence

from page_qa.models.result import PageResult, sort_test_ids
from page_qa.models.summary import FailedUrl, RunSummary, UrlResult


def summarize(
    results: Sequence[PageResult], known_test_ids: Iterable[str]
) -> RunSummary:
    """Compute run totals from all page results.

    A page counts as ``na`` when none of its requested ids is a known check,
    as ``passed`` when it passed with at least one known check, and as
    ``failed`` otherwise.

    Args:
        results: One result per URL task
        known_test_ids: Ids the registry can evaluate

    Returns:
        Summary ready for JSON hand-off

    """
    known = frozenset(known_test_ids)
    failure_counts: Counter[str] = Counter()
    failed_urls: list[FailedUrl] = []
    url_results: list[UrlResult] = []
    passed = failed = na = 0

    for result in results:
        failed_ids = result.failed_test_ids
        failure_counts.update(failed_ids)

        if failed_ids:
            failed += 1
            failed_urls.append(FailedUrl(url=result.url, failed_test_ids=failed_ids))
        elif result.requested_test_ids & known:
            passed += 1
        else:
            na += 1

        url_results.append(
            UrlResult(
                url=result.url,
                passed=result.page_pass,
                http_status=result.http_status,
                failed_test_ids=failed_ids,
            )
        )

    return RunSummary(
        total=len(results),
        passed=passed,
        failed=failed,
        na=na,
        per_test_failure_counts={
            test_id: failure_counts[test_id]
            for test_id in sort_test_ids(failure_counts)
        },
        failed_urls=failed_urls,
        url_results=url_results,
        screenshot_paths=[
            str(r.artifacts.screenshot) for r in results if r.artifacts.screenshot
        ],
        video_paths=[str(r.artifacts.video) for r in results if r.artifacts.video],
    )
