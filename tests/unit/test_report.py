"""Tests for results workbook and summary output."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
from openpyxl import load_workbook

from page_qa.aggregator import summarize
from page_qa.models.result import NAVIGATION_ERROR, CheckResult
from page_qa.models.task import TestId
from page_qa.report import RunInfo, result_headers, result_row, write_outputs
from page_qa.testing.factories import PageResultFactory


@pytest.fixture
def run_info() -> RunInfo:
    """Create a fixed run identity."""
    return RunInfo(
        run_id="run-1700000000000",
        initiated_by="qa-team",
        started_at=datetime(2026, 10, 18, 9, 30, 5, tzinfo=timezone.utc),
    )


def test_headers_cover_every_test_id() -> None:
    """One outcome column per id between the passthrough and verdict columns."""
    headers = result_headers()

    assert headers[:3] == ["url", "region", "test ids"]
    assert headers[3:-2] == [t.value for t in TestId]
    assert headers[-2:] == ["Page Pass?", "HTTP Status"]


def test_result_row() -> None:
    """Rows carry NA for ids that were not requested."""
    result = PageResultFactory.build(
        url="https://example.com",
        region="DE",
        requested_test_ids=frozenset({"TC-14", "TC-03"}),
        http_status=NAVIGATION_ERROR,
        outcomes={
            "TC-03": CheckResult.failed("Navigation failed"),
            "TC-14": CheckResult.failed("Navigation failed"),
        },
    )

    row = dict(zip(result_headers(), result_row(result), strict=True))

    assert row["test ids"] == "TC-03,TC-14"
    assert row["TC-03"] == "Fail"
    assert row["TC-01"] == "NA"
    assert row["Page Pass?"] == "Fail"
    assert row["HTTP Status"] == "Navigation Error"


async def test_write_outputs(tmp_path: Path, run_info: RunInfo) -> None:
    """Writes both sheets and the summary JSON."""
    results = [
        PageResultFactory.build(
            url="https://example.com",
            requested_test_ids=frozenset({"TC-03"}),
            outcomes={"TC-03": CheckResult.passed()},
        )
    ]
    summary = summarize(results, [t.value for t in TestId])
    output = tmp_path / "out" / "results.xlsx"
    summary_path = tmp_path / "summary.json"

    await write_outputs(output, summary_path, results, summary, run_info)

    workbook = load_workbook(output)
    assert workbook.sheetnames == ["Results", "Metadata"]
    rows = list(workbook["Results"].iter_rows(values_only=True))
    assert rows[1][0] == "https://example.com"
    assert rows[1][-2:] == ("Pass", 200)
    metadata = list(workbook["Metadata"].iter_rows(values_only=True))
    assert metadata[1][:4] == ("run-1700000000000", "2026-10-18", "09:30:05", "qa-team")

    payload = json.loads(summary_path.read_text())
    assert payload["runId"] == "run-1700000000000"
    assert payload["initiatedBy"] == "qa-team"
    assert payload["total"] == 1
    assert payload["passed"] == 1
    assert payload["urlResults"][0]["httpStatus"] == 200


def test_run_info_start() -> None:
    """Run ids are derived from the start time."""
    run = RunInfo.start("ci")

    assert run.initiated_by == "ci"
    assert run.run_id == f"run-{int(run.started_at.timestamp() * 1000)}"
