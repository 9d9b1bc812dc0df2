"""Results workbook and summary JSON output."""

import asyncio
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from openpyxl import Workbook

from page_qa.models.result import PageResult
from page_qa.models.summary import RunSummary
from page_qa.models.task import TestId

log = logging.getLogger(__name__)

RESULT_SHEET = "Results"
METADATA_SHEET = "Metadata"
PAGE_PASS_COLUMN = "Page Pass?"
HTTP_STATUS_COLUMN = "HTTP Status"
METADATA_HEADERS = (
    "Run ID",
    "Run Date",
    "Run Time",
    "Initiated By",
    "Total URLs",
    "Passed",
    "Failed",
    "N/A",
    "Notes",
)


@dataclass(frozen=True, kw_only=True)
class RunInfo:
    """Identity of a run, carried into every output."""

    run_id: str
    initiated_by: str
    started_at: datetime

    @classmethod
    def start(cls, initiated_by: str) -> "RunInfo":
        now = datetime.now().astimezone()
        return cls(
            run_id=f"run-{int(now.timestamp() * 1000)}",
            initiated_by=initiated_by,
            started_at=now,
        )


def result_headers() -> list[str]:
    return [
        "url",
        "region",
        "test ids",
        *(test_id.value for test_id in TestId),
        PAGE_PASS_COLUMN,
        HTTP_STATUS_COLUMN,
    ]


def result_row(result: PageResult) -> list[Any]:
    """One table row: passthrough columns, one outcome per id, verdict, status."""
    return [
        result.url,
        result.region,
        ",".join(sorted(result.requested_test_ids)),
        *(str(result.outcome(test_id.value)) for test_id in TestId),
        "Pass" if result.page_pass else "Fail",
        result.http_status,
    ]


def summary_payload(summary: RunSummary, run: RunInfo) -> dict[str, Any]:
    """Summary JSON with run identity fields added."""
    return {
        "runId": run.run_id,
        "initiatedBy": run.initiated_by,
        "date": run.started_at.isoformat(),
        **summary.to_json_dict(),
    }


def build_workbook(
    results: Sequence[PageResult], summary: RunSummary, run: RunInfo
) -> Workbook:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = RESULT_SHEET
    sheet.append(result_headers())
    for result in results:
        sheet.append(result_row(result))

    metadata = workbook.create_sheet(METADATA_SHEET)
    metadata.append(METADATA_HEADERS)
    metadata.append(
        [
            run.run_id,
            run.started_at.strftime("%Y-%m-%d"),
            run.started_at.strftime("%H:%M:%S"),
            run.initiated_by,
            summary.total,
            summary.passed,
            summary.failed,
            summary.na,
            f"Completed run: {summary.passed} passed, {summary.failed} failed",
        ]
    )
    return workbook


async def write_outputs(
    output_path: Path,
    summary_path: Path,
    results: Sequence[PageResult],
    summary: RunSummary,
    run: RunInfo,
) -> None:
    """Write the results workbook and the summary JSON file."""
    workbook = build_workbook(results, summary, run)
    await asyncio.to_thread(_save, workbook, output_path)
    log.info("Results saved to %s", output_path)

    payload = json.dumps(summary_payload(summary, run), indent=2)
    await asyncio.to_thread(summary_path.write_text, payload)
    log.info("Run summary saved to %s", summary_path)


def _save(workbook: Workbook, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)
