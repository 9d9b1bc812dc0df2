"""Read URL tasks from the input workbook."""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from page_qa.errors import SetupError
from page_qa.models.task import URLTask

log = logging.getLogger(__name__)

URL_SHEET = "URLs"
URL_COLUMN = "url"
TEST_IDS_COLUMN = "test ids"
REGION_COLUMN = "region"


async def load_url_tasks(path: Path) -> list[URLTask]:
    """Load URL tasks from the ``URLs`` sheet of an xlsx workbook.

    Args:
        path: Workbook path

    Returns:
        Tasks in sheet order

    Raises:
        SetupError: If the workbook is unreadable, lacks the sheet or the
            required columns, or holds no URL rows

    """
    return await asyncio.to_thread(_read_tasks, path)


def _read_tasks(path: Path) -> list[URLTask]:
    if not path.exists():
        raise SetupError(f"Input file not found: {path}")

    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, OSError, KeyError) as e:
        raise SetupError(f"Cannot read workbook {path}: {e}") from e

    try:
        if URL_SHEET not in workbook.sheetnames:
            raise SetupError(f'Sheet "{URL_SHEET}" not found in {path}')
        rows = workbook[URL_SHEET].iter_rows(values_only=True)
        tasks = parse_rows(next(rows, ()), rows)
    finally:
        workbook.close()

    if not tasks:
        raise SetupError(f"No URLs found in {path}")

    log.info("Loaded %d URL task(s) from %s", len(tasks), path)
    return tasks


def parse_rows(
    header: Sequence[Any], rows: Iterable[Sequence[Any]]
) -> list[URLTask]:
    """Turn a header row and data rows into tasks.

    Header matching is case-insensitive; fully empty rows are skipped.
    """
    columns = {
        _text(name).lower(): index
        for index, name in enumerate(header)
        if _text(name)
    }
    missing = [c for c in (URL_COLUMN, TEST_IDS_COLUMN) if c not in columns]
    if missing:
        raise SetupError(
            'Required columns "URL" and "Test IDs" not found in URLs sheet '
            f"(missing: {', '.join(missing)})"
        )

    region_index = columns.get(REGION_COLUMN)
    tasks: list[URLTask] = []
    for row in rows:
        if not any(_text(cell) for cell in row):
            continue
        tasks.append(
            URLTask.from_row(
                url=_cell(row, columns[URL_COLUMN]),
                test_ids=_cell(row, columns[TEST_IDS_COLUMN]),
                region=_cell(row, region_index) if region_index is not None else None,
            )
        )
    return tasks


def _cell(row: Sequence[Any], index: int) -> str:
    return _text(row[index]) if index < len(row) else ""


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()
