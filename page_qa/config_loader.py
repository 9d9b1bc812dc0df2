"""Load run configuration from YAML files."""

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from page_qa.config import RunConfig
from page_qa.errors import SetupError


async def load_run_config(
    path: Path | None, overrides: Mapping[str, Any] | None = None
) -> RunConfig:
    """Load a run configuration, applying non-None overrides on top.

    Args:
        path: Optional YAML file; defaults are used when None
        overrides: Values from the command line, None meaning "not given"

    Returns:
        Validated run configuration

    Raises:
        SetupError: If the file is missing, malformed or fails validation

    """
    data: dict[str, Any] = {}
    if path is not None:
        data = await asyncio.to_thread(_read_yaml, path)

    data.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        return RunConfig.model_validate(data)
    except ValidationError as e:
        raise SetupError(f"Invalid run configuration schema: {e}") from e


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise SetupError(f"Config file not found: {path}")

    try:
        content = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise SetupError(f"Invalid YAML in {path}: {e}") from e

    if content is None:
        raise SetupError(f"Empty config file: {path}")
    if not isinstance(content, dict):
        raise SetupError(f"Config file must contain a mapping: {path}")

    return content
