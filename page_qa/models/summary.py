"""Run-level summary handed to reporting collaborators."""

from collections.abc import Sequence

from pydantic import Field

from page_qa.models.base import CamelModel


class FailedUrl(CamelModel):
    """A failing page and the checks that failed on it."""

    url: str
    failed_test_ids: Sequence[str] = Field(default_factory=list)


class UrlResult(CamelModel):
    """Per-page verdict line."""

    url: str
    passed: bool
    http_status: int | str
    failed_test_ids: Sequence[str] = Field(default_factory=list)


class RunSummary(CamelModel):
    """Totals, per-check failure tallies and failing pages for one run."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    na: int = 0
    per_test_failure_counts: dict[str, int] = Field(default_factory=dict)
    failed_urls: Sequence[FailedUrl] = Field(default_factory=list)
    url_results: Sequence[UrlResult] = Field(default_factory=list)
    screenshot_paths: Sequence[str] = Field(default_factory=list)
    video_paths: Sequence[str] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, object]:
        """Dump with camelCase keys and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)
