"""Models for the URL tasks read from the input workbook."""

from collections.abc import Iterable
from enum import StrEnum

from pydantic import Field, field_validator

from page_qa.models.base import Model


class TestId(StrEnum):
    """Fixed check identifiers.

    Declaration order is the execution order: several checks follow links or
    open menus, and later checks for the same URL rely on that page state.
    """

    __test__ = False

    HERO_DESKTOP = "TC-01"
    HERO_MOBILE = "TC-02"
    HEADER = "TC-03"
    NAV = "TC-04"
    MAIN = "TC-05"
    FOOTER = "TC-06"
    VIDEO = "TC-07"
    CONTACT_FORM = "TC-08"
    RENDERING_ERROR = "TC-09"
    GATEKEEPER = "TC-10"
    INSIGHTS_LINK = "TC-11"
    DOCCHECK_REDIRECT = "TC-12"
    ULTRASOUND_MENU = "TC-13"
    HTTP_STATUS = "TC-14"


def parse_test_ids(raw: str | None) -> frozenset[str]:
    """Split a comma-separated test id cell into a set of trimmed ids."""
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


class URLTask(Model):
    """One URL and the checks requested for it."""

    url: str = Field(..., description="Page URL to check")
    region: str = Field(default="N/A", description="Regional site label")
    requested_test_ids: frozenset[str] = Field(
        default_factory=frozenset,
        description="Requested check ids, unknown ids included",
    )

    @field_validator("url", "region", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @classmethod
    def from_row(
        cls, url: str, test_ids: str | None, region: str | None = None
    ) -> "URLTask":
        """Build a task from raw tabular cell values."""
        return cls(
            url=url,
            region=region or "N/A",
            requested_test_ids=parse_test_ids(test_ids),
        )

    def valid_test_ids(self, known: Iterable[str]) -> frozenset[str]:
        """Return requested ids that are present in ``known``."""
        return self.requested_test_ids & frozenset(known)
