"""Models for check and page results."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from page_qa.models.task import TestId

NAVIGATION_ERROR = "Navigation Error"
INVALID_URL = "Invalid URL"
RUNNER_ERROR = "Timeout/Error"
NO_RESPONSE = "N/A"

type HttpStatus = int | str

PRIORITY = {test_id.value: index for index, test_id in enumerate(TestId)}


class TestOutcome(StrEnum):
    """Verdict of a single check."""

    __test__ = False

    PASS = "Pass"
    FAIL = "Fail"
    NA = "NA"


@dataclass(frozen=True, kw_only=True)
class CheckResult:
    """Outcome of one check, with the reason when it did not pass."""

    outcome: TestOutcome
    message: str | None = None

    @classmethod
    def passed(cls) -> "CheckResult":
        return cls(outcome=TestOutcome.PASS)

    @classmethod
    def failed(cls, message: str) -> "CheckResult":
        return cls(outcome=TestOutcome.FAIL, message=message)

    @classmethod
    def not_applicable(cls, message: str | None = None) -> "CheckResult":
        return cls(outcome=TestOutcome.NA, message=message)

    @classmethod
    def from_bool(cls, ok: bool, message: str) -> "CheckResult":
        """Pass when ``ok``, otherwise fail with ``message``."""
        return cls.passed() if ok else cls.failed(message)


@dataclass(frozen=True, kw_only=True)
class Artifacts:
    """Diagnostic files kept for a page."""

    screenshot: Path | None = None
    video: Path | None = None
    navigation_screenshot: Path | None = None


def sort_test_ids(test_ids: Iterable[str]) -> list[str]:
    """Sort ids in execution order, unknown ids last in lexical order."""
    return sorted(
        test_ids,
        key=lambda test_id: (PRIORITY.get(test_id, len(PRIORITY)), test_id),
    )


@dataclass(frozen=True, kw_only=True)
class PageResult:
    """Complete outcome for one URL across all requested checks."""

    url: str
    region: str = "N/A"
    requested_test_ids: frozenset[str] = frozenset()
    http_status: HttpStatus = NO_RESPONSE
    outcomes: Mapping[str, CheckResult] = field(default_factory=dict)
    artifacts: Artifacts = field(default_factory=Artifacts)
    duration: float = 0.0

    @property
    def failed_test_ids(self) -> list[str]:
        """Ids whose outcome is Fail, in execution order."""
        return sort_test_ids(
            [
                test_id
                for test_id, result in self.outcomes.items()
                if result.outcome is TestOutcome.FAIL
            ]
        )

    @property
    def page_pass(self) -> bool:
        """True when no requested check failed (an empty request passes)."""
        return not self.failed_test_ids

    def outcome(self, test_id: str) -> TestOutcome:
        """Outcome for ``test_id``, NA when it was not requested."""
        result = self.outcomes.get(test_id)
        return result.outcome if result else TestOutcome.NA
