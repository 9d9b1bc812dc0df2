"""Mapping from test ids to checks."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from page_qa.checks import selectors
from page_qa.checks.access import GatekeeperCheck, HttpStatusCheck, RedirectCheck
from page_qa.checks.base import Check
from page_qa.checks.flows import (
    ContactFormCheck,
    InsightsLinkCheck,
    UltrasoundMenuCheck,
    VideoCheck,
)
from page_qa.checks.structure import (
    ElementPresenceCheck,
    HeroTextCheck,
    TextAbsenceCheck,
)
from page_qa.models.task import TestId


class UnknownTestIdError(KeyError):
    """Raised when looking up a check for an id outside the registry."""


@dataclass(frozen=True)
class CheckRegistry:
    """Source of truth for valid test ids and their checks."""

    checks: Mapping[TestId, Check]

    def is_valid(self, test_id: str) -> bool:
        return test_id in self.known_ids

    @property
    def known_ids(self) -> frozenset[str]:
        return frozenset(test_id.value for test_id in self.checks)

    def get(self, test_id: str) -> Check:
        if not self.is_valid(test_id):
            raise UnknownTestIdError(test_id)
        return self.checks[TestId(test_id)]

    def ordered(self, requested: Iterable[str]) -> Iterator[TestId]:
        """Yield the requested valid ids, lowest id first."""
        wanted = set(requested)
        for test_id in TestId:
            if test_id in self.checks and test_id.value in wanted:
                yield test_id


def default_registry() -> CheckRegistry:
    """The standard check catalogue."""
    return CheckRegistry(
        {
            TestId.HERO_DESKTOP: HeroTextCheck(profile="desktop"),
            TestId.HERO_MOBILE: HeroTextCheck(profile="mobile"),
            TestId.HEADER: ElementPresenceCheck(
                selector=selectors.HEADER, label="Header"
            ),
            TestId.NAV: ElementPresenceCheck(
                selector=selectors.NAV, label="Navigation"
            ),
            TestId.MAIN: ElementPresenceCheck(
                selector=selectors.MAIN, label="Main content"
            ),
            TestId.FOOTER: ElementPresenceCheck(
                selector=selectors.FOOTER, label="Footer"
            ),
            TestId.VIDEO: VideoCheck(),
            TestId.CONTACT_FORM: ContactFormCheck(),
            TestId.RENDERING_ERROR: TextAbsenceCheck(),
            TestId.GATEKEEPER: GatekeeperCheck(),
            TestId.INSIGHTS_LINK: InsightsLinkCheck(),
            TestId.DOCCHECK_REDIRECT: RedirectCheck(),
            TestId.ULTRASOUND_MENU: UltrasoundMenuCheck(),
            TestId.HTTP_STATUS: HttpStatusCheck(),
        }
    )
