"""Checks on the static structure of the loaded page."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from page_qa.checks import selectors
from page_qa.checks.base import Check, first_visible
from page_qa.models.result import CheckResult
from page_qa.sessions import SessionBundle


@dataclass(frozen=True, kw_only=True)
class HeroTextCheck(Check):
    """Hero text is visible on the given device profile."""

    profile: Literal["desktop", "mobile"] = "desktop"
    hero_selectors: Sequence[str] = selectors.HERO_SELECTORS

    async def run(self, session: SessionBundle) -> CheckResult:
        page = session.mobile if self.profile == "mobile" else session.desktop
        found = await first_visible(page, self.hero_selectors)
        return CheckResult.from_bool(
            found is not None,
            f"Hero text not found or not visible on {self.profile} viewport",
        )


@dataclass(frozen=True, kw_only=True)
class ElementPresenceCheck(Check):
    """An element matching ``selector`` exists on the desktop page."""

    selector: str
    label: str

    async def run(self, session: SessionBundle) -> CheckResult:
        element = await session.desktop.query_selector(self.selector)
        return CheckResult.from_bool(
            element is not None, f"{self.label} element not found"
        )


@dataclass(frozen=True, kw_only=True)
class TextAbsenceCheck(Check):
    """The page source does not contain ``text``."""

    text: str = selectors.RENDERING_ERROR_TEXT

    async def run(self, session: SessionBundle) -> CheckResult:
        content = await session.desktop.content()
        return CheckResult.from_bool(
            self.text not in content, f'Page content contains "{self.text}"'
        )
