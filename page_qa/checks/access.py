"""Checks on how the page was reached: status, redirects and gatekeeper."""

from collections.abc import Collection
from dataclasses import dataclass

from page_qa.checks import selectors
from page_qa.checks.base import Check
from page_qa.models.result import CheckResult
from page_qa.sessions import SessionBundle


@dataclass(frozen=True, kw_only=True)
class HttpStatusCheck(Check):
    """Primary navigation answered 2xx or an accepted redirect."""

    redirects: Collection[int] = selectors.REDIRECT_STATUSES

    async def run(self, session: SessionBundle) -> CheckResult:
        code = session.status_code
        ok = code is not None and (200 <= code < 300 or code in self.redirects)
        return CheckResult.from_bool(
            ok, f"HTTP Status was {session.http_status}, expected 2xx or 3xx"
        )


@dataclass(frozen=True, kw_only=True)
class RedirectCheck(Check):
    """The desktop page ended up on a URL containing ``path``."""

    path: str = selectors.DOCCHECK_PATH

    async def run(self, session: SessionBundle) -> CheckResult:
        final_url = session.desktop.url
        return CheckResult.from_bool(
            self.path in final_url,
            f'Expected redirect to "{self.path}" not found: {final_url}',
        )


@dataclass(frozen=True, kw_only=True)
class GatekeeperCheck(Check):
    """A gatekeeper was shown and the page behind it loaded with 200."""

    async def run(self, session: SessionBundle) -> CheckResult:
        if not session.gatekeeper_detected:
            return CheckResult.failed("Gatekeeper UI not detected when expected")
        return CheckResult.from_bool(
            session.status_code == 200,
            "Page did not load successfully after gatekeeper "
            f"(status: {session.http_status})",
        )
