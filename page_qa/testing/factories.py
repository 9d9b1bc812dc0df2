"""Test factories for generating test data."""

from typing import Any
from unittest.mock import AsyncMock, Mock

from polyfactory import Use
from polyfactory.factories import DataclassFactory
from polyfactory.factories.pydantic_factory import ModelFactory

from page_qa.models.result import Artifacts, CheckResult, PageResult, TestOutcome
from page_qa.models.task import URLTask
from page_qa.sessions import SessionBundle


class URLTaskFactory(ModelFactory[URLTask]):
    """Factory for URLTask."""

    url = Use(ModelFactory.__faker__.url)
    region = "DE"
    requested_test_ids = frozenset({"TC-03", "TC-14"})


class CheckResultFactory(DataclassFactory[CheckResult]):
    """Factory for CheckResult."""

    outcome = TestOutcome.PASS
    message = None


class PageResultFactory(DataclassFactory[PageResult]):
    """Factory for PageResult."""

    url = Use(DataclassFactory.__faker__.url)
    region = "DE"
    requested_test_ids = frozenset()
    http_status = 200
    outcomes = Use(dict)
    artifacts = Use(Artifacts)
    duration = 1.0


def mock_page(url: str = "https://example.com/") -> Mock:
    """Playwright page double whose coroutine methods are AsyncMocks."""
    page = AsyncMock()
    page.url = url
    page.video = None
    page.query_selector.return_value = None
    page.query_selector_all.return_value = []
    page.content.return_value = "<html></html>"
    # Locator factories are synchronous on a real page.
    page.locator = Mock()
    page.get_by_role = Mock()
    page.get_by_text = Mock()
    return page


def mock_session(url: str = "https://example.com/", **fields: Any) -> SessionBundle:
    """Session bundle over two page doubles; ``fields`` override bundle values."""
    values: dict[str, Any] = {
        "url": url,
        "desktop": mock_page(url),
        "mobile": mock_page(url),
        "http_status": 200,
    }
    values.update(fields)
    return SessionBundle(**values)
