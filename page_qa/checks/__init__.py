"""Check catalogue."""

from page_qa.checks.base import Check, wait_within
from page_qa.checks.registry import CheckRegistry, UnknownTestIdError, default_registry

__all__ = [
    "Check",
    "CheckRegistry",
    "UnknownTestIdError",
    "default_registry",
    "wait_within",
]
