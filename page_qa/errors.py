"""Exceptions shared across the runner."""


class SetupError(ValueError):
    """Raised when run input or configuration is unusable."""
