"""Error handling utilities."""


class ZooDirectoryError(Exception):
    """Base exception for the zoo directory backend."""
    pass


class ContentStoreError(ZooDirectoryError):
    """Content store (CMS) request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(ZooDirectoryError):
    """Required configuration is missing or invalid."""
    pass
