"""Error kinds raised by collectors and handled by the metric evaluators."""

from typing import Optional


class RepometerError(Exception):
    """Base class for all repometer errors."""


class ConfigError(RepometerError):
    """Missing or malformed configuration (fatal at startup)."""


class InvalidRepositoryUrl(RepometerError):
    """The URL does not name a repository as host/owner/name."""

    def __init__(self, url: str):
        super().__init__(f"Not a repository URL: {url!r}")
        self.url = url


class RateLimitExhausted(RepometerError):
    """The API quota is used up; no further calls should be issued."""


class RemoteFetchError(RepometerError):
    """A call to the hosting API failed (network, auth, not found)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CloneFailure(RepometerError):
    """Shallow clone or reading the cloned tree failed."""
