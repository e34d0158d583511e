from __future__ import annotations

"""
Domain Error Hierarchy.

Classifies every failure the sync pipeline can surface. Fatal errors abort
the run and are rendered by the CLI; retryable errors are consumed by the
bounded retry driver and never escape a translation batch.
"""

from typing import List, Optional, Sequence


class I18nSyncError(Exception):
    """Base class for all errors raised by the sync pipeline."""


# -----------------------------------------------------------------------------
# FATAL ERRORS
# -----------------------------------------------------------------------------

class FatalError(I18nSyncError):
    """An error that must abort the current run without retries."""


class ConfigurationError(FatalError):
    """
    Required settings are missing or invalid.

    Attributes:
        missing: Names of the environment variables that were not provided.
    """

    def __init__(self, message: str, missing: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.missing: List[str] = list(missing or [])

    @classmethod
    def for_missing(cls, missing: Sequence[str]) -> "ConfigurationError":
        names = ", ".join(missing)
        return cls(
            f"Missing required environment variables: {names}. "
            f"Define them in your shell or in a .env file.",
            missing=missing,
        )


class AuthenticationError(FatalError):
    """The backend rejected the supplied credentials."""


class NotFoundError(FatalError):
    """The requested remote resource does not exist."""


class RateLimitError(FatalError):
    """The backend refused the request because of its rate limit."""


class BackendUnavailableError(FatalError):
    """A backend stayed unreachable after every retry attempt."""


# -----------------------------------------------------------------------------
# RETRYABLE ERRORS
# -----------------------------------------------------------------------------

class RetryableError(I18nSyncError):
    """A failure that may succeed when the same operation is attempted again."""


class TransientBackendError(RetryableError):
    """Timeout, dropped connection or server-side failure."""


class MalformedResponseError(RetryableError):
    """The backend answered, but the payload failed validation."""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class RetriesExhaustedError(I18nSyncError):
    """
    Raised by the retry driver once the retry ceiling has been reached.

    Attributes:
        attempts: Number of attempts performed.
        last_error: The retryable error raised by the final attempt.
    """

    def __init__(self, attempts: int, last_error: RetryableError) -> None:
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error
