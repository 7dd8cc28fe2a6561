"""Push delivery exceptions.

Every error raised by the push package derives from :class:`PushError`, so
callers can catch the whole family at one seam:

    try:
        result = await client.send_multicast(message, tokens)
    except PushRetryExhaustedError as exc:
        logger.error("No round trip succeeded", extra={"attempts": exc.attempts})
    except PushError:
        ...
"""

from __future__ import annotations

from push_service.infra.push.constants import RETRYABLE_HTTP_STATUSES
from push_service.utils.retry.exceptions import RetryExhaustedError


class PushError(Exception):
    """Base error for push delivery."""


class PushUsageError(PushError, ValueError):
    """A required argument (API key, target, recipients) is missing or empty."""


class PushTransportError(PushError):
    """The request could not be written or the response could not be read."""


class PushProtocolError(PushError):
    """The service answered with a non-200 HTTP status.

    Attributes:
        status_code: HTTP status returned by the service.
        description: Response body, or an empty string when unreadable.
    """

    def __init__(self, status_code: int, description: str | None = None) -> None:
        self.status_code = status_code
        self.description = description if description is not None else ""
        message = f"HTTP Status Code: {status_code}"
        if self.description:
            message = f"{message} ({self.description})"
        super().__init__(message)

    @property
    def is_transient(self) -> bool:
        """Whether the status is a server-side hiccup worth retrying."""
        return self.status_code in RETRYABLE_HTTP_STATUSES


class PushParseError(PushError):
    """The response body was malformed or had an unexpected structure."""

    def __init__(self, reason: str, body: str | None = None) -> None:
        self.reason = reason
        self.body = body
        message = f"Error parsing JSON response: {reason}"
        if body is not None:
            message = f"{message} ({body})"
        super().__init__(message)


class PushRetryExhaustedError(PushError, RetryExhaustedError):
    """No usable result was obtained within the configured attempt budget."""


__all__ = [
    "PushError",
    "PushParseError",
    "PushProtocolError",
    "PushRetryExhaustedError",
    "PushTransportError",
    "PushUsageError",
]
