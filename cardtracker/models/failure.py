"""
Failure taxonomy for remote fetches.

Every error raised by the HTTP layer is a FetchError subclass classified by
FailureKind. Callers catch FetchError at the unit of work they own (one
source URL, one collection page, one price lookup) and carry on; only a
ConfigError is allowed to end a run.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of fetch failures."""

    # Connection-level: DNS, refused, reset, timeout
    TRANSPORT = "transport"

    # Non-200 status outside the retryable class (400, 403, 404, ...)
    HTTP_STATUS = "http_status"

    # 429 / 5xx still failing after the retry budget
    RETRY_EXHAUSTED = "retry_exhausted"

    # 200 with a body that is not JSON
    MALFORMED_RESPONSE = "malformed_response"


class FetchError(Exception):
    """Base class for failures fetching a remote JSON document."""

    kind: FailureKind

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(message)


class TransportError(FetchError):
    """The request never produced an HTTP response."""

    kind = FailureKind.TRANSPORT

    def __init__(self, url: str, reason: str):
        self.reason = reason
        super().__init__(url, f"Transport error for {url}: {reason}")


class HttpStatusError(FetchError):
    """Non-retryable HTTP status."""

    kind = FailureKind.HTTP_STATUS

    def __init__(self, url: str, status_code: int):
        self.status_code = status_code
        super().__init__(url, f"HTTP {status_code} for {url}")


class RetryExhaustedError(FetchError):
    """Retryable HTTP status that persisted through every retry."""

    kind = FailureKind.RETRY_EXHAUSTED

    def __init__(self, url: str, status_code: int):
        self.status_code = status_code
        super().__init__(url, f"HTTP {status_code} after all retries for {url}")


class MalformedResponseError(FetchError):
    """HTTP 200 whose body could not be decoded as JSON."""

    kind = FailureKind.MALFORMED_RESPONSE

    def __init__(self, url: str, excerpt: str, reason: str):
        self.excerpt = excerpt
        super().__init__(url, f"Bad JSON from {url}: {reason} (body starts: {excerpt!r})")


class ConfigError(Exception):
    """Raised when the tracker configuration cannot be loaded."""

    pass
