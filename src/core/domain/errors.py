"""Domain exceptions.

Two families with different propagation rules:
- `EncodingError` is local to one credential; the batch skips it and goes on.
- `QueryError` comes from the I/O boundary and ends the batch.
"""

from __future__ import annotations


class PwnRangeError(Exception):
    """Base class for every error raised by pwnrange."""


class EncodingError(PwnRangeError):
    """A secret is not valid UTF-8 and cannot be digested."""


class FormatError(PwnRangeError):
    """A response line does not have the `SUFFIX:COUNT` shape.

    The line parser returns instances of this class instead of raising them,
    so callers decide whether one bad line fails the whole response.
    """

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class QueryError(PwnRangeError):
    """A range query could not produce a usable response."""

    def __init__(self, message: str, *, prefix: str | None = None) -> None:
        super().__init__(message)
        self.prefix = prefix


class ServiceUnavailableError(QueryError):
    """Connection, DNS, timeout or other transport failure."""


class TlsError(QueryError):
    """Certificate validation or TLS handshake failure."""


class ProxyAuthenticationError(QueryError):
    """The proxy refused the request (tunnel failure or HTTP 407)."""


class HttpStatusError(QueryError):
    """The service answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int, prefix: str | None = None) -> None:
        super().__init__(message, prefix=prefix)
        self.status_code = status_code


class ResponseFormatError(QueryError):
    """The response body is not UTF-8 or holds a malformed line."""


class BatchAbortedError(QueryError):
    """A batch stopped early because a range query failed.

    `position` is the 1-based index of the item whose query failed and
    `completed` the number of verdicts produced before it. The original
    `QueryError` is available as `__cause__`.
    """

    def __init__(self, message: str, *, position: int, completed: int, prefix: str | None = None) -> None:
        super().__init__(message, prefix=prefix)
        self.position = position
        self.completed = completed
