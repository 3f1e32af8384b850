"""Exception hierarchy for the Lark Open Platform client.

Failures fall in two groups:
- Transient: ``InternalError``, ``ServerError``, ``TransportTimeoutError``.
  The retry policy re-attempts these.
- Fatal: ``AccessTokenExpiredError``, ``ResponseError`` and ``LarkAPIError``.
  These reach the caller on first occurrence.
"""

from __future__ import annotations

from typing import Any


class LarkError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str, request_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.request_id = request_id

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for structured logging."""
        result: dict[str, Any] = {"error": type(self).__name__, "message": self.message}
        if self.request_id:
            result["request_id"] = self.request_id
        return result


class LarkAPIError(LarkError):
    """Business error reported through the ``code`` field of a JSON envelope.

    Attributes:
        code: Platform error code.
        msg: Error message from the platform.
    """

    def __init__(self, code: int, msg: str = "", request_id: str | None = None):
        self.code = code
        self.msg = msg
        super().__init__(f"Lark API Error {code}: {msg}", request_id=request_id)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["code"] = self.code
        return result


class AccessTokenExpiredError(LarkAPIError):
    """The access token sent with the request is no longer valid."""


class InternalError(LarkAPIError):
    """The platform reported a transient internal error in the envelope."""


class ServerError(LarkError):
    """HTTP 5xx from the upstream API."""

    def __init__(self, status_code: int, request_id: str | None = None):
        self.status_code = status_code
        super().__init__(f"Server error: HTTP {status_code}", request_id=request_id)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["status"] = self.status_code
        return result


class ResponseError(LarkError):
    """Non-success, non-5xx HTTP response.

    Attributes:
        status_code: HTTP status of the response.
        body: Raw response body as text.
    """

    def __init__(self, status_code: int, body: str, request_id: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}", request_id=request_id)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["status"] = self.status_code
        result["body"] = self.body
        return result


class TransportTimeoutError(LarkError):
    """The transport gave up waiting on connect, read, write or pool."""


RETRYABLE_ERRORS: tuple[type[LarkError], ...] = (
    InternalError,
    ServerError,
    TransportTimeoutError,
)
