"""Exceptions raised by the exchange client."""

from __future__ import annotations

from typing import Optional


class MissingApiKeyError(RuntimeError):
    """Raised when a request is attempted before an API key is configured.

    This is a usage error, not a request failure, so it does not derive
    from :class:`APIError`.
    """

    def __init__(self, message: str = "API key required: call set_api_key() before making requests"):
        super().__init__(message)


class APIError(Exception):
    """Base exception for API errors."""

    pass


class TransportError(APIError):
    """Raised when the request could not be completed (DNS, connection, TLS)."""

    pass


class APITimeoutError(TransportError):
    """Raised when API request times out."""

    pass


class HttpStatusError(APIError):
    """Raised when the exchange answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, url: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class RateLimitError(HttpStatusError):
    """Raised when API rate limit is exceeded."""

    def __init__(self, message: str, url: str = "", retry_after: Optional[int] = None):
        super().__init__(message, status_code=429, url=url)
        self.retry_after = retry_after


class DecodeError(APIError):
    """Raised when a body is not valid JSON or does not match the record schema."""

    pass
