"""Base client: HTTP transport, auth headers and status handling."""

from __future__ import annotations

import logging
import re
from typing import Optional

import requests

from ..errors import (
    APIError,
    APITimeoutError,
    DecodeError,
    HttpStatusError,
    MissingApiKeyError,
    RateLimitError,
    TransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "otx-exchange/0.1.0"

# Matches sensitive query parameters/header values that may appear in exception messages.
# Covers: key=, api_key=, X-OTX-API-KEY:, Authorization:, password=
_SENSITIVE_PARAM_RE = re.compile(
    r"((?:X-OTX-API-KEY|key|apiKey|api_key|Authorization|password|token|secret)"
    r"['\"]?[=:]\s*['\"]?)[^\s&,;\"']+",
    re.IGNORECASE,
)

__all__ = [
    "APIError",
    "APITimeoutError",
    "BaseClient",
    "DecodeError",
    "HttpStatusError",
    "MissingApiKeyError",
    "RateLimitError",
    "TransportError",
]


def _sanitize_message(msg: str) -> str:
    """Redact sensitive parameter values from a string."""
    return _SENSITIVE_PARAM_RE.sub(r"\1[REDACTED]", msg)


class BaseClient:
    """Base class for API clients: one session, one GET, no retries."""

    DEFAULT_TIMEOUT: int = 30

    def __init__(
        self,
        timeout: Optional[int] = None,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.session = session or requests.Session()
        self._setup_session()

    def _setup_session(self) -> None:
        """Configure session with default headers."""
        self.session.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            }
        )

    def _get_headers(self) -> dict[str, str]:
        """Get headers for request. Override in subclasses for auth."""
        return {}

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[dict] = None,
        **kwargs,
    ) -> str:
        """Issue a single HTTP request and return the body text of a 2xx response."""
        headers = {**self._get_headers(), **kwargs.pop("headers", {})}

        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.Timeout as e:
            logger.warning(f"Timeout: {url}")
            raise APITimeoutError(f"Request to {url} timed out") from e
        except requests.RequestException as e:
            sanitized = _sanitize_message(str(e))
            logger.warning(f"Request failed: {sanitized}")
            raise TransportError(f"Request failed: {sanitized}") from e

        if response.status_code == 429:
            retry_after_raw = response.headers.get("Retry-After", "60")
            try:
                retry_after = int(retry_after_raw)
            except (ValueError, TypeError):
                # Retry-After may be a date string per HTTP spec
                retry_after = 60
            logger.warning(f"Rate limited by {url} (retry after {retry_after}s)")
            raise RateLimitError(f"Rate limit exceeded for {url}", url=url, retry_after=retry_after)

        if not 200 <= response.status_code < 300:
            logger.warning(f"HTTP {response.status_code} from {url}")
            raise HttpStatusError(
                f"HTTP {response.status_code} from {url}",
                status_code=response.status_code,
                url=url,
            )

        return response.text

    def get(self, url: str, params: Optional[dict] = None, **kwargs) -> str:
        """Make GET request."""
        return self._request("GET", url, params=params, **kwargs)
