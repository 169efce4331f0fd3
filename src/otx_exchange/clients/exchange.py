"""AlienVault OTX (Open Threat Exchange) pulse client."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional

import requests

from ..errors import DecodeError, MissingApiKeyError
from ..models import Threat, ThreatPage, decode_json
from .base import DEFAULT_USER_AGENT, BaseClient

logger = logging.getLogger(__name__)

DEFAULT_EXCHANGE = "https://otx.alienvault.com"
DEFAULT_PAGE_LIMIT = 25
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SUBSCRIBED_PATH = "/api/v1/pulses/subscribed"
PULSE_PATH = "/api/v1/pulses/"


def format_rfc3339(t: datetime) -> str:
    """Format a timestamp as RFC 3339 in UTC; naive values are taken as UTC."""
    if t.tzinfo is None:
        t = t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc).replace(tzinfo=None).isoformat(timespec="seconds") + "Z"


@dataclass(frozen=True)
class ClientConfig:
    """Request settings for an :class:`ExchangeClient`.

    Builder methods return a new configuration; no value is validated.

    ``since`` defaults to the Unix epoch, 1970-01-01T00:00:00Z, rather
    than the 1900-01-01T00:00:00Z some OTX clients send. Either value
    leaves the subscribed listing unfiltered.
    """

    api_key: Optional[str] = None
    page_limit: int = DEFAULT_PAGE_LIMIT
    since: datetime = EPOCH
    base_url: str = DEFAULT_EXCHANGE
    timeout: int = BaseClient.DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def set_api_key(self, api_key: str) -> "ClientConfig":
        return replace(self, api_key=api_key)

    def set_page_limit(self, page_limit: int) -> "ClientConfig":
        return replace(self, page_limit=page_limit)

    def set_since(self, since: datetime) -> "ClientConfig":
        return replace(self, since=since)

    def set_base_url(self, base_url: str) -> "ClientConfig":
        return replace(self, base_url=base_url)


class ExchangeClient(BaseClient):
    """Client for the OTX pulse API.

    Configure with the chainable builder methods, then walk subscribed
    pulses with :meth:`for_each` or :meth:`iter_threats`::

        client = ExchangeClient().set_api_key(key).set_since(last_week)
        client.for_each(lambda threat: print(threat.name) or True)

    Every builder call returns a new client sharing the same HTTP session.

    API docs: https://otx.alienvault.com/api
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or ClientConfig()
        super().__init__(
            timeout=self.config.timeout,
            user_agent=self.config.user_agent,
            session=session,
        )

    def _with_config(self, config: ClientConfig) -> "ExchangeClient":
        return type(self)(config, session=self.session)

    def set_api_key(self, api_key: str) -> "ExchangeClient":
        return self._with_config(self.config.set_api_key(api_key))

    def set_page_limit(self, page_limit: int) -> "ExchangeClient":
        return self._with_config(self.config.set_page_limit(page_limit))

    def set_since(self, since: datetime) -> "ExchangeClient":
        return self._with_config(self.config.set_since(since))

    def set_base_url(self, base_url: str) -> "ExchangeClient":
        return self._with_config(self.config.set_base_url(base_url))

    def _get_headers(self) -> dict[str, str]:
        if not self.config.api_key:
            raise MissingApiKeyError()
        return {"X-OTX-API-KEY": self.config.api_key}

    def _decode(self, record_cls, body: str, url: str):
        try:
            return decode_json(record_cls, body)
        except DecodeError as e:
            logger.warning(f"Undecodable response from {url}: {e}")
            raise

    def fetch_page(self, cursor: Optional[str] = None) -> ThreatPage:
        """Fetch one page of subscribed pulses.

        Args:
            cursor: ``next`` link from a previous page, used verbatim as the
                request URL. When omitted the first page is requested using
                the configured page limit and ``since`` filter.

        Returns:
            The decoded page

        Raises:
            MissingApiKeyError: no API key is configured (nothing is sent).
            TransportError: the request could not be completed.
            HttpStatusError: the exchange answered with a non-2xx status.
            DecodeError: the body is not a valid page.
        """
        if cursor:
            url, params = cursor, None
        else:
            url = f"{self.config.base_url}{SUBSCRIBED_PATH}"
            params = {
                "limit": self.config.page_limit,
                "modified_since": format_rfc3339(self.config.since),
            }

        body = self.get(url, params=params)
        return self._decode(ThreatPage, body, url)

    def fetch_threat(self, threat_id: str) -> Threat:
        """Fetch a single pulse by ID.

        Raises the same exceptions as :meth:`fetch_page`.
        """
        url = f"{self.config.base_url}{PULSE_PATH}{threat_id}"
        return self._decode(Threat, self.get(url), url)

    def iter_threats(self, max_pages: Optional[int] = None) -> Iterator[Threat]:
        """Yield subscribed pulses in order, following ``next`` links lazily.

        Args:
            max_pages: Stop after this many pages even if the exchange
                reports more. ``None`` follows the cursor chain to its end.
        """
        cursor: Optional[str] = None
        pages = 0

        while True:
            if max_pages is not None and pages >= max_pages:
                logger.info(f"Stopping after {pages} pages; more results available at {cursor}")
                return

            page = self.fetch_page(cursor)
            pages += 1
            logger.debug(f"Page {pages}: {len(page.results)} threats of {page.count}")

            yield from page.results

            cursor = page.next
            if not cursor:
                return

    def for_each(
        self,
        visitor: Callable[[Threat], bool],
        max_pages: Optional[int] = None,
    ) -> int:
        """Call ``visitor`` for each subscribed pulse until it returns False.

        Request failures propagate; iteration never ends silently on error.

        Returns:
            Number of times the visitor was called
        """
        visited = 0
        for threat in self.iter_threats(max_pages=max_pages):
            visited += 1
            if not visitor(threat):
                break
        return visited
