"""Shared test fixtures."""

import pytest

from otx_exchange.clients.exchange import ExchangeClient

EXCHANGE = "https://otx.test"


def _indicator(n: int, indicator_type: str = "domain") -> dict:
    return {
        "_id": f"ind-{n}",
        "created": "2024-01-15T10:00:00",
        "indicator": f"bad{n}.example.com",
        "type": indicator_type,
        "description": "",
    }


def _threat(pulse_id: str, **overrides) -> dict:
    threat = {
        "id": pulse_id,
        "author_name": "AlienVault",
        "name": f"Pulse {pulse_id}",
        "description": "Test pulse",
        "created": "2024-01-15T10:00:00",
        "modified": "2024-01-16T10:00:00",
        "indicators": [_indicator(1)],
        "revision": 1,
        "references": ["https://blog.example.com/report"],
        "tags": ["phishing"],
    }
    threat.update(overrides)
    return threat


@pytest.fixture
def exchange_url():
    return EXCHANGE


@pytest.fixture
def make_indicator():
    """Factory for indicator JSON objects."""
    return _indicator


@pytest.fixture
def make_threat():
    """Factory for pulse JSON objects."""
    return _threat


@pytest.fixture
def client():
    """Client pointed at a fake exchange with a key configured."""
    return ExchangeClient().set_api_key("test-key").set_base_url(EXCHANGE)
