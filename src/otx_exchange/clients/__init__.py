"""API clients for the OTX exchange."""

from .base import BaseClient
from .exchange import ClientConfig, ExchangeClient

__all__ = [
    "BaseClient",
    "ClientConfig",
    "ExchangeClient",
]
