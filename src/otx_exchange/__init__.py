"""OTX Exchange - client for AlienVault Open Threat Exchange pulse feeds."""

__version__ = "0.1.0"

from .indicator_types import IndicatorType, UnknownIndicatorTypeError
from .models import Indicator, Threat, ThreatPage, decode_json, encode_json
from .errors import (
    APIError,
    APITimeoutError,
    DecodeError,
    HttpStatusError,
    MissingApiKeyError,
    RateLimitError,
    TransportError,
)
from .clients import ClientConfig, ExchangeClient

__all__ = [
    "__version__",
    "IndicatorType",
    "UnknownIndicatorTypeError",
    "Indicator",
    "Threat",
    "ThreatPage",
    "decode_json",
    "encode_json",
    "APIError",
    "APITimeoutError",
    "DecodeError",
    "HttpStatusError",
    "MissingApiKeyError",
    "RateLimitError",
    "TransportError",
    "ClientConfig",
    "ExchangeClient",
]
