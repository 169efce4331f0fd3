"""Indicator type taxonomy used by OTX pulses."""

from __future__ import annotations

from enum import Enum


class UnknownIndicatorTypeError(ValueError):
    """Raised when an indicator type string is not part of the taxonomy."""

    def __init__(self, text: str):
        super().__init__(f"Unknown indicator type: {text!r}")
        self.text = text


class IndicatorType(str, Enum):
    """Kinds of observable an OTX indicator can describe.

    Member values are the exact strings used in the ``type`` field of
    indicator records. ``UNKNOWN`` maps to the empty string.
    """

    IPV4 = "IPv4"
    IPV6 = "IPv6"
    DOMAIN = "domain"
    HOSTNAME = "hostname"
    EMAIL = "email"
    URL = "URL"
    URI = "URI"
    MD5 = "FileHash-MD5"
    SHA1 = "FileHash-SHA1"
    SHA256 = "FileHash-SHA256"
    PEHASH = "FileHash-PEHASH"
    IMPHASH = "FileHash-IMPHASH"
    CIDR = "CIDR"
    FILE_PATH = "FilePath"
    MUTEX = "Mutex"
    CVE = "CVE"
    UNKNOWN = ""

    @classmethod
    def parse(cls, text: str) -> "IndicatorType":
        """Map wire text to a member.

        Raises:
            UnknownIndicatorTypeError: if the text is not recognized.
        """
        try:
            return cls(text)
        except ValueError:
            raise UnknownIndicatorTypeError(text) from None

    def render(self) -> str:
        """Wire text for this member."""
        return self.value

    def __str__(self) -> str:
        return self.value
