"""Threat records returned by the OTX exchange.

Records decode from the JSON objects served by the ``/api/v1/pulses``
endpoints. Fields the exchange may omit (descriptions, references, tags,
pagination links) fall back to empty defaults; anything else missing or
of the wrong JSON type is reported as a :class:`DecodeError`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar, Union

from .errors import DecodeError
from .indicator_types import IndicatorType, UnknownIndicatorTypeError

_MISSING = object()


def _field(data: dict, key: str, expected: Union[type, tuple], default: Any = _MISSING) -> Any:
    """Fetch a key from a decoded JSON object and check its type."""
    if key not in data or data[key] is None:
        if default is _MISSING:
            raise DecodeError(f"Missing required field '{key}'")
        return default() if callable(default) else default

    value = data[key]
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, expected):
        raise DecodeError(f"Field '{key}' has unexpected type {type(value).__name__}")
    return value


def _string_list(data: dict, key: str) -> tuple[str, ...]:
    values = _field(data, key, list, default=list)
    for value in values:
        if not isinstance(value, str):
            raise DecodeError(f"Field '{key}' must contain only strings")
    return tuple(values)


def _require_object(data: Any, record: str) -> dict:
    if not isinstance(data, dict):
        raise DecodeError(f"{record} must be a JSON object, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class Indicator:
    """A single observable artifact attached to a threat."""

    id: str
    created: str
    indicator: str
    indicator_type: IndicatorType
    description: str = ""

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "_id": self.id,
            "created": self.created,
            "indicator": self.indicator,
            "type": self.indicator_type.render(),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Indicator":
        """Create from a decoded JSON object."""
        data = _require_object(data, "Indicator")
        try:
            indicator_type = IndicatorType.parse(_field(data, "type", str))
        except UnknownIndicatorTypeError as e:
            raise DecodeError(str(e)) from e

        return cls(
            id=_field(data, "_id", str),
            created=_field(data, "created", str),
            indicator=_field(data, "indicator", str),
            indicator_type=indicator_type,
            description=_field(data, "description", str, default=""),
        )


@dataclass(frozen=True)
class Threat:
    """A pulse: a set of indicators plus the metadata describing them."""

    id: str
    author_name: str
    name: str
    created: str
    modified: str
    revision: float
    indicators: tuple[Indicator, ...] = ()
    description: str = ""
    references: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "author_name": self.author_name,
            "name": self.name,
            "description": self.description,
            "created": self.created,
            "modified": self.modified,
            "indicators": [ind.to_dict() for ind in self.indicators],
            "revision": self.revision,
            "references": list(self.references),
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Threat":
        """Create from a decoded JSON object."""
        data = _require_object(data, "Threat")
        return cls(
            id=_field(data, "id", str),
            author_name=_field(data, "author_name", str),
            name=_field(data, "name", str),
            description=_field(data, "description", str, default=""),
            created=_field(data, "created", str),
            modified=_field(data, "modified", str),
            indicators=tuple(Indicator.from_dict(ind) for ind in _field(data, "indicators", list)),
            revision=float(_field(data, "revision", (int, float))),
            references=_string_list(data, "references"),
            tags=_string_list(data, "tags"),
        )


@dataclass(frozen=True)
class ThreatPage:
    """One page of the subscribed pulse listing."""

    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: tuple[Threat, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "count": self.count,
            "next": self.next,
            "previous": self.previous,
            "results": [t.to_dict() for t in self.results],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ThreatPage":
        """Create from a decoded JSON object."""
        data = _require_object(data, "ThreatPage")
        count = _field(data, "count", int, default=0)
        if count < 0:
            raise DecodeError("Field 'count' must not be negative")

        return cls(
            count=count,
            next=_field(data, "next", str, default=None),
            previous=_field(data, "previous", str, default=None),
            results=tuple(Threat.from_dict(t) for t in _field(data, "results", list, default=list)),
        )


Record = TypeVar("Record", Indicator, Threat, ThreatPage)


def decode_json(record_cls: type[Record], text: Union[str, bytes]) -> Record:
    """Parse JSON text into a record of the given class.

    Raises:
        DecodeError: on malformed JSON or a schema mismatch.
    """
    try:
        data = json.loads(text)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"Malformed JSON: {e}") from e
    return record_cls.from_dict(data)


def encode_json(record: Union[Indicator, Threat, ThreatPage], indent: Optional[int] = None) -> str:
    """Serialize a record to JSON text."""
    return json.dumps(record.to_dict(), indent=indent)
