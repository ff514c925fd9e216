"""Float sample values and timestamped sample pairs."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from .timestamps import EARLIEST, Time

__all__ = [
    "format_float",
    "SampleValue",
    "SamplePair",
    "ZERO_SAMPLE_PAIR",
]

_DECIMAL_RE = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)
_HEX_RE = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+"
)
_SPECIAL_RE = re.compile(r"[+-]?(?:inf|infinity)|nan", re.IGNORECASE)


def format_float(value: float) -> str:
    """Shortest exact decimal form without exponent; +Inf, -Inf and NaN spelled out."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(Decimal(repr(value)).normalize(), "f")


def _parse_float(text: str) -> float:
    if _SPECIAL_RE.fullmatch(text):
        return float(text)
    try:
        if _DECIMAL_RE.fullmatch(text):
            value = float(text)
        elif _HEX_RE.fullmatch(text):
            value = float.fromhex(text)
        else:
            raise ValueError(f"invalid syntax: {text!r}")
    except OverflowError as err:
        raise ValueError(f"value out of range: {text!r}") from err
    if math.isinf(value):
        raise ValueError(f"value out of range: {text!r}")
    return value


class _RawNumber(str):
    """The unparsed text of a JSON number."""


def _reject_constant(name: str) -> None:
    raise ValueError(f"invalid JSON literal {name}")


def _load_array(text: Union[str, bytes], length: int) -> list:
    data = json.loads(
        text,
        parse_float=_RawNumber,
        parse_int=_RawNumber,
        parse_constant=_reject_constant,
    )
    if not isinstance(data, list):
        raise ValueError("expected a JSON array")
    if len(data) != length:
        raise ValueError(f"wrong number of fields: {len(data)} != {length}")
    return data


def _timestamp_from_element(element: object) -> Time:
    if not isinstance(element, _RawNumber):
        raise ValueError("timestamp must be a JSON number")
    return Time.from_json(element)


class SampleValue(float):
    """The value of a sample at a given time."""

    def equal(self, other: float) -> bool:
        """True if both values are equal or both are NaN."""
        if self == other:
            return True
        return math.isnan(self) and math.isnan(float(other))

    def to_json(self) -> str:
        """Encode as a quoted JSON string."""
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> SampleValue:
        """Decode a quoted JSON string holding a float."""
        raw = text.decode("utf-8") if isinstance(text, (bytes, bytearray)) else text
        if len(raw) < 2 or raw[0] != '"' or raw[-1] != '"':
            raise ValueError("sample value must be a quoted string")
        return cls(_parse_float(raw[1:-1]))

    def __str__(self) -> str:
        return format_float(self)

    def __repr__(self) -> str:
        return f"SampleValue({format_float(self)})"


@dataclass(frozen=True)
class SamplePair:
    """A sample value at a timestamp."""

    timestamp: Time = Time(0)
    value: SampleValue = SampleValue(0.0)

    def __post_init__(self) -> None:
        if not isinstance(self.timestamp, Time):
            object.__setattr__(self, "timestamp", Time(self.timestamp))
        if not isinstance(self.value, SampleValue):
            object.__setattr__(self, "value", SampleValue(self.value))

    def equal(self, other: SamplePair) -> bool:
        """True if timestamps match and values are equal in the NaN-aware sense."""
        return self is other or (
            self.value.equal(other.value) and self.timestamp == other.timestamp
        )

    def to_json(self) -> str:
        """Encode as [timestamp, "value"]."""
        return f"[{self.timestamp.to_json()},{self.value.to_json()}]"

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> SamplePair:
        """Decode a pair encoded as [timestamp, "value"]."""
        timestamp, value = _load_array(text, 2)
        if not isinstance(value, str) or isinstance(value, _RawNumber):
            raise ValueError("sample value must be a quoted string")
        return cls(_timestamp_from_element(timestamp), SampleValue(_parse_float(value)))

    def __str__(self) -> str:
        return f"{self.value} @[{self.timestamp}]"


# Marks a missing sample pair; a zero timestamp could be a real one.
ZERO_SAMPLE_PAIR = SamplePair(EARLIEST, SampleValue(0.0))