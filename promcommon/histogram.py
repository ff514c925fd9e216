"""Native histogram samples: buckets, histograms and timestamped histograms."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Union

from .timestamps import Time
from .value_float import (
    _parse_float,
    _RawNumber,
    _reject_constant,
    _timestamp_from_element,
    format_float,
)

__all__ = [
    "FloatString",
    "HistogramBucket",
    "SampleHistogram",
    "SampleHistogramPair",
]

_INT_RE = re.compile(r"-?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def _loads(text: Union[str, bytes]) -> Any:
    """Decode JSON, keeping numbers as their raw text."""
    return json.loads(
        text,
        parse_float=_RawNumber,
        parse_int=_RawNumber,
        parse_constant=_reject_constant,
    )


def _format_g(value: float) -> str:
    """Shortest %g-style formatting: exponent form below 1e-4 or from 1e6 on."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    exp10 = len(digits) + exponent - 1
    if exp10 < -4 or exp10 >= 6:
        mantissa = digits[0] + (f".{digits[1:]}" if len(digits) > 1 else "")
        neg = "-" if sign else ""
        exp_sign = "-" if exp10 < 0 else "+"
        return f"{neg}{mantissa}e{exp_sign}{abs(exp10):02d}"
    return format_float(value)


def _format_f(value: float) -> str:
    """%f formatting with six decimals; infinities as +Inf and -Inf."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:f}"


class FloatString(float):
    """A float that is encoded in JSON as a quoted string."""

    def to_json(self) -> str:
        """Encode as a quoted JSON string."""
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> FloatString:
        """Decode a quoted JSON string holding a float."""
        raw = text.decode("utf-8") if isinstance(text, (bytes, bytearray)) else text
        if len(raw) < 2 or raw[0] != '"' or raw[-1] != '"':
            raise ValueError("float value must be a quoted string")
        return cls(_parse_float(raw[1:-1]))

    @classmethod
    def _from_data(cls, data: Any) -> FloatString:
        if type(data) is not str:
            raise ValueError("float value must be a quoted string")
        return cls(_parse_float(data))

    def __str__(self) -> str:
        return format_float(self)

    def __repr__(self) -> str:
        return f"FloatString({format_float(self)})"


@dataclass(frozen=True)
class HistogramBucket:
    """One bucket of a native histogram.

    boundaries: 0 = (lower, upper], 1 = [lower, upper), 2 = (lower, upper),
    3 = [lower, upper].
    """

    boundaries: int = 0
    lower: FloatString = FloatString(0.0)
    upper: FloatString = FloatString(0.0)
    count: FloatString = FloatString(0.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "boundaries", int(self.boundaries))
        for name in ("lower", "upper", "count"):
            value = getattr(self, name)
            if not isinstance(value, FloatString):
                object.__setattr__(self, name, FloatString(value))

    def to_json(self) -> str:
        """Encode as [boundaries, "lower", "upper", "count"]."""
        return (
            f"[{self.boundaries},{self.lower.to_json()},"
            f"{self.upper.to_json()},{self.count.to_json()}]"
        )

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> HistogramBucket:
        """Decode a bucket encoded as [boundaries, "lower", "upper", "count"]."""
        return cls._from_data(_loads(text))

    @classmethod
    def _from_data(cls, data: Any) -> HistogramBucket:
        if not isinstance(data, list):
            raise ValueError("histogram bucket must be a JSON array")
        if len(data) != 4:
            raise ValueError(f"wrong number of fields: {len(data)} != 4")
        boundaries, lower, upper, count = data
        if not isinstance(boundaries, _RawNumber) or not _INT_RE.fullmatch(boundaries):
            raise ValueError("bucket boundaries must be a JSON integer")
        bound = int(boundaries)
        if not _INT64_MIN <= bound <= _INT64_MAX:
            raise ValueError(f"bucket boundaries out of range: {boundaries}")
        return cls(
            bound,
            FloatString._from_data(lower),
            FloatString._from_data(upper),
            FloatString._from_data(count),
        )

    def __str__(self) -> str:
        lower_inclusive = self.boundaries in (1, 3)
        upper_inclusive = self.boundaries in (0, 3)
        opening = "[" if lower_inclusive else "("
        closing = "]" if upper_inclusive else ")"
        return (
            f"{opening}{_format_g(self.lower)},{_format_g(self.upper)}"
            f"{closing}:{self.count}"
        )


@dataclass(frozen=True)
class SampleHistogram:
    """A native histogram: total count, sum and buckets."""

    count: FloatString = FloatString(0.0)
    sum: FloatString = FloatString(0.0)
    buckets: tuple[HistogramBucket, ...] = ()

    def __post_init__(self) -> None:
        for name in ("count", "sum"):
            value = getattr(self, name)
            if not isinstance(value, FloatString):
                object.__setattr__(self, name, FloatString(value))
        object.__setattr__(self, "buckets", tuple(self.buckets))

    def to_json(self) -> str:
        """Encode as {"count": ..., "sum": ..., "buckets": [...]}."""
        buckets = ",".join(bucket.to_json() for bucket in self.buckets)
        return (
            f'{{"count":{self.count.to_json()},"sum":{self.sum.to_json()},'
            f'"buckets":[{buckets}]}}'
        )

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> SampleHistogram:
        """Decode a histogram JSON object."""
        return cls._from_data(_loads(text))

    @classmethod
    def _from_data(cls, data: Any) -> SampleHistogram:
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("histogram must be a JSON object")
        count = FloatString._from_data(data["count"]) if "count" in data else 0.0
        total = FloatString._from_data(data["sum"]) if "sum" in data else 0.0
        raw_buckets = data.get("buckets")
        if raw_buckets is None:
            buckets: tuple[HistogramBucket, ...] = ()
        elif isinstance(raw_buckets, list):
            buckets = tuple(HistogramBucket._from_data(b) for b in raw_buckets)
        else:
            raise ValueError("histogram buckets must be a JSON array")
        return cls(count, total, buckets)

    def __str__(self) -> str:
        buckets = " ".join(str(bucket) for bucket in self.buckets)
        return (
            f"Count: {_format_f(self.count)}, Sum: {_format_f(self.sum)}, "
            f"Buckets: [{buckets}]"
        )


@dataclass(frozen=True)
class SampleHistogramPair:
    """A histogram at a timestamp."""

    timestamp: Time = Time(0)
    histogram: SampleHistogram = field(default_factory=SampleHistogram)

    def __post_init__(self) -> None:
        if not isinstance(self.timestamp, Time):
            object.__setattr__(self, "timestamp", Time(self.timestamp))

    def to_json(self) -> str:
        """Encode as [timestamp, histogram]."""
        return f"[{self.timestamp.to_json()},{self.histogram.to_json()}]"

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> SampleHistogramPair:
        """Decode a pair encoded as [timestamp, histogram]."""
        return cls._from_data(_loads(text))

    @classmethod
    def _from_data(cls, data: Any) -> SampleHistogramPair:
        items = [] if data is None else data
        if not isinstance(items, list):
            raise ValueError("histogram pair must be a JSON array")
        if len(items) != 2:
            raise ValueError(f"wrong number of fields: {len(items)} != 2")
        timestamp, histogram = items
        return cls(
            _timestamp_from_element(timestamp), SampleHistogram._from_data(histogram)
        )

    def __str__(self) -> str:
        return f"{self.histogram} @[{self.timestamp}]"