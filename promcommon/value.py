"""Query results: samples, vectors, sample streams, matrices, scalars and strings."""

from __future__ import annotations

import functools
import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .histogram import SampleHistogram, SampleHistogramPair, _loads
from .labelset import Metric
from .timestamps import EARLIEST, Time
from .value_float import (
    SamplePair,
    SampleValue,
    _parse_float,
    _timestamp_from_element,
    format_float,
)
from .valuetype import ValueType

__all__ = [
    "Sample",
    "Vector",
    "SampleStream",
    "Matrix",
    "Scalar",
    "String",
    "ZERO_SAMPLE",
]


def _json_str(text: str) -> str:
    """Encode a JSON string, escaping HTML-sensitive characters."""
    encoded = json.dumps(text, ensure_ascii=False)
    return (
        encoded.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def _metric_json(metric: Metric) -> str:
    pairs = ",".join(
        f"{_json_str(name)}:{_json_str(metric[name])}" for name in sorted(metric)
    )
    return "{" + pairs + "}"


def _metric_from_data(data: Any) -> Metric:
    if data is None:
        return Metric()
    if not isinstance(data, dict):
        raise ValueError("metric must be a JSON object")
    for name, value in data.items():
        if type(value) is not str:
            raise ValueError(f"label value for {_json_str(name)} must be a string")
    return Metric(data)


def _sample_pair_from_data(data: Any) -> SamplePair:
    if data is None:
        return SamplePair()
    if not isinstance(data, list):
        raise ValueError("sample pair must be a JSON array")
    if len(data) != 2:
        raise ValueError(f"wrong number of fields: {len(data)} != 2")
    timestamp, value = data
    if type(value) is not str:
        raise ValueError("sample value must be a quoted string")
    return SamplePair(_timestamp_from_element(timestamp), SampleValue(_parse_float(value)))


def _histogram_ptr_from_data(data: Any) -> tuple[Time, Optional[SampleHistogram]]:
    items = [] if data is None else data
    if not isinstance(items, list):
        raise ValueError("histogram pair must be a JSON array")
    if len(items) != 2:
        raise ValueError(f"wrong number of fields: {len(items)} != 2")
    timestamp, histogram = items
    if histogram is None:
        return _timestamp_from_element(timestamp), None
    return _timestamp_from_element(timestamp), SampleHistogram._from_data(histogram)


def _list_from_data(data: Any, what: str) -> list:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"{what} must be a JSON array")
    return data


@dataclass
class Sample:
    """A metric with either a float value or a histogram at a timestamp."""

    metric: Metric = field(default_factory=Metric)
    value: SampleValue = SampleValue(0.0)
    timestamp: Time = Time(0)
    histogram: Optional[SampleHistogram] = None

    def __post_init__(self) -> None:
        if not isinstance(self.metric, Metric):
            self.metric = Metric(self.metric or {})
        if not isinstance(self.value, SampleValue):
            self.value = SampleValue(self.value)
        if not isinstance(self.timestamp, Time):
            self.timestamp = Time(self.timestamp)

    def equal(self, other: Sample) -> bool:
        """Compare metrics, then timestamps, then histograms or NaN-aware values."""
        if self is other:
            return True
        if self.metric != other.metric:
            return False
        if self.timestamp != other.timestamp:
            return False
        if self.histogram is not None:
            return self.histogram == other.histogram
        return self.value.equal(other.value)

    def to_json(self) -> str:
        """Encode with either a "value" pair or a "histogram" pair."""
        metric = _metric_json(self.metric)
        if self.histogram is not None:
            pair = SampleHistogramPair(self.timestamp, self.histogram)
            return f'{{"metric":{metric},"histogram":{pair.to_json()}}}'
        pair_json = SamplePair(self.timestamp, self.value).to_json()
        return f'{{"metric":{metric},"value":{pair_json}}}'

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> Sample:
        """Decode a sample JSON object."""
        return cls._from_data(_loads(text))

    @classmethod
    def _from_data(cls, data: Any) -> Sample:
        if not isinstance(data, dict):
            raise ValueError("sample must be a JSON object")
        metric = _metric_from_data(data.get("metric"))
        pair = _sample_pair_from_data(data.get("value"))
        if "histogram" in data:
            timestamp, histogram = _histogram_ptr_from_data(data["histogram"])
            if histogram is not None:
                return cls(metric=metric, timestamp=timestamp, histogram=histogram)
        return cls(metric=metric, value=pair.value, timestamp=pair.timestamp)

    def __str__(self) -> str:
        if self.histogram is not None:
            return f"{self.metric} => {SampleHistogramPair(self.timestamp, self.histogram)}"
        return f"{self.metric} => {SamplePair(self.timestamp, self.value)}"


# Marks a missing sample; a zero timestamp could be a real one.
ZERO_SAMPLE = Sample(timestamp=EARLIEST)


def _compare_samples(a: Sample, b: Sample) -> int:
    if a.metric.before(b.metric):
        return -1
    if b.metric.before(a.metric):
        return 1
    if a.timestamp < b.timestamp:
        return -1
    if b.timestamp < a.timestamp:
        return 1
    return 0


class Vector(list):
    """A list of samples that share one timestamp."""

    @property
    def value_type(self) -> ValueType:
        return ValueType.VECTOR

    def equal(self, other: Vector) -> bool:
        """True if both hold pairwise equal samples in the same order."""
        if len(self) != len(other):
            return False
        return all(mine.equal(theirs) for mine, theirs in zip(self, other))

    def sort_samples(self) -> None:
        """Sort in place by metric, then by timestamp."""
        self.sort(key=functools.cmp_to_key(_compare_samples))

    def to_json(self) -> str:
        """Encode as a JSON array of samples."""
        return "[" + ",".join(sample.to_json() for sample in self) + "]"

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> Vector:
        """Decode a JSON array of samples."""
        data = _list_from_data(_loads(text), "vector")
        return cls(Sample._from_data(item) for item in data)

    def __str__(self) -> str:
        return "\n".join(str(sample) for sample in self)


@dataclass
class SampleStream:
    """A series of float values and histograms belonging to one metric."""

    metric: Metric = field(default_factory=Metric)
    values: list[SamplePair] = field(default_factory=list)
    histograms: list[SampleHistogramPair] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.metric, Metric):
            self.metric = Metric(self.metric or {})
        self.values = list(self.values)
        self.histograms = list(self.histograms)

    def to_json(self) -> str:
        """Encode with "values", "histograms" or both, as present."""
        parts = [f'"metric":{_metric_json(self.metric)}']
        values = "[" + ",".join(pair.to_json() for pair in self.values) + "]"
        histograms = "[" + ",".join(pair.to_json() for pair in self.histograms) + "]"
        if self.histograms and self.values:
            parts += [f'"values":{values}', f'"histograms":{histograms}']
        elif self.histograms:
            parts.append(f'"histograms":{histograms}')
        else:
            parts.append(f'"values":{values}')
        return "{" + ",".join(parts) + "}"

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> SampleStream:
        """Decode a sample stream JSON object."""
        return cls._from_data(_loads(text))

    @classmethod
    def _from_data(cls, data: Any) -> SampleStream:
        if not isinstance(data, dict):
            raise ValueError("sample stream must be a JSON object")
        return cls(
            metric=_metric_from_data(data.get("metric")),
            values=[
                _sample_pair_from_data(item)
                for item in _list_from_data(data.get("values"), "values")
            ],
            histograms=[
                SampleHistogramPair._from_data(item)
                for item in _list_from_data(data.get("histograms"), "histograms")
            ],
        )

    def __str__(self) -> str:
        lines = [str(pair) for pair in self.values]
        lines += [str(pair) for pair in self.histograms]
        return f"{self.metric} =>\n" + "\n".join(lines)


class Matrix(list):
    """A list of sample streams."""

    @property
    def value_type(self) -> ValueType:
        return ValueType.MATRIX

    def to_json(self) -> str:
        """Encode as a JSON array of sample streams."""
        return "[" + ",".join(stream.to_json() for stream in self) + "]"

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> Matrix:
        """Decode a JSON array of sample streams."""
        data = _list_from_data(_loads(text), "matrix")
        return cls(SampleStream._from_data(item) for item in data)

    def __str__(self) -> str:
        ordered = sorted(
            self,
            key=functools.cmp_to_key(
                lambda a, b: -1
                if a.metric.before(b.metric)
                else (1 if b.metric.before(a.metric) else 0)
            ),
        )
        return "\n".join(str(stream) for stream in ordered)


@dataclass
class Scalar:
    """A scalar value evaluated at a timestamp."""

    value: SampleValue = SampleValue(0.0)
    timestamp: Time = Time(0)

    def __post_init__(self) -> None:
        if not isinstance(self.value, SampleValue):
            self.value = SampleValue(self.value)
        if not isinstance(self.timestamp, Time):
            self.timestamp = Time(self.timestamp)

    @property
    def value_type(self) -> ValueType:
        return ValueType.SCALAR

    def to_json(self) -> str:
        """Encode as [timestamp, "value"]."""
        return f"[{self.timestamp.to_json()},{_json_str(format_float(self.value))}]"

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> Scalar:
        """Decode a scalar encoded as [timestamp, "value"]."""
        data = _loads(text)
        if not isinstance(data, list) or len(data) != 2:
            raise ValueError("scalar must be a JSON array of two elements")
        timestamp, value = data
        if type(value) is not str:
            raise ValueError("scalar value must be a JSON string")
        try:
            parsed = _parse_float(value)
        except ValueError as err:
            raise ValueError(f"error parsing sample value: {err}") from err
        return cls(SampleValue(parsed), _timestamp_from_element(timestamp))

    def __str__(self) -> str:
        return f"scalar: {self.value} @[{self.timestamp}]"


@dataclass
class String:
    """A string value evaluated at a timestamp."""

    value: str = ""
    timestamp: Time = Time(0)

    def __post_init__(self) -> None:
        if not isinstance(self.timestamp, Time):
            self.timestamp = Time(self.timestamp)

    @property
    def value_type(self) -> ValueType:
        return ValueType.STRING

    def to_json(self) -> str:
        """Encode as [timestamp, "value"]."""
        return f"[{self.timestamp.to_json()},{_json_str(self.value)}]"

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> String:
        """Decode a string value encoded as [timestamp, "value"]."""
        data = _loads(text)
        if not isinstance(data, list) or len(data) != 2:
            raise ValueError("string value must be a JSON array of two elements")
        timestamp, value = data
        if type(value) is not str:
            raise ValueError("string value must be a JSON string")
        return cls(value, _timestamp_from_element(timestamp))

    def __str__(self) -> str:
        return self.value