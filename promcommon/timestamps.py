"""Millisecond timestamps and the duration format used in configuration."""

from __future__ import annotations

import json
import re
import time as _time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Union

__all__ = [
    "EARLIEST",
    "LATEST",
    "Time",
    "Interval",
    "Duration",
    "parse_duration",
]

_MS_PER_SECOND = 1000
_NANOS_PER_TICK = 1_000_000
_NANOS_PER_MILLI = 1_000_000
_DOT_PRECISION = 3
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_INT_RE = re.compile(r"[+-]?[0-9]+")

_MS_YEAR = 1000 * 60 * 60 * 24 * 365
_MS_WEEK = 1000 * 60 * 60 * 24 * 7
_MS_DAY = 1000 * 60 * 60 * 24
_MS_HOUR = 1000 * 60 * 60
_MS_MINUTE = 1000 * 60
_MS_SECOND = 1000

_DURATION_RE = re.compile(
    r"(([0-9]+)y)?(([0-9]+)w)?(([0-9]+)d)?(([0-9]+)h)?"
    r"(([0-9]+)m)?(([0-9]+)s)?(([0-9]+)ms)?"
)
# Regex group holding the number of each unit, with the unit's size in ms.
_PARSE_UNITS = (
    (2, _MS_YEAR),
    (4, _MS_WEEK),
    (6, _MS_DAY),
    (8, _MS_HOUR),
    (10, _MS_MINUTE),
    (12, _MS_SECOND),
    (14, 1),
)
# Years and weeks are only shown when they divide the duration exactly.
_FORMAT_UNITS = (
    ("y", _MS_YEAR, True),
    ("w", _MS_WEEK, True),
    ("d", _MS_DAY, False),
    ("h", _MS_HOUR, False),
    ("m", _MS_MINUTE, False),
    ("s", _MS_SECOND, False),
    ("ms", 1, False),
)


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _parse_int(text: str, bits: int) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _shortest_fixed(value: float) -> str:
    return format(Decimal(repr(value)).normalize(), "f")


def _to_nanos(d: Union[timedelta, int]) -> int:
    if isinstance(d, timedelta):
        return (d.days * 86400 + d.seconds) * 1_000_000_000 + d.microseconds * 1000
    if isinstance(d, int) and not isinstance(d, bool):
        return int(d)
    raise TypeError(f"expected a timedelta or nanoseconds, not {type(d).__name__}")


def _text(data: Union[str, bytes]) -> str:
    return data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data


class Time(int):
    """Milliseconds since the Unix epoch, leap seconds excluded."""

    @classmethod
    def now(cls) -> Time:
        """Return the current time."""
        return cls.from_unix_nano(_time.time_ns())

    @classmethod
    def from_unix(cls, t: int) -> Time:
        """Return the Time for t seconds since the epoch."""
        return cls(t * _MS_PER_SECOND)

    @classmethod
    def from_unix_nano(cls, t: int) -> Time:
        """Return the Time for t nanoseconds since the epoch."""
        return cls(_trunc_div(t, _NANOS_PER_TICK))

    def add(self, d: Union[timedelta, int]) -> Time:
        """Return self plus d (a timedelta or a number of nanoseconds)."""
        return Time(int(self) + _trunc_div(_to_nanos(d), _NANOS_PER_TICK))

    def sub(self, other: int) -> timedelta:
        """Return the span from other to self."""
        return timedelta(milliseconds=int(self) - int(other))

    def to_datetime(self) -> datetime:
        """Return the time as an aware UTC datetime."""
        return _EPOCH + timedelta(milliseconds=int(self))

    def unix(self) -> int:
        """Seconds elapsed since the epoch."""
        return _trunc_div(int(self), _MS_PER_SECOND)

    def unix_nano(self) -> int:
        """Nanoseconds elapsed since the epoch."""
        return int(self) * _NANOS_PER_TICK

    def to_json(self) -> str:
        """Encode as a JSON number of seconds."""
        return str(self)

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> Time:
        """Decode a JSON number of seconds with up to millisecond precision."""
        raw = _text(text)
        parts = raw.split(".")
        if len(parts) == 1:
            return cls(_parse_int(parts[0], 64) * _MS_PER_SECOND)
        if len(parts) != 2:
            raise ValueError(f"invalid time {json.dumps(raw)}")
        whole, frac = parts
        seconds = _parse_int(whole, 64) * _MS_PER_SECOND
        pad = _DOT_PRECISION - len(frac)
        if pad < 0:
            frac = frac[:_DOT_PRECISION]
        elif pad > 0:
            frac = frac + "0" * pad
        millis = _parse_int(frac, 32)
        total = seconds + millis
        # A value such as -0.1 loses its sign in the integer part.
        if whole.startswith("-") and total > 0:
            return cls(-total)
        return cls(total)

    def __str__(self) -> str:
        return _shortest_fixed(float(self) / float(_MS_PER_SECOND))

    def __repr__(self) -> str:
        return f"Time({int(self)})"


EARLIEST = Time(_INT64_MIN)
LATEST = Time(_INT64_MAX)


@dataclass(frozen=True)
class Interval:
    """The span between two timestamps."""

    start: Time
    end: Time


class Duration(int):
    """A span of time in nanoseconds, written as e.g. 1d2h or 90s."""

    def to_timedelta(self) -> timedelta:
        """Return the duration as a timedelta."""
        return timedelta(microseconds=_trunc_div(int(self), 1000))

    def to_json(self) -> str:
        """Encode as a JSON string in the duration format."""
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> Duration:
        """Decode a JSON string in the duration format."""
        data = json.loads(text)
        if not isinstance(data, str):
            raise ValueError("duration must be a JSON string")
        return parse_duration(data)

    def __str__(self) -> str:
        ms = _trunc_div(int(self), _NANOS_PER_MILLI)
        if ms == 0:
            return "0s"
        parts = []
        for unit, mult, exact in _FORMAT_UNITS:
            if exact and ms % mult != 0:
                continue
            count = _trunc_div(ms, mult)
            if count > 0:
                parts.append(f"{count}{unit}")
                ms -= count * mult
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Duration({str(self)!r})"


def parse_duration(text: str) -> Duration:
    """Parse a duration, taking a year as 365d, a week as 7d and a day as 24h."""
    if text == "0":
        return Duration(0)
    if text == "":
        raise ValueError("empty duration string")
    match = _DURATION_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"not a valid duration string: {json.dumps(text)}")
    total = 0
    overflow = False
    for group, mult in _PARSE_UNITS:
        digits = match.group(group)
        if not digits:
            continue
        count = int(digits)
        if count > _INT64_MAX // mult // _NANOS_PER_MILLI:
            overflow = True
        total += count * _NANOS_PER_MILLI * mult
        if total > _INT64_MAX:
            overflow = True
    if overflow:
        raise ValueError("duration out of range")
    return Duration(total)