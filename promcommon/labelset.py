"""Label sets and metrics: maps from label names to label values."""

from __future__ import annotations

import json
import re
from typing import Union

from .fingerprint import Fingerprint, fast_fingerprint_of, fingerprint_of
from .labels import (
    METRIC_NAME_LABEL,
    is_valid_label_name,
    is_valid_label_value,
    parse_label_name,
)

__all__ = ["METRIC_NAME_RE", "LabelSet", "Metric", "is_valid_metric_name"]

# Use fullmatch: a plain "$" would also accept a trailing newline.
METRIC_NAME_RE = re.compile(r"[a-zA-Z_:][a-zA-Z0-9_:]*")

_METRIC_NAME_FIRST = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_:"
)
_METRIC_NAME_REST = _METRIC_NAME_FIRST | frozenset("0123456789")


def _quote(value: str) -> str:
    """Double-quote a string; undecodable bytes are shown as \\xNN escapes."""
    text = json.dumps(value, ensure_ascii=False)
    try:
        raw = text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        raw = text.encode("utf-8", "surrogatepass")
    return raw.decode("utf-8", "backslashreplace")


class LabelSet(dict):
    """A mapping of label names to label values."""

    def validate(self) -> None:
        """Raise ValueError if any name or value in the set is invalid."""
        for name, value in self.items():
            if not is_valid_label_name(name):
                raise ValueError(f"invalid name {_quote(str(name))}")
            if not isinstance(value, str) or not is_valid_label_value(value):
                raise ValueError(f"invalid value {_quote(str(value))}")

    def before(self, other: LabelSet) -> bool:
        """Order label sets by size, then by the first differing label pair."""
        if len(self) != len(other):
            return len(self) < len(other)
        for name in sorted([*self, *other]):
            if name not in self:
                return True
            if name not in other:
                return False
            mine, theirs = self[name], other[name]
            if mine != theirs:
                return mine < theirs
        return False

    def clone(self) -> LabelSet:
        """Return a shallow copy of the same type."""
        return type(self)(self)

    def merge(self, other: LabelSet) -> LabelSet:
        """Return a new set with the labels of other overriding ours."""
        return type(self)({**self, **other})

    def fingerprint(self) -> Fingerprint:
        """Return the fingerprint of the set."""
        return fingerprint_of(self)

    def fast_fingerprint(self) -> Fingerprint:
        """Return the cheaper, collision-prone fingerprint of the set."""
        return fast_fingerprint_of(self)

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> LabelSet:
        """Decode a JSON object into a label set, checking every name."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("label set must be a JSON object")
        for name, value in data.items():
            parse_label_name(name)
            if not isinstance(value, str):
                raise ValueError(f"label value for {_quote(name)} must be a string")
        return cls(data)

    def __str__(self) -> str:
        pairs = sorted(f"{name}={_quote(value)}" for name, value in self.items())
        return "{" + ", ".join(pairs) + "}"


class Metric(LabelSet):
    """A label set that identifies exactly one stream of samples."""

    def __str__(self) -> str:
        name = self.get(METRIC_NAME_LABEL)
        pairs = sorted(
            f"{label}={_quote(value)}"
            for label, value in self.items()
            if label != METRIC_NAME_LABEL
        )
        if not pairs:
            return name if name is not None else "{}"
        return f"{name or ''}{{{', '.join(pairs)}}}"


def is_valid_metric_name(name: str) -> bool:
    """True iff name matches METRIC_NAME_RE."""
    if not isinstance(name, str) or not name:
        return False
    return name[0] in _METRIC_NAME_FIRST and all(
        c in _METRIC_NAME_REST for c in name[1:]
    )